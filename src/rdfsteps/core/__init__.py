# src/rdfsteps/core/__init__.py
"""Core infrastructure: Graph, Configuration, Logging."""

from rdfsteps.core.config import (
    LoggingSettings,
    RdfstepsSettings,
    StepSettings,
    load_settings,
)
from rdfsteps.core.graph import Graph, Triple
from rdfsteps.core.logging import bind_run_context, configure_logging, get_logger

__all__ = [
    # Config
    "LoggingSettings",
    "RdfstepsSettings",
    "StepSettings",
    "load_settings",
    # Graph
    "Graph",
    "Triple",
    # Logging
    "bind_run_context",
    "configure_logging",
    "get_logger",
]

# src/rdfsteps/plugins/__init__.py
"""Plugin system: row steps via pluggy.

This module provides the step infrastructure for rdfsteps:

- Base class: BaseStep with the process/finish/close lifecycle
- Config: StepConfig and per-field policy specifications
- Context: StepContext carrying run identity, logger and diagnostics
- Manager: Plugin discovery and registration
- Hookspecs: pluggy hook definitions
"""

from rdfsteps.plugins.base import BaseStep
from rdfsteps.plugins.config_base import FieldSpec, KeyField, MergeField, StepConfig
from rdfsteps.plugins.context import Diagnostic, StepContext
from rdfsteps.plugins.hookspecs import hookimpl, hookspec
from rdfsteps.plugins.manager import PluginManager
from rdfsteps.plugins.sentinels import MISSING, MissingSentinel

__all__ = [
    # Base classes
    "BaseStep",
    # Config
    "FieldSpec",
    "KeyField",
    "MergeField",
    "StepConfig",
    # Context
    "Diagnostic",
    "StepContext",
    # Hookspecs
    "hookimpl",
    "hookspec",
    # Manager
    "PluginManager",
    # Sentinels
    "MISSING",
    "MissingSentinel",
]

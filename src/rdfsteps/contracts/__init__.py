"""Shared contracts for cross-boundary data types.

Enums, error types, result types and row aliases used by core, plugins
and the runner are defined here.

This package is a LEAF MODULE with no outbound dependencies to core,
plugins or engine.
"""

from rdfsteps.contracts.enums import FieldPolicy, GroupState, OtherFieldAction, ViolationKind
from rdfsteps.contracts.errors import (
    ConfigurationError,
    FailureContext,
    MissingFieldError,
    NullValueError,
    ResourceStateError,
    StepError,
    StepLifecycleError,
    TypeMismatchError,
)
from rdfsteps.contracts.results import StepResult
from rdfsteps.contracts.types import OutputRow, Row

__all__ = [
    # Enums
    "FieldPolicy",
    "GroupState",
    "OtherFieldAction",
    "ViolationKind",
    # Errors
    "ConfigurationError",
    "FailureContext",
    "MissingFieldError",
    "NullValueError",
    "ResourceStateError",
    "StepError",
    "StepLifecycleError",
    "TypeMismatchError",
    # Results
    "StepResult",
    # Types
    "OutputRow",
    "Row",
]

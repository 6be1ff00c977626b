"""Error taxonomy and failure payload contracts.

Every error a step raises derives from StepError. All of them are fatal:
steps have no per-row error routing, so raising aborts the whole run.
WARN-level conditions are never raised; they are recorded as diagnostics
on the StepContext instead.

A fatal error identifies the offending field, the kind of violation and
the number of rows the step had received when it failed. The runner
forwards the same information to the sink via failure_context().
"""

from typing import NotRequired, TypedDict

from rdfsteps.contracts.enums import ViolationKind


class FailureContext(TypedDict):
    """Schema for the diagnostic payload passed to RowSink.fail()."""

    kind: str  # ViolationKind value
    type: str  # Exception class name (e.g., "NullValueError")
    field: str | None  # Offending field name, if any
    rows_processed: int | None  # Rows received by the step so far
    step: NotRequired[str]  # Step name, added by the runner


class StepError(Exception):
    """Base class for all fatal step errors.

    Attributes:
        message: Human-readable description without the context suffix
        field_name: Offending field, or None when no single field applies
        rows_processed: Rows received when the error occurred, or None for
            errors raised before any row was read
    """

    kind: ViolationKind = ViolationKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        rows_processed: int | None = None,
    ) -> None:
        self.message = message
        self.field_name = field_name
        self.rows_processed = rows_processed
        super().__init__(self._render())

    def _render(self) -> str:
        parts = [f"kind={self.kind.value}"]
        if self.field_name is not None:
            parts.append(f"field={self.field_name}")
        if self.rows_processed is not None:
            parts.append(f"rows_processed={self.rows_processed}")
        return f"{self.message} [{', '.join(parts)}]"

    def failure_context(self) -> FailureContext:
        """Build the structured payload describing this failure."""
        return FailureContext(
            kind=self.kind.value,
            type=type(self).__name__,
            field=self.field_name,
            rows_processed=self.rows_processed,
        )


class ConfigurationError(StepError):
    """Raised when step configuration is invalid.

    Raised at step construction, before any row is processed.
    """

    kind = ViolationKind.CONFIGURATION


class MissingFieldError(StepError):
    """Raised when a configured field is absent and its policy is ERROR."""

    kind = ViolationKind.MISSING_FIELD


class NullValueError(StepError):
    """Raised when a configured field is null and its policy is ERROR."""

    kind = ViolationKind.NULL_VALUE


class TypeMismatchError(StepError):
    """Raised when a graph-valued field holds something other than a Graph.

    Not policy controlled: a wrong type means an upstream step broke its
    contract.
    """

    kind = ViolationKind.TYPE_MISMATCH


class ResourceStateError(StepError):
    """Raised when a closed Graph is read, written, merged or closed again."""

    kind = ViolationKind.RESOURCE_STATE


class StepLifecycleError(StepError):
    """Raised when a step is driven out of order (e.g. a row after finish())."""

    kind = ViolationKind.LIFECYCLE

"""Step execution context.

The StepContext carries everything a step needs during one run: the run
identity, a logger bound to that run, the running row count used in error
messages, and the diagnostics recorded for WARN-policy conditions.

A fresh context is created per run and passed explicitly into every step
call; steps keep no process-wide logging or message state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from rdfsteps.contracts.enums import ViolationKind
from rdfsteps.core.logging import get_logger


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal condition recorded while processing a row.

    Attributes:
        kind: What went wrong (missing field, null value, ...)
        field_name: The field the condition applies to
        message: Human-readable description
        rows_processed: Rows the step had received when it was recorded
    """

    kind: ViolationKind
    field_name: str
    message: str
    rows_processed: int


@dataclass
class StepContext:
    """Context passed to every step operation.

    Example:
        def process(self, row: Row, ctx: StepContext) -> StepResult:
            ctx.rows_processed += 1
            if name not in row:
                ctx.warn(ViolationKind.MISSING_FIELD, name, f"Key field '{name}' is absent from the row")
            ...
    """

    run_id: str
    step_name: str = "step"

    # Rows handed to the step so far, including the one being processed.
    # Steps increment this on entry to process().
    rows_processed: int = 0

    diagnostics: list[Diagnostic] = field(default_factory=list)
    logger: structlog.stdlib.BoundLogger = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = get_logger("rdfsteps.step").bind(run_id=self.run_id, step=self.step_name)

    def warn(self, kind: ViolationKind, field_name: str, message: str, **extra: Any) -> Diagnostic:
        """Record a WARN-level diagnostic and log it.

        Processing continues; the caller decides how to degrade.
        """
        diagnostic = Diagnostic(
            kind=kind,
            field_name=field_name,
            message=message,
            rows_processed=self.rows_processed,
        )
        self.diagnostics.append(diagnostic)
        self.logger.warning(
            message,
            kind=kind.value,
            field=field_name,
            rows_processed=self.rows_processed,
            **extra,
        )
        return diagnostic

"""Result type returned by step operations.

process() and finish() return a StepResult instead of pushing rows
themselves; the runner forwards any emitted rows to the sink.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from rdfsteps.contracts.types import OutputRow


@dataclass(frozen=True)
class StepResult:
    """Outcome of handing one row (or end-of-input) to a step.

    Use the factory methods to create instances.

    - emit(*rows): the step produced output rows, in order
    - hold(): the step consumed the input and has nothing to emit yet
    """

    action: Literal["emit", "hold"]
    rows: tuple[OutputRow, ...] = ()

    def __post_init__(self) -> None:
        """Validate that rows match the action."""
        if self.action == "emit" and not self.rows:
            raise ValueError("StepResult with action='emit' MUST carry at least one row. Use StepResult.hold() when nothing is emitted.")
        if self.action == "hold" and self.rows:
            raise ValueError("StepResult with action='hold' MUST NOT carry rows.")

    @property
    def has_output(self) -> bool:
        """True if this result carries rows for the sink."""
        return self.action == "emit"

    @classmethod
    def emit(cls, *rows: OutputRow) -> StepResult:
        """Create a result carrying one or more output rows."""
        return cls(action="emit", rows=rows)

    @classmethod
    def hold(cls) -> StepResult:
        """Create a result with no output."""
        return cls(action="hold")

# src/rdfsteps/plugins/base.py
"""Base class for step implementations.

Steps MUST subclass BaseStep. Plugin registration checks issubclass()
against it and reads the class-level `name` and `plugin_version`.

Lifecycle Contract (all calls made by the runner on one thread):
    __init__(config) -> process(row, ctx)* -> finish(ctx) -> close()

- __init__: Validate configuration. Invalid configuration raises
  ConfigurationError before any row is read.
- process: Called once per input row, in input order. Returns a
  StepResult with zero or more output rows. Never suspends mid-row.
- finish: End-of-input signal. Flushes anything the step still holds.
  No further rows are accepted afterwards.
- close: Pure teardown. Called even when the run aborted, in which case
  finish() was never called. Steps must not emit from close().
"""

from abc import ABC, abstractmethod
from typing import Any

from rdfsteps.contracts.results import StepResult
from rdfsteps.contracts.types import Row
from rdfsteps.plugins.config_base import StepConfig
from rdfsteps.plugins.context import StepContext


class BaseStep(ABC):
    """Base class for all row steps.

    Example:
        class MyStep(BaseStep):
            name = "my_step"

            def __init__(self, config: dict[str, Any]) -> None:
                super().__init__(config)
                self.options = MyStepConfig.from_dict(config)

            def process(self, row: Row, ctx: StepContext) -> StepResult:
                ctx.rows_processed += 1
                return StepResult.emit({**row, "new_field": "value"})
    """

    name: str
    plugin_version: str = "0.0.0"

    # Validated configuration, set by subclasses in __init__
    options: StepConfig

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize with configuration.

        Args:
            config: Step configuration as loaded from settings
        """
        self.config = config

    @abstractmethod
    def process(self, row: Row, ctx: StepContext) -> StepResult:
        """Process a single row.

        Args:
            row: Input row (never mutated by the step)
            ctx: Step context

        Returns:
            StepResult with the rows to emit, or hold()
        """

    def finish(self, ctx: StepContext) -> StepResult:
        """Signal end of input. Stateless steps have nothing to flush."""
        return StepResult.hold()

    def close(self) -> None:  # noqa: B027 - optional override, not abstract
        """Release resources held by the step."""
        pass

    def describe(self) -> dict[str, Any]:
        """Resolved configuration, JSON-compatible, for display."""
        return self.options.model_dump(mode="json")

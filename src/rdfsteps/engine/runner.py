# src/rdfsteps/engine/runner.py
"""Drive one step over a row source into a row sink.

The runner owns the step lifecycle:

    for each row from source: step.process(row) -> emit outputs to sink
    end of stream:            step.finish()     -> emit outputs to sink
    always:                   step.close()

A fatal StepError is reported to the sink with its failure context and
then re-raised. The step is closed without finish(), so an open group is
discarded rather than flushed.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Final, Protocol, runtime_checkable
from uuid import uuid4

from rdfsteps.contracts.errors import FailureContext, StepError
from rdfsteps.contracts.results import StepResult
from rdfsteps.contracts.types import OutputRow, Row
from rdfsteps.core.logging import bind_run_context
from rdfsteps.plugins.base import BaseStep
from rdfsteps.plugins.context import StepContext


class EndOfStream:
    """Sentinel returned by RowSource.next_row() when input is exhausted.

    This is a singleton - use the END_OF_STREAM instance, not the class.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "<END_OF_STREAM>"


END_OF_STREAM: Final[EndOfStream] = EndOfStream()


@runtime_checkable
class RowSource(Protocol):
    """Supplies input rows one at a time."""

    def next_row(self) -> Row | EndOfStream:
        """Return the next row, or END_OF_STREAM once input is exhausted."""
        ...


@runtime_checkable
class RowSink(Protocol):
    """Receives output rows and the run's fatal error, if any."""

    def emit(self, row: OutputRow) -> None:
        """Accept one output row."""
        ...

    def fail(self, reason: str, context: FailureContext) -> None:
        """Accept the fatal error that aborted the run."""
        ...


class IterableSource:
    """RowSource over any iterable of rows."""

    def __init__(self, rows: Iterable[Row]) -> None:
        self._rows: Iterator[Row] = iter(rows)

    def next_row(self) -> Row | EndOfStream:
        return next(self._rows, END_OF_STREAM)


@dataclass
class CollectingSink:
    """RowSink that keeps everything it receives in memory."""

    rows: list[OutputRow] = field(default_factory=list)
    failures: list[tuple[str, FailureContext]] = field(default_factory=list)

    def emit(self, row: OutputRow) -> None:
        self.rows.append(row)

    def fail(self, reason: str, context: FailureContext) -> None:
        self.failures.append((reason, context))


@dataclass(frozen=True)
class RunSummary:
    """Row counts for a completed run."""

    rows_in: int
    rows_out: int
    diagnostics: int = 0


def run_step(
    step: BaseStep,
    source: RowSource,
    sink: RowSink,
    ctx: StepContext | None = None,
) -> RunSummary:
    """Run a step to completion.

    Args:
        step: Constructed step (configuration already validated)
        source: Input rows
        sink: Output rows and failure report
        ctx: Step context; a fresh one is created if omitted

    Returns:
        RunSummary with input/output row counts

    Raises:
        StepError: Any fatal step error, after it was reported to the sink
    """
    if ctx is None:
        ctx = StepContext(run_id=uuid4().hex, step_name=step.name)

    rows_in = 0
    rows_out = 0

    def _deliver(result: StepResult) -> None:
        nonlocal rows_out
        for output in result.rows:
            sink.emit(output)
            rows_out += 1

    with bind_run_context(run_id=ctx.run_id, step=ctx.step_name):
        ctx.logger.info("run started", plugin=step.name)
        try:
            while True:
                row = source.next_row()
                if row is END_OF_STREAM:
                    break
                assert not isinstance(row, EndOfStream)
                rows_in += 1
                _deliver(step.process(row, ctx))
            _deliver(step.finish(ctx))
        except StepError as e:
            context = e.failure_context()
            context["step"] = ctx.step_name
            ctx.logger.error(
                "run aborted",
                error_type=type(e).__name__,
                kind=e.kind.value,
                field=e.field_name,
                rows_processed=e.rows_processed,
            )
            sink.fail(str(e), context)
            raise
        finally:
            step.close()

        ctx.logger.info(
            "run completed",
            rows_in=rows_in,
            rows_out=rows_out,
            diagnostics=len(ctx.diagnostics),
        )
    return RunSummary(rows_in=rows_in, rows_out=rows_out, diagnostics=len(ctx.diagnostics))

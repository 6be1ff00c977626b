"""Engine: drives steps over row sources and sinks."""

from rdfsteps.engine.runner import (
    END_OF_STREAM,
    CollectingSink,
    EndOfStream,
    IterableSource,
    RowSink,
    RowSource,
    RunSummary,
    run_step,
)

__all__ = [
    "END_OF_STREAM",
    "CollectingSink",
    "EndOfStream",
    "IterableSource",
    "RowSink",
    "RowSource",
    "RunSummary",
    "run_step",
]

# src/rdfsteps/core/logging.py
"""Logging setup for step runs.

Step events are emitted through structlog. rdflib logs through the stdlib
``logging`` module, so the root handler formats both sources with one
structlog processor chain: a run produces a single stream on stderr,
either JSON lines or console text.

While a run is active, bind_run_context() places the run id and step name
in structlog's context variables. Every record formatted during the run
carries them, including records that originate inside rdflib.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

# rdflib logs parser and plugin registration detail at DEBUG
_RDFLIB_LOGGERS: tuple[str, ...] = ("rdflib", "rdflib.term", "rdflib.plugin")

_FORMATTER_KEYS: tuple[str, ...] = ("_record", "_from_structlog")


def _drop_formatter_keys(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Strip the bookkeeping keys ProcessorFormatter adds to every event."""
    for key in _FORMATTER_KEYS:
        event_dict.pop(key, None)
    return event_dict


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_keys,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [_drop_formatter_keys, structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Install the rdfsteps handler on the root logger.

    Calling this again replaces the previous configuration.

    Args:
        json_output: Render one JSON object per line instead of console text.
        level: Root level name (DEBUG, INFO, WARNING, ERROR).
        stream: Destination; defaults to stderr so row output on stdout stays clean.
    """
    root_level = logging.getLevelNamesMapping()[level.upper()]
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(ProcessorFormatter(processors=_render_chain(json_output), foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(root_level)

    # rdflib stays at WARNING or above, whatever the root level
    for name in _RDFLIB_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))


@contextmanager
def bind_run_context(*, run_id: str, step: str) -> Iterator[None]:
    """Tag every log record emitted inside the block with run_id and step."""
    with structlog.contextvars.bound_contextvars(run_id=run_id, step=step):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger

"""Logging for kbase: structlog events rendered through one stderr handler.

stdout belongs to command output, so every log line goes to stderr.
Verbosity follows the global flags:

- ``-q``: errors only
- default: warnings and errors
- ``-v``: debug output from ``kbase.*`` loggers; the Markdown engine
  stays at warning

``--log-json`` swaps the console renderer for one JSON object per line.
Reconfiguring replaces only kbase's own handler, so handlers installed
by an embedding application survive.
"""

from __future__ import annotations

import logging
import sys

import structlog

HANDLER_NAME = "kbase-stderr"

# Libraries whose debug chatter never helps diagnose a vault.
NOISY_LOGGERS = ("markdown_it",)


def log_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Level for ``kbase.*`` loggers; ``-v`` wins over ``-q``."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _pre_chain(*, log_json: bool) -> list[structlog.types.Processor]:
    timestamp = "iso" if log_json else "%H:%M:%S"
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt=timestamp),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(*, log_json: bool) -> logging.Handler:
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(log_json=log_json),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib logging to stderr at the flag-selected level."""
    structlog.configure(
        processors=[
            *_pre_chain(log_json=log_json),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
    root.addHandler(_stderr_handler(log_json=log_json))
    root.setLevel(logging.WARNING)

    level = log_level(verbose=verbose, quiet=quiet)
    logging.getLogger("kbase").setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

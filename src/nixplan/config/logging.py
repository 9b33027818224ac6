"""structlog setup for nixplan.

Core modules log through :func:`get_logger`, which always hands records to
the stdlib ``logging`` tree. Used as a library, nixplan stays silent unless
the host application attaches handlers. The command line calls
:func:`configure_logging` to render records on stderr, either for humans
or as JSON lines (``--log-json``).
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "nixplan"


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the stdlib logger *name*.

    The stdlib logger is passed in explicitly, so records never reach
    structlog's default stdout printer even when structlog is unconfigured.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Render nixplan's records on stderr.

    Only the ``nixplan`` logger is touched: a handler installed by an
    earlier call is replaced, other handlers and the root logger are left
    alone.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    for existing in logger.handlers[:]:
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Records are rendered here; the host's root handlers would print them twice.
    logger.propagate = False

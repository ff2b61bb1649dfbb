"""Logging for the admin client.

Every gateway call logs one JSON line bound to a request id, the method
and the path. The same id is sent to the backend as the X-Request-ID
header so a line here can be matched with the server's own logs.

Log lines go to stderr; stdout carries only what the CLI prints for the
user. Bearer tokens and passwords are never passed to a logger.
"""
import logging
import sys
import uuid
from typing import IO, Optional

import structlog


def setup_structured_logging(log_level: str = "INFO", stream: Optional[IO[str]] = None):
    """
    Route structlog events through stdlib logging as JSON lines.

    Called once by the CLI entry point. Calling it again replaces the
    previous handler, so tests can point the output at a buffer.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (LOG_LEVEL in the environment)
        stream: Where lines are written (default: stderr)
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; the gateway binds request_id, method and path per call."""
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Id for the X-Request-ID header, e.g. ``req-3f9a0c1b2d4e``."""
    return f"req-{uuid.uuid4().hex[:12]}"

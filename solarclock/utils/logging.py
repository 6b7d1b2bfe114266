"""
structlog setup plus `log`, a logger that tags every line with a process ID.
Request handlers get a `request-xxxxxxxx` ID bound to the Flask request. Scheduler jobs run on
APScheduler worker threads and start their own ID with `start_process`.
"""

import logging
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

import structlog
from flask import has_request_context, request
from structlog.stdlib import BoundLogger

from solarclock.config import LOG_LEVEL

_process_id_ctx: ContextVar[str | None] = ContextVar("process_id", default=None)


def configure_logging(level: str = LOG_LEVEL) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            min_level=logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


class LoggerProxy:
    def __getattr__(self, name: str) -> Any:
        return getattr(_current_logger(), name)


log: BoundLogger = LoggerProxy()  # type:ignore[assignment]


def build_process_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:8]}"


def start_process(prefix: str) -> str:
    """Give the current thread a fresh process ID. Returns it"""
    process_id = build_process_id(prefix)
    _process_id_ctx.set(process_id)
    return process_id


def _current_logger() -> BoundLogger:
    if not has_request_context():
        return structlog.get_logger().bind(process_id=_process_id_ctx.get())

    if not hasattr(request, "logger"):
        request.id = build_process_id("request")  # type:ignore[attr-defined]
        request.logger = structlog.get_logger().bind(  # type:ignore[attr-defined]
            process_id=request.id  # type:ignore[attr-defined]
        )
    return request.logger  # type:ignore[attr-defined, no-any-return]

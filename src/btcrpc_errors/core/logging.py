"""Structured logging for btcrpc_errors.

Uses structlog with a component name bound to every entry. The library
never configures logging on import; applications (or the CLI) call
``configure_logging()`` once at startup.

Example usage:
    from btcrpc_errors.core.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", format="console")

    logger = get_logger("decoder")
    logger.info("rpc_error_decoded", code=-25, case="MissingOrSpend")

    table_logger = logger.bind(table="TYPE_ERROR")
    table_logger.debug("classifier_compiled")
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Field names whose values must never reach a log sink. Wallet RPCs take
# passphrases, and RPC credentials travel with the transport.
SENSITIVE_PATTERNS = frozenset({
    "passphrase",
    "password",
    "rpcauth",
    "rpcpassword",
    "cookie",
    "secret",
    "token",
    "authorization",
})

REDACTED = "[REDACTED]"


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(pattern in lowered for pattern in SENSITIVE_PATTERNS)


def _sanitize_value(key: str, value: Any) -> Any:
    return REDACTED if _is_sensitive(key) else value


def _sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Redact sensitive keys, including those of directly nested dicts."""
    return {
        key: (
            {k: _sanitize_value(k, v) for k, v in value.items()}
            if isinstance(value, dict)
            else _sanitize_value(key, value)
        )
        for key, value in event_dict.items()
    }


def _add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


class RpcErrorsLogger:
    """Component logger over structlog.

    The underlying structlog logger is resolved per call, so loggers created
    at module import still follow a later ``configure_logging()``.
    """

    def __init__(self, component: str, **initial_context: Any) -> None:
        self._component = component
        self._context: dict[str, Any] = {"component": component, **initial_context}

    @property
    def component(self) -> str:
        return self._component

    def _with_context(self, context: dict[str, Any]) -> RpcErrorsLogger:
        clone = RpcErrorsLogger(self._component)
        clone._context = context
        return clone

    def bind(self, **context: Any) -> RpcErrorsLogger:
        return self._with_context({**self._context, **context})

    def unbind(self, *keys: str) -> RpcErrorsLogger:
        return self._with_context(
            {k: v for k, v in self._context.items() if k not in keys}
        )

    def _emit(self, method: str, event: str, **kw: Any) -> None:
        bound = structlog.get_logger().bind(**self._context)
        getattr(bound, method)(event, **kw)

    def debug(self, event: str, **kw: Any) -> None:
        self._emit("debug", event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._emit("info", event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._emit("warning", event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._emit("error", event, **kw)

    def exception(self, event: str, **kw: Any) -> None:
        """Log at error level with the active exception's traceback."""
        self._emit("exception", event, **kw)


def _build_processors(include_timestamps: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        _sanitize_event_dict,
    ]
    if include_timestamps:
        chain.append(_add_timestamp)
    chain += [
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    return chain


def _formatter(renderer: Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def _build_handlers(
    format: str,  # noqa: A002
    file_path: Path | None,
    max_bytes: int,
    backup_count: int,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if format != "json":
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(
            _formatter(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
        )
        handlers.append(console)
    if format != "console":
        json_handler: logging.Handler
        if file_path is None:
            json_handler = logging.StreamHandler(sys.stdout)
        else:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            json_handler = RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        json_handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
        handlers.append(json_handler)
    return handlers


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console", "both"] = "console",  # noqa: A002
    file_path: Path | None = None,
    max_file_size_mb: int = 50,
    backup_count: int = 5,
    include_timestamps: bool = True,
) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        level: Minimum level to emit.
        format: "console" writes human-readable lines to stderr, "json"
            writes JSON lines to ``file_path`` (stdout when unset), "both"
            writes console lines to stderr and JSON lines to ``file_path``.
        file_path: Log file, rotated at ``max_file_size_mb``.
        max_file_size_mb: Size at which the log file rotates.
        backup_count: Rotated files to keep.
        include_timestamps: Add an ISO8601 UTC ``timestamp`` to each entry.

    Raises:
        ValueError: If format is "both" and no file_path is given.
    """
    if format == "both" and file_path is None:
        raise ValueError("file_path is required when format='both'")

    log_level = getattr(logging, level)
    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    for handler in _build_handlers(
        format, file_path, max_file_size_mb * 1024 * 1024, backup_count
    ):
        handler.setLevel(log_level)
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=_build_processors(include_timestamps),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must pick up reconfiguration.
        cache_logger_on_first_use=False,
    )


def get_logger(component: str, **initial_context: Any) -> RpcErrorsLogger:
    """Get a logger bound to a component (e.g., "compiler", "decoder")."""
    return RpcErrorsLogger(component, **initial_context)


__all__ = [
    "REDACTED",
    "RpcErrorsLogger",
    "SENSITIVE_PATTERNS",
    "configure_logging",
    "get_logger",
]

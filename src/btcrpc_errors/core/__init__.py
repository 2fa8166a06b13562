"""Ambient infrastructure: configuration models and structured logging."""

from btcrpc_errors.core.config import (
    CaseConfig,
    CaseTableConfig,
    CaseTableSet,
    LogConfig,
    MatchOptions,
)
from btcrpc_errors.core.logging import configure_logging, get_logger

__all__ = [
    "CaseConfig",
    "CaseTableConfig",
    "CaseTableSet",
    "LogConfig",
    "MatchOptions",
    "configure_logging",
    "get_logger",
]

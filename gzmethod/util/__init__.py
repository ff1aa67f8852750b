"""Utility module initialization."""

from .logging import get_logger, setup_logging
from .paths import (
    InvalidSuffixError,
    PathKind,
    available_path,
    delete_path,
    discard_path,
    format_size,
    has_suffix,
    path_kind,
    strip_suffix,
    with_suffix,
)

__all__ = [
    # logging
    "get_logger",
    "setup_logging",
    # paths
    "InvalidSuffixError",
    "PathKind",
    "available_path",
    "delete_path",
    "discard_path",
    "format_size",
    "has_suffix",
    "path_kind",
    "strip_suffix",
    "with_suffix",
]

"""Utility functions for path operations."""

import shutil
from enum import Enum
from pathlib import Path
from typing import Tuple, Union

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..util.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

# Longest first so "x.tar.gz" is never split as "x.tar" + ".gz"
COMPOUND_SUFFIXES = ("tar.gz", "gz", "tar")

MAX_PATH_ATTEMPTS = 10000


class InvalidSuffixError(ValueError):
    """A path does not carry the suffix an operation expects."""
    pass


class PathKind(Enum):
    """What a path points at on the local filesystem."""

    FILE = "file"
    DIRECTORY = "directory"
    MISSING = "missing"


def path_kind(path: PathLike) -> PathKind:
    """Classify a path as a regular file, a directory or missing."""
    path = Path(path)
    try:
        if path.is_dir():
            return PathKind.DIRECTORY
        if path.is_file():
            return PathKind.FILE
    except OSError as e:
        logger.debug(f"Cannot stat {path}: {e}")
        return PathKind.MISSING
    # Sockets, FIFOs and dangling links are treated as absent
    return PathKind.MISSING


def has_suffix(path: PathLike, suffix: str) -> bool:
    """Check whether the final path component ends with ``.suffix``.

    The comparison is case-sensitive and a bare ``.suffix`` name does not
    count, since stripping it would leave nothing behind.
    """
    name = Path(path).name
    dotted = f".{suffix}"
    return name.endswith(dotted) and len(name) > len(dotted)


def with_suffix(path: PathLike, suffix: str) -> Path:
    """Append ``.suffix`` to the textual form of a path."""
    return Path(f"{path}.{suffix}")


def strip_suffix(path: PathLike, suffix: str) -> Path:
    """Remove a trailing ``.suffix`` from a path.

    Raises:
        InvalidSuffixError: If the path does not end with ``.suffix``
    """
    path = Path(path)
    if not has_suffix(path, suffix):
        raise InvalidSuffixError(f"{path} does not have the extension: {suffix}")
    return path.with_name(path.name[: -(len(suffix) + 1)])


def _split_name(name: str) -> Tuple[str, str]:
    """Split a file name into the part to disambiguate and its suffix."""
    for suffix in COMPOUND_SUFFIXES:
        dotted = f".{suffix}"
        if name.endswith(dotted) and len(name) > len(dotted):
            return name[: -len(dotted)], dotted

    stem, dot, extension = name.rpartition(".")
    if dot and stem:
        return stem, f".{extension}"
    return name, ""


def available_path(candidate: PathLike) -> Path:
    """Return ``candidate`` if nothing exists there, else a free sibling path.

    Collisions are resolved by inserting ``-1``, ``-2``, ... before the
    suffix, so ``data.txt.gz`` becomes ``data.txt-1.gz`` and ``logs.tar.gz``
    becomes ``logs-1.tar.gz``.

    Args:
        candidate: Preferred destination

    Returns:
        A path that did not exist at the time of the check

    Raises:
        FileExistsError: If no free name was found within the attempt limit
    """
    candidate = Path(candidate)
    if not candidate.exists() and not candidate.is_symlink():
        return candidate

    stem, suffix = _split_name(candidate.name)
    for counter in range(1, MAX_PATH_ATTEMPTS + 1):
        option = candidate.with_name(f"{stem}-{counter}{suffix}")
        if not option.exists() and not option.is_symlink():
            logger.debug(f"{candidate} is taken, using {option}")
            return option

    raise FileExistsError(f"No available path found for {candidate}")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_fixed(0.1),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)
def delete_path(path: PathLike) -> None:
    """Delete a file or a directory tree, retrying transient OS errors."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def discard_path(path: PathLike) -> bool:
    """Delete a path, logging instead of raising when it cannot be removed."""
    try:
        delete_path(path)
        return True
    except OSError as e:
        logger.warning(f"Could not delete {path}: {e}")
        return False


def format_size(size_bytes: float) -> str:
    """Format file size in human readable format."""
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while size_bytes >= 1024.0 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.1f} {size_names[i]}"

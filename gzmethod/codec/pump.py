"""Chunked byte copying between open streams."""

from contextlib import contextmanager
from typing import BinaryIO, Callable, Iterator, Optional

from ..config import DEFAULT_CHUNK_SIZE
from ..util.logging import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]


def copy_stream(
    source: BinaryIO,
    destination: BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress_callback: Optional[ProgressCallback] = None
) -> int:
    """Copy ``source`` into ``destination`` in chunks of at most ``chunk_size``.

    Either side may be a GZIP stream; the copy itself does not care which.

    Args:
        source: Stream opened for binary reading
        destination: Stream opened for binary writing
        chunk_size: Upper bound on the bytes held in memory per read
        progress_callback: Called with the length of every chunk written

    Returns:
        Total number of bytes copied

    Raises:
        ValueError: If ``chunk_size`` is not positive
        OSError: If a read or write fails or a write comes up short
    """
    if chunk_size <= 0:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")

    total = 0
    while chunk := source.read(chunk_size):
        written = destination.write(chunk)
        if written is not None and written != len(chunk):
            raise OSError(f"Short write: {written} of {len(chunk)} bytes")
        total += len(chunk)
        if progress_callback:
            progress_callback(len(chunk))

    return total


@contextmanager
def guarded(stream: BinaryIO, label: str) -> Iterator[BinaryIO]:
    """Close ``stream`` exactly once when the block exits.

    On a clean exit a failing close propagates, because an unflushed GZIP
    trailer means the output is broken. When the block is already failing,
    close errors are logged and the original exception keeps propagating.
    """
    try:
        yield stream
    except BaseException:
        try:
            stream.close()
        except Exception as e:
            logger.warning(f"Failed to close {label}: {e}")
        raise
    else:
        stream.close()

"""In-memory GZIP encoding of byte strings."""

import gzip
import zlib
from typing import Union

from ..config import DEFAULT_COMPRESSION_LEVEL
from .errors import GzipCompressError, GzipUncompressError


def compress_string(data: Union[bytes, str], compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """Encode ``data`` as a complete GZIP member (RFC 1952).

    ``str`` input is encoded as UTF-8 first.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return gzip.compress(data, compresslevel=compression_level)
    except (ValueError, TypeError, zlib.error) as e:
        raise GzipCompressError(f"Failed to compress string: {e}") from e


def uncompress_string(data: bytes) -> bytes:
    """Decode a GZIP stream produced by :func:`compress_string` or any gzip tool.

    Raises:
        GzipUncompressError: If ``data`` is empty, has a bad header, is
            truncated or fails its CRC/length check
    """
    if not data:
        raise GzipUncompressError("Cannot uncompress an empty string: no GZIP header")
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, TypeError, zlib.error) as e:
        raise GzipUncompressError(f"Failed to uncompress string: {e}") from e

"""Codec module initialization."""

from .base import CompressionMethod
from .errors import (
    CompressError,
    CompressionMethodError,
    GzipCompressError,
    GzipUncompressError,
    TarballCompressError,
    TarballUncompressError,
    UncompressError,
    UnknownExtensionError,
)
from .gzip_method import GzipCompressionMethod
from .pump import copy_stream, guarded
from .strings import compress_string, uncompress_string
from .tarball_method import TarballCompressionMethod

__all__ = [
    # methods
    "CompressionMethod",
    "GzipCompressionMethod",
    "TarballCompressionMethod",
    # strings
    "compress_string",
    "uncompress_string",
    # pump
    "copy_stream",
    "guarded",
    # errors
    "CompressError",
    "CompressionMethodError",
    "GzipCompressError",
    "GzipUncompressError",
    "TarballCompressError",
    "TarballUncompressError",
    "UncompressError",
    "UnknownExtensionError",
]

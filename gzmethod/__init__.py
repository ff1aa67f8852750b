"""
gzmethod - GZIP compression method for strings, files and directories.

Files compress to ``<name>.gz`` and directories to ``<name>.tar.gz``,
byte-compatible with the standard gzip and tar tools. Data is streamed
in bounded chunks and partially written outputs are removed on failure.
"""

__version__ = "0.1.0"
__author__ = "gzmethod Contributors"

from .codec import (
    CompressError,
    GzipCompressionMethod,
    TarballCompressionMethod,
    UncompressError,
    UnknownExtensionError,
)
from .config import GzipConfig

__all__ = [
    "CompressError",
    "GzipCompressionMethod",
    "GzipConfig",
    "TarballCompressionMethod",
    "UncompressError",
    "UnknownExtensionError",
]

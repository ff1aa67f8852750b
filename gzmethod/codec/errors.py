"""Exceptions raised by compression methods."""


class CompressionMethodError(Exception):
    """Base class for compression method failures."""
    pass


class CompressError(CompressionMethodError):
    """Compressing a string, file or directory failed."""
    pass


class UncompressError(CompressionMethodError):
    """Uncompressing a string, file or directory failed."""
    pass


class UnknownExtensionError(UncompressError):
    """A path carries no suffix any known method can uncompress."""

    def __init__(self, path) -> None:
        super().__init__(f"Unknown extension for path: {path}")
        self.path = path


class GzipCompressError(CompressError):
    """GZIP compression failed."""
    pass


class GzipUncompressError(UncompressError):
    """GZIP uncompression failed."""
    pass


class TarballCompressError(CompressError):
    """Tar archival failed."""
    pass


class TarballUncompressError(UncompressError):
    """Tar extraction failed."""
    pass

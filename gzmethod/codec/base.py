"""Shared contract for compression methods."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..util.logging import get_logger
from ..util.paths import PathKind, PathLike, has_suffix, path_kind
from .errors import CompressError, UnknownExtensionError
from .pump import ProgressCallback

logger = get_logger(__name__)


class CompressionMethod(ABC):
    """A method that turns files and directories into single compressed files.

    Subclasses name the suffix their compressed files and compressed
    directories carry. The path-level operations below dispatch on those
    suffixes alone and never look at file contents.
    """

    file_suffix: str
    directory_suffix: str

    @abstractmethod
    def compress_file(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Compress a regular file, returning the compressed file."""

    @abstractmethod
    def uncompress_file(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Uncompress a compressed file, returning the restored file."""

    @abstractmethod
    def compress_directory(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Compress a directory tree, returning the compressed file."""

    @abstractmethod
    def uncompress_directory(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Uncompress a compressed directory, returning the restored directory."""

    def compress_path(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Compress whatever ``path`` points at.

        Raises:
            CompressError: If ``path`` is neither a file nor a directory
        """
        kind = path_kind(path)
        logger.debug(f"Compressing {kind.value} {path}")

        if kind is PathKind.DIRECTORY:
            return self.compress_directory(path, progress_callback)
        if kind is PathKind.FILE:
            return self.compress_file(path, progress_callback)
        raise CompressError(f"Path does not exist: {path}")

    def uncompress_path(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Uncompress ``path`` according to its suffix.

        The directory suffix is checked first, since it usually ends with
        the file suffix (``tar.gz`` ends with ``gz``).

        Raises:
            UnknownExtensionError: If the suffix belongs to neither flow
        """
        if has_suffix(path, self.directory_suffix):
            return self.uncompress_directory(path, progress_callback)
        if has_suffix(path, self.file_suffix):
            return self.uncompress_file(path, progress_callback)
        raise UnknownExtensionError(path)

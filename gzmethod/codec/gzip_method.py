"""GZIP compression of strings, files and directory trees."""

import gzip
import tempfile
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Type, Union

from ..config import GzipConfig
from ..util.logging import get_logger
from ..util.paths import (
    InvalidSuffixError,
    PathKind,
    PathLike,
    available_path,
    discard_path,
    has_suffix,
    path_kind,
    strip_suffix,
    with_suffix,
)
from .base import CompressionMethod
from .errors import CompressionMethodError, GzipCompressError, GzipUncompressError
from .pump import ProgressCallback, copy_stream, guarded
from .strings import compress_string, uncompress_string
from .tarball_method import TarballCompressionMethod

logger = get_logger(__name__)

STAGING_PREFIX = ".gzmethod-"


class GzipCompressionMethod(CompressionMethod):
    """Compresses files to ``.gz`` and directories to ``.tar.gz``.

    Directories go through the tar method first and the resulting archive
    is compressed like any other file. Data is streamed in chunks of
    ``config.chunk_size`` bytes, so memory use does not grow with file size.
    """

    EXTENSION_GZIP = "gz"
    EXTENSION_GZIPPED_ARCHIVE = f"{TarballCompressionMethod.EXTENSION_ARCHIVE}.{EXTENSION_GZIP}"

    file_suffix = EXTENSION_GZIP
    directory_suffix = EXTENSION_GZIPPED_ARCHIVE

    def __init__(
        self,
        tarball: Optional[TarballCompressionMethod] = None,
        config: Optional[GzipConfig] = None
    ):
        self.tarball = tarball if tarball is not None else TarballCompressionMethod()
        self.config = config if config is not None else GzipConfig()

    @property
    def compression_level(self) -> int:
        return self.config.compression_level

    @property
    def chunk_size(self) -> int:
        return self.config.chunk_size

    def compress_string(self, data: Union[bytes, str]) -> bytes:
        """Compress ``data`` in memory at the configured level."""
        return compress_string(data, self.compression_level)

    def uncompress_string(self, data: bytes) -> bytes:
        """Uncompress an in-memory GZIP stream."""
        return uncompress_string(data)

    def compress_file(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Compress ``path`` into ``<path>.gz`` (or the next free name).

        The source file is left untouched.

        Raises:
            GzipCompressError: If the source is not a regular file or any
                step of the streaming fails
        """
        source = Path(path)
        if path_kind(source) is not PathKind.FILE:
            raise GzipCompressError(f"The given uncompressed file is invalid or does not exist: {source}")

        destination = self._pick_destination(
            lambda: with_suffix(source, self.EXTENSION_GZIP), source, GzipCompressError
        )
        self._compress_to(source, destination, progress_callback)
        return destination

    def uncompress_file(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Uncompress ``<name>.gz`` into ``<name>`` (or the next free name).

        Raises:
            GzipUncompressError: If the source is missing or empty, lacks
                the ``gz`` suffix, is not valid GZIP data or streaming fails
        """
        source = Path(path)
        if path_kind(source) is not PathKind.FILE:
            raise GzipUncompressError(f"The given GZIP file is invalid or does not exist: {source}")

        destination = self._pick_destination(
            lambda: strip_suffix(source, self.EXTENSION_GZIP), source, GzipUncompressError
        )
        self._uncompress_to(source, destination, progress_callback)
        return destination

    def compress_directory(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Compress a directory tree into ``<directory>.tar.gz``.

        The final name is chosen before anything is written. The tar archive
        is built in a private staging directory beside the source, so a stray
        ``<directory>.tar`` never affects the result. The staging directory
        is removed whether or not compression succeeds; failing to remove it
        only logs a warning.
        """
        source = Path(path)
        if path_kind(source) is not PathKind.DIRECTORY:
            raise GzipCompressError(f"The given directory is invalid or does not exist: {source}")

        destination = self._pick_destination(
            lambda: with_suffix(source, self.EXTENSION_GZIPPED_ARCHIVE), source, GzipCompressError
        )

        staging = self._make_staging(source.parent, GzipCompressError)
        try:
            archive = self.tarball.compress_directory(
                source, destination=staging / f"{source.name}.{TarballCompressionMethod.EXTENSION_ARCHIVE}"
            )
            self._compress_to(archive, destination, progress_callback)
            return destination
        except GzipCompressError:
            raise
        except CompressionMethodError as e:
            raise GzipCompressError(str(e)) from e
        except Exception as e:
            raise GzipCompressError(f"Failed to compress directory {source}: {e}") from e
        finally:
            discard_path(staging)

    def uncompress_directory(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Restore a directory tree from ``<directory>.tar.gz``.

        The ``.tar.gz`` file itself is kept. The intermediate tar archive
        lives in a private staging directory that is removed whether or not
        extraction succeeds.
        """
        source = Path(path)
        if path_kind(source) is not PathKind.FILE:
            raise GzipUncompressError(f"The given GZIP archive is invalid or does not exist: {source}")
        if not has_suffix(source, self.EXTENSION_GZIPPED_ARCHIVE):
            raise GzipUncompressError(
                f"{source} does not have the extension: {self.EXTENSION_GZIPPED_ARCHIVE}"
            )

        destination = self._pick_destination(
            lambda: strip_suffix(source, self.EXTENSION_GZIPPED_ARCHIVE), source, GzipUncompressError
        )

        staging = self._make_staging(source.parent, GzipUncompressError)
        try:
            archive = staging / f"{destination.name}.{TarballCompressionMethod.EXTENSION_ARCHIVE}"
            self._uncompress_to(source, archive, progress_callback)
            return self.tarball.uncompress_directory(archive, destination=destination)
        except GzipUncompressError:
            raise
        except CompressionMethodError as e:
            raise GzipUncompressError(str(e)) from e
        except Exception as e:
            raise GzipUncompressError(f"Failed to uncompress directory {source}: {e}") from e
        finally:
            discard_path(staging)

    def _compress_to(
        self, source: Path, destination: Path, progress_callback: Optional[ProgressCallback] = None
    ) -> None:
        logger.debug(f"Compressing {source} -> {destination} (level {self.compression_level})")
        self._transfer(
            source,
            destination,
            open_reader=lambda: open(source, "rb"),
            open_writer=lambda: gzip.open(destination, "xb", compresslevel=self.compression_level),
            error_class=GzipCompressError,
            progress_callback=progress_callback,
        )
        logger.info(f"Compressed {source} -> {destination}")

    def _uncompress_to(
        self, source: Path, destination: Path, progress_callback: Optional[ProgressCallback] = None
    ) -> None:
        # A zero-length file has no GZIP header, same as uncompress_string(b"")
        try:
            empty = source.stat().st_size == 0
        except OSError as e:
            raise GzipUncompressError(f"Cannot read {source}: {e}") from e
        if empty:
            raise GzipUncompressError(f"{source} is empty: no GZIP header")

        logger.debug(f"Uncompressing {source} -> {destination}")
        self._transfer(
            source,
            destination,
            open_reader=lambda: gzip.open(source, "rb"),
            open_writer=lambda: open(destination, "xb"),
            error_class=GzipUncompressError,
            progress_callback=progress_callback,
        )
        logger.info(f"Uncompressed {source} -> {destination}")

    @staticmethod
    def _pick_destination(
        candidate: Callable[[], Path],
        source: Path,
        error_class: Type[CompressionMethodError]
    ) -> Path:
        """Resolve the first free name derived from ``source``.

        Any filesystem error while checking names (a name that is too long,
        a directory that cannot be listed) surfaces as ``error_class``.
        """
        try:
            return available_path(candidate())
        except InvalidSuffixError as e:
            raise error_class(str(e)) from e
        except OSError as e:
            raise error_class(f"Cannot choose a destination for {source}: {e}") from e

    @staticmethod
    def _make_staging(parent: Path, error_class: Type[CompressionMethodError]) -> Path:
        """Create a private scratch directory inside ``parent``."""
        try:
            return Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=parent))
        except OSError as e:
            raise error_class(f"Cannot create a staging directory in {parent}: {e}") from e

    def _transfer(
        self,
        source: Path,
        destination: Path,
        open_reader: Callable[[], BinaryIO],
        open_writer: Callable[[], BinaryIO],
        error_class: Type[CompressionMethodError],
        progress_callback: Optional[ProgressCallback] = None
    ) -> None:
        """Pump ``source`` into a freshly created ``destination``.

        Both streams are closed on every exit path, writer first. The
        destination is opened in exclusive-create mode, so a file that
        appeared after the available-path check is never overwritten, and
        only a destination this call created is deleted on failure.
        """
        created = False
        try:
            with guarded(open_reader(), str(source)) as reader:
                writer = open_writer()
                created = True
                with guarded(writer, str(destination)):
                    copy_stream(reader, writer, self.chunk_size, progress_callback)
        except BaseException as e:
            if created:
                discard_path(destination)
            if isinstance(e, error_class) or not isinstance(e, Exception):
                raise
            raise error_class(f"Failed to process {source}: {e}") from e

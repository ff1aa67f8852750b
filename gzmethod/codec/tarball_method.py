"""Tar archival of files and directory trees."""

import tarfile
from pathlib import Path
from typing import Optional

from ..util.logging import get_logger
from ..util.paths import (
    InvalidSuffixError,
    PathKind,
    PathLike,
    available_path,
    discard_path,
    path_kind,
    strip_suffix,
    with_suffix,
)
from .base import CompressionMethod
from .errors import TarballCompressError, TarballUncompressError
from .pump import ProgressCallback, copy_stream, guarded

logger = get_logger(__name__)


class TarballCompressionMethod(CompressionMethod):
    """Packs files and directory trees into uncompressed POSIX tar archives.

    Directory archives store their members relative to the directory
    itself, so the tree can be restored under any name.
    """

    EXTENSION_ARCHIVE = "tar"

    file_suffix = EXTENSION_ARCHIVE
    directory_suffix = EXTENSION_ARCHIVE

    def compress_directory(
        self,
        path: PathLike,
        progress_callback: Optional[ProgressCallback] = None,
        destination: Optional[PathLike] = None
    ) -> Path:
        """Archive a directory tree into ``<directory>.tar``.

        An explicit ``destination`` is used as is and must not exist yet.
        """
        source = Path(path)
        if path_kind(source) is not PathKind.DIRECTORY:
            raise TarballCompressError(f"The given directory is invalid or does not exist: {source}")

        def add_members(archive: tarfile.TarFile) -> None:
            for child in sorted(source.iterdir()):
                archive.add(child, arcname=child.name)

        destination = self._write_archive(source, add_members, destination)
        logger.info(f"Archived directory {source} -> {destination}")
        return destination

    def uncompress_directory(
        self,
        path: PathLike,
        progress_callback: Optional[ProgressCallback] = None,
        destination: Optional[PathLike] = None
    ) -> Path:
        """Extract ``<directory>.tar`` into a new directory beside it.

        An explicit ``destination`` directory is created and must not exist yet.
        """
        source, destination = self._resolve_extraction(path, destination)

        created = False
        try:
            with tarfile.open(source, "r") as archive:
                destination.mkdir(parents=True)
                created = True
                archive.extractall(destination, filter="data")
        except BaseException as e:
            if created:
                discard_path(destination)
            if not isinstance(e, Exception):
                raise
            raise TarballUncompressError(f"Failed to extract {source}: {e}") from e

        logger.info(f"Extracted {source} -> {destination}")
        return destination

    def compress_file(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Wrap a single regular file into ``<file>.tar``."""
        source = Path(path)
        if path_kind(source) is not PathKind.FILE:
            raise TarballCompressError(f"The given file is invalid or does not exist: {source}")

        def add_member(archive: tarfile.TarFile) -> None:
            archive.add(source, arcname=source.name)

        destination = self._write_archive(source, add_member)
        logger.info(f"Archived file {source} -> {destination}")
        return destination

    def uncompress_file(
        self, path: PathLike, progress_callback: Optional[ProgressCallback] = None
    ) -> Path:
        """Restore the single regular file stored in ``<file>.tar``."""
        source, destination = self._resolve_extraction(path)

        created = False
        try:
            with tarfile.open(source, "r") as archive:
                members = archive.getmembers()
                if len(members) != 1 or not members[0].isfile():
                    raise TarballUncompressError(
                        f"{source} does not hold exactly one regular file"
                    )
                with guarded(archive.extractfile(members[0]), f"member of {source}") as reader:
                    writer = open(destination, "xb")
                    created = True
                    with guarded(writer, str(destination)):
                        copy_stream(reader, writer, progress_callback=progress_callback)
        except BaseException as e:
            if created:
                discard_path(destination)
            if isinstance(e, TarballUncompressError) or not isinstance(e, Exception):
                raise
            raise TarballUncompressError(f"Failed to extract {source}: {e}") from e

        logger.info(f"Extracted {source} -> {destination}")
        return destination

    def _write_archive(self, source: Path, add, destination: Optional[PathLike] = None) -> Path:
        """Create a fresh archive next to ``source`` and fill it with ``add``."""
        try:
            if destination is None:
                destination = available_path(with_suffix(source, self.EXTENSION_ARCHIVE))
            else:
                destination = Path(destination)
        except OSError as e:
            raise TarballCompressError(f"Cannot choose an archive name for {source}: {e}") from e

        created = False
        try:
            with tarfile.open(destination, "x:", format=tarfile.PAX_FORMAT) as archive:
                created = True
                add(archive)
        except BaseException as e:
            if created:
                discard_path(destination)
            if not isinstance(e, Exception):
                raise
            raise TarballCompressError(f"Failed to archive {source}: {e}") from e

        return destination

    def _resolve_extraction(self, path: PathLike, destination: Optional[PathLike] = None):
        """Validate an archive path and pick where its contents go."""
        source = Path(path)
        if path_kind(source) is not PathKind.FILE:
            raise TarballUncompressError(f"The given archive is invalid or does not exist: {source}")
        if destination is not None:
            return source, Path(destination)
        try:
            return source, available_path(strip_suffix(source, self.EXTENSION_ARCHIVE))
        except InvalidSuffixError as e:
            raise TarballUncompressError(str(e)) from e
        except OSError as e:
            raise TarballUncompressError(f"Cannot choose a destination for {source}: {e}") from e

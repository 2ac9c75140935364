"""
Metadata normalization.

Turns RawEntry probes from the native provider into FileSystemMetadata.
Timestamps that the OS cannot report are replaced with MIN_TIMESTAMP and
logged, and entries with over-long paths are dropped from enumerations, so
one bad entry never aborts a bulk listing.
"""

import os
from datetime import datetime
from typing import Iterable, Iterator

from loguru import logger

from commonfs.models import MIN_TIMESTAMP, FileAttributes, FileSystemMetadata
from commonfs.services.fs.native import EntryKind, NativeFileIO, RawEntry, is_path_too_long
from commonfs.paths import get_extension, has_extension, last_segment, require


class MetadataNormalizer:
    """Builds FileSystemMetadata values from native probes."""

    def __init__(self, native: NativeFileIO):
        self.native = native

    def get_file_system_info(self, path: str) -> FileSystemMetadata:
        """
        Get metadata for a path that may be a file or a directory.

        Paths with an extension are probed as a file first, others as a
        directory first. If the first probe misses, the other shape is
        returned whether or not it exists.
        """
        require(path, "path")

        if has_extension(path):
            order = (EntryKind.FILE, EntryKind.DIRECTORY)
        else:
            order = (EntryKind.DIRECTORY, EntryKind.FILE)

        entry = self.native.describe(path, order[0])
        if not entry.exists:
            logger.debug(f"No {order[0].value} at {path}, probing as {order[1].value}")
            entry = self.native.describe(path, order[1])
        return self.from_entry(entry)

    def get_file_info(self, path: str) -> FileSystemMetadata:
        """Metadata for a file. A directory at this path reads as not existing."""
        require(path, "path")
        return self.from_entry(self.native.describe(path, EntryKind.FILE))

    def get_directory_info(self, path: str) -> FileSystemMetadata:
        """Metadata for a directory. A file at this path reads as not existing."""
        require(path, "path")
        return self.from_entry(self.native.describe(path, EntryKind.DIRECTORY))

    def from_entry(self, entry: RawEntry) -> FileSystemMetadata:
        name = last_segment(entry.path)
        fields = {
            "exists": entry.exists,
            "name": name,
            "full_name": entry.path,
            "extension": get_extension(name),
        }

        if not entry.exists:
            return FileSystemMetadata(is_directory=entry.kind is EntryKind.DIRECTORY, **fields)

        attributes = self.native.attributes(entry)
        fields["attributes"] = attributes
        fields["is_directory"] = (
            entry.kind is EntryKind.DIRECTORY or FileAttributes.DIRECTORY in attributes
        )

        if entry.kind is EntryKind.FILE:
            fields["length"] = entry.stat_result.st_size
            fields["directory_name"] = os.path.dirname(entry.path)

        fields["creation_time_utc"] = self._creation_time_utc(entry)
        fields["last_write_time_utc"] = self._last_write_time_utc(entry)
        return FileSystemMetadata(**fields)

    def _creation_time_utc(self, entry: RawEntry) -> datetime:
        result = self.native.creation_time_utc(entry)
        if not result.ok:
            logger.warning(f"Error determining creation time for {entry.path}: {result.error}")
            return MIN_TIMESTAMP
        return result.value

    def _last_write_time_utc(self, entry: RawEntry) -> datetime:
        result = self.native.last_write_time_utc(entry)
        if not result.ok:
            logger.warning(f"Error determining last write time for {entry.path}: {result.error}")
            return MIN_TIMESTAMP
        return result.value

    def to_metadata(self, entries: Iterable[tuple[str, EntryKind]]) -> Iterator[FileSystemMetadata]:
        """Lazily describe enumerated entries, skipping paths that are too long."""
        for path, kind in entries:
            try:
                entry = self.native.describe(path, kind)
            except OSError as e:
                if not is_path_too_long(e):
                    raise
                logger.warning(f"Path too long, skipping: {path}")
                continue
            yield self.from_entry(entry)

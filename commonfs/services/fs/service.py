"""
Filesystem facade for commonfs.

One entry point over the host filesystem:
- metadata queries that never fail on a bad timestamp
- shortcut (link file) detection, resolution and creation via handlers
- string-only path utilities
- enumeration as metadata or as raw paths, optionally recursive
- pass-through file operations, streams and text

Usage:
    from commonfs.services.fs import FileSystemService
    from commonfs.services.shortcuts import InternetShortcutHandler

    fs = FileSystemService()
    fs.add_shortcut_handler(InternetShortcutHandler())

    info = fs.get_file_system_info("/media/movies")
    for entry in fs.get_files("/media/movies", recursive=True):
        if fs.is_shortcut(entry.full_name):
            print(fs.resolve_shortcut(entry.full_name))
"""

from datetime import datetime
from itertools import chain
from typing import BinaryIO, Iterator

from loguru import logger

from commonfs import paths
from commonfs.models import FileAttributes, FileSystemMetadata
from commonfs.paths import InvalidFilenameChars, require
from commonfs.services.fs.metadata import MetadataNormalizer
from commonfs.services.fs.native import (
    ASYNC_STREAM_BUFFER_SIZE,
    STREAM_BUFFER_SIZE,
    EntryKind,
    FileAccess,
    FileMode,
    NativeFileIO,
)
from commonfs.services.shortcuts import ShortcutHandler, ShortcutRegistry
from commonfs.settings import settings


class FileSystemService:
    """
    Synchronous filesystem facade.

    Every call blocks until the underlying OS call returns. OS errors from
    copy, move, delete and stream operations propagate unchanged.
    """

    def __init__(
        self,
        native: NativeFileIO | None = None,
        invalid_filename_chars: InvalidFilenameChars | str | None = None,
        supports_async_file_streams: bool | None = None,
        enable_request_concat: bool | None = None,
    ):
        """
        Initialize FileSystemService.

        Args:
            native: Native I/O provider (default: NativeFileIO)
            invalid_filename_chars: Preset for get_valid_filename
                (or env FS__INVALID_FILENAME_CHARS, default: cross_platform)
            supports_async_file_streams: Allow async-hinted streams
                (or env FS__SUPPORTS_ASYNC_FILE_STREAMS)
            enable_request_concat: List directories then files in
                get_file_system_entries (or env FS__ENABLE_REQUEST_CONCAT)
        """
        self.native = native or NativeFileIO()
        self.invalid_filename_chars = InvalidFilenameChars(
            invalid_filename_chars or settings.fs.invalid_filename_chars
        )
        self.supports_async_file_streams = (
            settings.fs.supports_async_file_streams
            if supports_async_file_streams is None
            else supports_async_file_streams
        )
        self.enable_request_concat = (
            settings.fs.enable_request_concat
            if enable_request_concat is None
            else enable_request_concat
        )
        self.metadata = MetadataNormalizer(self.native)
        self.shortcuts = ShortcutRegistry()

    # --- Shortcuts ---

    def add_shortcut_handler(self, handler: ShortcutHandler) -> None:
        self.shortcuts.register(handler)

    def is_shortcut(self, filename: str) -> bool:
        return self.shortcuts.is_shortcut(filename)

    def resolve_shortcut(self, filename: str) -> str | None:
        return self.shortcuts.resolve(filename)

    def create_shortcut(self, shortcut_path: str, target: str) -> None:
        self.shortcuts.create(shortcut_path, target)

    # --- Metadata ---

    def get_file_system_info(self, path: str) -> FileSystemMetadata:
        """
        Get metadata for a file or directory.

        If the path is a directory, is_directory is true and the other fields
        describe the directory.
        """
        return self.metadata.get_file_system_info(path)

    def get_file_info(self, path: str) -> FileSystemMetadata:
        """
        Get metadata for a file.

        A directory at this path gives exists=False and is_directory=False.
        Use get_file_system_info() to handle both.
        """
        return self.metadata.get_file_info(path)

    def get_directory_info(self, path: str) -> FileSystemMetadata:
        """
        Get metadata for a directory.

        A file at this path gives exists=False and is_directory=True.
        """
        return self.metadata.get_directory_info(path)

    def get_creation_time_utc(self, path_or_info: str | FileSystemMetadata) -> datetime:
        if isinstance(path_or_info, FileSystemMetadata):
            return path_or_info.creation_time_utc
        return self.get_file_system_info(path_or_info).creation_time_utc

    def get_last_write_time_utc(self, path_or_info: str | FileSystemMetadata) -> datetime:
        if isinstance(path_or_info, FileSystemMetadata):
            return path_or_info.last_write_time_utc
        return self.get_file_system_info(path_or_info).last_write_time_utc

    # --- Path utilities ---

    def get_valid_filename(self, filename: str) -> str:
        return paths.get_valid_filename(filename, self.invalid_filename_chars)

    def contains_sub_path(self, parent_path: str, path: str) -> bool:
        return paths.contains_sub_path(parent_path, path)

    def is_root_path(self, path: str) -> bool:
        return paths.is_root_path(path)

    def normalize_path(self, path: str) -> str:
        return paths.normalize_path(path)

    def is_path_file(self, path: str) -> bool:
        return paths.is_path_file(path)

    def get_file_name_without_extension(self, path_or_info: str | FileSystemMetadata) -> str:
        if isinstance(path_or_info, FileSystemMetadata):
            if path_or_info.is_directory:
                return path_or_info.name
            return paths.get_file_name_without_extension(path_or_info.full_name)
        return paths.get_file_name_without_extension(path_or_info)

    # --- Bulk operations ---

    def swap_files(self, file1: str, file2: str) -> None:
        """
        Exchange the contents of two files via two temporary copies.

        Not atomic: a failure part way leaves the files in whatever state
        the last completed copy produced.
        """
        require(file1, "file1")
        require(file2, "file2")

        temp1 = self.native.temp_file_path()
        temp2 = self.native.temp_file_path()

        # Copying over hidden files fails on some platforms
        self._remove_hidden_attribute(file1)
        self._remove_hidden_attribute(file2)

        self.native.copy_file(file1, temp1, True)
        self.native.copy_file(file2, temp2, True)

        self.native.copy_file(temp1, file2, True)
        self.native.copy_file(temp2, file1, True)

        self.native.delete_file(temp1)
        self.native.delete_file(temp2)
        logger.debug(f"Swapped {file1} and {file2}")

    def _remove_hidden_attribute(self, path: str) -> None:
        require(path, "path")

        if not self.native.file_exists(path):
            return

        attributes = self.native.get_attributes(path)
        if FileAttributes.HIDDEN in attributes:
            self.native.set_attributes(path, attributes & ~FileAttributes.HIDDEN)

    def get_directories(self, path: str, recursive: bool = False) -> Iterator[FileSystemMetadata]:
        require(path, "path")
        return self.metadata.to_metadata(
            self.native.iter_entries(path, EntryKind.DIRECTORY, recursive)
        )

    def get_files(self, path: str, recursive: bool = False) -> Iterator[FileSystemMetadata]:
        require(path, "path")
        return self.metadata.to_metadata(self.native.iter_entries(path, EntryKind.FILE, recursive))

    def get_file_system_entries(
        self, path: str, recursive: bool = False
    ) -> Iterator[FileSystemMetadata]:
        """
        Enumerate files and directories as metadata.

        With request concatenation enabled all directories come first, then
        all files; otherwise entries arrive in a single walk.
        """
        require(path, "path")

        if self.enable_request_concat:
            return chain(self.get_directories(path, recursive), self.get_files(path, recursive))

        return self.metadata.to_metadata(self.native.iter_entries(path, EntryKind.ANY, recursive))

    def get_directory_paths(self, path: str, recursive: bool = False) -> Iterator[str]:
        require(path, "path")
        return self.native.iter_paths(path, EntryKind.DIRECTORY, recursive)

    def get_file_paths(self, path: str, recursive: bool = False) -> Iterator[str]:
        require(path, "path")
        return self.native.iter_paths(path, EntryKind.FILE, recursive)

    def get_file_system_entry_paths(self, path: str, recursive: bool = False) -> Iterator[str]:
        require(path, "path")
        return self.native.iter_paths(path, EntryKind.ANY, recursive)

    # --- Pass-through ---

    def file_exists(self, path: str) -> bool:
        require(path, "path")
        return self.native.file_exists(path)

    def directory_exists(self, path: str) -> bool:
        require(path, "path")
        return self.native.directory_exists(path)

    def create_directory(self, path: str) -> None:
        require(path, "path")
        self.native.create_directory(path)

    def delete_file(self, path: str) -> None:
        require(path, "path")
        self.native.delete_file(path)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        require(path, "path")
        self.native.delete_directory(path, recursive)

    def copy_file(self, source: str, target: str, overwrite: bool = False) -> None:
        require(source, "source")
        require(target, "target")
        self.native.copy_file(source, target, overwrite)

    def move_file(self, source: str, target: str) -> None:
        require(source, "source")
        require(target, "target")
        self.native.move_file(source, target)

    def move_directory(self, source: str, target: str) -> None:
        require(source, "source")
        require(target, "target")
        self.native.move_directory(source, target)

    def get_file_stream(
        self,
        path: str,
        mode: FileMode,
        access: FileAccess,
        is_async: bool = False,
    ) -> BinaryIO:
        """
        Open a binary stream.

        is_async only takes effect when the service was built with
        supports_async_file_streams: the stream then gets a larger buffer and
        a sequential read-ahead hint.
        """
        require(path, "path")

        if self.supports_async_file_streams and is_async:
            return self.native.open_stream(
                path, mode, access, ASYNC_STREAM_BUFFER_SIZE, sequential_hint=True
            )
        return self.native.open_stream(path, mode, access, STREAM_BUFFER_SIZE)

    def open_read(self, path: str) -> BinaryIO:
        require(path, "path")
        return self.native.open_read(path)

    def read_all_text(self, path: str, encoding: str | None = None) -> str:
        require(path, "path")
        return self.native.read_all_text(path, encoding)

    def write_all_text(self, path: str, text: str, encoding: str | None = None) -> None:
        require(path, "path")
        self.native.write_all_text(path, text, encoding)


# Singleton instance
_fs_service: FileSystemService | None = None


def get_fs_service() -> FileSystemService:
    """Get or create FileSystemService singleton."""
    global _fs_service
    if _fs_service is None:
        _fs_service = FileSystemService()
    return _fs_service

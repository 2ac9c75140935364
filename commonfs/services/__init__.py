"""commonfs services."""

from commonfs.services.fs import FileSystemService, MetadataNormalizer, NativeFileIO, get_fs_service
from commonfs.services.shortcuts import ShortcutHandler, ShortcutRegistry

__all__ = [
    "FileSystemService",
    "MetadataNormalizer",
    "NativeFileIO",
    "get_fs_service",
    "ShortcutHandler",
    "ShortcutRegistry",
]

"""commonfs - Cross-platform filesystem facade with pluggable shortcut resolution."""

__version__ = "0.1.0"

from commonfs.models import MIN_TIMESTAMP, FileAttributes, FileSystemMetadata
from commonfs.services.fs import FileSystemService, get_fs_service
from commonfs.services.shortcuts import ShortcutHandler

__all__ = [
    "MIN_TIMESTAMP",
    "FileAttributes",
    "FileSystemMetadata",
    "FileSystemService",
    "ShortcutHandler",
    "get_fs_service",
]

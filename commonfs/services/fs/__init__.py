"""Filesystem facade for commonfs."""

from commonfs.services.fs.metadata import MetadataNormalizer
from commonfs.services.fs.native import (
    EntryKind,
    FileAccess,
    FileMode,
    NativeFileIO,
    RawEntry,
    TimestampResult,
)
from commonfs.services.fs.service import (
    FileSystemService,
    get_fs_service,
)

__all__ = [
    "EntryKind",
    "FileAccess",
    "FileMode",
    "FileSystemService",
    "MetadataNormalizer",
    "NativeFileIO",
    "RawEntry",
    "TimestampResult",
    "get_fs_service",
]

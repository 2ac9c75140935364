"""commonfs data models."""

from commonfs.models.metadata import MIN_TIMESTAMP, FileAttributes, FileSystemMetadata

__all__ = ["MIN_TIMESTAMP", "FileAttributes", "FileSystemMetadata"]

"""Platform-independent file and directory metadata."""

from datetime import datetime, timezone
from enum import IntFlag
from typing import Annotated

from pydantic import BaseModel, PlainValidator

# Substituted for timestamps the OS cannot report
MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


class FileAttributes(IntFlag):
    """Attribute bits, using the Windows bit values on every platform."""

    READONLY = 0x1
    HIDDEN = 0x2
    SYSTEM = 0x4
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    NORMAL = 0x80
    REPARSE_POINT = 0x400


class FileSystemMetadata(BaseModel):
    """
    Snapshot of a path's state at the time it was queried.

    When ``exists`` is false only ``name``, ``full_name``, ``extension`` and
    ``is_directory`` carry information; ``is_directory`` then reflects whether
    the path was probed as a directory, not what is on disk.
    """

    exists: bool
    is_directory: bool
    name: str
    full_name: str
    extension: str = ""
    length: int = 0
    directory_name: str | None = None
    creation_time_utc: datetime = MIN_TIMESTAMP
    last_write_time_utc: datetime = MIN_TIMESTAMP
    attributes: Annotated[FileAttributes, PlainValidator(FileAttributes)] = FileAttributes(0)

    model_config = {"frozen": True}

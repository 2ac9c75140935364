"""
Path and filename utilities.

String-only helpers: none of these touch the disk. They back the
FileSystemService path methods, the shortcut registry's extension lookup and
the metadata normalizer's probe order.
"""

import os
from enum import Enum

# 31 control characters plus " < > | : * ? \ /
WINDOWS_INVALID_FILENAME_CHARS: frozenset[str] = frozenset(
    [chr(i) for i in range(0x20)] + ['"', "<", ">", "|", ":", "*", "?", "\\", "/"]
)

POSIX_INVALID_FILENAME_CHARS: frozenset[str] = frozenset(["\x00", "/"])


class InvalidFilenameChars(str, Enum):
    """Which characters get_valid_filename() treats as invalid."""

    HOST = "host"
    CROSS_PLATFORM = "cross_platform"

    @property
    def chars(self) -> frozenset[str]:
        if self is InvalidFilenameChars.CROSS_PLATFORM or os.name == "nt":
            return WINDOWS_INVALID_FILENAME_CHARS
        return POSIX_INVALID_FILENAME_CHARS


def require(value: str | None, name: str) -> str:
    """Raise ValueError when a required string argument is None or empty."""
    if not value:
        raise ValueError(f"{name} is required")
    return value


def _separators() -> tuple[str, ...]:
    return (os.sep, os.altsep) if os.altsep else (os.sep,)


def last_segment(path: str) -> str:
    """Return the part of the path after the last directory separator."""
    cut = max(path.rfind(sep) for sep in _separators())
    return path[cut + 1:]


def get_extension(path: str) -> str:
    """
    Return the extension of the last path segment, including the dot.

    Everything from the last "." onwards counts, so ".bashrc" has the
    extension ".bashrc". A trailing dot or no dot gives "".
    """
    segment = last_segment(path)
    dot = segment.rfind(".")
    if dot == -1 or dot == len(segment) - 1:
        return ""
    return segment[dot:]


def has_extension(path: str) -> bool:
    return get_extension(path) != ""


def get_file_name_without_extension(path: str) -> str:
    segment = last_segment(path)
    dot = segment.rfind(".")
    return segment[:dot] if dot != -1 else segment


def get_valid_filename(
    filename: str,
    invalid_chars: InvalidFilenameChars = InvalidFilenameChars.CROSS_PLATFORM,
) -> str:
    """
    Replace every invalid filename character with a space.

    Args:
        filename: Filename to sanitize
        invalid_chars: Character set preset to apply

    Returns:
        Sanitized filename of the same length

    Raises:
        ValueError: If filename is None or empty
    """
    require(filename, "filename")
    invalid = invalid_chars.chars
    return "".join(" " if c in invalid else c for c in filename)


def contains_sub_path(parent_path: str, path: str) -> bool:
    """
    Check whether path lies under parent_path.

    This is a case-insensitive substring test for the parent followed by a
    separator, so the parent also matches when it appears in the middle of
    an unrelated path ("/data/foo" inside "/backup/data/foo/x").
    """
    require(parent_path, "parent_path")
    require(path, "path")

    needle = parent_path.rstrip(os.sep) + os.sep
    return needle.lower() in path.lower()


def is_root_path(path: str) -> bool:
    require(path, "path")

    parent = os.path.dirname(path)
    return not parent or parent == path


def normalize_path(path: str) -> str:
    """Strip trailing separators, leaving drive roots ("C:\\") and "/" alone."""
    require(path, "path")

    if path.lower().endswith(":\\"):
        return path

    return path.rstrip(os.sep) or path


def is_path_file(path: str) -> bool:
    """False for URLs other than file:// ones, True for everything else."""
    if not path or not path.strip():
        raise ValueError("path is required")

    lowered = path.lower()
    if "://" in lowered and not lowered.startswith("file://"):
        return False
    return True

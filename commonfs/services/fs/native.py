"""
Native file I/O provider.

Thin pass-through to os, shutil and tempfile. Nothing here catches OS errors
except the timestamp accessors, which hand failures back as a
TimestampResult so the caller decides what to substitute.
"""

import errno
import os
import shutil
import stat
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import BinaryIO, Iterator

from loguru import logger

from commonfs.models import FileAttributes

STREAM_BUFFER_SIZE = 64 * 1024
ASYNC_STREAM_BUFFER_SIZE = 256 * 1024

# ERROR_FILENAME_EXCED_RANGE
_WINERROR_PATH_TOO_LONG = 206


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    ANY = "any"  # enumeration only


class FileMode(str, Enum):
    """How to open a stream with respect to an existing file."""

    CREATE_NEW = "create_new"  # fail if the file exists
    CREATE = "create"  # create or truncate
    OPEN = "open"  # fail if missing
    OPEN_OR_CREATE = "open_or_create"
    TRUNCATE = "truncate"  # existing file only, truncated
    APPEND = "append"  # create if missing, write at end


class FileAccess(str, Enum):
    READ = "read"
    WRITE = "write"
    READ_WRITE = "read_write"


_MODE_FLAGS = {
    FileMode.CREATE_NEW: os.O_CREAT | os.O_EXCL,
    FileMode.CREATE: os.O_CREAT | os.O_TRUNC,
    FileMode.OPEN: 0,
    FileMode.OPEN_OR_CREATE: os.O_CREAT,
    FileMode.TRUNCATE: os.O_TRUNC,
    FileMode.APPEND: os.O_CREAT | os.O_APPEND,
}

_ACCESS_FLAGS = {
    FileAccess.READ: os.O_RDONLY,
    FileAccess.WRITE: os.O_WRONLY,
    FileAccess.READ_WRITE: os.O_RDWR,
}


@dataclass(frozen=True)
class RawEntry:
    """
    A path probed as a file or as a directory.

    stat_result is None when nothing of the probed kind exists there. The
    stat follows symlinks; is_link records whether the path itself is one.
    """

    path: str
    kind: EntryKind
    stat_result: os.stat_result | None = None
    is_link: bool = False

    @property
    def exists(self) -> bool:
        return self.stat_result is not None


@dataclass(frozen=True)
class TimestampResult:
    """Outcome of reading a timestamp: a value, or the error that prevented it."""

    value: datetime | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_path_too_long(error: OSError) -> bool:
    return (
        error.errno == errno.ENAMETOOLONG
        or getattr(error, "winerror", None) == _WINERROR_PATH_TOO_LONG
    )


def attributes_from_stat(name: str, st: os.stat_result, is_link: bool = False) -> FileAttributes:
    """Map a stat result onto FileAttributes."""
    native = getattr(st, "st_file_attributes", None)
    if native is not None:
        attributes = FileAttributes(native)
        return attributes | FileAttributes.REPARSE_POINT if is_link else attributes

    attributes = FileAttributes(0)
    if stat.S_ISDIR(st.st_mode):
        attributes |= FileAttributes.DIRECTORY
    if is_link:
        attributes |= FileAttributes.REPARSE_POINT
    if stat.S_ISLNK(st.st_mode):
        attributes |= FileAttributes.REPARSE_POINT
    if not st.st_mode & (stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH):
        attributes |= FileAttributes.READONLY
    flags = getattr(st, "st_flags", 0)
    hidden_flag = getattr(stat, "UF_HIDDEN", 0)
    if (name.startswith(".") and name not in (".", "..")) or (flags & hidden_flag):
        attributes |= FileAttributes.HIDDEN
    return attributes or FileAttributes.NORMAL


def _utc(timestamp: float) -> TimestampResult:
    try:
        return TimestampResult(value=datetime.fromtimestamp(timestamp, tz=timezone.utc))
    except (OverflowError, OSError, ValueError) as e:
        return TimestampResult(error=e)


def _skip_too_long_below(root: str):
    """os.walk error handler: drop over-long subdirectories, raise the rest."""

    def onerror(error: OSError) -> None:
        if is_path_too_long(error) and error.filename != root:
            logger.warning(f"Path too long, skipping: {error.filename}")
            return
        raise error

    return onerror


class NativeFileIO:
    """Direct, blocking calls into the host filesystem."""

    # --- Probing ---

    def file_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def directory_exists(self, path: str) -> bool:
        return os.path.isdir(path)

    def describe(self, path: str, kind: EntryKind) -> RawEntry:
        """
        Probe a path as a file or as a directory.

        A file probe does not match a directory and vice versa. Path-too-long
        errors propagate; any other stat failure reads as "does not exist".
        """
        full_path = os.path.abspath(path)
        try:
            st = os.stat(full_path)
        except OSError as e:
            if is_path_too_long(e):
                raise
            return RawEntry(full_path, kind)

        if stat.S_ISDIR(st.st_mode) != (kind is EntryKind.DIRECTORY):
            return RawEntry(full_path, kind)
        return RawEntry(full_path, kind, st, is_link=os.path.islink(full_path))

    def creation_time_utc(self, entry: RawEntry) -> TimestampResult:
        """
        Creation time from st_birthtime where the platform records it.

        Otherwise st_ctime, which is the creation time on Windows but the
        inode change time on Linux and most other Unix systems.
        """
        st = entry.stat_result
        if st is None:
            return TimestampResult(error=FileNotFoundError(errno.ENOENT, "No such entry", entry.path))
        birth = getattr(st, "st_birthtime", None)
        return _utc(birth if birth is not None else st.st_ctime)

    def last_write_time_utc(self, entry: RawEntry) -> TimestampResult:
        st = entry.stat_result
        if st is None:
            return TimestampResult(error=FileNotFoundError(errno.ENOENT, "No such entry", entry.path))
        return _utc(st.st_mtime)

    def attributes(self, entry: RawEntry) -> FileAttributes:
        if entry.stat_result is None:
            return FileAttributes(0)
        return attributes_from_stat(
            os.path.basename(entry.path), entry.stat_result, entry.is_link
        )

    # --- Enumeration ---

    def iter_entries(
        self, path: str, kind: EntryKind = EntryKind.ANY, recursive: bool = False
    ) -> Iterator[tuple[str, EntryKind]]:
        """
        Yield (path, kind) for the children of a directory.

        Within each directory, subdirectories come before files. A
        subdirectory whose path is too long to list is logged and skipped;
        every other listing error propagates, as do all errors on path itself.
        """
        for dirpath, dirnames, filenames in os.walk(path, onerror=_skip_too_long_below(path)):
            if kind in (EntryKind.DIRECTORY, EntryKind.ANY):
                for name in dirnames:
                    yield os.path.join(dirpath, name), EntryKind.DIRECTORY
            if kind in (EntryKind.FILE, EntryKind.ANY):
                for name in filenames:
                    yield os.path.join(dirpath, name), EntryKind.FILE
            if not recursive:
                break

    def iter_paths(
        self, path: str, kind: EntryKind = EntryKind.ANY, recursive: bool = False
    ) -> Iterator[str]:
        for entry_path, _ in self.iter_entries(path, kind, recursive):
            yield entry_path

    # --- Mutations ---

    def create_directory(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def delete_file(self, path: str) -> None:
        os.remove(path)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        if recursive:
            shutil.rmtree(path)
        else:
            os.rmdir(path)

    def copy_file(self, source: str, target: str, overwrite: bool = False) -> None:
        if not overwrite and os.path.exists(target):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), target)
        shutil.copy2(source, target)

    def move_file(self, source: str, target: str) -> None:
        if os.path.exists(target):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), target)
        shutil.move(source, target)

    def move_directory(self, source: str, target: str) -> None:
        if os.path.exists(target):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), target)
        shutil.move(source, target)

    def temp_file_path(self) -> str:
        """Create an empty temporary file and return its path."""
        with tempfile.NamedTemporaryFile(prefix="commonfs_", delete=False) as tmp:
            return tmp.name

    # --- Streams and text ---

    def open_stream(
        self,
        path: str,
        mode: FileMode,
        access: FileAccess,
        buffering: int = STREAM_BUFFER_SIZE,
        sequential_hint: bool = False,
    ) -> BinaryIO:
        """
        Open a binary stream with explicit create/open and access semantics.

        Raises:
            ValueError: If the mode needs write access but access is READ
        """
        if access is FileAccess.READ and mode in (
            FileMode.CREATE_NEW,
            FileMode.CREATE,
            FileMode.TRUNCATE,
            FileMode.APPEND,
        ):
            raise ValueError(f"File mode {mode.value} requires write access")

        flags = _MODE_FLAGS[mode] | _ACCESS_FLAGS[access] | getattr(os, "O_BINARY", 0)
        fd = os.open(path, flags, 0o666)
        try:
            if sequential_hint and hasattr(os, "posix_fadvise"):
                os.posix_fadvise(fd, 0, 0, os.POSIX_FADV_SEQUENTIAL)

            if access is FileAccess.READ:
                py_mode = "rb"
            elif access is FileAccess.WRITE:
                py_mode = "ab" if mode is FileMode.APPEND else "wb"
            else:
                py_mode = "a+b" if mode is FileMode.APPEND else "r+b"
            return os.fdopen(fd, py_mode, buffering=buffering)
        except BaseException:
            os.close(fd)
            raise

    def open_read(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def read_all_text(self, path: str, encoding: str | None = None) -> str:
        # utf-8-sig also strips a byte order mark
        with open(path, "r", encoding=encoding or "utf-8-sig") as f:
            return f.read()

    def write_all_text(self, path: str, text: str, encoding: str | None = None) -> None:
        with open(path, "w", encoding=encoding or "utf-8") as f:
            f.write(text)

    # --- Attributes ---

    def get_attributes(self, path: str) -> FileAttributes:
        return attributes_from_stat(os.path.basename(path), os.stat(path))

    def set_attributes(self, path: str, attributes: FileAttributes) -> None:
        """
        Apply the READONLY and HIDDEN bits.

        On POSIX only the read-only bit and the BSD hidden flag can change;
        dot-file names stay hidden.
        """
        if os.name == "nt":
            import ctypes

            value = int(attributes) or int(FileAttributes.NORMAL)
            if not ctypes.windll.kernel32.SetFileAttributesW(path, value):
                raise ctypes.WinError()
            return

        st = os.stat(path)
        if attributes & FileAttributes.READONLY:
            os.chmod(path, st.st_mode & ~(stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH))
        elif not st.st_mode & stat.S_IWUSR:
            os.chmod(path, st.st_mode | stat.S_IWUSR)

        hidden_flag = getattr(stat, "UF_HIDDEN", 0)
        if hidden_flag and hasattr(os, "chflags"):
            flags = st.st_flags
            wanted = flags | hidden_flag if attributes & FileAttributes.HIDDEN else flags & ~hidden_flag
            if wanted != flags:
                logger.debug(f"Updating file flags on {path}")
                os.chflags(path, wanted)

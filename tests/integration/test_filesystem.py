"""Integration tests for FileSystemService on the local filesystem."""

import errno
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from commonfs.models import MIN_TIMESTAMP, FileAttributes
from commonfs.services.fs import FileAccess, FileMode
from commonfs.services.shortcuts import (
    DesktopEntryShortcutHandler,
    InternetShortcutHandler,
    PlainTextShortcutHandler,
)


class TestMetadata:
    def test_existing_file(self, fs, media_tree):
        info = fs.get_file_system_info(str(media_tree / "movie.mkv"))

        assert info.exists is True
        assert info.is_directory is False
        assert info.name == "movie.mkv"
        assert info.extension == ".mkv"
        assert info.length == 10
        assert info.full_name == str(media_tree / "movie.mkv")
        assert info.directory_name == str(media_tree)
        assert info.last_write_time_utc.tzinfo == timezone.utc
        assert info.last_write_time_utc > MIN_TIMESTAMP
        assert info.last_write_time_utc <= datetime.now(timezone.utc)

    def test_directory_with_dot_in_name(self, fs, media_tree):
        info = fs.get_file_system_info(str(media_tree / "season.1"))

        assert info.exists is True
        assert info.is_directory is True
        assert info.length == 0
        assert info.directory_name is None

    def test_file_without_extension(self, fs, media_tree):
        info = fs.get_file_system_info(str(media_tree / "notes"))

        assert info.exists is True
        assert info.is_directory is False
        assert info.length == 4

    def test_missing_path(self, fs, media_tree):
        info = fs.get_file_system_info(str(media_tree / "missing.mkv"))

        assert info.exists is False
        assert info.length == 0
        assert info.creation_time_utc == MIN_TIMESTAMP

    def test_file_info_on_directory(self, fs, media_tree):
        info = fs.get_file_info(str(media_tree / "extras"))

        assert info.exists is False
        assert info.is_directory is False

    def test_directory_info_on_file(self, fs, media_tree):
        info = fs.get_directory_info(str(media_tree / "movie.mkv"))

        assert info.exists is False
        assert info.is_directory is True

    def test_relative_path_made_absolute(self, fs, media_tree, monkeypatch):
        monkeypatch.chdir(media_tree)

        info = fs.get_file_info("movie.mkv")

        assert info.exists is True
        assert os.path.isabs(info.full_name)

    def test_last_write_time_matches_mtime(self, fs, media_tree):
        target = media_tree / "movie.mkv"
        os.utime(target, (1_000_000_000, 1_000_000_000))

        assert fs.get_last_write_time_utc(str(target)) == datetime.fromtimestamp(
            1_000_000_000, tz=timezone.utc
        )


class TestEnumeration:
    def test_files_top_level(self, fs, media_tree):
        names = sorted(m.name for m in fs.get_files(str(media_tree)))
        assert names == ["movie.mkv", "notes"]

    def test_files_recursive(self, fs, media_tree):
        names = sorted(m.name for m in fs.get_files(str(media_tree), recursive=True))
        assert names == ["episode1.avi", "movie.mkv", "notes", "scene.mp4"]

    def test_directories_recursive(self, fs, media_tree):
        result = list(fs.get_directories(str(media_tree), recursive=True))

        assert sorted(m.name for m in result) == ["deleted", "extras", "season.1"]
        assert all(m.is_directory and m.exists for m in result)

    def test_entries_concat_order(self, fs, media_tree):
        result = list(fs.get_file_system_entries(str(media_tree)))

        kinds = [m.is_directory for m in result]
        assert kinds == sorted(kinds, reverse=True)
        assert len(result) == 4

    def test_entry_paths(self, fs, media_tree):
        paths = sorted(fs.get_file_system_entry_paths(str(media_tree)))

        assert paths == sorted(str(media_tree / n) for n in ["extras", "movie.mkv", "notes", "season.1"])

    def test_file_paths_recursive(self, fs, media_tree):
        paths = set(fs.get_file_paths(str(media_tree), recursive=True))

        assert str(media_tree / "extras" / "deleted" / "scene.mp4") in paths
        assert len(paths) == 4

    def test_directory_paths(self, fs, media_tree):
        assert sorted(fs.get_directory_paths(str(media_tree))) == [
            str(media_tree / "extras"),
            str(media_tree / "season.1"),
        ]

    def test_missing_directory_raises(self, fs, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(fs.get_files(str(tmp_path / "nope")))

    def test_path_too_long_entry_dropped(self, fs, media_tree, monkeypatch):
        """One entry failing with ENAMETOOLONG does not abort the listing."""
        real_stat = os.stat
        bad = str(media_tree / "notes")

        def fake_stat(path, *args, **kwargs):
            if os.fspath(path) == bad:
                raise OSError(errno.ENAMETOOLONG, "File name too long", path)
            return real_stat(path, *args, **kwargs)

        monkeypatch.setattr(os, "stat", fake_stat)

        names = sorted(m.name for m in fs.get_files(str(media_tree)))

        assert names == ["movie.mkv"]

    @pytest.mark.skipif(
        os.mkdir not in os.supports_dir_fd or not hasattr(os, "O_DIRECTORY"),
        reason="needs dir_fd support to build paths longer than PATH_MAX",
    )
    def test_recursive_listing_skips_over_long_subtree(self, fs, tmp_path, log_messages):
        """A nested directory too long to list is skipped, not fatal."""
        root = tmp_path / "lib"
        root.mkdir()
        (root / "keep.mkv").write_bytes(b"keep")

        name = "d" * 250
        fd = os.open(root, os.O_RDONLY | os.O_DIRECTORY)
        try:
            for _ in range(17):
                os.mkdir(name, dir_fd=fd)
                child = os.open(name, os.O_RDONLY | os.O_DIRECTORY, dir_fd=fd)
                os.close(fd)
                fd = child
        finally:
            os.close(fd)

        assert [m.name for m in fs.get_files(str(root), recursive=True)] == ["keep.mkv"]
        assert list(fs.get_file_paths(str(root), recursive=True)) == [str(root / "keep.mkv")]
        assert any("Path too long, skipping" in m for m in log_messages)


class TestAttributes:
    def test_plain_file_is_not_reparse_point(self, fs, media_tree):
        info = fs.get_file_system_info(str(media_tree / "movie.mkv"))

        assert FileAttributes.REPARSE_POINT not in info.attributes

    def test_symlink_is_reparse_point(self, fs, media_tree):
        link = media_tree / "link.mkv"
        try:
            link.symlink_to(media_tree / "movie.mkv")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not available")

        info = fs.get_file_system_info(str(link))

        assert info.exists is True
        assert info.length == 10
        assert FileAttributes.REPARSE_POINT in info.attributes


class TestFileOperations:
    def test_swap_files(self, fs, tmp_path):
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"
        a.write_text("alpha")
        b.write_text("bravo")

        fs.swap_files(str(a), str(b))

        assert a.read_text() == "bravo"
        assert b.read_text() == "alpha"

    def test_swap_dot_files(self, fs, tmp_path):
        a = tmp_path / ".a"
        b = tmp_path / ".b"
        a.write_text("alpha")
        b.write_text("bravo")

        fs.swap_files(str(a), str(b))

        assert a.read_text() == "bravo"

    def test_copy_without_overwrite(self, fs, tmp_path):
        src = tmp_path / "src.txt"
        dst = tmp_path / "dst.txt"
        src.write_text("new")
        dst.write_text("old")

        with pytest.raises(FileExistsError):
            fs.copy_file(str(src), str(dst))

        fs.copy_file(str(src), str(dst), overwrite=True)
        assert dst.read_text() == "new"

    def test_move_file_and_directory(self, fs, tmp_path):
        src = tmp_path / "src.txt"
        src.write_text("x")
        fs.move_file(str(src), str(tmp_path / "moved.txt"))

        folder = tmp_path / "folder"
        folder.mkdir()
        fs.move_directory(str(folder), str(tmp_path / "renamed"))

        assert fs.file_exists(str(tmp_path / "moved.txt"))
        assert not fs.file_exists(str(src))
        assert fs.directory_exists(str(tmp_path / "renamed"))

    def test_move_onto_existing_raises(self, fs, tmp_path):
        (tmp_path / "a").write_text("a")
        (tmp_path / "b").write_text("b")

        with pytest.raises(FileExistsError):
            fs.move_file(str(tmp_path / "a"), str(tmp_path / "b"))

    def test_create_and_delete_directory(self, fs, tmp_path):
        nested = tmp_path / "x" / "y"
        fs.create_directory(str(nested))
        (nested / "f.txt").write_text("f")

        with pytest.raises(OSError):
            fs.delete_directory(str(tmp_path / "x"))

        fs.delete_directory(str(tmp_path / "x"), recursive=True)
        assert not fs.directory_exists(str(tmp_path / "x"))

    def test_delete_missing_file_raises(self, fs, tmp_path):
        with pytest.raises(FileNotFoundError):
            fs.delete_file(str(tmp_path / "missing"))

    def test_text_round_trip_with_encoding(self, fs, tmp_path):
        target = str(tmp_path / "t.txt")

        fs.write_all_text(target, "café", "latin-1")

        assert Path(target).read_bytes() == b"caf\xe9"
        assert fs.read_all_text(target, "latin-1") == "café"

    def test_read_text_strips_bom(self, fs, tmp_path):
        target = tmp_path / "bom.txt"
        target.write_bytes(b"\xef\xbb\xbfhello")

        assert fs.read_all_text(str(target)) == "hello"


class TestStreams:
    def test_create_new_fails_when_present(self, fs, tmp_path):
        target = tmp_path / "s.bin"
        target.write_bytes(b"x")

        with pytest.raises(FileExistsError):
            fs.get_file_stream(str(target), FileMode.CREATE_NEW, FileAccess.WRITE)

    def test_open_missing_fails(self, fs, tmp_path):
        with pytest.raises(FileNotFoundError):
            fs.get_file_stream(str(tmp_path / "missing.bin"), FileMode.OPEN, FileAccess.READ)

    def test_create_truncates(self, fs, tmp_path):
        target = tmp_path / "s.bin"
        target.write_bytes(b"old content")

        with fs.get_file_stream(str(target), FileMode.CREATE, FileAccess.WRITE) as stream:
            stream.write(b"new")

        assert target.read_bytes() == b"new"

    def test_append(self, fs, tmp_path):
        target = tmp_path / "s.bin"
        target.write_bytes(b"abc")

        with fs.get_file_stream(str(target), FileMode.APPEND, FileAccess.WRITE) as stream:
            stream.write(b"def")

        assert target.read_bytes() == b"abcdef"

    def test_async_read(self, fs, tmp_path):
        target = tmp_path / "s.bin"
        target.write_bytes(b"payload")

        with fs.get_file_stream(str(target), FileMode.OPEN, FileAccess.READ, is_async=True) as stream:
            assert stream.read() == b"payload"

    def test_read_write(self, fs, tmp_path):
        target = tmp_path / "s.bin"
        target.write_bytes(b"abcdef")

        with fs.get_file_stream(str(target), FileMode.OPEN, FileAccess.READ_WRITE) as stream:
            assert stream.read(3) == b"abc"
            stream.write(b"XYZ")

        assert target.read_bytes() == b"abcXYZ"

    def test_write_mode_needs_write_access(self, fs, tmp_path):
        with pytest.raises(ValueError, match="write access"):
            fs.get_file_stream(str(tmp_path / "s.bin"), FileMode.CREATE, FileAccess.READ)

    def test_open_read(self, fs, media_tree):
        with fs.open_read(str(media_tree / "movie.mkv")) as stream:
            assert stream.read() == b"0123456789"


class TestShortcuts:
    def test_round_trip_through_service(self, fs, media_tree, tmp_path):
        fs.add_shortcut_handler(PlainTextShortcutHandler(".pathlink"))
        fs.add_shortcut_handler(InternetShortcutHandler())
        fs.add_shortcut_handler(DesktopEntryShortcutHandler())
        target = str(media_tree / "movie.mkv")

        for name in ["movie.pathlink", "movie.URL", "movie.desktop"]:
            shortcut = str(tmp_path / name)
            assert fs.is_shortcut(shortcut) is True
            fs.create_shortcut(shortcut, target)
            assert fs.resolve_shortcut(shortcut) == target

    def test_unregistered_type(self, fs, tmp_path):
        with pytest.raises(NotImplementedError):
            fs.create_shortcut(str(tmp_path / "movie.lnk"), "/x")
        assert not (tmp_path / "movie.lnk").exists()

    def test_resolve_unregistered(self, fs, media_tree):
        assert fs.resolve_shortcut(str(media_tree / "movie.mkv")) is None

"""
Pytest configuration for integration tests.

Integration tests run FileSystemService against real directories under
tmp_path. No services or network access needed.

Usage:
    pytest tests/integration/
"""

from pathlib import Path

import pytest

from commonfs.services.fs import FileSystemService


@pytest.fixture
def fs() -> FileSystemService:
    """Service with explicit settings so the environment cannot change results."""
    return FileSystemService(
        invalid_filename_chars="cross_platform",
        supports_async_file_streams=True,
        enable_request_concat=True,
    )


@pytest.fixture
def media_tree(tmp_path) -> Path:
    """
    A small library:

        media/
            movie.mkv          (10 bytes)
            notes              (file without extension)
            season.1/          (directory with a dot in its name)
                episode1.avi
            extras/
                deleted/
                    scene.mp4
    """
    root = tmp_path / "media"
    (root / "season.1").mkdir(parents=True)
    (root / "extras" / "deleted").mkdir(parents=True)
    (root / "movie.mkv").write_bytes(b"0123456789")
    (root / "notes").write_text("todo")
    (root / "season.1" / "episode1.avi").write_bytes(b"ep1")
    (root / "extras" / "deleted" / "scene.mp4").write_bytes(b"scene")
    return root

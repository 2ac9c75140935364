"""
Pytest configuration and shared fixtures for commonfs tests.

Test Organization:
- tests/unit/     - Native I/O mocked, or plain files under tmp_path
- tests/integration/ - FileSystemService against real directories
"""

import os
import stat

import pytest
from loguru import logger


@pytest.fixture
def log_messages() -> list:
    """Capture loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level}|{message}")
    yield messages
    logger.remove(handler_id)


def _make_stat(
    size: int = 0,
    is_dir: bool = False,
    mtime: float = 1_700_000_000.0,
    ctime: float = 1_600_000_000.0,
) -> os.stat_result:
    """Build an os.stat_result without touching the disk."""
    mode = (stat.S_IFDIR | 0o755) if is_dir else (stat.S_IFREG | 0o644)
    return os.stat_result((mode, 0, 0, 1, 0, 0, size, mtime, mtime, ctime))


@pytest.fixture
def make_stat():
    """Factory for in-memory stat results."""
    return _make_stat


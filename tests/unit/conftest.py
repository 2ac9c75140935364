"""
Pytest configuration and fixtures for commonfs unit tests.

Unit tests MUST NOT depend on what the host filesystem reports:
- Native I/O is a MagicMock(spec=NativeFileIO)
- Stat results are built in memory

Shortcut handler tests are the exception: they read and write small files
under tmp_path.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from commonfs.models import FileAttributes
from commonfs.services.fs.native import NativeFileIO, RawEntry, TimestampResult

CREATED = datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)
MODIFIED = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.fixture
def native():
    """
    Mock native provider.

    describe() returns a missing entry of the requested kind unless a test
    overrides it. Timestamps succeed with CREATED / MODIFIED.
    """
    mock = MagicMock(spec=NativeFileIO)
    mock.describe.side_effect = lambda path, kind: RawEntry(path, kind)
    mock.attributes.return_value = FileAttributes.NORMAL
    mock.creation_time_utc.return_value = TimestampResult(value=CREATED)
    mock.last_write_time_utc.return_value = TimestampResult(value=MODIFIED)
    return mock

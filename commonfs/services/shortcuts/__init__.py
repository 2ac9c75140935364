"""Shortcut resolution for commonfs."""

from commonfs.services.shortcuts.handlers import (
    DesktopEntryShortcutHandler,
    InternetShortcutHandler,
    PlainTextShortcutHandler,
    ShortcutHandler,
)
from commonfs.services.shortcuts.registry import ShortcutRegistry

__all__ = [
    "DesktopEntryShortcutHandler",
    "InternetShortcutHandler",
    "PlainTextShortcutHandler",
    "ShortcutHandler",
    "ShortcutRegistry",
]

"""Shortcut handler plugins.

Handlers read and write one kind of platform link file each, identified by
its file extension. None are registered by default; the application picks
the ones it wants and registers them on the FileSystemService.
"""

import configparser
import os
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from loguru import logger

from commonfs.settings import settings


class ShortcutHandler(ABC):
    """Base class for shortcut handlers."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension this handler claims, e.g. ".url"."""
        pass

    @abstractmethod
    def resolve(self, shortcut_path: str) -> str | None:
        """
        Read a shortcut file and return its target.

        Args:
            shortcut_path: Path to the shortcut file

        Returns:
            Target path, or None if the file cannot be resolved
        """
        pass

    @abstractmethod
    def create(self, shortcut_path: str, target_path: str) -> None:
        """Write a shortcut file pointing at target_path."""
        pass


def _target_from_url(url: str) -> str:
    """file:// URLs become local paths, anything else is returned verbatim."""
    parsed = urlparse(url)
    if parsed.scheme != "file":
        return url
    path = url2pathname(parsed.path)
    if parsed.netloc and parsed.netloc != "localhost":
        return f"//{parsed.netloc}{path}"
    return path


def _url_from_target(target_path: str) -> str:
    if "://" in target_path:
        return target_path
    return Path(os.path.abspath(target_path)).as_uri()


class PlainTextShortcutHandler(ShortcutHandler):
    """
    Shortcut whose file body is the target path.

    The first non-blank line is the target. The extension is configurable,
    see FS__PLAINTEXT_SHORTCUT_EXTENSION.
    """

    def __init__(self, extension: str | None = None):
        extension = extension or settings.fs.plaintext_shortcut_extension
        self._extension = extension if extension.startswith(".") else f".{extension}"

    @property
    def extension(self) -> str:
        return self._extension

    def resolve(self, shortcut_path: str) -> str | None:
        try:
            text = Path(shortcut_path).read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            logger.debug(f"Shortcut file not found: {shortcut_path}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Unreadable shortcut file {shortcut_path}: {e}")
            return None

        for line in text.splitlines():
            if line.strip():
                return line.strip()
        return None

    def create(self, shortcut_path: str, target_path: str) -> None:
        Path(shortcut_path).write_text(target_path, encoding="utf-8")


class _IniShortcutHandler(ShortcutHandler):
    """Shared reading and writing for INI-style link files."""

    section: str = ""

    def _read_section(self, shortcut_path: str) -> configparser.SectionProxy | None:
        parser = configparser.ConfigParser(interpolation=None, strict=False)
        parser.optionxform = str
        try:
            with open(shortcut_path, encoding="utf-8-sig") as f:
                parser.read_file(f)
        except FileNotFoundError:
            logger.debug(f"Shortcut file not found: {shortcut_path}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Unreadable shortcut file {shortcut_path}: {e}")
            return None
        except configparser.Error as e:
            logger.warning(f"Malformed shortcut file {shortcut_path}: {e}")
            return None

        if not parser.has_section(self.section):
            logger.warning(f"Shortcut file {shortcut_path} has no [{self.section}] section")
            return None
        return parser[self.section]

    def _write_section(self, shortcut_path: str, values: dict[str, str]) -> None:
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str
        parser[self.section] = values
        with open(shortcut_path, "w", encoding="utf-8") as f:
            parser.write(f, space_around_delimiters=False)


class InternetShortcutHandler(_IniShortcutHandler):
    """Windows Internet Shortcut (.url) files."""

    section = "InternetShortcut"

    @property
    def extension(self) -> str:
        return ".url"

    def resolve(self, shortcut_path: str) -> str | None:
        values = self._read_section(shortcut_path)
        if values is None or not values.get("URL"):
            return None
        return _target_from_url(values["URL"])

    def create(self, shortcut_path: str, target_path: str) -> None:
        self._write_section(shortcut_path, {"URL": _url_from_target(target_path)})


class DesktopEntryShortcutHandler(_IniShortcutHandler):
    """
    freedesktop.org desktop entries (.desktop).

    Only Type=Link entries resolve; applications and directories are not
    shortcuts to a path.
    """

    section = "Desktop Entry"

    @property
    def extension(self) -> str:
        return ".desktop"

    def resolve(self, shortcut_path: str) -> str | None:
        values = self._read_section(shortcut_path)
        if values is None:
            return None
        if values.get("Type") != "Link" or not values.get("URL"):
            logger.debug(f"Desktop entry {shortcut_path} is not a link")
            return None
        return _target_from_url(values["URL"])

    def create(self, shortcut_path: str, target_path: str) -> None:
        self._write_section(
            shortcut_path,
            {
                "Version": "1.0",
                "Type": "Link",
                "Name": Path(shortcut_path).stem,
                "URL": _url_from_target(target_path),
            },
        )

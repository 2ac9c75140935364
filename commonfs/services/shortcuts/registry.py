"""
Shortcut handler registry.

Handlers are kept in registration order and matched by case-insensitive
file extension. The first matching handler wins; a later handler for the
same extension is kept but never reached.

Resolving a file nobody claims returns None ("not a shortcut" is a valid
answer). Creating a shortcut of a type nobody claims raises
NotImplementedError, since there is nothing sensible to fall back to.

The list is meant to be filled during setup. Registering while other
code resolves shortcuts is not supported.
"""

from loguru import logger

from commonfs.paths import get_extension, require
from commonfs.services.shortcuts.handlers import ShortcutHandler


def _normalize_extension(extension: str) -> str:
    extension = extension.lower()
    return extension if extension.startswith(".") else f".{extension}"


class ShortcutRegistry:
    """Ordered collection of shortcut handlers."""

    def __init__(self):
        self._handlers: list[ShortcutHandler] = []

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def handlers(self) -> tuple[ShortcutHandler, ...]:
        return tuple(self._handlers)

    def register(self, handler: ShortcutHandler) -> None:
        self._handlers.append(handler)
        logger.debug(f"Registered shortcut handler {type(handler).__name__} for {handler.extension}")

    def find_handler(self, filename: str) -> ShortcutHandler | None:
        """Return the first handler claiming the filename's extension."""
        extension = get_extension(filename).lower()
        if not extension:
            return None
        for handler in self._handlers:
            if _normalize_extension(handler.extension) == extension:
                return handler
        return None

    def is_shortcut(self, filename: str) -> bool:
        require(filename, "filename")
        return self.find_handler(filename) is not None

    def resolve(self, filename: str) -> str | None:
        """
        Resolve a shortcut file to its target.

        Args:
            filename: Path to the shortcut file

        Returns:
            The handler's result (which may itself be None), or None when no
            handler claims the extension

        Raises:
            ValueError: If filename is None or empty
        """
        require(filename, "filename")

        handler = self.find_handler(filename)
        if handler is None:
            return None
        return handler.resolve(filename)

    def create(self, shortcut_path: str, target: str) -> None:
        """
        Create a shortcut file pointing at target.

        Raises:
            ValueError: If either argument is None or empty
            NotImplementedError: If no handler claims the shortcut's extension
        """
        require(shortcut_path, "shortcut_path")
        require(target, "target")

        handler = self.find_handler(shortcut_path)
        if handler is None:
            raise NotImplementedError(
                f"No shortcut handler registered for {get_extension(shortcut_path) or shortcut_path}"
            )
        handler.create(shortcut_path, target)

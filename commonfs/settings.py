"""commonfs settings with environment variable support."""

import os
from pathlib import Path

# Load .env file from project root
from dotenv import load_dotenv

# Find .env file - check current dir and parent dirs
def _find_env_file() -> Path | None:
    """Find .env file in current or parent directories."""
    current = Path.cwd()
    for _ in range(5):  # Check up to 5 levels
        env_file = current / ".env"
        if env_file.exists():
            return env_file
        current = current.parent
    # Also check package directory
    pkg_dir = Path(__file__).parent.parent
    env_file = pkg_dir / ".env"
    if env_file.exists():
        return env_file
    return None

env_file = _find_env_file()
if env_file:
    load_dotenv(env_file, override=True)  # Override shell vars with .env

from pydantic import BaseModel


class FileSystemSettings(BaseModel):
    """Filesystem facade settings."""

    # "cross_platform" (fixed Windows-compatible set) or "host"
    invalid_filename_chars: str = os.getenv("FS__INVALID_FILENAME_CHARS", "cross_platform")
    supports_async_file_streams: bool = (
        os.getenv("FS__SUPPORTS_ASYNC_FILE_STREAMS", "false").lower() == "true"
    )
    enable_request_concat: bool = os.getenv("FS__ENABLE_REQUEST_CONCAT", "true").lower() == "true"
    plaintext_shortcut_extension: str = os.getenv("FS__PLAINTEXT_SHORTCUT_EXTENSION", ".pathlink")


class Settings(BaseModel):
    """Application settings."""

    fs: FileSystemSettings = FileSystemSettings()
    environment: str = os.getenv("ENVIRONMENT", "development")


settings = Settings()

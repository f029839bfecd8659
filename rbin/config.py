"""
Configuration module for rbin.
Loads environment variables into an immutable settings object.
"""
import ipaddress
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_PASTE_DIR = "pastes"
DEFAULT_ID_LENGTH = 6
DEFAULT_MAX_BODY_SIZE = 10 * 1024 * 1024  # 10 MiB
DEFAULT_WRITE_ATTEMPTS = 5
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_REQUEST_LOG_LEVEL = "DEBUG"


class Settings(BaseModel):
    """Application settings, built once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    paste_dir: Path = Path(DEFAULT_PASTE_DIR)
    id_length: int = Field(DEFAULT_ID_LENGTH, ge=1)
    max_body_size: int = Field(DEFAULT_MAX_BODY_SIZE, ge=1)
    write_attempts: int = Field(DEFAULT_WRITE_ATTEMPTS, ge=1)
    log_level: str = DEFAULT_LOG_LEVEL
    request_log_level: str = DEFAULT_REQUEST_LOG_LEVEL

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """
        Build settings from RBIN_* environment variables.

        Malformed host or numeric values are logged and replaced by their
        defaults rather than aborting startup.
        """
        if load_env_file:
            load_dotenv()

        return cls(
            host=_read_host(),
            port=_read_int("RBIN_PORT", DEFAULT_PORT, upper=65535),
            paste_dir=Path(os.getenv("RBIN_PASTE_DIR", DEFAULT_PASTE_DIR)),
            id_length=_read_int("RBIN_ID_LENGTH", DEFAULT_ID_LENGTH),
            max_body_size=_read_int("RBIN_MAX_BODY_SIZE", DEFAULT_MAX_BODY_SIZE),
            write_attempts=_read_int("RBIN_WRITE_ATTEMPTS", DEFAULT_WRITE_ATTEMPTS),
            log_level=_read_level("RBIN_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            request_log_level=_read_level(
                "RBIN_REQUEST_LOG_LEVEL", DEFAULT_REQUEST_LOG_LEVEL
            ),
        )


def _read_host() -> str:
    raw = os.getenv("RBIN_HOST", DEFAULT_HOST)
    try:
        ipaddress.ip_address(raw)
    except ValueError as e:
        logger.warning(f"Invalid RBIN_HOST '{raw}', using default {DEFAULT_HOST}: {e}")
        return DEFAULT_HOST
    return raw


def _read_int(name: str, default: int, upper: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        logger.warning(f"Invalid {name} '{raw}', using default {default}: {e}")
        return default
    if value < 1 or (upper is not None and value > upper):
        logger.warning(f"Out of range {name} '{raw}', using default {default}")
        return default
    return value


def _read_level(name: str, default: str) -> str:
    raw = os.getenv(name, default).upper()
    # logging.getLevelName returns a string for unknown names
    if not isinstance(logging.getLevelName(raw), int):
        logger.warning(f"Invalid {name} '{raw}', using default {default}")
        return default
    return raw

"""Application configuration with environment variable support.

All settings can be overridden via environment variables prefixed with ``CHATRELAY_``,
or via a ``.env`` file in the project root.

Examples::

    CHATRELAY_PORT=9000 chatrelay start
    CHATRELAY_LOG_LEVEL=DEBUG chatrelay start
    CHATRELAY_STRICT_CHANNEL_NAMES=false chatrelay start   # only require non-empty names
    CHATRELAY_SEED_CHANNELS='["lobby"]' chatrelay start
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root: two levels up from this file (backend/app/config.py -> project/)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """chatrelay configuration, all values overridable via env vars."""

    model_config = SettingsConfigDict(
        env_prefix="CHATRELAY_",
        env_file=str(_BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # Browsers reject allow_origins=["*"] together with credentials,
    # so the default list is explicit.
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:3001"]

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None

    # Channel naming. The lenient variant only requires a non-empty string.
    strict_channel_names: bool = True
    channel_name_max_length: int = 15

    # Recreated at every process start, in this order (ids 1, 2, ...)
    seed_channels: list[str] = ["general", "random"]


# Singleton instance, import this everywhere
settings = Settings()

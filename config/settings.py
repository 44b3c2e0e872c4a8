"""
Application settings for FreightDesk.

Loads settings from environment variables or uses defaults.
Provides centralized configuration management.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

from .constants import (
    APP_VERSION,
    DEFAULT_CURRENCY,
    DEFAULT_PDF_PAGE_SIZE,
    DEFAULT_USER_NAME,
)
from .paths import get_data_base_path, get_database_path, get_reports_path


@dataclass
class Settings:
    """
    Application settings.

    Can be loaded from environment variables or initialized with defaults.
    """

    # Application info
    app_version: str = APP_VERSION
    user_name: str = DEFAULT_USER_NAME

    # Database settings
    database_type: str = "sqlite"
    database_path: Path = field(default_factory=get_database_path)

    # Directory paths (created automatically if missing)
    data_dir: Path = field(default_factory=get_data_base_path)
    temp_dir: Path = field(default_factory=lambda: get_data_base_path() / "temp")
    reports_dir: Path = field(default_factory=get_reports_path)

    # Reporting currency for statements and shipment reports
    display_currency: str = DEFAULT_CURRENCY

    # PDF settings
    pdf_page_size: str = DEFAULT_PDF_PAGE_SIZE

    # UI settings
    window_width: int = 1280
    window_height: int = 820

    # Debug settings
    debug_mode: bool = False
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    def __post_init__(self):
        """Ensure directories exist after initialization."""
        self._ensure_directories()

    def _ensure_directories(self):
        """Create required directories if they don't exist."""
        for dir_path in [
            self.data_dir,
            self.temp_dir,
            self.reports_dir,
        ]:
            Path(dir_path).mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load settings from environment variables.

        Environment variables:
        - FREIGHTDESK_USER_NAME: User name shown in the window title
        - FREIGHTDESK_DATABASE_PATH: Path to SQLite database
        - FREIGHTDESK_DATA_DIR: Data directory (session file lives here)
        - FREIGHTDESK_TEMP_DIR: Scratch directory for intermediate PDFs
        - FREIGHTDESK_REPORTS_DIR: Output directory for reports
        - FREIGHTDESK_DISPLAY_CURRENCY: Reporting currency (USD/EUR/GBP/PKR)
        - FREIGHTDESK_DEBUG: Enable debug mode (true/false)
        - FREIGHTDESK_LOG_LEVEL: Logging level (DEBUG/INFO/WARNING/ERROR)

        Returns:
            Settings instance with values from environment or defaults
        """
        data_dir = Path(os.getenv("FREIGHTDESK_DATA_DIR", str(get_data_base_path())))
        return cls(
            user_name=os.getenv("FREIGHTDESK_USER_NAME", DEFAULT_USER_NAME),
            database_path=Path(os.getenv("FREIGHTDESK_DATABASE_PATH", str(get_database_path()))),
            data_dir=data_dir,
            temp_dir=Path(os.getenv("FREIGHTDESK_TEMP_DIR", str(data_dir / "temp"))),
            reports_dir=Path(os.getenv("FREIGHTDESK_REPORTS_DIR", str(data_dir / "reports"))),
            display_currency=os.getenv("FREIGHTDESK_DISPLAY_CURRENCY", DEFAULT_CURRENCY).upper(),
            debug_mode=os.getenv("FREIGHTDESK_DEBUG", "false").lower() == "true",
            log_level=os.getenv("FREIGHTDESK_LOG_LEVEL", "INFO").upper(),
        )

    def to_dict(self) -> dict:
        """Convert settings to dictionary for serialization."""
        return {
            "app_version": self.app_version,
            "user_name": self.user_name,
            "database_type": self.database_type,
            "database_path": str(self.database_path),
            "data_dir": str(self.data_dir),
            "temp_dir": str(self.temp_dir),
            "reports_dir": str(self.reports_dir),
            "display_currency": self.display_currency,
            "pdf_page_size": self.pdf_page_size,
            "window_width": self.window_width,
            "window_height": self.window_height,
            "debug_mode": self.debug_mode,
            "log_level": self.log_level,
        }


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance.

    Lazy-loaded on first call. Loads from environment variables.

    Returns:
        Settings instance

    Example:
        >>> from config.settings import get_settings
        >>> settings = get_settings()
        >>> print(settings.database_path)
    """
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings():
    """
    Reset global settings instance.

    Useful for testing - forces reload from environment on next get_settings() call.
    """
    global _settings
    _settings = None

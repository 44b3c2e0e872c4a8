"""
Application Context for FreightDesk.

Centralized application state and dependency injection.
"""

from dataclasses import dataclass, field, replace
from typing import Optional
from pathlib import Path

from data.interface import DatabaseInterface
from .settings import Settings, get_settings


@dataclass
class AppContext:
    """
    Centralized application context.

    Contains all application-wide state and dependencies.
    Injected into UI layer and passed to operations.

    Key principles:
    - Immutable where possible (use with_* methods for changes)
    - All dependencies explicit (database, settings, etc.)
    - No global state - everything through context

    Example:
        >>> from config.app_context import AppContext
        >>> from data import create_database
        >>> db = create_database("sqlite", path="./test.db")
        >>> ctx = AppContext(database=db)
        >>> ctx = ctx.with_display_currency("EUR")
        >>> from operations import list_customers
        >>> customers = list_customers(ctx.database)
    """

    # Core dependencies (required)
    database: DatabaseInterface
    settings: Settings = field(default_factory=get_settings)

    # User info (set after login)
    user_name: str = field(default_factory=lambda: get_settings().user_name)

    # Application version
    app_version: str = field(default_factory=lambda: get_settings().app_version)

    # Reporting currency for statements and shipment reports
    display_currency: str = field(default_factory=lambda: get_settings().display_currency)

    @property
    def data_dir(self) -> Path:
        """Get data directory from settings."""
        return self.settings.data_dir

    @property
    def temp_dir(self) -> Path:
        """Get temp directory from settings."""
        return self.settings.temp_dir

    @property
    def reports_dir(self) -> Path:
        """Get reports directory from settings."""
        return self.settings.reports_dir

    def with_display_currency(self, currency: str) -> "AppContext":
        """
        Create new context with another reporting currency.

        Immutable pattern - returns new instance instead of modifying self.

        Args:
            currency: Currency code (e.g. "EUR")

        Returns:
            New AppContext instance
        """
        return replace(self, display_currency=currency.upper())

    def with_user(self, user_name: str) -> "AppContext":
        """Create new context for a logged-in user."""
        return replace(self, user_name=user_name)


def create_app_context(
    database: DatabaseInterface,
    settings: Optional[Settings] = None,
    user_name: Optional[str] = None,
) -> AppContext:
    """
    Factory function to create AppContext.

    Args:
        database: Database instance (required)
        settings: Settings instance (defaults to global settings)
        user_name: User name (defaults to settings.user_name)

    Returns:
        AppContext instance

    Example:
        >>> from data import create_database
        >>> db = create_database("sqlite", path="./test.db")
        >>> ctx = create_app_context(database=db, user_name="accounts")
    """
    if settings is None:
        settings = get_settings()

    if user_name is None:
        user_name = settings.user_name

    return AppContext(
        database=database,
        settings=settings,
        user_name=user_name,
        app_version=settings.app_version,
        display_currency=settings.display_currency,
    )

"""
Path Configuration for FreightDesk.

Centralized path management for the database, reports and session file.
"""

from pathlib import Path
import logging
import re
import sys

from .constants import DEFAULT_DATABASE_NAME, SESSION_FILE_NAME

logger = logging.getLogger(__name__)

DATA_DIR_NAME = "freightdesk_data"


def get_app_root() -> Path:
    """
    Get application root directory.

    Returns:
        - Frozen build: directory where the executable is located
        - Development (script): project root
    """
    if getattr(sys, 'frozen', False):
        app_root = Path(sys.executable).parent
        logger.debug(f"Running as executable, app root: {app_root}")
    else:
        # __file__ = <root>/config/paths.py
        app_root = Path(__file__).parent.parent
        logger.debug(f"Running as script, app root: {app_root}")

    return app_root


def get_data_base_path() -> Path:
    """
    Get the data directory, creating it if missing.

    Everything the application writes lives below this directory so a
    single folder copy is a full backup.
    """
    data_path = get_app_root() / DATA_DIR_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_database_path() -> Path:
    """
    Get database file path.

    Returns:
        Path to database file, e.g. <root>/freightdesk_data/freightdesk.db
    """
    db_path = get_data_base_path() / DEFAULT_DATABASE_NAME
    logger.debug(f"Database path: {db_path}")
    return db_path


def get_reports_path() -> Path:
    """Get directory for generated PDF and Excel reports."""
    reports_path = get_data_base_path() / "reports"
    reports_path.mkdir(parents=True, exist_ok=True)
    return reports_path


def get_session_path(data_dir: Path) -> Path:
    """Get path of the session token file inside a data directory."""
    return Path(data_dir) / SESSION_FILE_NAME


def sanitize_filename(name: str) -> str:
    """
    Sanitize a document number for use in a file name.

    Example:
        >>> sanitize_filename("INV-2024/0001")
        'INV-2024_0001'
    """
    safe_name = re.sub(r'[<>:"/\\|?*]', '_', name or "")
    safe_name = safe_name.strip(' .')
    return safe_name or "unnamed"

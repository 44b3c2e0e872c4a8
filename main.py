#!/usr/bin/env python3
"""
FreightDesk - freight forwarding back-office
Main entry point for the application
"""

import sys
import logging
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def setup_logging(level: str = "INFO"):
    """
    Configure logging for the application.

    Sets up console output with pretty formatting.
    Suppresses noisy third-party loggers.
    """
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    # Suppress noisy third-party loggers
    logging.getLogger('PySide6').setLevel(logging.WARNING)
    logging.getLogger('playwright').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    logging.info("=" * 60)
    logging.info("FreightDesk")
    logging.info(f"Logging initialized - Level: {level.upper()}")
    logging.info("=" * 60)


def main():
    """Main application entry point."""
    from config import get_settings, create_app_context, APP_NAME, APP_ORGANIZATION

    settings = get_settings()
    setup_logging("DEBUG" if settings.debug_mode else settings.log_level)

    try:
        from PySide6.QtWidgets import QApplication, QDialog, QStyleFactory
        from data import create_database
        from services import SessionStore
        from ui.dialogs import LoginDialog
        from ui.main_window import MainWindow
        from ui.styles import MAIN_STYLESHEET

        app = QApplication(sys.argv)
        app.setApplicationName(APP_NAME)
        app.setOrganizationName(APP_ORGANIZATION)
        app.setStyle(QStyleFactory.create("Fusion"))
        app.setStyleSheet(MAIN_STYLESHEET)

        database = create_database("sqlite", settings.database_path)
        session_store = SessionStore(settings.data_dir)

        if not session_store.is_authenticated():
            login = LoginDialog(session_store, default_user=settings.user_name)
            if login.exec() != QDialog.Accepted:
                logging.info("Sign-in cancelled")
                sys.exit(0)

        context = create_app_context(
            database=database,
            settings=settings,
            user_name=session_store.get_user_name() or settings.user_name,
        )

        window = MainWindow(context, session_store)
        window.show()
        exit_code = app.exec()
        database.close()
        sys.exit(exit_code)
    except Exception as e:
        logging.exception("Failed to launch GUI")
        print(f"\nFailed to launch GUI: {e}")
        print("Run in development mode: python -m pytest tests/")
        sys.exit(1)


if __name__ == "__main__":
    main()

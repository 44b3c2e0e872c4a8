"""
Chrome/Chromium checker service.

PDF generation drives the system Chrome through Playwright
(channel="chrome"); no browser is bundled with the application.
"""

import shutil
import logging
import platform
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

CHROME_NAMES = [
    "chrome",
    "chromium",
    "google-chrome",
    "google-chrome-stable",
    "chrome.exe",
    "chromium.exe",
]


def _platform_paths() -> List[Path]:
    system = platform.system()
    if system == "Windows":
        return [
            Path(r"C:\Program Files\Google\Chrome\Application\chrome.exe"),
            Path(r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe"),
            Path.home() / r"AppData\Local\Google\Chrome\Application\chrome.exe",
        ]
    if system == "Darwin":
        return [
            Path("/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"),
            Path("/Applications/Chromium.app/Contents/MacOS/Chromium"),
        ]
    return []


def get_chrome_path() -> Optional[Path]:
    """
    Get the path to Chrome/Chromium executable.

    Returns:
        Path to Chrome executable, or None if not found
    """
    for name in CHROME_NAMES:
        path = shutil.which(name)
        if path:
            return Path(path)

    for path in _platform_paths():
        if path.exists():
            return path

    return None


def has_system_chrome() -> bool:
    """Check if Chrome or Chromium is installed on the system."""
    found = get_chrome_path() is not None
    if not found:
        logger.warning("Chrome/Chromium not found on system")
    return found


def ensure_chrome_installed() -> None:
    """
    Ensure Chrome/Chromium is installed on the system.

    Raises:
        EnvironmentError: If Chrome/Chromium is not found
    """
    chrome_path = get_chrome_path()
    if chrome_path is None:
        raise EnvironmentError(
            "Chrome or Chromium is required for PDF generation but was not found.\n\n"
            "Install Chrome from: https://google.com/chrome\n"
            "Then restart FreightDesk."
        )
    logger.info(f"Chrome found at: {chrome_path}")


def get_chrome_info() -> dict:
    """
    Get information about installed Chrome/Chromium.

    Returns:
        Dict with installed (bool), path (str or None) and platform
    """
    path = get_chrome_path()
    return {
        "installed": path is not None,
        "path": str(path) if path else None,
        "platform": platform.system(),
    }

"""
Unit tests for Chrome Checker service.

Tests cover Chrome detection and error handling.
"""

import pytest
from unittest.mock import patch
from pathlib import Path

from services.chrome_checker import (
    ensure_chrome_installed,
    get_chrome_info,
    get_chrome_path,
    has_system_chrome,
)


def test_has_system_chrome_when_chrome_exists():
    """Test Chrome detection when Chrome is found."""
    with patch("shutil.which", return_value="/usr/bin/google-chrome"):
        assert has_system_chrome() is True


def test_has_system_chrome_when_chrome_missing():
    """Test Chrome detection when Chrome is not found."""
    with patch("shutil.which", return_value=None):
        with patch("platform.system", return_value="Linux"):
            assert has_system_chrome() is False


def test_get_chrome_path_when_exists():
    with patch("shutil.which", return_value="/usr/bin/google-chrome"):
        assert get_chrome_path() == Path("/usr/bin/google-chrome")


def test_get_chrome_path_falls_back_to_platform_paths(tmp_path):
    fake_chrome = tmp_path / "chrome.exe"
    fake_chrome.write_text("")

    with patch("shutil.which", return_value=None):
        with patch("services.chrome_checker._platform_paths", return_value=[tmp_path / "missing", fake_chrome]):
            assert get_chrome_path() == fake_chrome


def test_ensure_chrome_installed_raises_when_missing():
    with patch("services.chrome_checker.get_chrome_path", return_value=None):
        with pytest.raises(EnvironmentError) as exc_info:
            ensure_chrome_installed()

    assert "Chrome or Chromium is required" in str(exc_info.value)


def test_ensure_chrome_installed_when_present():
    with patch("services.chrome_checker.get_chrome_path", return_value=Path("/usr/bin/chromium")):
        ensure_chrome_installed()


def test_get_chrome_info():
    with patch("services.chrome_checker.get_chrome_path", return_value=Path("/usr/bin/chromium")):
        with patch("platform.system", return_value="Linux"):
            info = get_chrome_info()

    assert info == {"installed": True, "path": str(Path("/usr/bin/chromium")), "platform": "Linux"}


def test_get_chrome_info_missing():
    with patch("services.chrome_checker.get_chrome_path", return_value=None):
        info = get_chrome_info()

    assert info["installed"] is False
    assert info["path"] is None

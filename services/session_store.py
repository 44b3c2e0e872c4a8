"""
Session token store.

Keeps the login token in session.json inside the data directory. The file
is readable by anyone with access to the machine; it marks a user as logged
in on this workstation and nothing more.
"""

import json
import logging
import secrets
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.paths import get_session_path

logger = logging.getLogger(__name__)


def generate_secure_token() -> str:
    """Random 64-character hex token."""
    return secrets.token_hex(32)


class SessionStore:
    """
    File-backed session token.

    Example:
        >>> store = SessionStore(settings.data_dir)
        >>> store.set_token(generate_secure_token(), user_name="admin")
        >>> store.is_authenticated()
        True
    """

    def __init__(self, data_dir: Path):
        self.path = get_session_path(data_dir)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}

    def set_token(self, token: str, user_name: str = "") -> None:
        """Store token (and who logged in)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "token": token,
            "user_name": user_name,
            "created_at": datetime.now().isoformat(timespec="seconds"),
        }
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info(f"Session started for {user_name or 'unknown user'}")

    def get_token(self) -> Optional[str]:
        return self._read().get("token") or None

    def get_user_name(self) -> str:
        return self._read().get("user_name", "")

    def clear(self) -> None:
        """Remove the token (logout)."""
        if self.path.exists():
            self.path.unlink()
            logger.info("Session cleared")

    def is_authenticated(self) -> bool:
        return self.get_token() is not None

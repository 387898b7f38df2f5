"""File-backed storage for the signed-in session.

Keeps the auth token and user profile between runs so the assistant can
restore a session without logging in again.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from src.models.schemas import UserProfile

logger = logging.getLogger("finance_mcp")


class SessionStore:
    """Persists a token and profile as JSON on disk."""

    def __init__(self, session_file: Optional[str] = None):
        self._session_file = session_file or str(
            Path.home() / ".banortech" / "session.json"
        )

    def save(self, token: str, profile: UserProfile):
        """Persist the session to disk."""
        path = Path(self._session_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {"token": token, "profile": profile.model_dump(by_alias=True)}
        path.write_text(json.dumps(data, indent=2))

    def load(self) -> Optional[tuple[str, UserProfile]]:
        """Load the saved session, or ``None`` if there is no usable one."""
        path = Path(self._session_file)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
            return data["token"], UserProfile.model_validate(data["profile"])
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValidationError):
            logger.warning("Ignoring unreadable session file %s", path)
            return None

    def clear(self):
        """Forget the saved session."""
        Path(self._session_file).unlink(missing_ok=True)

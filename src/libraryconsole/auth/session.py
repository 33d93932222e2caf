"""Local storage of the auth session token.

The token file is the only state the console keeps between invocations.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .schemas import AuthSession

logger = logging.getLogger(__name__)


class SessionStore:
    """Reads and writes the session file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, session: AuthSession) -> None:
        """Write the session, readable by the owner only."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # The creation mode does not apply to a file that already exists
        os.chmod(self.path, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(session.model_dump(mode="json"), f, indent=2)

    def load(self) -> Optional[AuthSession]:
        """Return the stored session, or None if absent or unreadable."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                return AuthSession.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None

    def clear(self) -> bool:
        """Delete the session file. Returns True if one existed."""
        if self.path.exists():
            self.path.unlink()
            return True
        return False

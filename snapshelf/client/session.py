"""Display-name storage for the client. The name is the whole session."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SESSION_KEY = "user_name"


class SessionStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def save(self, user_name: str) -> None:
        """Persist the trimmed display name."""
        self.path.write_text(json.dumps({SESSION_KEY: user_name.strip()}), encoding="utf-8")

    def load(self) -> Optional[str]:
        """Return the remembered name, or None when absent or unreadable."""
        if not self.path.exists():
            return None
        try:
            value = json.loads(self.path.read_text(encoding="utf-8")).get(SESSION_KEY)
        except (OSError, ValueError, AttributeError) as error:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, error)
            return None
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def clear(self) -> None:
        """Forget the remembered name."""
        self.path.unlink(missing_ok=True)

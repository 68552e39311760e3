# snapshelf/client/config.py
"""
Configuration for the SnapShelf client.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


def _default_session_file() -> Path:
    return Path(os.getenv("SNAPSHELF_SESSION_FILE", str(Path.home() / ".snapshelf_user.json")))


@dataclass
class ClientConfig:
    """Configuration for the SnapShelf client."""

    # Gateway location
    api_url: str = field(default_factory=lambda: os.getenv("SNAPSHELF_API_URL", "http://localhost:8000"))

    # Which catalog this client drives: "wine" or "recipe"
    kind: str = field(default_factory=lambda: os.getenv("SNAPSHELF_KIND", "wine"))

    # Where the display name is remembered between runs
    session_file: Path = field(default_factory=_default_session_file)

    # Wall-clock limit before the analysis spinner gives up
    analyze_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("SNAPSHELF_ANALYZE_TIMEOUT", "90"))
    )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.api_url:
            errors.append("SNAPSHELF_API_URL is required")
        if self.kind not in ("wine", "recipe"):
            errors.append("SNAPSHELF_KIND must be 'wine' or 'recipe'")
        if self.analyze_timeout_seconds <= 0:
            errors.append("SNAPSHELF_ANALYZE_TIMEOUT must be positive")

        return errors


def get_config() -> ClientConfig:
    """Get client configuration from environment, loading a .env file when one exists."""
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(dotenv_path=env_path)
    return ClientConfig()

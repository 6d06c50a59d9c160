"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

OWNER_MODE_CALLER = "caller"
OWNER_MODE_VERIFIED = "verified"
OWNER_MODES = (OWNER_MODE_CALLER, OWNER_MODE_VERIFIED)


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


@dataclass
class Settings:
    """Application settings."""

    # Database
    database_url: str = field(default_factory=lambda: _env("DATABASE_URL", "sqlite:///slack_relay.db"))

    # Credential vault
    encryption_key: str = field(default_factory=lambda: _env("ENCRYPTION_KEY"))

    # Who owns a registered workspace: "caller" (supplied on registration)
    # or "verified" (the subject of the verified credential). With a bot token the
    # subject is the bot user itself, so "verified" only makes sense with user tokens.
    owner_mode: str = field(default_factory=lambda: _env("OWNER_MODE", OWNER_MODE_CALLER))

    # Slack
    slack_api_url: str = field(default_factory=lambda: _env("SLACK_API_URL", "https://slack.com/api/"))
    history_page_size: int = field(default_factory=lambda: _env_int("HISTORY_PAGE_SIZE", 200))
    mention_scan_limit: int = field(default_factory=lambda: _env_int("MENTION_SCAN_LIMIT", 1000))

    def validate(self) -> "Settings":
        """Reject settings the service cannot run with."""
        if self.owner_mode not in OWNER_MODES:
            raise ValueError(f"OWNER_MODE must be one of {', '.join(OWNER_MODES)}, got {self.owner_mode!r}")
        if not self.encryption_key:
            raise ValueError("ENCRYPTION_KEY is required")
        if self.history_page_size < 1:
            raise ValueError("HISTORY_PAGE_SIZE must be positive")
        if self.mention_scan_limit < 1:
            raise ValueError("MENTION_SCAN_LIMIT must be positive")
        return self


def load_settings() -> Settings:
    """Load settings from the environment (and .env, if present)."""
    load_dotenv()
    return Settings()

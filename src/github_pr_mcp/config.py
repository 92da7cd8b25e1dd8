"""Configuration loading for GitHub PR MCP.

This module loads environment variables from a `.env` file using
`python-dotenv` and populates a `Config` object.

Variables:
- GITHUB_PERSONAL_ACCESS_TOKEN (falls back to GITHUB_TOKEN).  Not validated
  here: a missing token surfaces as a 401 on the first GitHub call.
- GITHUB_API_URL (default: https://api.github.com)
- GITHUB_TIMEOUT_S (default: unset, no client-side timeout)
- LOG_LEVEL (default: 'INFO')
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .constants import DEFAULT_API_URL


@dataclass(frozen=True)
class Config:
    """Configuration values loaded from the environment."""

    github_token: str
    api_url: str = DEFAULT_API_URL
    timeout_s: float | None = None
    log_level: str = "INFO"

    def __repr__(self) -> str:
        token_state = "set" if self.github_token else "unset"
        return (
            f"Config(github_token=<{token_state}>, api_url={self.api_url!r}, "
            f"timeout_s={self.timeout_s!r}, log_level={self.log_level!r})"
        )

    @classmethod
    def load_from_env(cls) -> Config:
        """Load configuration from environment variables.

        The `.env` file is loaded if present.  Raises `ValueError` for a
        malformed API URL or timeout; the token itself is never checked.
        """
        load_dotenv()

        github_token = (
            os.getenv("GITHUB_PERSONAL_ACCESS_TOKEN")
            or os.getenv("GITHUB_TOKEN")
            or ""
        )

        api_url = (os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        if not api_url.startswith("https://"):
            raise ValueError(f"GITHUB_API_URL must use https: {api_url}")

        timeout_raw = os.getenv("GITHUB_TIMEOUT_S")
        timeout_s: float | None = None
        if timeout_raw:
            try:
                timeout_s = float(timeout_raw)
            except ValueError as exc:
                raise ValueError(f"GITHUB_TIMEOUT_S must be a number: {timeout_raw!r}") from exc
            if timeout_s <= 0:
                raise ValueError("GITHUB_TIMEOUT_S must be positive")

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        return cls(
            github_token=github_token,
            api_url=api_url,
            timeout_s=timeout_s,
            log_level=log_level,
        )

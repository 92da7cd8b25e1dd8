"""Authentication helpers for GitHub API."""

from __future__ import annotations

import httpx

from .. import __version__
from ..config import Config
from ..constants import GITHUB_API_VERSION


def github_headers(config: Config) -> dict[str, str]:
    """Return the default request headers, with Authorization when a token is set."""
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
        "User-Agent": f"github-pr-mcp/{__version__}",
    }
    if config.github_token:
        headers["Authorization"] = f"Bearer {config.github_token}"
    return headers


def get_github_client(
    config: Config,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Return a configured GitHub httpx client with the Authorization header set.

    ``transport`` lets tests plug in ``httpx.MockTransport``.
    """
    return httpx.AsyncClient(
        base_url=config.api_url,
        headers=github_headers(config),
        timeout=httpx.Timeout(config.timeout_s),
        follow_redirects=False,
        transport=transport,
    )

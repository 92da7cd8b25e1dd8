"""GitHub API integration."""

from .api import GitHubAPI
from .auth import get_github_client

__all__ = [
    "GitHubAPI",
    "get_github_client",
]

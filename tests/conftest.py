"""Pytest configuration and fixtures for GitHub PR MCP tests.

This module provides a FakeGitHubAPI that records every call a handler makes,
so tests can assert on call counts and ordering without touching the network.

IMPORTANT: Environment variables are set BEFORE importing github_pr_mcp
modules so that nothing picks up a real token from the developer's shell.
"""

from __future__ import annotations

import os

os.environ.setdefault("GITHUB_PERSONAL_ACCESS_TOKEN", "test-github-token")

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from github_pr_mcp.config import Config
from github_pr_mcp.errors import GitHubAPIError
from github_pr_mcp.github.api import GitHubAPI
from github_pr_mcp.models import (
    GitBlob,
    GitCommit,
    GitRef,
    GitTree,
    PullRequest,
    PullRequestFile,
    Repository,
)


def make_pr(number: int = 1, **overrides: Any) -> PullRequest:
    fields: dict[str, Any] = {
        "number": number,
        "title": f"PR {number}",
        "url": f"https://github.com/o/r/pull/{number}",
        "state": "open",
        "created_at": "2024-01-01T00:00:00Z",
        "author": "octocat",
        "body": "Body text",
        "mergeable": True,
    }
    fields.update(overrides)
    return PullRequest(**fields)


def make_repo(owner: str = "octocat", name: str = "demo", **overrides: Any) -> Repository:
    fields: dict[str, Any] = {
        "owner": owner,
        "name": name,
        "full_name": f"{owner}/{name}",
        "url": f"https://github.com/{owner}/{name}",
        "private": False,
        "default_branch": "main",
    }
    fields.update(overrides)
    return Repository(**fields)


def api_error(status_code: int | None, message: str = "boom") -> GitHubAPIError:
    return GitHubAPIError(f"GitHub API error {status_code}: {message}", status_code=status_code, api_message=message)


class FakeGitHubAPI:
    """A recording stand-in for ``GitHubAPI``.

    ``responses`` maps a method name to a value or a callable computing it
    from the call arguments (an ``async def`` callable is awaited).  ``errors`` maps a method name to an exception
    raised instead.  Every call is appended to ``calls`` (names) and
    ``call_args`` (name, args, kwargs) in the order it was issued.
    """

    def __init__(self) -> None:
        self.config = Config(github_token="test-github-token")
        self.calls: list[str] = []
        self.call_args: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self.responses: dict[str, Any] = {}
        self.errors: dict[str, Exception | Callable[..., Exception | None]] = {}

    def count(self, name: str) -> int:
        return self.calls.count(name)

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        async def method(*args: Any, **kwargs: Any) -> Any:
            self.calls.append(name)
            self.call_args.append((name, args, kwargs))
            # Yield so concurrent calls can interleave like real requests
            await asyncio.sleep(0)
            error = self.errors.get(name)
            if callable(error) and not isinstance(error, Exception):
                error = error(*args, **kwargs)
            if error is not None:
                raise error
            value = self.responses.get(name)
            if callable(value):
                value = value(*args, **kwargs)
            if asyncio.iscoroutine(value):
                value = await value
            return value

        return method


@pytest.fixture
def fake_api() -> FakeGitHubAPI:
    return FakeGitHubAPI()


@pytest.fixture
def seeded_api(fake_api: FakeGitHubAPI) -> FakeGitHubAPI:
    """A fake whose Git data calls return plausible objects."""
    fake_api.responses.update(
        {
            "create_user_repo": lambda name, **kw: make_repo("octocat", name),
            "create_org_repo": lambda org, name, **kw: make_repo(org, name),
            "get_ref": lambda owner, repo, branch: GitRef(ref=f"refs/heads/{branch}", sha="head-sha"),
            "create_blob": lambda owner, repo, content, encoding="utf-8": GitBlob(sha=f"blob-{content}"),
            "get_tree": lambda owner, repo, sha, **kw: GitTree(sha="base-tree-sha"),
            "create_tree": lambda owner, repo, entries, base_tree=None: GitTree(sha="new-tree-sha", entries=entries),
            "create_commit": lambda owner, repo, message, tree, parents: GitCommit(
                sha="new-commit-sha", tree_sha=tree, parents=list(parents)
            ),
            "update_ref": lambda owner, repo, branch, sha, **kw: GitRef(ref=f"refs/heads/{branch}", sha=sha),
        }
    )
    return fake_api


@pytest.fixture
def sample_files() -> list[PullRequestFile]:
    return [
        PullRequestFile(filename="a.py", status="modified", additions=3, deletions=1, changes=4, patch="@@ -1 +1 @@"),
        PullRequestFile(filename="b.png", status="added", additions=5, deletions=0, changes=5, patch=None),
    ]


@pytest.fixture
def mock_transport_api():
    """Build a real ``GitHubAPI`` whose requests go to an ``httpx.MockTransport`` handler."""

    def build(handler: Callable[[httpx.Request], httpx.Response], token: str = "tok") -> GitHubAPI:
        config = Config(github_token=token)
        return GitHubAPI(config, transport=httpx.MockTransport(handler))

    return build

"""GitHub REST API wrapper.

``GitHubAPI`` is built once at process start and handed to every tool
handler.  It keeps only the configuration; each request opens its own
``httpx.AsyncClient`` so concurrent calls (blob creation) share nothing.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..config import Config
from ..constants import BLOB_FILE_MODE, MERGE_METHOD
from ..errors import GitHubAPIError
from ..models import (
    Comment,
    GitBlob,
    GitCommit,
    GitRef,
    GitTree,
    MergeResult,
    PullRequest,
    PullRequestFile,
    Repository,
    TreeEntry,
)
from ..policy.redaction import redact_secrets
from .auth import get_github_client

logger = logging.getLogger(__name__)


def _seg(value: str | int) -> str:
    """Quote a single path segment."""
    return quote(str(value), safe="")


class GitHubAPI:
    """Typed access to the GitHub REST endpoints used by the tools."""

    def __init__(self, config: Config, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, object] | None = None,
        json: dict[str, object] | None = None,
        allow_404: bool = False,
    ) -> Any:
        """Perform an HTTP request against the GitHub API.

        Returns the decoded JSON body, ``None`` for empty responses (204) and
        for 404 when ``allow_404=True``.  Any other non-2xx status raises
        ``GitHubAPIError`` carrying the status code.
        """
        try:
            async with get_github_client(self.config, self._transport) as client:
                resp = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            message = redact_secrets(str(exc), [self.config.github_token])
            logger.error("GitHub API request %s %s failed: %s", method, path, message)
            raise GitHubAPIError(f"GitHub API request failed: {message}") from exc

        if allow_404 and resp.status_code == 404:
            return None

        if 200 <= resp.status_code < 300:
            if resp.status_code == 204 or not resp.content:
                return None
            try:
                return resp.json()
            except ValueError:
                return resp.text

        api_message = _error_message(resp)
        logger.error("GitHub API error %s on %s %s: %s", resp.status_code, method, path, api_message)
        raise GitHubAPIError(
            f"GitHub API error {resp.status_code}: {api_message}",
            status_code=resp.status_code,
            api_message=api_message,
        )

    # Pull requests

    async def list_pulls(self, owner: str, repo: str, state: str = "open") -> list[PullRequest]:
        data = await self._request("GET", f"/repos/{_seg(owner)}/{_seg(repo)}/pulls", params={"state": state})
        return [PullRequest.from_api(item) for item in data or []]

    async def get_pull(self, owner: str, repo: str, number: int) -> PullRequest:
        data = await self._request("GET", f"/repos/{_seg(owner)}/{_seg(repo)}/pulls/{int(number)}")
        return PullRequest.from_api(data)

    async def list_pull_files(self, owner: str, repo: str, number: int) -> list[PullRequestFile]:
        data = await self._request("GET", f"/repos/{_seg(owner)}/{_seg(repo)}/pulls/{int(number)}/files")
        return [PullRequestFile.from_api(item) for item in data or []]

    async def create_issue_comment(self, owner: str, repo: str, number: int, body: str) -> Comment:
        """Post a comment.  Pull requests share the issue number space."""
        data = await self._request(
            "POST",
            f"/repos/{_seg(owner)}/{_seg(repo)}/issues/{int(number)}/comments",
            json={"body": body},
        )
        data = data or {}
        return Comment(number=number, body=body, id=data.get("id"), url=data.get("html_url"))

    async def request_reviewers(self, owner: str, repo: str, number: int, reviewers: list[str]) -> list[str]:
        """Request review from ``reviewers``; returns every login now requested on the PR."""
        data = await self._request(
            "POST",
            f"/repos/{_seg(owner)}/{_seg(repo)}/pulls/{int(number)}/requested_reviewers",
            json={"reviewers": list(reviewers)},
        )
        requested = (data or {}).get("requested_reviewers") or []
        return [user["login"] for user in requested if user.get("login")]

    async def merge_pull(
        self,
        owner: str,
        repo: str,
        number: int,
        commit_title: str | None = None,
        commit_message: str | None = None,
    ) -> MergeResult:
        payload: dict[str, object] = {"merge_method": MERGE_METHOD}
        if commit_title:
            payload["commit_title"] = commit_title
        if commit_message:
            payload["commit_message"] = commit_message
        data = await self._request(
            "PUT",
            f"/repos/{_seg(owner)}/{_seg(repo)}/pulls/{int(number)}/merge",
            json=payload,
        )
        data = data or {}
        return MergeResult(merged=bool(data.get("merged", True)), sha=data.get("sha"), message=data.get("message") or "")

    async def update_issue_state(self, owner: str, repo: str, number: int, state: str) -> dict[str, object]:
        data = await self._request(
            "PATCH",
            f"/repos/{_seg(owner)}/{_seg(repo)}/issues/{int(number)}",
            json={"state": state},
        )
        return data or {}

    # Repositories

    async def create_user_repo(
        self,
        name: str,
        *,
        description: str | None = None,
        private: bool = False,
        auto_init: bool = True,
    ) -> Repository:
        """Create a repository owned by the authenticated user."""
        data = await self._request("POST", "/user/repos", json=_repo_payload(name, description, private, auto_init))
        return Repository.from_api(data)

    async def create_org_repo(
        self,
        org: str,
        name: str,
        *,
        description: str | None = None,
        private: bool = False,
        auto_init: bool = True,
    ) -> Repository:
        """Create a repository owned by ``org``."""
        data = await self._request(
            "POST",
            f"/orgs/{_seg(org)}/repos",
            json=_repo_payload(name, description, private, auto_init),
        )
        return Repository.from_api(data)

    async def find_repo(self, owner: str, repo: str) -> Repository | None:
        """Return the repository, or ``None`` when GitHub answers 404."""
        data = await self._request("GET", f"/repos/{_seg(owner)}/{_seg(repo)}", allow_404=True)
        if data is None:
            return None
        return Repository.from_api(data)

    async def delete_repo(self, owner: str, repo: str) -> None:
        await self._request("DELETE", f"/repos/{_seg(owner)}/{_seg(repo)}")

    # Git data

    async def get_ref(self, owner: str, repo: str, branch: str) -> GitRef:
        data = await self._request("GET", f"/repos/{_seg(owner)}/{_seg(repo)}/git/ref/heads/{quote(branch)}")
        return GitRef(ref=data["ref"], sha=data["object"]["sha"])

    async def create_blob(self, owner: str, repo: str, content: str, encoding: str = "utf-8") -> GitBlob:
        data = await self._request(
            "POST",
            f"/repos/{_seg(owner)}/{_seg(repo)}/git/blobs",
            json={"content": content, "encoding": encoding},
        )
        return GitBlob(sha=data["sha"])

    async def get_tree(self, owner: str, repo: str, tree_ish: str, recursive: bool = True) -> GitTree:
        """Fetch a tree.  ``tree_ish`` may be a commit SHA; GitHub resolves it to its tree."""
        params = {"recursive": "1"} if recursive else None
        data = await self._request(
            "GET",
            f"/repos/{_seg(owner)}/{_seg(repo)}/git/trees/{_seg(tree_ish)}",
            params=params,
        )
        return _tree_from_api(data)

    async def create_tree(self, owner: str, repo: str, entries: list[TreeEntry], base_tree: str | None = None) -> GitTree:
        payload: dict[str, object] = {"tree": [entry.to_api() for entry in entries]}
        if base_tree:
            payload["base_tree"] = base_tree
        data = await self._request("POST", f"/repos/{_seg(owner)}/{_seg(repo)}/git/trees", json=payload)
        return _tree_from_api(data)

    async def create_commit(self, owner: str, repo: str, message: str, tree: str, parents: list[str]) -> GitCommit:
        data = await self._request(
            "POST",
            f"/repos/{_seg(owner)}/{_seg(repo)}/git/commits",
            json={"message": message, "tree": tree, "parents": list(parents)},
        )
        return GitCommit(
            sha=data["sha"],
            tree_sha=(data.get("tree") or {}).get("sha", tree),
            parents=[p["sha"] for p in data.get("parents") or []],
        )

    async def update_ref(self, owner: str, repo: str, branch: str, sha: str, force: bool = False) -> GitRef:
        data = await self._request(
            "PATCH",
            f"/repos/{_seg(owner)}/{_seg(repo)}/git/refs/heads/{quote(branch)}",
            json={"sha": sha, "force": force},
        )
        return GitRef(ref=data["ref"], sha=data["object"]["sha"])


def _repo_payload(name: str, description: str | None, private: bool, auto_init: bool) -> dict[str, object]:
    payload: dict[str, object] = {"name": name, "private": private, "auto_init": auto_init}
    if description:
        payload["description"] = description
    return payload


def _tree_from_api(data: dict[str, Any]) -> GitTree:
    entries = [
        TreeEntry(
            path=item["path"],
            sha=item.get("sha") or "",
            mode=item.get("mode") or BLOB_FILE_MODE,
            type=item.get("type") or "blob",
        )
        for item in data.get("tree") or []
    ]
    return GitTree(sha=data["sha"], entries=entries)


def _error_message(resp: httpx.Response) -> str:
    """Extract GitHub's ``message`` field, falling back to the raw body."""
    try:
        payload = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        message = payload["message"]
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            details = [e.get("message") or e.get("code") for e in errors if isinstance(e, dict)]
            details = [d for d in details if d]
            if details:
                message = f"{message} ({'; '.join(details)})"
        return message
    return resp.text

"""Typed views of the GitHub objects this server reads and writes.

The API layer builds these from raw JSON with the ``from_api`` class
methods.  Nothing here is cached; every instance lives for one tool call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    url: str
    state: str
    created_at: str
    author: str | None = None
    body: str | None = None
    merged: bool = False
    # None while GitHub is still computing mergeability
    mergeable: bool | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PullRequest:
        user = data.get("user") or {}
        return cls(
            number=data["number"],
            title=data.get("title") or "",
            url=data.get("html_url") or "",
            state=data.get("state") or "",
            created_at=data.get("created_at") or "",
            author=user.get("login"),
            body=data.get("body"),
            merged=bool(data.get("merged", False)),
            mergeable=data.get("mergeable"),
        )

    def summary(self) -> dict[str, object]:
        """Return the fields shown in PR listings."""
        return {
            "number": self.number,
            "title": self.title,
            "url": self.url,
            "state": self.state,
            "created_at": self.created_at,
            "user": self.author,
        }


@dataclass(frozen=True)
class PullRequestFile:
    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PullRequestFile:
        return cls(
            filename=data["filename"],
            status=data.get("status") or "modified",
            additions=int(data.get("additions") or 0),
            deletions=int(data.get("deletions") or 0),
            changes=int(data.get("changes") or 0),
            patch=data.get("patch"),
        )


@dataclass(frozen=True)
class Repository:
    owner: str
    name: str
    full_name: str
    url: str
    private: bool = False
    default_branch: str = "main"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Repository:
        owner = (data.get("owner") or {}).get("login") or ""
        name = data.get("name") or ""
        return cls(
            owner=owner,
            name=name,
            full_name=data.get("full_name") or f"{owner}/{name}",
            url=data.get("html_url") or "",
            private=bool(data.get("private", False)),
            default_branch=data.get("default_branch") or "main",
        )


@dataclass(frozen=True)
class Comment:
    number: int
    body: str
    id: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class MergeResult:
    merged: bool
    sha: str | None = None
    message: str = ""


@dataclass(frozen=True)
class RepositoryFile:
    """A file supplied by the caller to seed a new repository."""

    path: str
    content: str
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not self.path or self.path.startswith("/"):
            raise ValueError(f"Repository file path must be relative: {self.path!r}")
        if self.encoding not in {"utf-8", "base64"}:
            raise ValueError(f"Unsupported encoding {self.encoding!r}; use 'utf-8' or 'base64'")


# Git data primitives used while seeding a repository


@dataclass(frozen=True)
class GitBlob:
    sha: str


@dataclass(frozen=True)
class TreeEntry:
    path: str
    sha: str
    mode: str = "100644"
    type: str = "blob"

    def to_api(self) -> dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


@dataclass(frozen=True)
class GitTree:
    sha: str
    entries: list[TreeEntry] = field(default_factory=list)


@dataclass(frozen=True)
class GitCommit:
    sha: str
    tree_sha: str
    parents: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GitRef:
    ref: str
    sha: str


# discuss-pr arguments as a tagged variant


@dataclass(frozen=True)
class Browse:
    """List the open pull requests of a repository."""


@dataclass(frozen=True)
class Inspect:
    """Show one pull request, optionally echoing the caller's question."""

    number: int
    query: str | None = None


DiscussTarget = Union[Browse, Inspect]


def discuss_target(number: int | None = None, query: str | None = None) -> DiscussTarget:
    """Build the discuss-pr variant from its optional arguments."""
    if number is None:
        return Browse()
    return Inspect(number=number, query=query or None)

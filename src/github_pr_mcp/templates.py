"""Text templates for tool results.

Pure functions from models to strings.  Handlers decide *what* happened;
these decide how it reads.
"""

from __future__ import annotations

from collections.abc import Sequence

from .constants import COMMENT_PREVIEW_CHARS, ELLIPSIS, PATCH_PREVIEW_CHARS
from .envelope import format_data
from .models import PullRequest, PullRequestFile, Repository

NO_DESCRIPTION = "No description provided"


def truncate(text: str, limit: int) -> str:
    """Return ``text`` cut to ``limit`` characters, marking any cut with ``...``."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def render_pr_list(owner: str, repo: str, state: str, prs: Sequence[PullRequest]) -> str:
    label = state.capitalize()
    if not prs:
        return f"No {state} PRs found for {owner}/{repo}."
    return f"{label} PRs for {owner}/{repo}:\n\n{format_data([pr.summary() for pr in prs])}"


def pr_details(pr: PullRequest) -> dict[str, object]:
    details = pr.summary()
    details["body"] = pr.body or NO_DESCRIPTION
    details["merged"] = pr.merged
    details["mergeable"] = pr.mergeable
    return details


def render_pr_detail(pr: PullRequest, query: str | None = None) -> str:
    details = format_data(pr_details(pr))
    if query:
        return f"Discussion query for PR #{pr.number}: {query}\n\nDetails:\n{details}"
    return f"Details for PR #{pr.number}:\n{details}"


def render_summary(pr: PullRequest, files: Sequence[PullRequestFile]) -> str:
    total_additions = sum(f.additions for f in files)
    total_deletions = sum(f.deletions for f in files)

    lines = [
        f"# PR #{pr.number} Summary",
        "",
        f"**Title**: {pr.title}",
        "",
        "**Description**:",
        pr.body or NO_DESCRIPTION,
        "",
        f"**Changes**: {len(files)} files changed, "
        f"{total_additions} additions, {total_deletions} deletions",
        "",
        "## Modified Files",
        "",
    ]
    sections = [_render_file(f) for f in files]
    return "\n".join(lines) + "\n\n".join(sections)


def _render_file(f: PullRequestFile) -> str:
    header = f"- **{f.filename}** ({f.status}): +{f.additions} -{f.deletions}"
    if not f.patch:
        return header
    return f"{header}\n```diff\n{truncate(f.patch, PATCH_PREVIEW_CHARS)}\n```"


def comment_preview(comment: str) -> str:
    return truncate(comment, COMMENT_PREVIEW_CHARS)


def render_repository(repository: Repository, files: Sequence[str] = ()) -> str:
    data: dict[str, object] = {
        "full_name": repository.full_name,
        "url": repository.url,
        "private": repository.private,
        "default_branch": repository.default_branch,
    }
    if files:
        data["files"] = list(files)
    return format_data(data)

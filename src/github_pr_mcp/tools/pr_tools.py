"""Pull request tool implementations.

Each handler takes the shared ``GitHubAPI`` as its first argument, performs
its calls strictly in order, and returns a ``ToolResult``.  ``GitHubAPIError``
from any call is caught here and turned into an error envelope; informational
outcomes (already closed, not mergeable) are returned as non-errors.
"""

from __future__ import annotations

import logging

from ..constants import CLOSE_REASON_PREFIX, PULLS_RESOURCE_TEMPLATE
from ..envelope import ToolResult, failure, info, resource, resource_failure, success
from ..errors import GitHubAPIError, describe_error
from ..github.api import GitHubAPI
from ..models import Browse, DiscussTarget, Inspect, discuss_target
from ..templates import comment_preview, render_pr_detail, render_pr_list, render_summary

logger = logging.getLogger(__name__)


def _pr_subject(owner: str, repo: str, number: int) -> str:
    return f"PR #{number} in {owner}/{repo}"


def _api_failure(prefix: str, exc: GitHubAPIError, subject: str | None = None) -> ToolResult:
    logger.error("%s: %s", prefix, exc)
    return failure(f"{prefix}: {describe_error(exc, subject)}")


async def list_prs(api: GitHubAPI, owner: str, repo: str, state: str = "open") -> ToolResult:
    """List pull requests in ``state`` (open, closed or all), in GitHub's order."""
    try:
        prs = await api.list_pulls(owner, repo, state=state)
    except GitHubAPIError as exc:
        return _api_failure("Error fetching PRs", exc, f"Repository {owner}/{repo}")
    return success(render_pr_list(owner, repo, state, prs))


async def browse_prs(api: GitHubAPI, owner: str, repo: str) -> ToolResult:
    return await list_prs(api, owner, repo, state="open")


async def inspect_pr(api: GitHubAPI, owner: str, repo: str, target: Inspect) -> ToolResult:
    try:
        pr = await api.get_pull(owner, repo, target.number)
    except GitHubAPIError as exc:
        return _api_failure(f"Error fetching PR #{target.number}", exc, _pr_subject(owner, repo, target.number))
    return success(render_pr_detail(pr, target.query))


async def discuss_pr(
    api: GitHubAPI,
    owner: str,
    repo: str,
    number: int | None = None,
    query: str | None = None,
) -> ToolResult:
    """Browse open PRs when ``number`` is omitted, otherwise inspect that PR.

    ``query`` is echoed next to the details for the calling agent; it is not
    sent to GitHub.
    """
    target: DiscussTarget = discuss_target(number, query)
    if isinstance(target, Browse):
        return await browse_prs(api, owner, repo)
    return await inspect_pr(api, owner, repo, target)


async def summarize_pr(api: GitHubAPI, owner: str, repo: str, number: int) -> ToolResult:
    """Report title, description, line totals and a diff excerpt per file."""
    subject = _pr_subject(owner, repo, number)
    try:
        pr = await api.get_pull(owner, repo, number)
        files = await api.list_pull_files(owner, repo, number)
    except GitHubAPIError as exc:
        return _api_failure("Error summarizing PR", exc, subject)
    return success(render_summary(pr, files))


async def comment_on_pr(api: GitHubAPI, owner: str, repo: str, number: int, comment: str) -> ToolResult:
    try:
        await api.create_issue_comment(owner, repo, number, comment)
    except GitHubAPIError as exc:
        return _api_failure("Error posting comment", exc, _pr_subject(owner, repo, number))
    return success(f'✅ Comment posted on PR #{number}: "{comment_preview(comment)}"')


async def request_reviewers(
    api: GitHubAPI,
    owner: str,
    repo: str,
    number: int,
    reviewers: list[str],
) -> ToolResult:
    if not reviewers:
        return failure("Error requesting reviewers: at least one reviewer is required.")
    try:
        await api.request_reviewers(owner, repo, number, reviewers)
    except GitHubAPIError as exc:
        return _api_failure("Error requesting reviewers", exc, _pr_subject(owner, repo, number))
    return success(f"✅ Requested {len(reviewers)} reviewer(s) for PR #{number}: {', '.join(reviewers)}")


async def merge_pr(
    api: GitHubAPI,
    owner: str,
    repo: str,
    number: int,
    commit_title: str | None = None,
    commit_message: str | None = None,
) -> ToolResult:
    """Merge the PR if GitHub currently reports it mergeable.

    The mergeability snapshot and the merge call are not atomic; a conflict
    introduced in between surfaces as the merge call's own error.
    """
    subject = _pr_subject(owner, repo, number)
    try:
        pr = await api.get_pull(owner, repo, number)
    except GitHubAPIError as exc:
        return _api_failure("Error merging PR", exc, subject)

    if pr.mergeable is None:
        return info(
            f"⚠️ PR #{number} is not mergeable yet: GitHub is still computing its "
            "mergeability. Try again shortly."
        )
    if not pr.mergeable:
        return info(f"⚠️ PR #{number} is not mergeable. It may have conflicts that need to be resolved.")

    try:
        result = await api.merge_pull(owner, repo, number, commit_title=commit_title, commit_message=commit_message)
    except GitHubAPIError as exc:
        return _api_failure("Error merging PR", exc, subject)

    logger.info("Merged %s (%s)", subject, result.sha)
    suffix = f" Merge commit: {result.sha}" if result.sha else ""
    return success(f"✅ Successfully merged PR #{number}!{suffix}")


async def close_pr(
    api: GitHubAPI,
    owner: str,
    repo: str,
    number: int,
    reason: str | None = None,
) -> ToolResult:
    """Close an open PR without merging, then post ``reason`` as a comment.

    Closing and commenting are separate calls.  If the comment fails the PR
    stays closed and the error says so.
    """
    subject = _pr_subject(owner, repo, number)
    try:
        pr = await api.get_pull(owner, repo, number)
    except GitHubAPIError as exc:
        return _api_failure("Error closing PR", exc, subject)

    if pr.state != "open":
        state = "merged" if pr.merged else pr.state
        return info(f"PR #{number} is already {state}. No action taken.")

    try:
        await api.update_issue_state(owner, repo, number, "closed")
    except GitHubAPIError as exc:
        return _api_failure("Error closing PR", exc, subject)

    if reason:
        try:
            await api.create_issue_comment(owner, repo, number, f"{CLOSE_REASON_PREFIX}{reason}")
        except GitHubAPIError as exc:
            return _api_failure(
                f"PR #{number} was closed, but posting the closing reason failed",
                exc,
                subject,
            )

    with_reason = f" with reason: {reason}" if reason else ""
    return success(f"✅ PR #{number} has been closed{with_reason}.")


async def pull_requests_resource(api: GitHubAPI, owner: str, repo: str) -> ToolResult:
    """Open PRs as a JSON resource payload."""
    uri = PULLS_RESOURCE_TEMPLATE.format(owner=owner, repo=repo)
    try:
        prs = await api.list_pulls(owner, repo, state="open")
    except GitHubAPIError as exc:
        logger.error("Error fetching pull requests for %s/%s: %s", owner, repo, exc)
        subject = f"Repository {owner}/{repo}"
        return resource_failure(uri, f"Error fetching pull requests: {describe_error(exc, subject)}")
    data = [
        {"number": pr.number, "title": pr.title, "url": pr.url, "created_at": pr.created_at}
        for pr in prs
    ]
    return resource(uri, data)

"""Tests for error classification and secret redaction."""

from __future__ import annotations

from github_pr_mcp.errors import ErrorKind, GitHubAPIError, classify_error, describe_error
from github_pr_mcp.policy.redaction import redact_secrets


def test_classify_by_status() -> None:
    assert classify_error(GitHubAPIError("x", 404)) is ErrorKind.NOT_FOUND
    assert classify_error(GitHubAPIError("x", 401)) is ErrorKind.AUTHENTICATION
    assert classify_error(GitHubAPIError("x", 403)) is ErrorKind.FORBIDDEN
    assert classify_error(GitHubAPIError("x", 422)) is ErrorKind.UNCLASSIFIED
    assert classify_error(GitHubAPIError("x")) is ErrorKind.UNCLASSIFIED
    assert classify_error(ValueError("x")) is ErrorKind.UNCLASSIFIED


def test_describe_auth_errors_give_token_hints() -> None:
    assert "Check your token" in describe_error(GitHubAPIError("x", 401))
    forbidden = describe_error(GitHubAPIError("x", 403, api_message="Resource not accessible"))
    assert "Check your token permissions" in forbidden
    assert "Resource not accessible" in forbidden


def test_describe_not_found_names_subject() -> None:
    text = describe_error(GitHubAPIError("x", 404), "PR #3 in o/r")
    assert text.startswith("PR #3 in o/r does not exist")


def test_describe_unclassified_uses_raw_message() -> None:
    exc = GitHubAPIError("GitHub API error 422: Validation Failed", 422)
    assert describe_error(exc) == "GitHub API error 422: Validation Failed"


def test_redact_explicit_secret_and_patterns() -> None:
    token = "ghp_" + "a" * 36
    text = f"header Authorization: Bearer {token} and secret s3cr3t"
    redacted = redact_secrets(text, ["s3cr3t"])
    assert token not in redacted
    assert "s3cr3t" not in redacted
    assert "<REDACTED>" in redacted


def test_redact_leaves_shas_alone() -> None:
    sha = "0123456789abcdef0123456789abcdef01234567"
    assert redact_secrets(f"commit {sha}") == f"commit {sha}"

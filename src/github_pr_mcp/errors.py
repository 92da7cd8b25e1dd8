"""Error types and classification for GitHub API failures.

``GitHubAPIError`` is the only exception the API layer raises.  Tool
handlers catch it and turn it into an error envelope via
``describe_error``, which maps the HTTP status to a diagnosis an agent can
act on.
"""

from __future__ import annotations

from enum import Enum


class GitHubAPIError(RuntimeError):
    """A failed GitHub REST call.

    ``status_code`` is ``None`` when the request never produced a response
    (DNS failure, connection reset, timeout) or the response was unusable.
    """

    def __init__(self, message: str, status_code: int | None = None, api_message: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.api_message = api_message

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    UNCLASSIFIED = "unclassified"


def classify_error(exc: BaseException) -> ErrorKind:
    """Return the taxonomy bucket for ``exc``."""
    status = getattr(exc, "status_code", None)
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status == 401:
        return ErrorKind.AUTHENTICATION
    if status == 403:
        return ErrorKind.FORBIDDEN
    return ErrorKind.UNCLASSIFIED


def describe_error(exc: BaseException, subject: str | None = None) -> str:
    """Return a human-readable diagnosis for ``exc``.

    ``subject`` names what was being looked up (``"PR #7 in octo/repo"``)
    and is only used for the not-found message.
    """
    kind = classify_error(exc)
    if kind is ErrorKind.NOT_FOUND:
        target = subject or "The requested resource"
        return f"{target} does not exist or is not visible to this token (404)."
    if kind is ErrorKind.AUTHENTICATION:
        return (
            "Authentication failed (401). Check your token: set "
            "GITHUB_PERSONAL_ACCESS_TOKEN to a valid GitHub personal access token."
        )
    if kind is ErrorKind.FORBIDDEN:
        detail = getattr(exc, "api_message", None)
        suffix = f" GitHub said: {detail}" if detail else ""
        return f"Permission denied (403). Check your token permissions and scopes.{suffix}"
    return str(exc) or exc.__class__.__name__

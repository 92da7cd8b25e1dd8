"""Tool name to handler routing.

The dispatcher owns the ``GitHubAPI`` instance and passes it to whichever
handler a tool name maps to.  Arguments arrive already validated by the MCP
layer; the dispatcher only renames the camelCase tool parameters to the
handlers' keyword names.  A handler that raises is turned into an error
envelope here so the transport never sees a raw exception.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from .envelope import ToolResult, failure
from .github.api import GitHubAPI
from .policy.redaction import redact_secrets
from .tools import pr_tools, repo_tools

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[ToolResult]]

# Tool surface parameter names that differ from the handler keyword names
ARGUMENT_ALIASES: dict[str, str] = {
    "commitTitle": "commit_title",
    "commitMessage": "commit_message",
    "initializeWithReadme": "initialize_with_readme",
}


def build_tools_dispatch() -> dict[str, Handler]:
    """Return a mapping from tool names to handler coroutines."""
    return {
        # Pull requests
        "list-prs": pr_tools.list_prs,
        "discuss-pr": pr_tools.discuss_pr,
        "summarize-pr": pr_tools.summarize_pr,
        "comment-on-pr": pr_tools.comment_on_pr,
        "request-reviewers": pr_tools.request_reviewers,
        "merge-pr": pr_tools.merge_pr,
        "close-pr": pr_tools.close_pr,
        # Repositories
        "create-repository": repo_tools.create_repository,
        "delete-repository": repo_tools.delete_repository,
    }


def _handler_kwargs(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Rename tool arguments and drop unset optionals."""
    kwargs: dict[str, Any] = {}
    for key, value in arguments.items():
        if value is None:
            continue
        kwargs[ARGUMENT_ALIASES.get(key, key)] = value
    return kwargs


class Dispatcher:
    """Route ``(tool name, arguments)`` to exactly one handler."""

    def __init__(self, api: GitHubAPI, handlers: Mapping[str, Handler] | None = None) -> None:
        self.api = api
        self.handlers = dict(handlers) if handlers is not None else build_tools_dispatch()

    @property
    def tool_names(self) -> list[str]:
        return list(self.handlers)

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        handler = self.handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", name)
            return failure(f"Unknown tool: {name}")

        logger.info("Tool called: %s", name)
        try:
            return await handler(self.api, **_handler_kwargs(arguments or {}))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Tool %s failed", name)
            message = redact_secrets(str(exc) or exc.__class__.__name__, [self.api.config.github_token])
            return failure(message)

"""Tool module exports for GitHub PR MCP.

Each submodule exposes async handlers that take the shared ``GitHubAPI`` as
their first argument and return a ``ToolResult``:

    from github_pr_mcp.tools import pr_tools
    await pr_tools.list_prs(api, "octo", "repo", state="open")

The dispatcher maps tool names onto these handlers.
"""

from . import (
    pr_tools,  # noqa: F401
    repo_tools,  # noqa: F401
)

__all__ = [
    "pr_tools",
    "repo_tools",
]

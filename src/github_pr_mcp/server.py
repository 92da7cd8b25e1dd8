"""MCP stdio server entrypoint for GitHub PR MCP.

The server runs over standard input/output using the Model Context Protocol.
Each tool below declares its argument schema through its signature (FastMCP
validates calls against it) and forwards to the ``Dispatcher``, which owns the
GitHub client and the handler table.

This is an MCP-only server - no JSON fallback protocol is supported.
"""

from __future__ import annotations

import logging
import sys
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from .config import Config
from .constants import PULLS_RESOURCE_TEMPLATE
from .dispatcher import Dispatcher
from .github.api import GitHubAPI
from .tools import pr_tools

# Import MCP SDK - required, no fallback
try:
    from mcp.server.fastmcp import FastMCP
    from mcp.types import CallToolResult
except ImportError as exc:
    print(
        "ERROR: MCP SDK is required but not installed.\n"
        "Install with: pip install mcp\n"
        f"Import error: {exc}",
        file=sys.stderr
    )
    sys.exit(1)

logger = logging.getLogger(__name__)

Owner = Annotated[str, Field(description="Repository owner", min_length=1)]
Repo = Annotated[str, Field(description="Repository name", min_length=1)]
PRNumber = Annotated[int, Field(description="Pull request number", ge=1)]


class RepositoryFileInput(BaseModel):
    """A file to commit into a newly created repository."""

    path: str = Field(description="Path of the file relative to the repository root", min_length=1)
    content: str = Field(description="File content")
    encoding: Literal["utf-8", "base64"] = Field(default="utf-8", description="Encoding of content")


def build_server(dispatcher: Dispatcher) -> FastMCP:
    """Create the FastMCP server and register every tool and the PR resource."""
    mcp = FastMCP("github-pr-mcp")

    async def call(name: str, arguments: dict[str, Any]) -> CallToolResult:
        result = await dispatcher.dispatch(name, arguments)
        return result.to_mcp()

    @mcp.tool(name="list-prs", description="List pull requests in a repository.")
    async def list_prs(
        owner: Owner,
        repo: Repo,
        state: Literal["open", "closed", "all"] = "open",
    ) -> CallToolResult:
        return await call("list-prs", {"owner": owner, "repo": repo, "state": state})

    @mcp.tool(
        name="discuss-pr",
        description=(
            "Get details about a specific pull request, or list open pull requests "
            "when no number is given. An optional query is echoed with the details."
        ),
    )
    async def discuss_pr(
        owner: Owner,
        repo: Repo,
        number: Annotated[
            Annotated[int, Field(ge=1)] | None,
            Field(description="Pull request number; omit to list open PRs"),
        ] = None,
        query: Annotated[str | None, Field(description="Question about the pull request")] = None,
    ) -> CallToolResult:
        return await call("discuss-pr", {"owner": owner, "repo": repo, "number": number, "query": query})

    @mcp.tool(name="summarize-pr", description="Summarize the changes made by a pull request.")
    async def summarize_pr(owner: Owner, repo: Repo, number: PRNumber) -> CallToolResult:
        return await call("summarize-pr", {"owner": owner, "repo": repo, "number": number})

    @mcp.tool(name="comment-on-pr", description="Post a comment on a pull request.")
    async def comment_on_pr(
        owner: Owner,
        repo: Repo,
        number: PRNumber,
        comment: Annotated[str, Field(description="Comment text to post", min_length=1)],
    ) -> CallToolResult:
        return await call("comment-on-pr", {"owner": owner, "repo": repo, "number": number, "comment": comment})

    @mcp.tool(name="request-reviewers", description="Request reviewers for a pull request.")
    async def request_reviewers(
        owner: Owner,
        repo: Repo,
        number: PRNumber,
        reviewers: Annotated[list[str], Field(description="GitHub usernames to request as reviewers", min_length=1)],
    ) -> CallToolResult:
        return await call(
            "request-reviewers",
            {"owner": owner, "repo": repo, "number": number, "reviewers": reviewers},
        )

    @mcp.tool(name="merge-pr", description="Merge a pull request if GitHub reports it mergeable.")
    async def merge_pr(
        owner: Owner,
        repo: Repo,
        number: PRNumber,
        commitTitle: Annotated[str | None, Field(description="Optional title for the merge commit")] = None,
        commitMessage: Annotated[str | None, Field(description="Optional message for the merge commit")] = None,
    ) -> CallToolResult:
        return await call(
            "merge-pr",
            {
                "owner": owner,
                "repo": repo,
                "number": number,
                "commitTitle": commitTitle,
                "commitMessage": commitMessage,
            },
        )

    @mcp.tool(name="close-pr", description="Close a pull request without merging it.")
    async def close_pr(
        owner: Owner,
        repo: Repo,
        number: PRNumber,
        reason: Annotated[str | None, Field(description="Optional reason, posted as a comment")] = None,
    ) -> CallToolResult:
        return await call("close-pr", {"owner": owner, "repo": repo, "number": number, "reason": reason})

    @mcp.tool(
        name="create-repository",
        description=(
            "Create a repository for the authenticated user, or in an organization when "
            "owner is given, optionally committing a set of files in a single commit."
        ),
    )
    async def create_repository(
        name: Annotated[str, Field(description="Repository name", min_length=1)],
        owner: Annotated[str | None, Field(description="Organization to create the repository in")] = None,
        description: Annotated[str | None, Field(description="Repository description")] = None,
        private: Annotated[bool, Field(description="Create a private repository")] = False,
        files: Annotated[list[RepositoryFileInput] | None, Field(description="Files for the initial commit")] = None,
        initializeWithReadme: Annotated[bool, Field(description="Initialize with a README")] = True,
        commitMessage: Annotated[str | None, Field(description="Message for the commit adding files")] = None,
    ) -> CallToolResult:
        return await call(
            "create-repository",
            {
                "name": name,
                "owner": owner,
                "description": description,
                "private": private,
                "files": [f.model_dump() for f in files] if files else None,
                "initializeWithReadme": initializeWithReadme,
                "commitMessage": commitMessage,
            },
        )

    @mcp.tool(
        name="delete-repository",
        description="Permanently delete a repository. Requires confirmation set to true.",
    )
    async def delete_repository(
        owner: Owner,
        repo: Repo,
        confirmation: Annotated[bool, Field(description="Must be true to delete; deletion is irreversible")] = False,
    ) -> CallToolResult:
        return await call("delete-repository", {"owner": owner, "repo": repo, "confirmation": confirmation})

    @mcp.resource(
        PULLS_RESOURCE_TEMPLATE,
        name="pull-requests",
        description="Open pull requests of a repository as JSON",
        mime_type="application/json",
    )
    async def pull_requests(owner: str, repo: str) -> str:
        result = await pr_tools.pull_requests_resource(dispatcher.api, owner, repo)
        return result.content[-1].text

    return mcp


def main() -> None:
    """Entrypoint for the GitHub PR MCP server.

    This starts an MCP stdio server. The MCP SDK is required.
    """
    config = Config.load_from_env()

    # Configure logging to stderr (stdout is used for MCP protocol)
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger.info("Starting GitHub PR MCP server (%s)", config.api_url)
    if not config.github_token:
        logger.warning("No GitHub token configured; GitHub calls will fail with 401")

    # One client for the whole process, threaded through every handler
    dispatcher = Dispatcher(GitHubAPI(config))
    mcp = build_server(dispatcher)
    logger.info("Registered %d tools", len(dispatcher.tool_names))

    # Run the MCP server over stdio (blocking)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

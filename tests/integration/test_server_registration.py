"""Integration tests for the FastMCP tool and resource registration."""

from __future__ import annotations

import pytest
from conftest import api_error, make_pr
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import CallToolResult

from github_pr_mcp.dispatcher import Dispatcher
from github_pr_mcp.server import build_server


@pytest.fixture
def server(fake_api):
    return build_server(Dispatcher(fake_api))


@pytest.mark.asyncio
async def test_registers_every_tool(server) -> None:
    tools = {tool.name: tool for tool in await server.list_tools()}

    assert set(tools) == {
        "list-prs",
        "discuss-pr",
        "summarize-pr",
        "comment-on-pr",
        "request-reviewers",
        "merge-pr",
        "close-pr",
        "create-repository",
        "delete-repository",
    }


@pytest.mark.asyncio
async def test_tool_schemas_match_contract(server) -> None:
    tools = {tool.name: tool for tool in await server.list_tools()}

    list_schema = tools["list-prs"].inputSchema
    assert set(list_schema["required"]) == {"owner", "repo"}
    assert list_schema["properties"]["state"]["default"] == "open"

    discuss_schema = tools["discuss-pr"].inputSchema
    assert set(discuss_schema["required"]) == {"owner", "repo"}

    merge_props = tools["merge-pr"].inputSchema["properties"]
    assert {"commitTitle", "commitMessage"} <= set(merge_props)

    create_schema = tools["create-repository"].inputSchema
    assert create_schema["required"] == ["name"]
    assert create_schema["properties"]["private"]["default"] is False
    assert create_schema["properties"]["initializeWithReadme"]["default"] is True

    delete_schema = tools["delete-repository"].inputSchema
    assert delete_schema["properties"]["confirmation"]["default"] is False


@pytest.mark.asyncio
async def test_registers_pull_request_resource_template(server) -> None:
    templates = await server.list_resource_templates()

    assert [t.uriTemplate for t in templates] == ["github://{owner}/{repo}/pulls"]


@pytest.mark.asyncio
async def test_discuss_pr_number_must_be_positive(server, fake_api) -> None:
    tools = {tool.name: tool for tool in await server.list_tools()}
    number = tools["discuss-pr"].inputSchema["properties"]["number"]
    assert {"type": "integer", "minimum": 1} in number["anyOf"]

    with pytest.raises(ToolError):
        await server.call_tool("discuss-pr", {"owner": "o", "repo": "r", "number": 0})

    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_call_tool_returns_informational_result(server, fake_api) -> None:
    fake_api.responses["get_pull"] = make_pr(6, mergeable=False)

    result = await server.call_tool("merge-pr", {"owner": "o", "repo": "r", "number": 6})

    assert isinstance(result, CallToolResult)
    assert result.isError is False
    assert "not mergeable" in result.content[0].text
    assert fake_api.calls == ["get_pull"]


@pytest.mark.asyncio
async def test_call_tool_marks_failures_as_errors(server, fake_api) -> None:
    fake_api.errors["list_pulls"] = api_error(401, "Bad credentials")

    result = await server.call_tool("list-prs", {"owner": "o", "repo": "r"})

    assert isinstance(result, CallToolResult)
    assert result.isError is True
    assert "Authentication failed" in result.content[0].text

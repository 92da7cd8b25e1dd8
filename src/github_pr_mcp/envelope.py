"""Uniform tool result envelope.

Every tool handler returns a ``ToolResult``: a non-empty list of content
blocks plus an error flag.  Only two block kinds exist.  Conversion to the
MCP wire types happens once, at the server boundary, in ``to_mcp``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Union

from mcp.types import CallToolResult, EmbeddedResource, TextContent, TextResourceContents


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ResourceBlock:
    uri: str
    text: str
    mime_type: str = "application/json"


ContentBlock = Union[TextBlock, ResourceBlock]


@dataclass(frozen=True)
class ToolResult:
    """The envelope every handler returns."""

    content: list[ContentBlock] = field(default_factory=list)
    is_error: bool = False

    def __post_init__(self) -> None:
        if not self.content:
            raise ValueError("ToolResult requires at least one content block")

    @property
    def text(self) -> str:
        """All block bodies joined by blank lines."""
        return "\n\n".join(block.text for block in self.content)

    def to_mcp(self) -> CallToolResult:
        blocks: list[TextContent | EmbeddedResource] = []
        for block in self.content:
            if isinstance(block, ResourceBlock):
                blocks.append(
                    EmbeddedResource(
                        type="resource",
                        resource=TextResourceContents(uri=block.uri, mimeType=block.mime_type, text=block.text),
                    )
                )
            else:
                blocks.append(TextContent(type="text", text=block.text))
        return CallToolResult(content=blocks, isError=self.is_error)


def format_data(data: object) -> str:
    """Render structured data as an indented JSON text block."""
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def success(text: str, data: object | None = None) -> ToolResult:
    """A successful result; ``data`` is appended as formatted JSON."""
    if data is not None:
        text = f"{text}\n\n{format_data(data)}"
    return ToolResult(content=[TextBlock(text=text)])


def info(text: str) -> ToolResult:
    """A valid terminal outcome that did nothing (already closed, not mergeable...)."""
    return ToolResult(content=[TextBlock(text=text)])


def failure(text: str) -> ToolResult:
    return ToolResult(content=[TextBlock(text=text or "Unknown error")], is_error=True)


def resource(uri: str, data: object, summary: str | None = None) -> ToolResult:
    """A result carrying a resource payload, optionally preceded by a text line."""
    blocks: list[ContentBlock] = []
    if summary:
        blocks.append(TextBlock(text=summary))
    blocks.append(ResourceBlock(uri=uri, text=format_data(data)))
    return ToolResult(content=blocks)


def resource_failure(uri: str, text: str) -> ToolResult:
    """An error result whose payload is still JSON: ``{"error": text}``."""
    payload = format_data({"error": text or "Unknown error"})
    return ToolResult(content=[ResourceBlock(uri=uri, text=payload)], is_error=True)

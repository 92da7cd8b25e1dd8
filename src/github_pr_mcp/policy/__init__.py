"""Policy utilities for GitHub PR MCP."""

from .redaction import redact_secrets

__all__ = [
    "redact_secrets",
]

"""Top‑level package for GitHub PR MCP.

This package exposes an MCP stdio server whose tools let an agent list,
inspect, comment on, merge and close pull requests, and create or delete
repositories on GitHub.  See `README.md` for the tool list.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

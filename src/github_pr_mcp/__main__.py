"""Allow ``python -m github_pr_mcp`` to start the stdio server."""

from .server import main

if __name__ == "__main__":
    main()

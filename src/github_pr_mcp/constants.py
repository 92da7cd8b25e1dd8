"""Global constants for GitHub PR MCP.

Formatting caps and fixed request parameters shared by the tool handlers.
Deployment settings (token, API URL, timeout, log level) live in ``config``.
"""

# Preview caps (characters) for echoed text
COMMENT_PREVIEW_CHARS = 50
PATCH_PREVIEW_CHARS = 300
ELLIPSIS = "..."

# GitHub
DEFAULT_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
MERGE_METHOD = "merge"
BLOB_FILE_MODE = "100644"
DEFAULT_INITIAL_COMMIT_MESSAGE = "Add initial files"
CLOSE_REASON_PREFIX = "Closing this PR: "

# Resource template exposing open pull requests
PULLS_RESOURCE_TEMPLATE = "github://{owner}/{repo}/pulls"

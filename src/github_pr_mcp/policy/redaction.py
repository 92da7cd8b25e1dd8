"""Secret redaction utilities.

Error text returned by GitHub or by ``httpx`` can echo request headers.
This module removes the configured token and anything shaped like a GitHub
credential before such text reaches a log line or a tool envelope.
Redaction substitutes matches with the string ``"<REDACTED>"``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_TOKEN_PATTERNS = [
    # GitHub tokens: ghp_, gho_, ghu_, ghs_, ghr_ prefixes
    re.compile(r"gh[pousr]_[A-Za-z0-9]{30,}", re.IGNORECASE),
    # Fine-grained personal access tokens
    re.compile(r"github_pat_[A-Za-z0-9_]{20,}", re.IGNORECASE),
    # Authorization header values
    re.compile(r"(Bearer|token)\s+[A-Za-z0-9\-\._~\+/]{20,}=*", re.IGNORECASE),
]


def redact_secrets(text: str, secrets: Iterable[str] = ()) -> str:
    """Return ``text`` with secrets and GitHub token patterns replaced.

    Commit and blob SHAs are left alone; only credential-shaped strings and
    the explicit ``secrets`` are replaced.
    """
    redacted = text or ""
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, "<REDACTED>")
    for pattern in _TOKEN_PATTERNS:
        redacted = pattern.sub("<REDACTED>", redacted)
    return redacted

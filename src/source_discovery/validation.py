"""Input validation helpers for namespaces."""

from __future__ import annotations

import re

# RFC 1123 label: lowercase alphanumeric and hyphens, 1-63 chars, starts/ends with alphanumeric
_NAMESPACE_RE = re.compile(r"^[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?$")


def validate_namespace(namespace: str) -> None:
    """Validate a Kubernetes namespace name against RFC 1123.

    The empty string is accepted and means all namespaces.
    """
    if namespace == "":
        return
    if not _NAMESPACE_RE.match(namespace):
        msg = f"Invalid namespace: {namespace!r}. Must be a valid RFC 1123 label."
        raise ValueError(msg)


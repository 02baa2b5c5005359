"""Pydantic v2 models for tool outputs and errors."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

# --- Shared error model ---


class ToolError(BaseModel):
    """Structured error returned by all tools."""

    error: str
    source: str
    namespace: str
    partial_data: bool = False


# --- Output scrubbing ---

_BEARER_PATTERN = re.compile(r"\bBearer\s+[\w.~+/=-]+", re.IGNORECASE)
_URL_CREDENTIALS_PATTERN = re.compile(r"(https?://)[^/\s:@]+:[^/\s@]+@", re.IGNORECASE)
_HOME_PATH_PATTERN = re.compile(r"(/home|/Users)/[^/\s]+")


def scrub_sensitive_values(text: str) -> str:
    """Remove bearer tokens, URL credentials, and user home directories from error text.

    Endpoint targets (load balancer IPs and hostnames) are not scrubbed; they are the
    tool's output.
    """
    if not text:
        return text
    result = _BEARER_PATTERN.sub("Bearer [REDACTED]", text)
    result = _URL_CREDENTIALS_PATTERN.sub(r"\1[REDACTED]@", result)
    result = _HOME_PATH_PATTERN.sub(r"\1/[REDACTED]", result)
    return result


# --- Discovery models ---


class EndpointRecord(BaseModel):
    """One discovered DNS name and its targets."""

    dns_name: str
    targets: list[str]
    resource: str
    source: str


class DiscoveryOutput(BaseModel):
    """Output for discover_endpoints."""

    namespace: str
    sources: list[str]
    endpoints: list[EndpointRecord]
    summary: str
    timestamp: str
    errors: list[ToolError] = Field(default_factory=list)


class SourceListOutput(BaseModel):
    """Output for list_sources."""

    sources: list[str]
    configured: list[str]
    namespace: str

"""discover_endpoints — resolve sources and collect their endpoints."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime

import structlog

from source_discovery.config import SourceConfig
from source_discovery.models import DiscoveryOutput, EndpointRecord, SourceListOutput, ToolError
from source_discovery.sources import KNOWN_SOURCES, ClientProvider, by_names
from source_discovery.validation import validate_namespace

log = structlog.get_logger()


async def discover_endpoints_handler(
    provider: ClientProvider,
    names: Sequence[str],
    namespace: str = "",
) -> DiscoveryOutput:
    """Core handler for discover_endpoints.

    Source resolution is all-or-nothing and raises on the first failure. Once every
    source is built, a source whose listing fails is reported in ``errors`` and the
    remaining sources still contribute endpoints.
    """
    validate_namespace(namespace)

    sources = by_names(names, provider, SourceConfig(namespace=namespace))
    results = await asyncio.gather(*(s.endpoints() for s in sources), return_exceptions=True)

    endpoints: list[EndpointRecord] = []
    errors: list[ToolError] = []
    for source, result in zip(sources, results, strict=True):
        if isinstance(result, BaseException):
            log.error("source_endpoints_failed", source=source.name, namespace=namespace, error=str(result))
            errors.append(ToolError(error=str(result), source=source.name, namespace=namespace, partial_data=True))
            continue
        endpoints.extend(
            EndpointRecord(dns_name=e.dns_name, targets=list(e.targets), resource=e.resource, source=e.source)
            for e in result
        )

    scope = namespace or "all namespaces"
    count = len(endpoints)
    summary = f"{count} endpoint{'s' if count != 1 else ''} from {len(sources)} source(s) in {scope}"
    if errors:
        summary += f"; {len(errors)} source(s) failed"

    return DiscoveryOutput(
        namespace=namespace,
        sources=[s.name for s in sources],
        endpoints=endpoints,
        summary=summary,
        timestamp=datetime.now(tz=UTC).isoformat(),
        errors=errors,
    )


def list_sources_handler(configured: Sequence[str], namespace: str) -> SourceListOutput:
    """Core handler for list_sources."""
    return SourceListOutput(sources=sorted(KNOWN_SOURCES), configured=list(configured), namespace=namespace)

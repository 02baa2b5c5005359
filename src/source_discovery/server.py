"""MCP server entry point and tool registration."""

from __future__ import annotations

import sys
import time

import structlog
from mcp.server.fastmcp import FastMCP

from source_discovery.clients.provider import SingletonClientProvider
from source_discovery.config import DiscoveryConfig, load_discovery_config
from source_discovery.models import scrub_sensitive_values
from source_discovery.sources import by_names
from source_discovery.tools.discovery import discover_endpoints_handler, list_sources_handler

# Configure structlog for JSON output to stderr
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

log = structlog.get_logger()

mcp = FastMCP("Source Discovery Server")

_config: DiscoveryConfig | None = None
_provider: SingletonClientProvider | None = None


def configure(config: DiscoveryConfig) -> SingletonClientProvider:
    """Install the configuration and the shared client provider used by every tool."""
    global _config, _provider
    _config = config
    _provider = SingletonClientProvider(config.connection)
    return _provider


def _require_configured() -> tuple[DiscoveryConfig, SingletonClientProvider]:
    if _config is None or _provider is None:
        msg = "Server is not configured; call configure() before serving tools."
        raise RuntimeError(msg)
    return _config, _provider


@mcp.tool()
async def list_sources() -> str:
    """List the source names this server can resolve and the ones configured by default.

    Use this to find valid values for the `sources` argument of discover_endpoints.
    """
    config, _ = _require_configured()
    return list_sources_handler(config.sources, config.namespace).model_dump_json(indent=2)


@mcp.tool()
async def discover_endpoints(sources: list[str] | None = None, namespace: str | None = None) -> str:
    """Discover DNS endpoints from the cluster's ingress resources.

    Returns every ingress host name with its load balancer targets, grouped by the
    source that produced it. Use this to see what DNS records the cluster wants.

    Args:
        sources: Ordered source names (e.g., ['ingress-nginx', 'ingress-gce']). Omit for the configured list.
        namespace: Namespace to scan. Omit for the configured namespace; '' for all namespaces.
    """
    start = time.monotonic()
    try:
        config, provider = _require_configured()
        names = sources if sources is not None else list(config.sources)
        scope = namespace if namespace is not None else config.namespace
        result = await discover_endpoints_handler(provider, names, scope)
        log.info("tool_completed", tool="discover_endpoints", sources=names, latency_ms=_elapsed_ms(start))
        return result.model_dump_json(indent=2)
    except Exception as e:
        sanitised = scrub_sensitive_values(str(e))
        log.error("tool_failed", tool="discover_endpoints", error=sanitised)
        raise RuntimeError(sanitised) from None


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def main() -> None:
    """Load configuration, verify every configured source resolves, then serve over stdio."""
    config = load_discovery_config()
    provider = configure(config)
    # Any error here is fatal to startup.
    by_names(config.sources, provider, config.source_config)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

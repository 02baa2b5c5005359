"""Resolve source names into sources sharing one cluster client."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from kubernetes import client as k8s_client

from source_discovery.sources.base import Endpoint, Source
from source_discovery.sources.registry import KNOWN_SOURCES, SOURCE_REGISTRY, build_source

if TYPE_CHECKING:
    from source_discovery.config import SourceConfig

__all__ = ["KNOWN_SOURCES", "SOURCE_REGISTRY", "ClientProvider", "Endpoint", "Source", "build_source", "by_names"]


class ClientProvider(Protocol):
    def get_client(self) -> k8s_client.ApiClient: ...


def by_names(names: Sequence[str], provider: ClientProvider, config: SourceConfig) -> list[Source]:
    """Build one source per name, in order, all sharing the provider's client.

    The first failure propagates and no list is returned. An empty ``names``
    returns an empty list without asking the provider for a client.
    """
    if not names:
        return []

    client = provider.get_client()
    sources: list[Source] = []
    for name in names:
        sources.append(build_source(name, client, config.namespace))
    return sources

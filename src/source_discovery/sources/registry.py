"""Registered source names and their constructors."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType

from kubernetes import client as k8s_client

from source_discovery.errors import AdapterConstructionError, UnknownSourceError
from source_discovery.sources.base import Source
from source_discovery.sources.ingress import IngressGCESource, IngressNginxSource

SourceConstructor = Callable[[k8s_client.ApiClient, str], Source]

SOURCE_REGISTRY: Mapping[str, SourceConstructor] = MappingProxyType(
    {
        IngressNginxSource.name: IngressNginxSource,
        IngressGCESource.name: IngressGCESource,
    }
)

KNOWN_SOURCES: tuple[str, ...] = tuple(SOURCE_REGISTRY)


def build_source(name: str, client: k8s_client.ApiClient, namespace: str) -> Source:
    """Construct a fresh source for ``name`` bound to the shared client and namespace.

    Raises:
        UnknownSourceError: If ``name`` is not registered.
        AdapterConstructionError: If the registered constructor fails.
    """
    constructor = SOURCE_REGISTRY.get(name)
    if constructor is None:
        raise UnknownSourceError(name, KNOWN_SOURCES)
    try:
        return constructor(client, namespace)
    except Exception as exc:
        raise AdapterConstructionError(name, exc) from exc

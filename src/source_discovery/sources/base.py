"""The Source interface shared by every discovery backend."""

from __future__ import annotations

import abc
from dataclasses import dataclass

from kubernetes import client as k8s_client


@dataclass(frozen=True)
class Endpoint:
    """A DNS name and the addresses it should resolve to."""

    dns_name: str
    targets: tuple[str, ...]
    resource: str
    source: str


class Source(abc.ABC):
    """Something that can discover endpoints from the cluster.

    Sources are bound to one client and one namespace at construction time and
    hold no state shared with other sources.
    """

    name: str

    def __init__(self, client: k8s_client.ApiClient, namespace: str) -> None:
        self.client = client
        self.namespace = namespace

    @abc.abstractmethod
    async def endpoints(self) -> list[Endpoint]:
        """Return the endpoints currently described by the cluster."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(namespace={self.namespace!r})"

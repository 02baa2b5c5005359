"""Ingress-backed sources, one per ingress controller."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from kubernetes import client as k8s_client

from source_discovery.sources.base import Endpoint, Source
from source_discovery.validation import validate_namespace

log = structlog.get_logger()

INGRESS_CLASS_ANNOTATION = "kubernetes.io/ingress.class"


def ingress_class_of(ingress: Any) -> str | None:
    """Return the ingress class, preferring spec.ingressClassName over the legacy annotation."""
    spec_class = ingress.spec.ingress_class_name if ingress.spec else None
    if spec_class:
        return spec_class
    annotations = ingress.metadata.annotations or {}
    return annotations.get(INGRESS_CLASS_ANNOTATION)


def load_balancer_targets(ingress: Any) -> tuple[str, ...]:
    """Collect the IPs and hostnames published in the ingress status."""
    status = ingress.status
    if not status or not status.load_balancer:
        return ()
    targets: list[str] = []
    for lb in status.load_balancer.ingress or []:
        if lb.ip:
            targets.append(lb.ip)
        elif lb.hostname:
            targets.append(lb.hostname)
    return tuple(targets)


class IngressSource(Source):
    """Discovers endpoints from Ingress rules served by one ingress controller."""

    ingress_class: str
    # Ingresses without any class are claimed by this controller.
    claims_unclassified = False

    def __init__(self, client: k8s_client.ApiClient, namespace: str) -> None:
        if not isinstance(client, k8s_client.ApiClient):
            msg = f"{type(self).__name__} requires a kubernetes ApiClient, got {type(client).__name__}."
            raise TypeError(msg)
        validate_namespace(namespace)
        super().__init__(client, namespace)
        self._api = k8s_client.NetworkingV1Api(client)

    def _matches(self, ingress: Any) -> bool:
        ingress_class = ingress_class_of(ingress)
        if ingress_class is None:
            return self.claims_unclassified
        return ingress_class == self.ingress_class

    async def endpoints(self) -> list[Endpoint]:
        try:
            if self.namespace:
                ingress_list = await asyncio.to_thread(self._api.list_namespaced_ingress, self.namespace)
            else:
                ingress_list = await asyncio.to_thread(self._api.list_ingress_for_all_namespaces)
        except Exception:
            log.error("failed_to_list_ingresses", source=self.name, namespace=self.namespace)
            raise

        results: list[Endpoint] = []
        for ingress in ingress_list.items:
            if not self._matches(ingress):
                continue
            targets = load_balancer_targets(ingress)
            if not targets:
                log.debug("ingress_without_targets", source=self.name, ingress=ingress.metadata.name)
                continue
            resource = f"ingress/{ingress.metadata.namespace}/{ingress.metadata.name}"
            for rule in (ingress.spec.rules if ingress.spec else None) or []:
                if not rule.host:
                    continue
                results.append(Endpoint(dns_name=rule.host, targets=targets, resource=resource, source=self.name))
        return results


class IngressNginxSource(IngressSource):
    name = "ingress-nginx"
    ingress_class = "nginx"


class IngressGCESource(IngressSource):
    """GCE ingress controller; on GKE it serves ingresses that name no class."""

    name = "ingress-gce"
    ingress_class = "gce"
    claims_unclassified = True

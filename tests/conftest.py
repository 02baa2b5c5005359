"""Shared test fixtures for all test modules."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest
from kubernetes import client as k8s_client


@pytest.fixture
def api_client() -> MagicMock:
    """A stand-in for a constructed kubernetes ApiClient."""
    return MagicMock(spec=k8s_client.ApiClient)


@pytest.fixture
def provider(api_client: MagicMock) -> MagicMock:
    """A client provider that always hands out the same api_client."""
    mock = MagicMock()
    mock.get_client.return_value = api_client
    return mock


def make_ingress(
    name: str = "web",
    namespace: str = "default",
    hosts: list[str | None] | None = None,
    ingress_class_name: str | None = None,
    annotation_class: str | None = None,
    ips: list[str] | None = None,
    hostnames: list[str] | None = None,
) -> Any:
    """Create an ingress object shaped like the kubernetes SDK's V1Ingress."""
    annotations = {"kubernetes.io/ingress.class": annotation_class} if annotation_class else None
    lb_entries = [SimpleNamespace(ip=ip, hostname=None) for ip in ips or []]
    lb_entries += [SimpleNamespace(ip=None, hostname=h) for h in hostnames or []]
    rules = [SimpleNamespace(host=h) for h in (hosts if hosts is not None else ["web.example.com"])]
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, namespace=namespace, annotations=annotations),
        spec=SimpleNamespace(ingress_class_name=ingress_class_name, rules=rules),
        status=SimpleNamespace(load_balancer=SimpleNamespace(ingress=lb_entries)),
    )


def make_ingress_list(*ingresses: Any) -> Any:
    return SimpleNamespace(items=list(ingresses))


KUBECONFIG_TEMPLATE = """\
apiVersion: v1
kind: Config
current-context: test
clusters:
- name: test
  cluster:
    server: {server}
contexts:
- name: test
  context:
    cluster: test
    user: test
users:
- name: test
  user:
    token: not-a-real-token
"""


@pytest.fixture
def kubeconfig_file(tmp_path: Any) -> str:
    """A valid token-based kubeconfig on disk pointing at https://10.0.0.1:6443."""
    path = tmp_path / "kubeconfig"
    path.write_text(KUBECONFIG_TEMPLATE.format(server="https://10.0.0.1:6443"))
    return str(path)


@pytest.fixture
def ingress_factory() -> Any:
    """Expose make_ingress to tests as a fixture."""
    return make_ingress


@pytest.fixture
def ingress_list_factory() -> Any:
    return make_ingress_list

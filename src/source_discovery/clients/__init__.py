"""Kubernetes API client construction."""

from __future__ import annotations

import os
from urllib.parse import urlsplit

import structlog
import yaml
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.config.config_exception import ConfigException
from kubernetes.config.kube_config import KUBE_CONFIG_DEFAULT_LOCATION

from source_discovery.clients.instrumentation import instrument_api_client
from source_discovery.config import ConnectionParameters
from source_discovery.errors import ClusterConnectionError

log = structlog.get_logger()

# Honours $KUBECONFIG, otherwise ~/.kube/config.
DEFAULT_KUBECONFIG = os.path.expanduser(KUBE_CONFIG_DEFAULT_LOCATION)


def resolve_kubeconfig_path(kubeconfig: str | None) -> str | None:
    """Pick the kubeconfig file to load.

    An explicit path is returned verbatim, whether or not it exists. Otherwise the
    default location is used if present, and None means in-cluster credentials.
    """
    if kubeconfig:
        return kubeconfig
    if os.path.exists(DEFAULT_KUBECONFIG):
        return DEFAULT_KUBECONFIG
    return None


def _validate_master(kube_master: str) -> None:
    parts = urlsplit(kube_master)
    try:
        # .port raises ValueError for non-numeric or out-of-range ports.
        parts.port
    except ValueError as exc:
        msg = f"Invalid control plane address: {kube_master!r}. {exc}."
        raise ClusterConnectionError(msg) from exc
    if parts.scheme not in ("http", "https") or not parts.hostname:
        msg = f"Invalid control plane address: {kube_master!r}. Expected http(s)://host[:port]."
        raise ClusterConnectionError(msg)


def build_client_configuration(kube_master: str | None, kubeconfig: str | None) -> k8s_client.Configuration:
    """Build an isolated client Configuration from a master URL and a kubeconfig path.

    Never touches the SDK's global default configuration.

    Raises:
        ClusterConnectionError: If the address is malformed or the credentials
            cannot be loaded.
    """
    if kube_master:
        _validate_master(kube_master)

    configuration = k8s_client.Configuration()
    try:
        if kubeconfig:
            if not os.path.exists(kubeconfig):
                msg = f"Kubeconfig file not found: {kubeconfig}"
                raise ClusterConnectionError(msg)
            k8s_config.load_kube_config(
                config_file=kubeconfig,
                client_configuration=configuration,
                persist_config=False,
            )
            if kube_master:
                configuration.host = kube_master
        elif kube_master:
            configuration.host = kube_master
        else:
            k8s_config.load_incluster_config(client_configuration=configuration)
    # The SDK raises TypeError, KeyError and AttributeError for kubeconfigs of the wrong shape.
    except (ConfigException, OSError, yaml.YAMLError, ValueError, TypeError, KeyError, AttributeError) as exc:
        msg = f"Failed to load cluster credentials: {exc}"
        raise ClusterConnectionError(msg) from exc
    return configuration


def new_kube_client(params: ConnectionParameters) -> k8s_client.ApiClient:
    """Create an instrumented Kubernetes API client.

    Raises:
        ClusterConnectionError: If credentials cannot be resolved or the client
            cannot be constructed.
    """
    kubeconfig = resolve_kubeconfig_path(params.kubeconfig)
    configuration = build_client_configuration(params.kube_master, kubeconfig)

    try:
        api_client = k8s_client.ApiClient(configuration)
    except Exception as exc:
        msg = f"Failed to create Kubernetes client for {configuration.host}: {exc}"
        raise ClusterConnectionError(msg) from exc

    instrument_api_client(api_client)

    log.info("connected_to_cluster", host=configuration.host)
    return api_client

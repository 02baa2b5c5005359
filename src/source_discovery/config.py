"""Connection parameters, shared source configuration, and the YAML config file loader."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from source_discovery.sources.registry import KNOWN_SOURCES


@dataclass(frozen=True)
class ConnectionParameters:
    """How to reach the control plane.

    An empty string and None both mean "not given": the kubeconfig falls back to
    the default location, then to in-cluster credentials.
    """

    kubeconfig: str | None = None
    kube_master: str | None = None


@dataclass(frozen=True)
class SourceConfig:
    """Configuration shared by every source built in one resolution.

    An empty namespace scopes sources to all namespaces.
    """

    namespace: str = ""


@dataclass(frozen=True)
class DiscoveryConfig:
    """Top-level configuration with environment variable overrides."""

    sources: tuple[str, ...] = ()
    namespace: str = field(default_factory=lambda: os.environ.get("SOURCE_NAMESPACE", ""))
    kubeconfig: str | None = field(default_factory=lambda: os.environ.get("KUBECONFIG_PATH") or None)
    kube_master: str | None = field(default_factory=lambda: os.environ.get("KUBE_MASTER") or None)

    @property
    def connection(self) -> ConnectionParameters:
        return ConnectionParameters(kubeconfig=self.kubeconfig, kube_master=self.kube_master)

    @property
    def source_config(self) -> SourceConfig:
        return SourceConfig(namespace=self.namespace)


_OPTIONAL_STRING_FIELDS = ("namespace", "kubeconfig", "kube_master")


def _load_discovery_config(path: Path) -> DiscoveryConfig:
    """Parse a YAML discovery configuration file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The parsed DiscoveryConfig. Keys missing from the file keep their
        environment-derived defaults.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the file is malformed or names an unknown source.
    """
    if not path.exists():
        msg = (
            f"Discovery configuration file not found: {path}. "
            "Copy sources.example.yaml to sources.yaml, "
            "or set SOURCE_DISCOVERY_CONFIG to point to your config file."
        )
        raise FileNotFoundError(msg)

    raw = yaml.safe_load(path.read_text())

    if not isinstance(raw, dict) or "sources" not in raw:
        msg = f"Discovery config file {path} must contain a top-level 'sources' key."
        raise ValueError(msg)

    sources_raw: Any = raw["sources"]
    if not isinstance(sources_raw, list) or not all(isinstance(s, str) for s in sources_raw):
        msg = f"Discovery config file {path} has an invalid 'sources' section; expected a list of names."
        raise ValueError(msg)

    unknown = [s for s in sources_raw if s not in KNOWN_SOURCES]
    if unknown:
        valid = ", ".join(sorted(KNOWN_SOURCES))
        msg = f"Discovery config file {path} names unknown sources: {', '.join(unknown)}. Valid sources: {valid}"
        raise ValueError(msg)

    overrides: dict[str, Any] = {}
    for key in _OPTIONAL_STRING_FIELDS:
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            msg = f"Discovery config key '{key}' must be a string, got {type(value).__name__}."
            raise ValueError(msg)
        overrides[key] = value

    return DiscoveryConfig(sources=tuple(sources_raw), **overrides)


def load_discovery_config() -> DiscoveryConfig:
    """Load discovery configuration from YAML.

    Reads the file path from the ``SOURCE_DISCOVERY_CONFIG`` environment variable,
    defaulting to ``sources.yaml`` in the current working directory.
    """
    path = Path(os.environ.get("SOURCE_DISCOVERY_CONFIG", "sources.yaml"))
    return _load_discovery_config(path)

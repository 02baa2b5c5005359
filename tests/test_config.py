"""Tests for config.py: data types, YAML loading, environment variable overrides."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from source_discovery.config import (
    ConnectionParameters,
    DiscoveryConfig,
    SourceConfig,
    _load_discovery_config,
    load_discovery_config,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "sources.yaml"
    path.write_text(text)
    return path


class TestDataTypes:
    def test_connection_parameters_default_to_unset(self) -> None:
        params = ConnectionParameters()
        assert params.kubeconfig is None
        assert params.kube_master is None

    def test_connection_parameters_are_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            ConnectionParameters().kubeconfig = "/tmp/kubeconfig"  # type: ignore[misc]

    def test_source_config_defaults_to_all_namespaces(self) -> None:
        assert SourceConfig().namespace == ""

    def test_source_config_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            SourceConfig(namespace="prod").namespace = "dev"  # type: ignore[misc]


class TestDiscoveryConfigEnv:
    def test_env_overrides(self) -> None:
        env = {"SOURCE_NAMESPACE": "staging", "KUBECONFIG_PATH": "/etc/kube", "KUBE_MASTER": "https://api:6443"}
        with patch.dict(os.environ, env):
            config = DiscoveryConfig()
        assert config.namespace == "staging"
        assert config.connection == ConnectionParameters(kubeconfig="/etc/kube", kube_master="https://api:6443")
        assert config.source_config == SourceConfig(namespace="staging")

    def test_empty_env_values_mean_unset(self) -> None:
        with patch.dict(os.environ, {"KUBECONFIG_PATH": "", "KUBE_MASTER": ""}):
            config = DiscoveryConfig()
        assert config.kubeconfig is None
        assert config.kube_master is None


class TestLoadDiscoveryConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "sources: [ingress-gce, ingress-nginx]\n"
            "namespace: prod\n"
            "kubeconfig: /etc/kube/config\n"
            "kube_master: https://10.0.0.1:6443\n",
        )
        config = _load_discovery_config(path)
        assert config.sources == ("ingress-gce", "ingress-nginx")
        assert config.namespace == "prod"
        assert config.kubeconfig == "/etc/kube/config"
        assert config.kube_master == "https://10.0.0.1:6443"

    def test_file_values_win_over_env(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "sources: [ingress-nginx]\nnamespace: prod\n")
        with patch.dict(os.environ, {"SOURCE_NAMESPACE": "dev"}):
            assert _load_discovery_config(path).namespace == "prod"

    def test_missing_keys_keep_env_defaults(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "sources: []\n")
        with patch.dict(os.environ, {"SOURCE_NAMESPACE": "dev"}):
            config = _load_discovery_config(path)
        assert config.sources == ()
        assert config.namespace == "dev"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="SOURCE_DISCOVERY_CONFIG"):
            _load_discovery_config(tmp_path / "nope.yaml")

    @pytest.mark.parametrize("text", ["", "- ingress-nginx\n", "namespace: prod\n"])
    def test_missing_sources_key(self, tmp_path: Path, text: str) -> None:
        with pytest.raises(ValueError, match="top-level 'sources' key"):
            _load_discovery_config(_write(tmp_path, text))

    @pytest.mark.parametrize("text", ["sources: ingress-nginx\n", "sources: [1, 2]\n"])
    def test_invalid_sources_section(self, tmp_path: Path, text: str) -> None:
        with pytest.raises(ValueError, match="invalid 'sources' section"):
            _load_discovery_config(_write(tmp_path, text))

    def test_unknown_source(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="unknown sources: ingress-traefik"):
            _load_discovery_config(_write(tmp_path, "sources: [ingress-nginx, ingress-traefik]\n"))

    def test_non_string_value(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="'namespace' must be a string"):
            _load_discovery_config(_write(tmp_path, "sources: []\nnamespace: 42\n"))

    def test_path_from_env(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "sources: [ingress-nginx]\n")
        with patch.dict(os.environ, {"SOURCE_DISCOVERY_CONFIG": str(path)}):
            assert load_discovery_config().sources == ("ingress-nginx",)

    def test_example_file_is_valid(self) -> None:
        example = Path(__file__).resolve().parent.parent / "sources.example.yaml"
        config = _load_discovery_config(example)
        assert config.sources == ("ingress-nginx", "ingress-gce")

"""At-most-once construction of the shared Kubernetes API client."""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable
from types import TracebackType

import structlog
from kubernetes import client as k8s_client

from source_discovery.clients import new_kube_client
from source_discovery.config import ConnectionParameters

log = structlog.get_logger()


class ProviderState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class SingletonClientProvider:
    """Hands out one shared ApiClient, built on first use.

    The first caller of ``get_client`` runs the factory while holding the lock;
    concurrent callers block on the same lock and then observe the recorded
    result. A failure is recorded and re-raised to every later caller unless
    ``retry_on_failure`` is set, in which case the next call tries again.
    """

    def __init__(
        self,
        params: ConnectionParameters | None = None,
        factory: Callable[[ConnectionParameters], k8s_client.ApiClient] = new_kube_client,
        retry_on_failure: bool = False,
    ) -> None:
        self._params = params or ConnectionParameters()
        self._factory = factory
        self._retry_on_failure = retry_on_failure
        self._lock = threading.Lock()
        self._state = ProviderState.UNINITIALIZED
        self._client: k8s_client.ApiClient | None = None
        self._error: Exception | None = None
        self._error_tb: TracebackType | None = None

    @property
    def state(self) -> ProviderState:
        return self._state

    def get_client(self) -> k8s_client.ApiClient:
        """Return the shared client, constructing it on the first call.

        Raises:
            ClusterConnectionError: (or whatever the factory raised) if construction failed.
        """
        # READY is terminal and _client is set before the state flips.
        if self._state is ProviderState.READY:
            return self._client  # type: ignore[return-value]

        with self._lock:
            if self._state is ProviderState.READY:
                return self._client  # type: ignore[return-value]
            if self._state is ProviderState.FAILED and not self._retry_on_failure:
                # Reset to the original traceback so repeated raises do not grow it.
                raise self._error.with_traceback(self._error_tb)  # type: ignore[union-attr]

            self._state = ProviderState.INITIALIZING
            try:
                client = self._factory(self._params)
            except Exception as exc:
                self._error = exc
                self._error_tb = exc.__traceback__
                self._state = ProviderState.FAILED
                log.error("kube_client_init_failed", error=str(exc))
                raise
            self._client = client
            self._error = None
            self._error_tb = None
            self._state = ProviderState.READY
            return client

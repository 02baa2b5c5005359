"""Request observation for the Kubernetes REST transport.

The wrapper records a request counter and a latency histogram labelled by HTTP
method, response status, and a low-cardinality path label. It returns exactly
what the wrapped call returns and re-raises exactly what it raises.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit

from kubernetes import client as k8s_client
from kubernetes.client.exceptions import ApiException
from opentelemetry import metrics

_meter = metrics.get_meter("source_discovery.clients")
request_counter = _meter.create_counter(
    name="kube.client.requests",
    description="Number of requests sent to the Kubernetes API server",
    unit="1",
)
request_duration_histogram = _meter.create_histogram(
    name="kube.client.request.duration",
    description="Duration of requests sent to the Kubernetes API server",
    unit="s",
)


def last_path_segment(path: str) -> str:
    """Reduce a request path to its final segment, e.g. ``/apis/networking.k8s.io/v1/ingresses`` -> ``ingresses``."""
    return path.split("/")[-1]


def _status_of(result: Any) -> str:
    status = getattr(result, "status", None)
    return str(status) if status is not None else "unknown"


def instrument_request(
    request_fn: Callable[..., Any],
    path_processor: Callable[[str], str] = last_path_segment,
) -> Callable[..., Any]:
    """Decorate a ``request(method, url, ...)`` callable with metric observation."""

    @functools.wraps(request_fn)
    def wrapper(method: str, url: str, *args: Any, **kwargs: Any) -> Any:
        labels = {"method": method, "path": path_processor(urlsplit(url).path)}
        start = time.monotonic()
        try:
            response = request_fn(method, url, *args, **kwargs)
        except ApiException as exc:
            labels["status"] = str(exc.status) if exc.status is not None else "error"
            _record(labels, start)
            raise
        except Exception:
            labels["status"] = "error"
            _record(labels, start)
            raise
        labels["status"] = _status_of(response)
        _record(labels, start)
        return response

    return wrapper


def _record(labels: dict[str, str], start: float) -> None:
    request_counter.add(1, labels)
    request_duration_histogram.record(time.monotonic() - start, labels)


def instrument_api_client(
    api_client: k8s_client.ApiClient,
    path_processor: Callable[[str], str] = last_path_segment,
) -> k8s_client.ApiClient:
    """Wrap the REST transport of an ApiClient in place and return the same client."""
    rest_client = api_client.rest_client
    rest_client.request = instrument_request(rest_client.request, path_processor)
    return api_client

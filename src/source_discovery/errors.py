"""Exception types raised while connecting to a cluster and resolving sources."""

from __future__ import annotations


class SourceDiscoveryError(Exception):
    """Base class for every error raised by this package."""


class ClusterConnectionError(SourceDiscoveryError):
    """Credential resolution, configuration build, or client construction failed."""


class UnknownSourceError(SourceDiscoveryError):
    """A requested source name has no registry entry."""

    def __init__(self, name: str, known: tuple[str, ...] = ()) -> None:
        self.name = name
        msg = f"Unknown source {name!r}."
        if known:
            msg += f" Valid sources: {', '.join(sorted(known))}"
        super().__init__(msg)


class AdapterConstructionError(SourceDiscoveryError):
    """A registered source constructor failed for a valid client and namespace."""

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to build source {name!r}: {cause}")

"""Host fact collection: raw sources and failure-tolerant probes."""

from .sources import HostSources, LocalHostSources

__all__ = ["HostSources", "LocalHostSources"]

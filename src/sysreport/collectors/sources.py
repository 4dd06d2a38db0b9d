"""Raw host reads behind a small interface so probes can run on fixtures."""

import platform
import socket
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence


class HostSources(ABC):
    """Read-only access to the host facts a report is built from.

    Implementations may raise on any call (missing file, unsupported
    platform, permission denied). Callers are expected to absorb failures.
    """

    @abstractmethod
    def read_meminfo(self) -> str:
        """Return the memory-status description (``Key:   value kB`` lines)."""

    @abstractmethod
    def read_cpuinfo(self) -> str:
        """Return the CPU description (``key : value`` lines)."""

    @abstractmethod
    def read_uptime(self) -> str:
        """Return the uptime source (``<seconds> <idle seconds>``)."""

    @abstractmethod
    def loadavg(self) -> Sequence[float]:
        """Return the 1/5/15 minute load averages."""

    @abstractmethod
    def disk_usage(self, path: Path) -> tuple[int, int]:
        """Return ``(total, free)`` bytes for the filesystem holding *path*."""

    @abstractmethod
    def uname(self) -> tuple[str, str, str]:
        """Return ``(kernel_name, kernel_release, architecture)``."""

    @abstractmethod
    def hostname(self) -> str:
        """Return the host name."""

    @abstractmethod
    def runtime_version(self) -> str:
        """Return the version of the running interpreter."""

    @abstractmethod
    def read_file(self, path: Path) -> str:
        """Return the text content of an arbitrary file."""


class LocalHostSources(HostSources):
    """Sources backed by the local machine.

    Args:
        proc_root: Directory holding ``meminfo``, ``cpuinfo`` and ``uptime``.
            Defaults to ``/proc``.
    """

    def __init__(self, proc_root: Path | None = None) -> None:
        self.proc_root = Path(proc_root) if proc_root else Path("/proc")

    def read_meminfo(self) -> str:
        return (self.proc_root / "meminfo").read_text()

    def read_cpuinfo(self) -> str:
        return (self.proc_root / "cpuinfo").read_text()

    def read_uptime(self) -> str:
        return (self.proc_root / "uptime").read_text()

    def loadavg(self) -> Sequence[float]:
        import psutil

        return psutil.getloadavg()

    def disk_usage(self, path: Path) -> tuple[int, int]:
        import psutil

        usage = psutil.disk_usage(str(path))
        return usage.total, usage.free

    def uname(self) -> tuple[str, str, str]:
        info = platform.uname()
        return info.system, info.release, info.machine

    def hostname(self) -> str:
        return socket.gethostname()

    def runtime_version(self) -> str:
        return platform.python_version()

    def read_file(self, path: Path) -> str:
        return Path(path).read_text()

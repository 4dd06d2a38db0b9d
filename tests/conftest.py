"""Shared fixtures: an in-memory HostSources with fixed host facts."""

from pathlib import Path

import pytest

from sysreport.collectors.sources import HostSources

MEMINFO = """\
MemTotal:       16384000 kB
MemFree:         2048000 kB
MemAvailable:    8192000 kB
Buffers:          512000 kB
"""

CPUINFO = """\
processor\t: 0
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
processor\t: 1
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
processor\t: 2
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
processor\t: 3
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
"""


class StaticSources(HostSources):
    """HostSources returning fixed values; ``None`` makes a read fail."""

    def __init__(self, **overrides):
        self.values = {
            "meminfo": MEMINFO,
            "cpuinfo": CPUINFO,
            "uptime": "90061.5 12345.6\n",
            "loadavg": (0.5, 0.4, 0.3),
            "disk": (100 * 1024**3, 25 * 1024**3),
            "uname": ("Linux", "6.1.0-18-amd64", "x86_64"),
            "hostname": "web01",
            "runtime": "3.12.1",
            "files": {},
        }
        self.values.update(overrides)
        self.calls: list[str] = []

    def _get(self, key):
        self.calls.append(key)
        value = self.values[key]
        if value is None:
            raise OSError(f"{key} unavailable")
        return value

    def read_meminfo(self):
        return self._get("meminfo")

    def read_cpuinfo(self):
        return self._get("cpuinfo")

    def read_uptime(self):
        return self._get("uptime")

    def loadavg(self):
        return self._get("loadavg")

    def disk_usage(self, path):
        return self._get("disk")

    def uname(self):
        return self._get("uname")

    def hostname(self):
        return self._get("hostname")

    def runtime_version(self):
        return self._get("runtime")

    def read_file(self, path):
        files = self._get("files")
        try:
            return files[str(Path(path))]
        except KeyError:
            raise FileNotFoundError(path) from None


@pytest.fixture
def sources():
    return StaticSources()


@pytest.fixture
def failing_sources():
    return StaticSources(
        meminfo=None,
        cpuinfo=None,
        uptime=None,
        loadavg=None,
        disk=None,
        uname=None,
        hostname=None,
        runtime=None,
    )


@pytest.fixture
def make_sources():
    """Factory for StaticSources with selected values overridden."""
    return StaticSources

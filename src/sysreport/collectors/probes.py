"""Individual host probes with fallbacks.

Every probe reads through a :class:`HostSources` and degrades to ``None``
or a documented default instead of raising.
"""

import logging
import math
import re
from pathlib import Path
from typing import Optional

from sysreport.report.models import CpuInfo, DiskUsage, MemoryInfo, OsInfo

from .sources import HostSources

logger = logging.getLogger(__name__)

BYTE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]
NOT_AVAILABLE = "n/a"

_SERVER_TOKEN_RE = re.compile(r"^([A-Za-z0-9._-]+)")
_MEMINFO_RE = re.compile(r"^(MemTotal|MemAvailable|MemFree):\s+(\d+)\s+kB", re.IGNORECASE)
_HASH_RE = re.compile(r"^[0-9a-f]{7,40}$", re.IGNORECASE)


def format_bytes(num_bytes: Optional[int]) -> str:
    """Format a byte count with a binary unit, e.g. ``1536 -> "1.5 KB"``."""
    if num_bytes is None:
        return NOT_AVAILABLE
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.1f} {BYTE_UNITS[unit]}"


def format_uptime(seconds: int) -> str:
    """Format whole seconds as ``"{d}d {h}h {m}m"``.

    Days and hours are omitted when zero; minutes are always shown.
    """
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")
    return " ".join(parts)


def format_load(load: Optional[tuple[float, float, float]]) -> str:
    if load is None:
        return NOT_AVAILABLE
    return ", ".join(f"{value:.2f}" for value in load)


def os_info(sources: HostSources) -> OsInfo:
    try:
        kernel_name, release, machine = sources.uname()
    except Exception as e:
        logger.debug(f"uname probe failed: {e}")
        return OsInfo("unknown", "unknown", "unknown")
    return OsInfo(kernel_name or "unknown", release or "unknown", machine or "unknown")


def runtime_version(sources: HostSources) -> str:
    try:
        return f"Python {sources.runtime_version()}"
    except Exception as e:
        logger.debug(f"runtime version probe failed: {e}")
        return "Python unknown"


def server_software_token(banner: Optional[str]) -> str:
    """Keep only the leading product token of a server banner.

    ``"nginx/1.24.0 (Ubuntu)"`` becomes ``"nginx"``.
    """
    match = _SERVER_TOKEN_RE.match(banner or "")
    if match:
        return match.group(1)
    return "unknown"


def hostname(sources: HostSources) -> Optional[str]:
    try:
        return sources.hostname() or None
    except Exception as e:
        logger.debug(f"hostname probe failed: {e}")
        return None


def disk_usage(sources: HostSources, path: Path = Path("/")) -> Optional[DiskUsage]:
    """Query total and free space of the filesystem holding *path*."""
    try:
        total, free = sources.disk_usage(path)
    except Exception as e:
        logger.debug(f"disk usage probe failed for {path}: {e}")
        return None
    used = total - free
    pct = used / total * 100 if total > 0 else None
    return DiskUsage(
        path=str(path),
        total_bytes=total,
        free_bytes=free,
        used_bytes=used,
        used_percent=pct,
    )


def memory_info(sources: HostSources) -> MemoryInfo:
    """Parse MemTotal/MemAvailable/MemFree (kB) into bytes."""
    try:
        content = sources.read_meminfo()
    except Exception as e:
        logger.debug(f"meminfo probe failed: {e}")
        return MemoryInfo()

    values: dict[str, int] = {}
    for line in content.splitlines():
        match = _MEMINFO_RE.match(line)
        if match:
            values[match.group(1).lower()] = int(match.group(2)) * 1024

    return MemoryInfo(
        total_bytes=values.get("memtotal"),
        available_bytes=values.get("memavailable"),
        free_bytes=values.get("memfree"),
    )


def cpu_model(sources: HostSources) -> Optional[str]:
    try:
        content = sources.read_cpuinfo()
    except Exception as e:
        logger.debug(f"cpuinfo probe failed: {e}")
        return None

    for line in content.splitlines():
        if line.lower().startswith("model name") and ":" in line:
            return line.split(":", 1)[1].strip()
    return None


def cpu_cores(sources: HostSources) -> int:
    """Count ``processor`` entries; never less than 1."""
    try:
        content = sources.read_cpuinfo()
    except Exception as e:
        logger.debug(f"cpuinfo probe failed: {e}")
        return 1

    count = sum(1 for line in content.splitlines() if line.lower().startswith("processor"))
    return count if count > 0 else 1


def cpu_info(sources: HostSources) -> CpuInfo:
    return CpuInfo(model=cpu_model(sources), core_count=cpu_cores(sources))


def uptime_pretty(sources: HostSources) -> Optional[str]:
    try:
        raw = sources.read_uptime().strip()
        fields = raw.split()
        if len(fields) < 2:
            return None
        seconds = float(fields[0])
        if not math.isfinite(seconds) or seconds < 0:
            return None
    except Exception as e:
        logger.debug(f"uptime probe failed: {e}")
        return None
    return format_uptime(int(math.floor(seconds)))


def load_average(sources: HostSources) -> Optional[tuple[float, float, float]]:
    try:
        values = tuple(float(v) for v in sources.loadavg())
    except Exception as e:
        logger.debug(f"load average probe failed: {e}")
        return None
    if len(values) != 3:
        return None
    return values


def vcs_revision(sources: HostSources, root: Path) -> Optional[str]:
    """Return the short commit hash of a git checkout at *root*.

    Reads ``.git/HEAD`` and, for symbolic refs, the loose ref file or the
    matching ``packed-refs`` entry. No git commands are run.
    """
    git_dir = Path(root) / ".git"
    try:
        head = sources.read_file(git_dir / "HEAD").strip()
    except Exception as e:
        logger.debug(f"no readable git HEAD under {root}: {e}")
        return None

    if head.startswith("ref:"):
        ref = head[4:].strip()
        commit = _resolve_ref(sources, git_dir, ref)
    else:
        commit = head

    if commit and _HASH_RE.match(commit):
        return commit[:7].lower()
    return None


def _resolve_ref(sources: HostSources, git_dir: Path, ref: str) -> Optional[str]:
    if not ref or ref.startswith("/") or ".." in Path(ref).parts:
        logger.debug(f"rejecting suspicious git ref {ref!r}")
        return None

    try:
        return sources.read_file(git_dir / ref).strip()
    except Exception as e:
        logger.debug(f"loose ref {ref} unreadable: {e}")

    try:
        packed = sources.read_file(git_dir / "packed-refs")
    except Exception as e:
        logger.debug(f"packed-refs unreadable: {e}")
        return None

    for line in packed.splitlines():
        if line.startswith(("#", "^")):
            continue
        parts = line.split()
        if len(parts) == 2 and parts[1] == ref:
            return parts[0]
    return None

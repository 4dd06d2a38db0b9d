"""Immutable system report snapshot."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional

from .classifier import ViewerClass


@dataclass(frozen=True)
class OsInfo:
    kernel_name: str
    kernel_release: str
    architecture: str

    @property
    def summary(self) -> str:
        return f"{self.kernel_name} {self.kernel_release} ({self.architecture})"


@dataclass(frozen=True)
class CpuInfo:
    model: Optional[str]
    core_count: int = 1


@dataclass(frozen=True)
class MemoryInfo:
    total_bytes: Optional[int] = None
    available_bytes: Optional[int] = None
    free_bytes: Optional[int] = None


@dataclass(frozen=True)
class DiskUsage:
    """Usage of one filesystem. Either fully known or absent from the report."""

    path: str
    total_bytes: int
    free_bytes: int
    used_bytes: int
    used_percent: Optional[float]


@dataclass(frozen=True)
class AdvancedRequestInfo:
    """Request metadata shown only to private viewers."""

    server_name: Optional[str]
    document_root: Optional[str]
    script_path: Optional[str]
    https_enabled: bool


@dataclass(frozen=True)
class SystemReport:
    """Snapshot of host facts built once per request.

    ``advanced`` is only ever populated for private viewers; constructing a
    public report with it set raises ``ValueError``.
    """

    generated_at: datetime
    timezone: str
    viewer_address: str
    viewer_class: ViewerClass
    os: OsInfo
    runtime_version: str
    server_software: str
    cpu: CpuInfo
    memory: MemoryInfo
    hostname: Optional[str] = None
    disk: Optional[DiskUsage] = None
    uptime: Optional[str] = None
    load_average: Optional[tuple[float, float, float]] = None
    vcs_revision: Optional[str] = None
    advanced: Optional[AdvancedRequestInfo] = None

    def __post_init__(self) -> None:
        if self.viewer_class is ViewerClass.PUBLIC and self.advanced is not None:
            raise ValueError("advanced request info must not be attached to a public report")

    @property
    def is_private(self) -> bool:
        return self.viewer_class is ViewerClass.PRIVATE

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        data = asdict(self)
        data["generated_at"] = self.generated_at.isoformat()
        data["viewer_class"] = self.viewer_class.value
        data["os"]["summary"] = self.os.summary
        if self.load_average is not None:
            data["load_average"] = list(self.load_average)
        return data

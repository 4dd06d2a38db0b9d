"""Assemble a SystemReport from a request context and host probes."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from sysreport.collectors import probes
from sysreport.collectors.sources import HostSources, LocalHostSources
from sysreport.config.models import AppConfig

from .classifier import ViewerClass, classify, viewer_address
from .models import AdvancedRequestInfo, SystemReport


@dataclass(frozen=True)
class RequestContext:
    """Request metadata supplied by the surrounding HTTP server.

    All values are untrusted and must be escaped before display.
    """

    connection_address: str = ""
    forwarded_for: Optional[str] = None
    server_software: Optional[str] = None
    server_name: Optional[str] = None
    document_root: Optional[str] = None
    script_path: Optional[str] = None
    https: Optional[str] = None

    @property
    def https_enabled(self) -> bool:
        return self.https is not None and self.https != "off"


def _now(config: AppConfig) -> datetime:
    if config.timezone:
        return datetime.now(ZoneInfo(config.timezone))
    return datetime.now().astimezone()


def _timezone_label(moment: datetime) -> str:
    tz = moment.tzinfo
    if isinstance(tz, ZoneInfo):
        return tz.key
    return moment.tzname() or "UTC"


def build_report(
    context: RequestContext,
    sources: Optional[HostSources] = None,
    config: Optional[AppConfig] = None,
    now: Optional[datetime] = None,
) -> SystemReport:
    """Build a report for one request.

    Args:
        context: Request metadata.
        sources: Host reads. Defaults to the local machine.
        config: Application config. Defaults to ``AppConfig()``.
        now: Fixed timestamp, mainly for tests.

    Returns:
        SystemReport with advanced request info only for private viewers.
    """
    config = config or AppConfig()
    sources = sources or LocalHostSources(config.proc_root)

    forwarded_for = context.forwarded_for if config.trust_forwarded_for else None
    viewer_class = classify(forwarded_for, context.connection_address)

    advanced = None
    if viewer_class is ViewerClass.PRIVATE:
        advanced = AdvancedRequestInfo(
            server_name=context.server_name,
            document_root=context.document_root,
            script_path=context.script_path,
            https_enabled=context.https_enabled,
        )

    moment = now or _now(config)
    if moment.tzinfo is None:
        # Naive timestamps are taken as local time.
        moment = moment.astimezone()

    return SystemReport(
        generated_at=moment,
        timezone=_timezone_label(moment),
        viewer_address=viewer_address(forwarded_for, context.connection_address),
        viewer_class=viewer_class,
        hostname=probes.hostname(sources),
        os=probes.os_info(sources),
        runtime_version=probes.runtime_version(sources),
        server_software=probes.server_software_token(context.server_software),
        cpu=probes.cpu_info(sources),
        memory=probes.memory_info(sources),
        disk=probes.disk_usage(sources, Path(config.disk_path)),
        uptime=probes.uptime_pretty(sources),
        load_average=probes.load_average(sources),
        vcs_revision=probes.vcs_revision(sources, Path(config.deploy_root)),
        advanced=advanced,
    )

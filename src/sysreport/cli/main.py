"""sysreport CLI - main entry point."""

import json
import logging
import logging.handlers
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sysreport import __version__
from sysreport.collectors.probes import NOT_AVAILABLE, format_bytes, format_load
from sysreport.config.loader import ConfigError, load_config
from sysreport.config.models import AppConfig

console = Console()
logger = logging.getLogger(__name__)

# Log rotation: 5 MB per file, keep 3 backups
_LOG_MAX_BYTES = 5 * 1024 * 1024
_LOG_BACKUP_COUNT = 3


def _setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure logging with a console handler and optional rotating file."""
    log_format = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=_LOG_MAX_BYTES,
            backupCount=_LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(logging.Formatter(log_format))
        root_logger.addHandler(file_handler)


def _load(config_path: str | None) -> AppConfig:
    try:
        return load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="SYSREPORT_CONFIG",
    help="YAML configuration file",
)


@click.group()
@click.version_option(version=__version__, prog_name="sysreport")
def cli():
    """sysreport - privacy-gated server information page."""


@cli.command()
@config_option
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port for the web page")
@click.option("--debug", is_flag=True, help="Enable debug mode")
def serve(config_path, host, port, debug):
    """Serve the system information page over HTTP."""
    config = _load(config_path)
    _setup_logging(config.log_level, config.log_file)

    from sysreport.web.app import create_app

    host = host or config.host
    port = port or config.port

    console.print("[bold]sysreport[/bold]")
    console.print(f"  URL: http://{host}:{port}")
    console.print(f"  Disk: {config.disk_path}")
    console.print()

    app = create_app(config)
    app.run(host=host, port=port, debug=debug or config.debug)


@cli.command()
@config_option
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--public", is_flag=True, help="Preview the report a public viewer sees")
def show(config_path, as_json, public):
    """Print the report for this machine."""
    config = _load(config_path)

    from sysreport.report.builder import RequestContext, build_report

    context = RequestContext(
        connection_address="203.0.113.1" if public else "127.0.0.1",
        server_software="sysreport-cli",
    )
    report = build_report(context, config=config)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    table = Table(title="Server System Information")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    disk = NOT_AVAILABLE
    if report.disk:
        disk = f"{format_bytes(report.disk.used_bytes)} used / {format_bytes(report.disk.total_bytes)}"
        if report.disk.used_percent is not None:
            disk += f" ({report.disk.used_percent:.1f}%)"

    rows = [
        ("Generated", f"{report.generated_at:%Y-%m-%d %H:%M:%S} ({report.timezone})"),
        ("Viewer", f"{report.viewer_address} ({report.viewer_class.value})"),
        ("Hostname", report.hostname or NOT_AVAILABLE),
        ("OS", report.os.summary),
        ("Runtime", report.runtime_version),
        ("Uptime", report.uptime or NOT_AVAILABLE),
        ("Load Avg (1/5/15m)", format_load(report.load_average)),
        ("Disk", disk),
        ("CPU Model", report.cpu.model or NOT_AVAILABLE),
        ("CPU Cores", str(report.cpu.core_count)),
        (
            "Memory",
            f"{format_bytes(report.memory.available_bytes)} available / "
            f"{format_bytes(report.memory.total_bytes)} total",
        ),
        ("Git", report.vcs_revision or NOT_AVAILABLE),
    ]
    for name, value in rows:
        # Host strings may contain rich markup characters.
        table.add_row(name, Text(value))

    console.print(table)


if __name__ == "__main__":
    cli()

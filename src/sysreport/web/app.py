"""Flask application serving the system information page."""

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, current_app, jsonify, render_template, request

from sysreport import __version__
from sysreport.collectors.probes import NOT_AVAILABLE, format_bytes, format_load
from sysreport.collectors.sources import HostSources, LocalHostSources
from sysreport.config.models import AppConfig
from sysreport.report.builder import build_report
from sysreport.report.models import SystemReport

from .context import request_context_from_flask

logger = logging.getLogger(__name__)

ROBOTS_DIRECTIVE = "noindex, nofollow"


def create_app(
    config: Optional[AppConfig] = None,
    sources: Optional[HostSources] = None,
) -> Flask:
    """Create the sysreport Flask application.

    Args:
        config: Application config. Defaults to ``AppConfig()``.
        sources: Host reads used by every request. Defaults to the local
            machine rooted at ``config.proc_root``.
    """
    config = config or AppConfig()

    app = Flask(
        __name__,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    app.config["SYSREPORT"] = config
    app.config["SYSREPORT_SOURCES"] = sources or LocalHostSources(config.proc_root)

    app.add_template_filter(format_bytes, "bytes")
    app.add_template_filter(format_load, "loadavg")
    app.add_template_filter(lambda value: NOT_AVAILABLE if value is None else value, "na")

    def _current_report() -> SystemReport:
        cfg: AppConfig = current_app.config["SYSREPORT"]
        context = request_context_from_flask(request, cfg)
        return build_report(
            context,
            sources=current_app.config["SYSREPORT_SOURCES"],
            config=cfg,
        )

    @app.route("/")
    def index():
        report = _current_report()
        return render_template("report.html", report=report, version=__version__)

    @app.route("/api/v1/report")
    def api_report():
        return jsonify(_current_report().to_dict())

    @app.route("/api/v1/health")
    def health():
        return jsonify({"status": "ok", "version": __version__})

    @app.after_request
    def add_privacy_headers(response):
        response.headers["X-Robots-Tag"] = ROBOTS_DIRECTIVE
        response.headers["Cache-Control"] = "no-store"
        return response

    logger.info("sysreport web app created")
    return app

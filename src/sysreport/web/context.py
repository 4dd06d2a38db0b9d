"""Map a Flask request onto a RequestContext."""

from sysreport.config.models import AppConfig
from sysreport.report.builder import RequestContext


def request_context_from_flask(request, config: AppConfig) -> RequestContext:
    """Extract the request metadata the report builder consumes.

    ``DOCUMENT_ROOT`` and ``HTTPS`` are read from the WSGI environ when the
    front server provides them; otherwise the configured document root and
    the request scheme are used.
    """
    environ = request.environ

    document_root = environ.get("DOCUMENT_ROOT") or None
    if document_root is None and config.document_root is not None:
        document_root = str(config.document_root)

    https = environ.get("HTTPS")
    if https is None and request.is_secure:
        https = "on"

    return RequestContext(
        connection_address=request.remote_addr or "",
        forwarded_for=request.headers.get("X-Forwarded-For"),
        server_software=environ.get("SERVER_SOFTWARE"),
        server_name=environ.get("SERVER_NAME"),
        document_root=document_root,
        script_path=(request.script_root + request.path) or None,
        https=https,
    )

"""Tests for the Flask report page."""

import pytest

from sysreport.config.models import AppConfig
from sysreport.web.app import create_app

PUBLIC = {"REMOTE_ADDR": "8.8.8.8"}
PRIVATE = {"REMOTE_ADDR": "192.168.1.20"}
EXPOSED_CONTEXT = {
    "SERVER_NAME": "internal-host.lan",
    "DOCUMENT_ROOT": "/srv/secret-docroot",
    "SERVER_SOFTWARE": "nginx/1.24.0 (Ubuntu)",
    "HTTPS": "on",
}


@pytest.fixture
def app(sources, tmp_path):
    flask_app = create_app(AppConfig(deploy_root=tmp_path), sources=sources)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


class TestIndexPage:
    def test_renders_host_facts(self, client):
        response = client.get("/", environ_overrides=PRIVATE)
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert "Server System Information" in body
        assert "web01" in body
        assert "Linux 6.1.0-18-amd64 (x86_64)" in body
        assert "1d 1h 1m" in body
        assert "0.50, 0.40, 0.30" in body
        assert "75.0 GB used / 100.0 GB" in body
        assert "(75.0%)" in body
        assert "7.8 GB available / 15.6 GB total" in body
        assert "CPU Cores</td><td>4" in body

    def test_robots_meta_and_header(self, client):
        response = client.get("/", environ_overrides=PUBLIC)
        assert '<meta name="robots" content="noindex, nofollow">' in response.get_data(as_text=True)
        assert response.headers["X-Robots-Tag"] == "noindex, nofollow"
        assert response.headers["Cache-Control"] == "no-store"

    def test_server_banner_reduced_to_product(self, client):
        body = client.get("/", environ_overrides={**PUBLIC, **EXPOSED_CONTEXT}).get_data(as_text=True)
        assert "nginx" in body
        assert "1.24.0" not in body

    def test_private_viewer_sees_advanced_section(self, client):
        response = client.get("/", environ_overrides={**PRIVATE, **EXPOSED_CONTEXT})
        body = response.get_data(as_text=True)
        assert "LAN viewer" in body
        assert "Request (Advanced)" in body
        assert "/srv/secret-docroot" in body
        assert "internal-host.lan" in body

    def test_public_viewer_never_sees_advanced_section(self, client):
        response = client.get("/", environ_overrides={**PUBLIC, **EXPOSED_CONTEXT})
        body = response.get_data(as_text=True)
        assert "Public viewer (limited)" in body
        assert "Request (Advanced)" not in body
        assert "Document Root" not in body
        assert "/srv/secret-docroot" not in body
        assert "internal-host.lan" not in body
        assert "HTTPS" not in body

    def test_spoofed_forwarded_for_from_public_peer(self, sources, tmp_path):
        app = create_app(AppConfig(deploy_root=tmp_path, trust_forwarded_for=False), sources=sources)
        response = app.test_client().get(
            "/",
            headers={"X-Forwarded-For": "10.0.0.1"},
            environ_overrides={**PUBLIC, **EXPOSED_CONTEXT},
        )
        assert "/srv/secret-docroot" not in response.get_data(as_text=True)

    def test_missing_facts_render_na(self, failing_sources, tmp_path):
        app = create_app(AppConfig(deploy_root=tmp_path), sources=failing_sources)
        response = app.test_client().get("/", environ_overrides=PUBLIC)
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert "n/a available / n/a total" in body
        assert "CPU Cores</td><td>1" in body


class TestRequestContext:
    def test_configured_document_root_and_secure_scheme(self, sources, tmp_path):
        config = AppConfig(deploy_root=tmp_path, document_root="/cfg/docroot")
        client = create_app(config, sources=sources).test_client()
        response = client.get(
            "/api/v1/report",
            base_url="https://intranet.lan",
            environ_overrides={"REMOTE_ADDR": "10.0.0.2"},
        )
        advanced = response.get_json()["advanced"]
        assert advanced["document_root"] == "/cfg/docroot"
        assert advanced["https_enabled"] is True

    def test_environ_document_root_wins_over_config(self, sources, tmp_path):
        config = AppConfig(deploy_root=tmp_path, document_root="/cfg/docroot")
        client = create_app(config, sources=sources).test_client()
        response = client.get("/api/v1/report", environ_overrides={**PRIVATE, **EXPOSED_CONTEXT})
        assert response.get_json()["advanced"]["document_root"] == "/srv/secret-docroot"

    def test_plain_http_without_indicator_is_off(self, client):
        response = client.get("/api/v1/report", environ_overrides=PRIVATE)
        assert response.get_json()["advanced"]["https_enabled"] is False

    def test_empty_document_root_renders_na(self, client):
        body = client.get("/", environ_overrides={**PRIVATE, "DOCUMENT_ROOT": ""}).get_data(as_text=True)
        assert "<td>Document Root</td><td>n/a</td>" in body

    def test_empty_document_root_uses_config(self, sources, tmp_path):
        config = AppConfig(deploy_root=tmp_path, document_root="/cfg/docroot")
        client = create_app(config, sources=sources).test_client()
        response = client.get("/api/v1/report", environ_overrides={**PRIVATE, "DOCUMENT_ROOT": ""})
        assert response.get_json()["advanced"]["document_root"] == "/cfg/docroot"


class TestEscaping:
    def test_reflected_forwarded_for_is_escaped(self, client):
        response = client.get(
            "/",
            headers={"X-Forwarded-For": "<script>alert(1)</script>"},
            environ_overrides=PUBLIC,
        )
        body = response.get_data(as_text=True)
        assert "<script>alert(1)</script>" not in body
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in body

    def test_private_context_values_are_escaped(self, client):
        hostile = {**PRIVATE, "DOCUMENT_ROOT": '"><script>alert(1)</script>'}
        body = client.get("/", environ_overrides=hostile).get_data(as_text=True)
        assert "<script>alert(1)</script>" not in body
        assert "&#34;&gt;&lt;script&gt;" in body

    def test_hostile_server_banner(self, client):
        hostile = {**PUBLIC, "SERVER_SOFTWARE": "<script>x</script>"}
        body = client.get("/", environ_overrides=hostile).get_data(as_text=True)
        assert "<script>x</script>" not in body
        assert "unknown" in body


class TestApi:
    def test_report_json_private(self, client):
        response = client.get("/api/v1/report", environ_overrides={**PRIVATE, **EXPOSED_CONTEXT})
        assert response.status_code == 200
        data = response.get_json()
        assert data["viewer_class"] == "private"
        assert data["cpu"]["core_count"] == 4
        assert data["advanced"]["server_name"] == "internal-host.lan"
        assert data["advanced"]["https_enabled"] is True

    def test_report_json_public_is_redacted(self, client):
        response = client.get("/api/v1/report", environ_overrides={**PUBLIC, **EXPOSED_CONTEXT})
        data = response.get_json()
        assert data["viewer_class"] == "public"
        assert data["advanced"] is None
        assert "/srv/secret-docroot" not in response.get_data(as_text=True)
        assert response.headers["X-Robots-Tag"] == "noindex, nofollow"

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"

"""Tests for the HTTP exporter against a real local HTTP server."""

import json
import socket

import pytest

from hostpulse.collector.base import SystemSnapshot
from hostpulse.config import EndpointConfig
from hostpulse.errors import TransportError
from hostpulse.exporter.http import HttpExporter

SNAPSHOT = SystemSnapshot(cpu_percent=12.5, ram_used_gb=3.2, ram_used_percent=40.0, temperature_c=55.3)


def _exporter(url, secret="s3cret"):
    return HttpExporter(EndpointConfig(url=url, secret=secret, timeout_seconds=5.0))


def _closed_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_success_posts_json_with_raw_secret(collector_server):
    exporter = _exporter(collector_server.url)
    try:
        exporter.export(SNAPSHOT)
    finally:
        exporter.shutdown()

    assert len(collector_server.requests) == 1
    request = collector_server.requests[0]
    assert request["path"] == "/api/agent"
    assert request["headers"]["Content-Type"] == "application/json"
    assert request["headers"]["Authorization"] == "s3cret"
    assert json.loads(request["body"].decode("utf-8")) == {
        "cpu_percent": 12.5,
        "ram_used_gb": 3.2,
        "ram_used_percent": 40.0,
        "temperature_c": 55.3,
    }


def test_trailing_slash_in_url(collector_server):
    exporter = _exporter(collector_server.url + "/")
    assert exporter.url == collector_server.url + "/api/agent"
    exporter.export(SNAPSHOT)
    exporter.shutdown()
    assert collector_server.requests[0]["path"] == "/api/agent"


def test_server_error_reports_status_and_body(collector_server):
    collector_server.status = 500
    collector_server.body = b"server error"
    exporter = _exporter(collector_server.url)
    with pytest.raises(TransportError) as info:
        exporter.export(SNAPSHOT)
    exporter.shutdown()

    assert info.value.status_code == 500
    assert info.value.body == "server error"
    assert "500" in str(info.value)
    assert "server error" in str(info.value)


def test_non_200_success_code_is_failure(collector_server):
    collector_server.status = 201
    collector_server.body = b"created"
    exporter = _exporter(collector_server.url)
    with pytest.raises(TransportError) as info:
        exporter.export(SNAPSHOT)
    exporter.shutdown()
    assert info.value.status_code == 201


def test_connection_refused():
    exporter = _exporter(f"http://127.0.0.1:{_closed_port()}")
    with pytest.raises(TransportError, match="API error") as info:
        exporter.export(SNAPSHOT)
    assert info.value.status_code is None
    exporter.shutdown()


def test_non_finite_value_is_serialization_failure():
    exporter = _exporter("http://127.0.0.1:9")
    with pytest.raises(TransportError, match="JSON error"):
        exporter.export(SystemSnapshot(float("nan"), 1.0, 1.0, 1.0))
    exporter.shutdown()


def test_unencodable_secret_is_transport_failure(collector_server):
    exporter = _exporter(collector_server.url, secret="ключ")
    with pytest.raises(TransportError):
        exporter.export(SNAPSHOT)
    exporter.shutdown()

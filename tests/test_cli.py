"""Tests for the command line entry point."""

import json

import pytest
import yaml

from hostpulse import __version__
from hostpulse.cli import main


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("API_URL", "API_SECRET", "HOSTPULSE_API_URL", "HOSTPULSE_API_SECRET"):
        monkeypatch.delenv(key, raising=False)


def _config(tmp_path, **endpoint):
    path = tmp_path / "hostpulse.yaml"
    path.write_text(yaml.dump({
        "endpoint": endpoint,
        "sampling": {"cpu_window_seconds": 0.1},
        "temperature": {"source": "none"},
    }))
    return str(path)


def _exit_code(argv):
    with pytest.raises(SystemExit) as info:
        main(argv)
    return info.value.code


def test_version(capsys):
    assert _exit_code(["version"]) == 0
    assert capsys.readouterr().out.strip() == f"hostpulse {__version__}"


def test_no_command_prints_help(capsys):
    assert _exit_code([]) == 1
    assert "usage" in capsys.readouterr().out


def test_run_without_endpoint_is_fatal():
    assert _exit_code(["run", "--once"]) == 1


def test_sample_prints_snapshot(tmp_path, capsys):
    path = _config(tmp_path)
    assert _exit_code(["-c", path, "sample"]) == 0
    record = json.loads(capsys.readouterr().out)
    assert set(record) == {"cpu_percent", "ram_used_gb", "ram_used_percent", "temperature_c", "temperature_available"}
    assert record["temperature_c"] == 0
    assert record["temperature_available"] is False


def test_run_once_sends_to_collector(tmp_path, collector_server):
    path = _config(tmp_path, url=collector_server.url, secret="s3cret")
    assert _exit_code(["-c", path, "run", "--once"]) == 0
    assert len(collector_server.requests) == 1
    assert collector_server.requests[0]["headers"]["Authorization"] == "s3cret"


def test_run_once_reports_send_failure(tmp_path, collector_server):
    collector_server.status = 500
    path = _config(tmp_path, url=collector_server.url, secret="s3cret")
    assert _exit_code(["-c", path, "run", "--once"]) == 2


def test_secret_from_environment(tmp_path, monkeypatch, collector_server):
    path = _config(tmp_path, url=collector_server.url)
    monkeypatch.setenv("API_SECRET", "from-env")
    assert _exit_code(["-c", path, "run", "--once"]) == 0
    assert collector_server.requests[0]["headers"]["Authorization"] == "from-env"

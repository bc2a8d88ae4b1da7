"""Tests for the retryhttp CLI."""

import json

import pytest
import requests
from click.testing import CliRunner

from retryhttp import cli
from retryhttp.client import RetryHttpClient

from .helpers import URL, StubAdapter


@pytest.fixture
def stub_client(monkeypatch):
    """Route CLI requests to a StubAdapter instead of the network."""
    holder = {}

    class StubbedClient:
        @staticmethod
        def from_config(config, request_timeout=30.0):
            return RetryHttpClient.from_config(
                config, inner=holder["inner"], request_timeout=request_timeout
            )

    monkeypatch.setattr(cli, "RetryHttpClient", StubbedClient)

    def install(*outcomes):
        holder["inner"] = StubAdapter(*outcomes)
        return holder["inner"]

    return install


def test_success_reports_retries(stub_client, tmp_path):
    inner = stub_client(503, 200)
    config = tmp_path / "retry.yaml"
    config.write_text("retry:\n  delay: none\n", encoding="utf-8")

    result = CliRunner().invoke(cli.main, [URL, "--config", str(config)])

    assert result.exit_code == 0, result.output
    output = json.loads(result.output)
    assert output["success"] is True
    assert output["data"]["status"] == 200
    assert output["data"]["attempts"] == 2
    assert output["data"]["retries"][0]["status"] == 503
    assert inner.calls == 2


def test_error_status_exits_nonzero(stub_client, tmp_path):
    stub_client(500)
    config = tmp_path / "retry.yaml"
    config.write_text("delay: none\n", encoding="utf-8")

    result = CliRunner().invoke(cli.main, [URL, "-c", str(config), "--retries", "1"])

    assert result.exit_code == 1
    output = json.loads(result.output)
    assert output["success"] is False
    assert output["data"]["attempts"] == 2


def test_transport_error_is_reported(stub_client, tmp_path):
    stub_client(requests.exceptions.InvalidURL("bad url"))
    config = tmp_path / "retry.yaml"
    config.write_text("delay: none\n", encoding="utf-8")

    result = CliRunner().invoke(cli.main, [URL, "-c", str(config), "-X", "post", "-d", "hi"])

    assert result.exit_code == 1
    output = json.loads(result.output)
    assert output["message"].startswith("Request failed")


def test_invalid_config_is_reported(tmp_path):
    config = tmp_path / "retry.yaml"
    config.write_text("delay: sometimes\n", encoding="utf-8")

    result = CliRunner().invoke(cli.main, [URL, "--config", str(config)])

    assert result.exit_code == 1
    output = json.loads(result.output)
    assert output["message"].startswith("Failed to load config")


def test_negative_retries_rejected():
    result = CliRunner().invoke(cli.main, [URL, "--retries=-2"])

    assert result.exit_code == 1
    assert "max_retries" in json.loads(result.output)["message"]

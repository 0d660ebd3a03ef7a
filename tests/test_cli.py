"""Tests for the command line interface."""

import json

from typer.testing import CliRunner

from oneshot import __version__
from oneshot.cli import app, parse_cookies, parse_headers

runner = CliRunner()


class TestParsers:
    def test_parse_headers(self):
        """Headers keep order and trim whitespace."""
        assert parse_headers(["X-B: 2", "X-A:1"]) == {"X-B": "2", "X-A": "1"}

    def test_parse_cookies(self):
        """Cookie values may contain '='."""
        assert parse_cookies(["a=1", "token=x=y"]) == {"a": "1", "token": "x=y"}


class TestRequestCommand:
    def test_prints_body(self, httpx_mock):
        """The decoded body is written to stdout."""
        httpx_mock.add_response(url="https://example.com/", content=b"hello")

        result = runner.invoke(app, ["request", "https://example.com/", "-q"])

        assert result.exit_code == 0
        assert result.stdout == "hello"

    def test_sends_options(self, httpx_mock):
        """Method, body, headers and cookies are passed through."""
        httpx_mock.add_response(url="https://example.com/api", method="POST", content=b"{}")

        result = runner.invoke(
            app,
            [
                "request", "https://example.com/api",
                "-X", "POST",
                "-d", '{"a":1}',
                "--content-type", "application/json",
                "-H", "X-Test: yes",
                "-b", "session=abc",
                "-q",
            ],
        )

        assert result.exit_code == 0
        request = httpx_mock.get_request()
        assert request.content == b'{"a":1}'
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["X-Test"] == "yes"
        assert request.headers["Cookie"] == "session=abc"

    def test_trace_output_file(self, httpx_mock, tmp_path):
        """--trace-output writes the trace as JSONL."""
        httpx_mock.add_response(url="https://example.com/", content=b"ABC")
        trace_file = tmp_path / "trace.jsonl"

        result = runner.invoke(
            app,
            ["request", "https://example.com/", "--raw", "-o", str(trace_file), "-q"],
        )

        assert result.exit_code == 0
        records = [json.loads(line) for line in trace_file.read_text().splitlines()]
        assert {"category": "response-raw", "text": "41, 42, 43"} in records

    def test_execution_error_exit_code(self, httpx_mock):
        """Failures exit with code 1 and name the error kind."""
        import httpx

        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url="https://example.com/")

        result = runner.invoke(app, ["request", "https://example.com/", "-q"])

        assert result.exit_code == 1
        assert "timeout" in result.output

    def test_invalid_request_exit_code(self):
        """Validation errors are reported without sending anything."""
        result = runner.invoke(app, ["request", "ftp://example.com/", "-q"])

        assert result.exit_code == 1
        assert "invalid_request" in result.output

    def test_bad_header_option(self):
        """Malformed -H values are usage errors."""
        result = runner.invoke(app, ["request", "https://example.com/", "-H", "nocolon"])

        assert result.exit_code == 2

    def test_bad_proxy_option(self):
        """Malformed proxies are usage errors."""
        result = runner.invoke(app, ["request", "https://example.com/", "-p", "proxy.local"])

        assert result.exit_code == 2


class TestVersionCommand:
    def test_version(self):
        """version prints the package version."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

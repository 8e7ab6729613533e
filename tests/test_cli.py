"""Tests for the pagecap CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from PIL import Image
from typer.testing import CliRunner

from cli.main import app
from pagecap.scraper.models import Validation, ValidationCode

runner = CliRunner()

_FETCH = "cli.main.get_page_html"


class TestSliceCommand:
    def test_prints_slice(self, tmp_path: Path) -> None:
        page = tmp_path / "page.html"
        page.write_bytes(b"<html><body><p>Hi</p></body></html>")

        result = runner.invoke(app, ["slice", str(page), "body p"])

        assert result.exit_code == 0
        assert "<p>Hi</p>" in result.stdout
        assert "<body>" not in result.stdout

    def test_reports_selector_miss(self, tmp_path: Path) -> None:
        page = tmp_path / "page.html"
        page.write_bytes(b"<html><body><p>Hi</p></body></html>")

        result = runner.invoke(app, ["slice", str(page), "nav"])

        assert result.exit_code == 0
        assert "not fully matched" in result.output
        assert "<html><body><p>Hi</p></body></html>" in result.output

    def test_missing_file_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["slice", str(tmp_path / "nope.html"), "body"])
        assert result.exit_code != 0


class TestCaptureCommand:
    def test_writes_png(self, tmp_path: Path, tmp_dir: Path, fake_renderer) -> None:
        output = tmp_path / "out.png"
        fetched = (b"<p>Hi</p>", Validation(valid=True, code=ValidationCode.OK))
        with patch(_FETCH, return_value=fetched) as mock_fetch:
            result = runner.invoke(
                app, ["capture", "http://example.test/", "-s", "body p", "-o", str(output)]
            )

        assert result.exit_code == 0, result.output
        mock_fetch.assert_called_once_with("http://example.test/", "body p")
        assert Image.open(output).format == "PNG"
        assert list(tmp_dir.iterdir()) == []

    def test_notes_selector_miss(self, tmp_path: Path, tmp_dir: Path, fake_renderer) -> None:
        fetched = (b"<html></html>", Validation(valid=True, code=ValidationCode.SELECTOR_MISS))
        with patch(_FETCH, return_value=fetched):
            result = runner.invoke(
                app, ["capture", "http://example.test/", "-s", "nav", "-o", str(tmp_path / "o.png")]
            )

        assert result.exit_code == 0
        assert "not fully matched" in result.output

    def test_fetch_failure_exits_1(self, tmp_path: Path, tmp_dir: Path, fake_renderer) -> None:
        fetched = (b"", Validation(valid=False, code=ValidationCode.UNREACHABLE))
        with patch(_FETCH, return_value=fetched):
            result = runner.invoke(app, ["capture", "http://host.invalid/", "-o", str(tmp_path / "o.png")])

        assert result.exit_code == 1
        assert "Capture site could not be contacted" in result.output
        assert fake_renderer.calls == []

    def test_conversion_failure_exits_1(self, tmp_path: Path, tmp_dir: Path, fake_renderer) -> None:
        fake_renderer.returncode = 1
        fetched = (b"<p>x</p>", Validation(valid=True, code=ValidationCode.OK))
        with patch(_FETCH, return_value=fetched):
            result = runner.invoke(app, ["capture", "http://example.test/", "-o", str(tmp_path / "o.png")])

        assert result.exit_code == 1
        assert "Conversion failed" in result.output
        assert not (tmp_path / "o.png").exists()
        assert list(tmp_dir.iterdir()) == []


class TestServeCommand:
    def test_runs_uvicorn_with_settings(self, tmp_dir: Path) -> None:
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0, result.output
        args, kwargs = mock_run.call_args
        assert args == ("pagecap.api.app:app",)
        assert kwargs["port"] == 8080
        assert kwargs["reload"] is False

    def test_overrides_host_and_port(self, tmp_dir: Path) -> None:
        with patch("uvicorn.run") as mock_run:
            runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "9000"])

        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000

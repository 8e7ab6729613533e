"""Shared fixtures.

- ``tmp_dir`` points ``settings.tmp_dir`` at an isolated directory.
- ``fake_renderer`` replaces the ``wkhtmltoimage`` subprocess with a stub that
  writes a real PNG to the requested output path and records each call.
"""

from __future__ import annotations

import io
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from PIL import Image


def make_png(width: int = 4, height: int = 3) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@dataclass
class RendererCall:
    command: list[str]
    html: bytes
    input_mode: int
    timeout: float | None


@dataclass
class FakeRenderer:
    """Stand-in for ``subprocess.run``; behaviour is tweakable per test."""

    returncode: int = 0
    output: bytes | None = field(default_factory=make_png)
    calls: list[RendererCall] = field(default_factory=list)

    def __call__(self, command, **kwargs):
        in_path, out_path = Path(command[-2]), Path(command[-1])
        self.calls.append(
            RendererCall(
                command=list(command),
                html=in_path.read_bytes(),
                input_mode=in_path.stat().st_mode & 0o777,
                timeout=kwargs.get("timeout"),
            )
        )
        if self.output is not None:
            out_path.write_bytes(self.output)
        return subprocess.CompletedProcess(command, self.returncode, stdout=b"", stderr=b"boom")


@pytest.fixture()
def tmp_dir(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "tmp"
    path.mkdir()
    monkeypatch.setattr("pagecap.config.settings.tmp_dir", path)
    return path


@pytest.fixture()
def fake_renderer(monkeypatch) -> FakeRenderer:
    renderer = FakeRenderer()
    monkeypatch.setattr("pagecap.render.converter.subprocess.run", renderer)
    return renderer


@pytest.fixture()
def png_factory():
    return make_png

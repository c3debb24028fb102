"""Shared test fixtures for specsite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from specsite.config import SiteConfig

# Stand-in for the ecmarkup CLI: same flags, deterministic output.  Sources
# containing <emu-broken> fail after writing a partial document.
FAKE_RENDERER = '''\
import argparse
import pathlib
import sys

parser = argparse.ArgumentParser()
parser.add_argument("--strict", action="store_true")
parser.add_argument("--js-out")
parser.add_argument("--css-out")
parser.add_argument("--assets", default="none")
parser.add_argument("entry")
parser.add_argument("out")
args = parser.parse_args()

source = pathlib.Path(args.entry).read_text(encoding="utf-8")
out = pathlib.Path(args.out)
if "<emu-broken" in source:
    out.write_text("<!DOCTYPE html>\\n<html><body>", encoding="utf-8")
    sys.stderr.write("error: malformed <emu-broken> element\\n")
    sys.exit(1)
if args.strict and "<emu-warn" in source:
    sys.stderr.write("warning: <emu-warn> is deprecated\\n")
    sys.exit(1)

out.write_text(
    "<!DOCTYPE html>\\n<html><body>\\n" + source + "</body></html>\\n",
    encoding="utf-8",
)
if args.js_out:
    pathlib.Path(args.js_out).write_text("/* script */\\n", encoding="utf-8")
if args.css_out:
    pathlib.Path(args.css_out).write_text("body { margin: 0; }\\n", encoding="utf-8")
'''


@pytest.fixture
def renderer_command(tmp_path_factory: pytest.TempPathFactory) -> tuple[str, ...]:
    """argv prefix running the fake renderer with the current interpreter."""
    script = tmp_path_factory.mktemp("bin") / "fake_ecmarkup.py"
    script.write_text(FAKE_RENDERER, encoding="utf-8")
    return (sys.executable, str(script))


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal proposal repository: src/index.html plus one included file."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.html").write_text(
        "<emu-clause id=\"intro\">\n  <h1>Introduction</h1>\n</emu-clause>\n",
        encoding="utf-8",
    )
    (src / "grammar.html").write_text("<emu-grammar></emu-grammar>\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(project: Path, renderer_command: tuple[str, ...]) -> SiteConfig:
    """SiteConfig for ``project`` using the fake renderer."""
    return SiteConfig(root=project, renderer_command=renderer_command)

"""Tests for the specsite CLI and the app entry points."""

from __future__ import annotations

from pathlib import Path

import pytest

from specsite import app
from specsite._cli import TASK_NAMES, _build_parser, main
from specsite.tasks.graph import TaskState
from specsite.tasks.runner import TaskRun


@pytest.fixture
def configured(project: Path, renderer_command: tuple[str, ...]) -> Path:
    """``project`` with a specsite.yaml pointing at the fake renderer."""
    lines = ["renderer_command:"]
    lines.extend(f"  - {arg!r}" for arg in renderer_command)
    (project / "specsite.yaml").write_text("\n".join(lines) + "\n", encoding="utf-8")
    return project


class TestParser:
    def test_defaults(self) -> None:
        args = _build_parser().parse_args([])
        assert args.task == "default"
        assert args.root == "."
        assert args.entry is None
        assert args.output is None
        assert args.host is None
        assert args.port is None
        assert args.live_reload is None

    @pytest.mark.parametrize("task", TASK_NAMES)
    def test_task_names(self, task: str) -> None:
        assert _build_parser().parse_args([task]).task == task

    def test_overrides(self) -> None:
        args = _build_parser().parse_args([
            "start", "proposal",
            "--entry", "spec.html",
            "--output", "out",
            "--host", "0.0.0.0",
            "--port", "9000",
            "--no-live-reload",
        ])
        assert args.task == "start"
        assert args.root == "proposal"
        assert args.entry == "spec.html"
        assert args.output == "out"
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.live_reload is False

    def test_unknown_task_rejected(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["deploy"])
        assert exc_info.value.code == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "specsite 0.1.0" in capsys.readouterr().out


class TestMain:
    def test_build_exits_zero(self, configured: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(configured)])
        assert exc_info.value.code == 0
        assert (configured / "docs" / "index.html").is_file()

    def test_default_task_builds(self, configured: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["default", str(configured), "--output", "site"])
        assert exc_info.value.code == 0
        assert (configured / "site" / "index.html").is_file()

    def test_failed_build_exits_one(self, configured: Path) -> None:
        (configured / "src" / "index.html").write_text("<emu-broken>\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(configured)])
        assert exc_info.value.code == 1

    def test_clean_exits_zero(self, configured: Path) -> None:
        docs = configured / "docs"
        docs.mkdir()
        (docs / "index.html").write_text("stale")
        with pytest.raises(SystemExit) as exc_info:
            main(["clean", str(configured)])
        assert exc_info.value.code == 0
        assert list(docs.iterdir()) == []

    def test_config_error_exits_one(
        self, configured: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        (configured / "specsite.yaml").write_text("colour: blue\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(configured)])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_interrupt_exits_130(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def interrupted(*args: object, **kwargs: object) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr(app, "run", interrupted)
        with pytest.raises(SystemExit) as exc_info:
            main(["watch"])
        assert exc_info.value.code == 130
        assert "Stopped." in capsys.readouterr().err

    def test_overrides_forwarded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

        def fake_run(*args: object, **kwargs: object) -> TaskRun:
            calls.append((args, kwargs))
            return TaskRun("start", state=TaskState.SUCCEEDED)

        monkeypatch.setattr(app, "run", fake_run)
        with pytest.raises(SystemExit):
            main(["start", "proj", "--port", "0", "--no-live-reload"])

        (args, kwargs), = calls
        assert args == ("start", "proj")
        assert kwargs["port"] == 0
        assert kwargs["live_reload"] is False
        assert kwargs["entry"] is None


class TestApp:
    def test_build(self, configured: Path) -> None:
        result = app.build(configured)
        assert result.ok
        assert (configured / "docs" / "ecmarkup.js").is_file()

    def test_overrides(self, configured: Path) -> None:
        result = app.build(configured, output="out")
        assert result.ok
        assert (configured / "out" / "index.html").is_file()

    def test_clean(self, configured: Path) -> None:
        assert app.build(configured).ok
        assert app.clean(configured).ok
        assert list((configured / "docs").iterdir()) == []

    def test_failed_build(self, configured: Path) -> None:
        (configured / "src" / "index.html").write_text("<emu-broken>\n")
        result = app.run("build", configured)
        assert result.state is TaskState.FAILED

    def test_banner_printed(
        self, configured: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        app.build(configured)
        err = capsys.readouterr().err
        assert "specsite" in err
        assert "output:" in err

"""Tests for menu_e2e.utils.logger — console formatting and log files."""

from __future__ import annotations

import pathlib

import pytest

from menu_e2e.utils import logger


class TestFormatDuration:
    @pytest.mark.parametrize(
        ("ms", "expected"),
        [(0, "0ms"), (999.9, "999ms"), (1500, "1.50s"), (59_999, "60.00s"), (90_000, "1m 30.0s")],
    )
    def test_format(self, ms: float, expected: str) -> None:
        assert logger.format_duration(ms) == expected


class TestLogger:
    def test_prefix_and_data(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger.create_logger("Consent-Gate").info("Banner detected", {"selector": "#x", "count": 2})
        err = capsys.readouterr().err
        assert "[Consent-Gate]" in err
        assert "Banner detected" in err
        assert "selector=" in err
        assert '"#x"' in err

    def test_writes_to_stderr_only(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger.create_logger("Test").warn("careful")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "careful" in captured.err

    def test_timer_returns_duration(self, capsys: pytest.CaptureFixture[str]) -> None:
        log = logger.create_logger("Timer")
        log.start_timer("step")
        assert log.end_timer("step") >= 0
        assert "Completed: step" in capsys.readouterr().err

    def test_unstarted_timer(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert logger.create_logger("Timer").end_timer("never") == 0.0
        assert 'Timer "never" was not started' in capsys.readouterr().err


class TestLogFile:
    def test_disabled_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WRITE_TO_FILE", raising=False)
        assert logger.start_log_file("run") is None

    def test_writes_plain_text(self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
        monkeypatch.setenv("WRITE_TO_FILE", "true")
        monkeypatch.chdir(tmp_path)
        path = logger.start_log_file("menu run/1")
        try:
            assert path is not None
            logger.create_logger("File").success("done", {"ok": True})
        finally:
            logger.end_log_file()

        content = pathlib.Path(path).read_text(encoding="utf-8")
        assert pathlib.Path(path).parent == tmp_path / ".logs"
        assert pathlib.Path(path).name.startswith("menu_run_1_")
        assert "[File] done" in content
        assert "\033[" not in content


class TestParallelRuns:
    def test_worker_tag(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("PYTEST_XDIST_WORKER", "gw3")
        logger.create_logger("Gate").info("hello")
        assert "gw3" in capsys.readouterr().err

    def test_no_color(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        logger.create_logger("Gate").error("plain", {"ok": False})
        err = capsys.readouterr().err
        assert "\033[" not in err
        assert "ok=False" in err

    def test_log_file_per_worker(self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
        monkeypatch.setenv("WRITE_TO_FILE", "true")
        monkeypatch.setenv("PYTEST_XDIST_WORKER", "gw1")
        monkeypatch.chdir(tmp_path)
        try:
            path = logger.start_log_file("run")
        finally:
            logger.end_log_file()
        assert path is not None
        assert pathlib.Path(path).name.startswith("run_gw1_")

"""Tests for the faultlog CLI commands."""

import json
import logging
from datetime import datetime

import pytest
from faultlog.config import LOG_ROOT_ENV
from faultlog.store import ErrorLogStore
from faultlog.summary import ErrorSummary
from faultlog_cli.cli import _setup_logging, app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch):
    monkeypatch.delenv(LOG_ROOT_ENV, raising=False)


@pytest.fixture(autouse=True)
def _restore_faultlog_logger():
    logger = logging.getLogger("faultlog")
    handlers, propagate, level = logger.handlers[:], logger.propagate, logger.level
    yield
    logger.handlers = handlers
    logger.propagate = propagate
    logger.setLevel(level)


def _persist(root, message: str, moment: datetime) -> int:
    store = ErrorLogStore(root / "logs" / "syserrs", clock=lambda: moment)
    return store.persist(ErrorSummary(message=message, cause=RuntimeError(message))).record_id


class TestListCommand:
    def test_empty(self, tmp_path):
        result = runner.invoke(app, ["list", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "No error records" in result.output

    def test_lists_most_recent_first(self, tmp_path):
        older = _persist(tmp_path, "older", datetime(2026, 10, 17, 9, 0, 0, 1000))
        newer = _persist(tmp_path, "newer", datetime(2026, 10, 17, 10, 0, 0, 2000))
        result = runner.invoke(app, ["list", "--root", str(tmp_path)])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0].startswith(str(newer))
        assert lines[1].startswith(str(older))
        assert "2026-10-17 10:00:00.002" in lines[0]

    def test_limit(self, tmp_path):
        _persist(tmp_path, "a", datetime(2026, 10, 17, 9, 0, 0))
        newest = _persist(tmp_path, "b", datetime(2026, 10, 17, 9, 0, 1))
        result = runner.invoke(app, ["list", "--limit", "1", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert result.output.strip().splitlines() == [f"{newest}  2026-10-17 09:00:01.000"]

    def test_uses_config_file(self, tmp_path):
        config = tmp_path / "custom.json"
        config.write_text(json.dumps({"log_root": str(tmp_path / "elsewhere"), "errors_dir_name": "errs"}))
        record_id = (
            ErrorLogStore(tmp_path / "elsewhere" / "errs")
            .persist(ErrorSummary(message="m", cause=RuntimeError("r")))
            .record_id
        )
        result = runner.invoke(app, ["list", "--config", str(config)])
        assert result.exit_code == 0
        assert str(record_id) in result.output


class TestShowCommand:
    def test_show_prints_abstract_and_detail(self, tmp_path):
        record_id = _persist(tmp_path, "disk full", datetime(2026, 10, 17, 9, 0, 0))
        result = runner.invoke(app, ["show", str(record_id), "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert result.output.startswith("disk full\n")
        assert "RuntimeError: disk full" in result.output

    def test_abstract_only(self, tmp_path):
        record_id = _persist(tmp_path, "disk full", datetime(2026, 10, 17, 9, 0, 0))
        result = runner.invoke(app, ["show", str(record_id), "--abstract-only", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert result.output == "disk full\n"

    def test_missing_record(self, tmp_path):
        result = runner.invoke(app, ["show", "20261017093015123", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "No error record" in result.output

    def test_invalid_id(self, tmp_path):
        result = runner.invoke(app, ["show", "not-an-id", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "Invalid record id" in result.output

    def test_corrupt_record(self, tmp_path):
        log_dir = tmp_path / "logs" / "syserrs"
        log_dir.mkdir(parents=True)
        (log_dir / "20261017093015123").write_text("garbage")
        result = runner.invoke(app, ["show", "20261017093015123", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "Undecodable" in result.output


class TestPathCommand:
    def test_default_path(self, tmp_path):
        result = runner.invoke(app, ["path", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert result.output.strip() == str(tmp_path / "logs" / "syserrs")

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv(LOG_ROOT_ENV, str(tmp_path / "env-root"))
        result = runner.invoke(app, ["path", "--root", str(tmp_path)])
        assert result.output.strip() == str(tmp_path / "env-root" / "syserrs")


class TestConfigErrors:
    def test_invalid_json(self, tmp_path):
        config = tmp_path / "broken.json"
        config.write_text("{not json")
        result = runner.invoke(app, ["list", "--config", str(config)])
        assert result.exit_code == 1
        assert "Invalid config" in result.output

    def test_unknown_key(self, tmp_path):
        config_dir = tmp_path / ".faultlog"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"log_root": "logs", "log_dirr": "typo"}))
        result = runner.invoke(app, ["path", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "Invalid config" in result.output
        assert "log_dirr" in result.output

    def test_show_with_bad_config(self, tmp_path):
        config = tmp_path / "list.json"
        config.write_text(json.dumps(["logs"]))
        result = runner.invoke(app, ["show", "20261017093015123", "--config", str(config)])
        assert result.exit_code == 1
        assert "JSON object" in result.output


class _Collector(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestLogging:
    def test_faultlog_logger_does_not_propagate(self, tmp_path):
        result = runner.invoke(app, ["list", "--verbose", "--root", str(tmp_path)])
        assert result.exit_code == 0
        logger = logging.getLogger("faultlog")
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO

    def test_store_messages_not_duplicated_on_root(self):
        collector = _Collector()
        root_logger = logging.getLogger()
        root_logger.addHandler(collector)
        try:
            _setup_logging(verbose=False)
            logging.getLogger("faultlog.store").warning("collision")
        finally:
            root_logger.removeHandler(collector)
        assert collector.records == []

"""Tests for agro_advisor.utils.logging."""

from __future__ import annotations

import json
import logging

import pytest

from agro_advisor.config import LoggingConfig
from agro_advisor.ingestion.weather_client import WeatherClient
from agro_advisor.rules.store import load_rule_table
from agro_advisor.utils.logging import _JsonFormatter, configure_logging, resolve_log_path


@pytest.fixture(autouse=True)
def _restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("agro_advisor.test", logging.INFO, __file__, 1, msg, None, None)
    for key, val in extra.items():
        setattr(record, key, val)
    return record


def test_json_formatter_fields():
    payload = json.loads(_JsonFormatter().format(_record("loaded 21 rules")))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "agro_advisor.test"
    assert payload["msg"] == "loaded 21 rules"
    assert payload["ts"].endswith("Z")


def test_json_formatter_includes_extra():
    payload = json.loads(_JsonFormatter().format(_record("x", rule_id="cs_clay_kharif")))
    assert payload["rule_id"] == "cs_clay_kharif"


def test_json_formatter_keeps_non_ascii():
    payload = _JsonFormatter().format(_record("अनुवाद", target_language="hi"))
    assert "अनुवाद" in payload
    assert json.loads(payload)["target_language"] == "hi"


def test_resolve_log_path(tmp_path):
    assert resolve_log_path("") is None
    assert resolve_log_path(str(tmp_path / "a.log")) == tmp_path / "a.log"
    assert resolve_log_path("data/logs/x.log", root=tmp_path) == tmp_path / "data" / "logs" / "x.log"
    assert resolve_log_path("data/logs/x.log").is_absolute()


def test_configure_logging_with_file(tmp_path):
    log_file = tmp_path / "logs" / "agro.log"
    configure_logging(LoggingConfig(level="DEBUG", log_file=str(log_file)))

    logging.getLogger("agro_advisor.test").debug("hello file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file.exists()
    assert "hello file" in log_file.read_text(encoding="utf-8")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_console_only():
    configure_logging(LoggingConfig(level="ERROR", log_file=""))
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.ERROR


def _json_lines(path) -> list[dict]:
    for handler in logging.getLogger().handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_json_log_carries_collaborator_context(tmp_path):
    log_file = tmp_path / "agro.jsonl"
    configure_logging(LoggingConfig(level="INFO", log_file=str(log_file), json_format=True))

    WeatherClient(api_key=None).fetch_by_location("Pune")
    load_rule_table(tmp_path / "missing.json")

    records = _json_lines(log_file)
    weather = [r for r in records if "weather_error" in r]
    assert weather[0]["weather_error"] == "UNKNOWN_ERROR"
    degraded = [r for r in records if r["level"] == "ERROR"]
    assert degraded[0]["rule_source"] == str(tmp_path / "missing.json")

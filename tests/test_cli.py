"""Tests for agro_advisor.cli — typer commands run in-process."""

from __future__ import annotations

import json
import logging

import pytest
from typer.testing import CliRunner

from agro_advisor.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(monkeypatch):
    """Keep env overrides and API keys out, and restore root logging afterwards."""
    for var in (
        "AGRO_ADVISOR_RULES_FILE", "AGRO_ADVISOR_LOG_LEVEL", "AGRO_ADVISOR_DEBUG",
        "TRANSLATION_PROVIDER", "TRANSLATION_API_KEY", "WEATHER_API_KEY",
    ):
        monkeypatch.delenv(var, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _run(*args: str, config=None):
    argv = list(args)
    if config is not None:
        argv += ["--config", str(config)]
    return runner.invoke(app, argv)


class TestValidateConfig:
    def test_ok(self, app_config_file):
        result = _run("validate-config", config=app_config_file)
        assert result.exit_code == 0
        assert "[OK] Config valid." in result.output
        assert "Kharif, Rabi, Summer, Winter" in result.output

    def test_missing_file(self, tmp_path):
        result = _run("validate-config", config=tmp_path / "absent.toml")
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text('[logging]\nlevel = "LOUD"\n', encoding="utf-8")
        result = _run("validate-config", config=path)
        assert result.exit_code == 1
        assert "Config validation failed" in result.output


class TestRules:
    def test_loaded(self, app_config_file):
        result = _run("rules", config=app_config_file)
        assert result.exit_code == 0
        assert "=== Rule Table ===" in result.output
        assert "[OK] Rule table loaded." in result.output

    def test_degraded_exits_nonzero(self, tmp_path):
        path = tmp_path / "config.toml"
        missing = tmp_path / "missing.json"
        path.write_text(
            f"[rules]\nrules_file = {str(missing)!r}\n\n[logging]\nlog_file = \"\"\nlevel = \"ERROR\"\n",
            encoding="utf-8",
        )
        result = _run("rules", config=path)
        assert result.exit_code == 1
        assert "[DEGRADED]" in result.output


def test_options(app_config_file):
    result = _run("options", config=app_config_file)
    assert result.exit_code == 0
    assert "Alluvial" in result.output
    assert "pa (Punjabi)" in result.output


class TestAdvise:
    def test_text_report(self, app_config_file):
        result = _run(
            "advise", "--crop", "Rice", "--soil", "clay", "--season", "Kharif",
            config=app_config_file,
        )
        assert result.exit_code == 0
        assert "Overall confidence: 8.7/10 (High)" in result.output
        assert "rule: fa_rice_clay_kharif" in result.output

    def test_json_with_manual_weather_and_translation(self, app_config_file):
        result = _run(
            "advise", "--soil", "Loamy", "--season", "Rabi",
            "--temperature", "36", "--humidity", "50", "--lang", "hi", "--json",
            config=app_config_file,
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["advisory"]["confidenceScore"] == 5.0
        assert payload["advisory"]["weatherAdvice"]["currentWeather"]["temperature"] == "36°C"
        assert payload["translation"]["performed"] is True
        assert payload["translation"]["target_language"] == "hi"
        assert "advisory" not in payload["translation"]

    def test_invalid_soil(self, app_config_file):
        result = _run("advise", "--soil", "Peaty", "--season", "Rabi", config=app_config_file)
        assert result.exit_code == 1
        assert "[ERROR] soilType: Soil type must be one of" in result.output

    def test_partial_manual_weather(self, app_config_file):
        result = _run(
            "advise", "--soil", "Clay", "--season", "Rabi", "--temperature", "30",
            config=app_config_file,
        )
        assert result.exit_code == 1
        assert "must be given together" in result.output

    def test_manual_and_live_weather_conflict(self, app_config_file):
        result = _run(
            "advise", "--soil", "Clay", "--season", "Rabi",
            "--temperature", "30", "--humidity", "50", "--location", "Pune",
            config=app_config_file,
        )
        assert result.exit_code == 1

    def test_live_weather_unavailable_still_advises(self, app_config_file):
        result = _run(
            "advise", "--soil", "Clay", "--season", "Rabi", "--location", "Pune",
            config=app_config_file,
        )
        assert result.exit_code == 0
        assert "Weather unavailable" in result.output
        assert "[WEATHER]" not in result.output


def test_weather_requires_location(app_config_file):
    result = _run("weather", config=app_config_file)
    assert result.exit_code == 1
    assert "Provide --location" in result.output

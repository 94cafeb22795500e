"""
Agro Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (load rules, compose advisory, fetch weather, etc.).
  5. Report result to stdout.

Install and run::

    pip install -e .
    agro-advisor --help
    agro-advisor validate-config
    agro-advisor rules
    agro-advisor options
    agro-advisor weather --location Ludhiana
    agro-advisor advise --crop Rice --soil Clay --season Kharif
    agro-advisor advise --soil Loamy --season Rabi --temperature 36 --humidity 50 --lang hi
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="agro-advisor",
    help="Rule-based crop, fertilizer, irrigation and weather-risk advisor.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from agro_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from agro_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_service(config):
    from agro_advisor.service import AdvisoryService
    return AdvisoryService(config)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Rules file:       {config.rules_path()}")
    typer.echo(f"  Soil types:       {', '.join(config.validation.soil_types)}")
    typer.echo(f"  Seasons:          {', '.join(config.validation.seasons)}")
    typer.echo(f"  Languages:        {', '.join(config.translation.supported_languages)}")
    typer.echo(f"  Translation API:  {config.translation.provider}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("rules")
def rules(
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Load the rule table and print per-category diagnostics.

    Exits with code 1 if the rule source could not be loaded.
    """
    from agro_advisor.reporting.formatters import format_rule_table_summary
    from agro_advisor.rules.store import load_rule_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    table = load_rule_table(config.rules_path())
    typer.echo(format_rule_table_summary(table))

    if table.is_degraded:
        typer.echo("")
        typer.echo("[ERROR] Rule table degraded; see log for details.", err=True)
        raise typer.Exit(code=1)

    typer.echo("")
    typer.echo("[OK] Rule table loaded.")


@app.command("options")
def options(
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """List accepted soil types, seasons, common crops and languages."""
    from agro_advisor.reporting.formatters import format_options

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    service = _build_service(config)
    typer.echo(format_options(service.options()))


@app.command("weather")
def weather(
    location: Optional[str] = typer.Option(
        None, "--location", help="City name, e.g. 'Ludhiana' or 'Pune,IN'."
    ),
    lat: Optional[float] = typer.Option(None, "--lat", help="Latitude (-90..90)."),
    lon: Optional[float] = typer.Option(None, "--lon", help="Longitude (-180..180)."),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Fetch current weather (requires WEATHER_API_KEY)."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if location is None and (lat is None or lon is None):
        typer.echo("[ERROR] Provide --location or both --lat and --lon.", err=True)
        raise typer.Exit(code=1)

    service = _build_service(config)
    result = service.fetch_weather_result(location=location, lat=lat, lon=lon)
    if not result.success:
        typer.echo(f"[ERROR] {result.code}: {result.error}", err=True)
        raise typer.Exit(code=1)

    reading = result.data
    place = ", ".join(p for p in (result.location, result.country) if p)
    typer.echo(f"  Location:    {place or location or f'{lat},{lon}'}")
    typer.echo(f"  Temperature: {reading.temperature:g}°C")
    typer.echo(f"  Humidity:    {reading.humidity:g}%")
    typer.echo(f"  Conditions:  {reading.description}")


@app.command("advise")
def advise(
    soil: str = typer.Option(..., "--soil", help="Soil type, e.g. Clay."),
    season: str = typer.Option(..., "--season", help="Season, e.g. Kharif."),
    crop: Optional[str] = typer.Option(
        None, "--crop", help="Crop to validate. Omit to get a crop recommendation."
    ),
    location: Optional[str] = typer.Option(
        None, "--location", help="Fetch live weather for this city."
    ),
    lat: Optional[float] = typer.Option(None, "--lat", help="Latitude for live weather."),
    lon: Optional[float] = typer.Option(None, "--lon", help="Longitude for live weather."),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", help="Manual weather: temperature in °C."
    ),
    humidity: Optional[float] = typer.Option(
        None, "--humidity", help="Manual weather: relative humidity in %."
    ),
    description: str = typer.Option(
        "", "--description", help="Manual weather: condition text, e.g. 'light rain'."
    ),
    lang: Optional[str] = typer.Option(
        None, "--lang", help="Translate the advisory (e.g. hi, pa)."
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the advisory as JSON (camelCase wire format)."
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Compose an advisory for a crop / soil / season, with optional weather."""
    from pydantic import ValidationError

    from agro_advisor.engine.validation import InvalidAdvisoryRequest
    from agro_advisor.models.advisory import WeatherReading
    from agro_advisor.reporting.formatters import format_advisory

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    manual = temperature is not None or humidity is not None
    live = location is not None or lat is not None or lon is not None
    if manual and live:
        typer.echo(
            "[ERROR] Use either --temperature/--humidity or --location/--lat/--lon, not both.",
            err=True,
        )
        raise typer.Exit(code=1)
    if manual and (temperature is None or humidity is None):
        typer.echo("[ERROR] --temperature and --humidity must be given together.", err=True)
        raise typer.Exit(code=1)

    service = _build_service(config)

    try:
        request = service.validate({"crop": crop, "soil_type": soil, "season": season})
    except InvalidAdvisoryRequest as exc:
        for msg in exc.errors:
            typer.echo(f"[ERROR] {msg}", err=True)
        raise typer.Exit(code=1)

    reading: Optional[WeatherReading] = None
    if manual:
        try:
            reading = WeatherReading(
                temperature=temperature, humidity=humidity, description=description
            )
        except ValidationError as exc:
            typer.echo(f"[ERROR] Invalid weather values: {exc}", err=True)
            raise typer.Exit(code=1)
    elif live:
        reading = service.fetch_weather(location=location, lat=lat, lon=lon)
        if reading is None:
            typer.echo("[WARN] Weather unavailable; advisory composed without weather.", err=True)

    advisory = service.generate(request, reading)

    outcome = None
    if lang:
        outcome = service.translate_advisory(advisory, lang)
        advisory = outcome.advisory

    if as_json:
        payload = {"advisory": advisory.to_wire()}
        if outcome is not None:
            payload["translation"] = outcome.model_dump(
                mode="json", exclude={"advisory"}, exclude_none=True
            )
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    typer.echo(
        format_advisory(
            advisory,
            crop=request.crop,
            soil_type=request.soil_type,
            season=request.season,
            translation=outcome,
        )
    )


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()

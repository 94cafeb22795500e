"""
Weather risk resolver: threshold rules over a ``WeatherReading``.

Thresholds are evaluated independently and additively, so several warnings
can co-occur for one reading:

  temperature > 35                      → heat_stress (high)
  humidity > 80                         → fungal_risk (medium)
  temperature > 30 and humidity > 70    → disease_pressure (high)
  temperature < 10                      → cold_stress (medium)
  20 ≤ temperature ≤ 30, 40 ≤ humidity ≤ 70 → favourable, no warning

The description adds condition-specific lines ("rain" → reduce irrigation,
"clear" above 25 °C → monitor moisture).

Confidence is 8, raised to 9 when more than two warnings fire and lowered to
6 when none do. The rule table is never consulted.
"""

from __future__ import annotations

from agro_advisor.models.advisory import (
    AdvisoryInputs,
    CurrentWeather,
    WeatherAdvice,
    WeatherReading,
    WeatherWarning,
)
from agro_advisor.taxonomy.advisory_taxonomy import (
    FallbackTag,
    WarningSeverity,
    WarningType,
)

HEAT_STRESS_ABOVE_C = 35.0
FUNGAL_RISK_ABOVE_PCT = 80.0
DISEASE_TEMP_ABOVE_C = 30.0
DISEASE_HUMIDITY_ABOVE_PCT = 70.0
COLD_STRESS_BELOW_C = 10.0
FAVOURABLE_TEMP_C = (20.0, 30.0)
FAVOURABLE_HUMIDITY_PCT = (40.0, 70.0)
CLEAR_SKY_MOISTURE_ABOVE_C = 25.0

BASE_CONFIDENCE = 8
MANY_WARNINGS_CONFIDENCE = 9
NO_WARNING_CONFIDENCE = 6

HEAT_RECOMMENDATIONS = (
    "Irrigate during early morning or evening to reduce water loss.",
    "Apply mulch to conserve soil moisture and keep roots cool.",
    "Provide shade for sensitive crops and nurseries where possible.",
)
FUNGAL_RECOMMENDATIONS = (
    "Inspect leaves regularly for fungal spots and mildew.",
    "Ensure good air circulation by avoiding dense planting.",
    "Avoid overhead irrigation to keep foliage dry.",
    "Apply preventive fungicide if disease symptoms appear.",
)
COLD_RECOMMENDATIONS = (
    "Protect young plants with covers or mulch during cold nights.",
    "Irrigate lightly in the evening to reduce frost damage.",
    "Delay sowing of cold-sensitive crops until temperatures rise.",
)
FAVOURABLE_RECOMMENDATIONS = (
    "Weather conditions are favourable for crop growth.",
    "Continue regular field operations and monitoring.",
)
RAIN_RECOMMENDATION = "Reduce irrigation as rainfall is expected."
CLEAR_SKY_RECOMMENDATION = "Monitor soil moisture closely during clear, warm weather."


def resolve_weather_advice(weather: WeatherReading, inputs: AdvisoryInputs) -> WeatherAdvice:
    """Derive warnings and recommendations from a weather reading.

    Args:
        weather: Current temperature, humidity and description.
        inputs: Normalized request; only ``crop`` is used, for crop-specific lines.

    Returns:
        ``WeatherAdvice`` with warnings and recommendations in evaluation order.
    """
    temp = weather.temperature
    humidity = weather.humidity
    description = weather.description.lower()

    warnings: list[WeatherWarning] = []
    recommendations: list[str] = []

    if temp > HEAT_STRESS_ABOVE_C:
        warnings.append(WeatherWarning(
            type=WarningType.HEAT_STRESS,
            severity=WarningSeverity.HIGH,
            message=f"High temperature ({_num(temp)}°C) may cause heat stress to crops.",
        ))
        recommendations.extend(HEAT_RECOMMENDATIONS)
        if inputs.crop_known:
            recommendations.append(
                f"Monitor {inputs.crop} closely for wilting and leaf scorch."
            )

    if humidity > FUNGAL_RISK_ABOVE_PCT:
        warnings.append(WeatherWarning(
            type=WarningType.FUNGAL_RISK,
            severity=WarningSeverity.MEDIUM,
            message=f"High humidity ({_num(humidity)}%) increases the risk of fungal diseases.",
        ))
        recommendations.extend(FUNGAL_RECOMMENDATIONS)
        if inputs.crop_known:
            recommendations.append(
                f"Check {inputs.crop} for common fungal diseases in humid conditions."
            )

    if temp > DISEASE_TEMP_ABOVE_C and humidity > DISEASE_HUMIDITY_ABOVE_PCT:
        warnings.append(WeatherWarning(
            type=WarningType.DISEASE_PRESSURE,
            severity=WarningSeverity.HIGH,
            message="Warm and humid conditions favour pest and disease build-up.",
        ))

    if temp < COLD_STRESS_BELOW_C:
        warnings.append(WeatherWarning(
            type=WarningType.COLD_STRESS,
            severity=WarningSeverity.MEDIUM,
            message=f"Low temperature ({_num(temp)}°C) may slow growth or cause cold injury.",
        ))
        recommendations.extend(COLD_RECOMMENDATIONS)

    temp_lo, temp_hi = FAVOURABLE_TEMP_C
    hum_lo, hum_hi = FAVOURABLE_HUMIDITY_PCT
    if temp_lo <= temp <= temp_hi and hum_lo <= humidity <= hum_hi:
        recommendations.extend(FAVOURABLE_RECOMMENDATIONS)

    if "rain" in description:
        recommendations.append(RAIN_RECOMMENDATION)
    if "clear" in description and temp > CLEAR_SKY_MOISTURE_ABOVE_C:
        recommendations.append(CLEAR_SKY_RECOMMENDATION)

    return WeatherAdvice(
        current_weather=CurrentWeather(
            temperature=f"{_num(temp)}°C",
            humidity=f"{_num(humidity)}%",
            description=weather.description,
        ),
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
        confidence=weather_confidence(len(warnings)),
        explanation=(
            f"Weather analysis based on {_num(temp)}°C temperature "
            f"and {_num(humidity)}% humidity"
        ),
        rule_applied=FallbackTag.WEATHER_ANALYSIS.value,
    )


def weather_confidence(warning_count: int) -> int:
    """Confidence for a given number of co-occurring warnings."""
    if warning_count == 0:
        return NO_WARNING_CONFIDENCE
    if warning_count > 2:
        return MANY_WARNINGS_CONFIDENCE
    return BASE_CONFIDENCE


def _num(value: float) -> str:
    # 36.0 -> "36", 36.5 -> "36.5"
    return f"{value:g}"

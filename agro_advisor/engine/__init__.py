"""
Advisory engine: turns normalized farmer inputs into a complete ``Advisory``.

Modules
-------
resolvers    : CategoryResolver ABC + Crop/Fertilizer/Irrigation resolvers
               + RESOLVER_REGISTRY — rule matching and fallback tiers.
weather_risk : resolve_weather_advice() — threshold warnings, no rule table.
confidence   : aggregate_confidence() — one-decimal mean of category confidences.
composer     : AdvisoryComposer + compose_advisory() — the public entry point.
validation   : AdvisoryRequest + validate_request() — request checks against
               the configured soil/season/crop enumerations.
"""

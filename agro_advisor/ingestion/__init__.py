"""
Ingestion layer — external data collaborators.

Submodules:
  weather_client      — OpenWeatherMap current weather (httpx); failures map
                        to WeatherFetchResult error codes, never raise

Credential placement (.env, gitignored):
  WEATHER_API_KEY            — OpenWeatherMap API key
"""

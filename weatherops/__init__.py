"""WeatherOps Console — system anomaly monitor and per-client rate limiter."""

__version__ = "1.0.0"

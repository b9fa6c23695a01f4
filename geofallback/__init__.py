"""Multi-provider geocoding with ordered fallback."""

__version__ = "0.1.0"

"""Monthly savings projection engine, scenario set and Flask API."""

__version__ = "0.1.0"

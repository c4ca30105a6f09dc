"""taskai - close programs by asking in plain language."""

__version__ = "0.1.0"

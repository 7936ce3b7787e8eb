"""partygen - resilient content pipeline for party games."""

__version__ = "0.1.0"

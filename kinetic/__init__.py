"""Kinetic rehab exercise tracking engine."""

__version__ = "1.0.0"

"""Quantum Studio - AI-assisted live coding core."""

__version__ = "0.1.0"

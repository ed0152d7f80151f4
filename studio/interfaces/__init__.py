"""Outer surfaces: Typer CLI and FastAPI routes."""

"""Typer-based CLI entry package for promg."""

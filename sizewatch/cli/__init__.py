"""Sizewatch CLI — Typer application with Rich output."""

from sizewatch.cli.app import app, main

__all__ = ["app", "main"]

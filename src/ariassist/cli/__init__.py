"""CLI module for ariassist."""

from .app import app, main

__all__ = ["app", "main"]

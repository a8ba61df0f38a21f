"""HTTP interface for the AI Analyst."""

from .app import create_app

__all__ = ["create_app"]

"""Qt desktop front-end for ImageX."""

from .app import run_app

__all__ = ["run_app"]

"""FastAPI surface for ScriptCraft."""

from .app import create_app

__all__ = ["create_app"]

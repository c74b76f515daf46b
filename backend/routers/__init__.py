"""Routers module - FastAPI route handlers"""

from . import config, history, optimize

__all__ = ["config", "history", "optimize"]

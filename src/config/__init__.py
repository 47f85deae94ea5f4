"""
Configuration package for docz

Provides application settings via environment variables using pydantic-settings.
"""

from .settings import AppSettings

__all__ = ["AppSettings"]

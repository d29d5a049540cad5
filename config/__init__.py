"""Configuration module for DocDesk.

Provides settings for search scoring, library doc fetching, logging and seed data.
"""

from .settings import (
    Settings,
    DEFAULT_CONFIG,
    settings
)

__all__ = [
    'Settings',
    'DEFAULT_CONFIG',
    'settings'
]

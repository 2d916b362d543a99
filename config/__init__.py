"""Configuration module for the World Universities Directory."""
from .settings import Settings, settings
from . import logger  # Initialize logging

__all__ = ["Settings", "settings"]

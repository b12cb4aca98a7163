"""Render captured HTTP test traffic as an API Blueprint document."""

from .utils.env import load_env

# Ensure environment defaults from `.env` are available to all modules on import.
load_env()

__version__ = "0.1.0"

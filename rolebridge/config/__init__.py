"""Configuration module for the role bridge."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]

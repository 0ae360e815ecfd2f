"""Configuration module for shopcache."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]

"""Configuration management for feedpage."""

from .loader import Config, load_config, save_config
from .models import DEFAULT_SITE_URL, OptionsModel

__all__ = [
    "Config",
    "DEFAULT_SITE_URL",
    "OptionsModel",
    "load_config",
    "save_config",
]

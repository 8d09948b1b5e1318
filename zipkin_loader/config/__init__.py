"""
Configuration Module

Loader settings plus the YAML-backed translation tables.
"""

from zipkin_loader.config.settings import (
    DEFAULT_TRANSLATION_PATH,
    LoaderSettings,
    NoiseRule,
    TranslationConfig,
    get_loader_settings,
    load_translation_config,
)

__all__ = [
    "DEFAULT_TRANSLATION_PATH",
    "LoaderSettings",
    "NoiseRule",
    "TranslationConfig",
    "get_loader_settings",
    "load_translation_config",
]

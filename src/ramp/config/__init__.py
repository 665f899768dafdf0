"""Configuration management: ramp.toml loading and config models.

Usage:
    >>> from ramp.config import load_config, GeneratorConfig
"""

from ramp.config.loader import CONFIG_FILENAME, load_config
from ramp.config.models import GeneratorConfig, GeneratorSettings, ManifestSettings

__all__ = [
    "load_config",
    "CONFIG_FILENAME",
    "GeneratorConfig",
    "GeneratorSettings",
    "ManifestSettings",
]

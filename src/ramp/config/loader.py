"""Configuration loading from ramp.toml."""

import tomllib
from pathlib import Path

from ramp.config.models import GeneratorConfig

CONFIG_FILENAME = "ramp.toml"


def load_config(config_path: Path | None = None) -> GeneratorConfig:
    """Load generator configuration from a TOML file.

    Relative paths in the file are resolved against the file's directory.

    Args:
        config_path: Path to ramp.toml. When ``None``, ``ramp.toml`` in the
            current directory is used if present, otherwise defaults.

    Returns:
        GeneratorConfig

    Raises:
        FileNotFoundError: If *config_path* is given but doesn't exist
        ValueError: If the file is not valid TOML or has invalid values
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return GeneratorConfig()
    elif not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    config = GeneratorConfig.model_validate(data)

    base_dir = config_path.resolve().parent
    generator = config.generator
    for attr in ("schema_path", "output", "templates"):
        value = getattr(generator, attr)
        if value is not None:
            setattr(generator, attr, str(base_dir / value))

    return config

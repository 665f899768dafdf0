"""Pydantic models for generator configuration."""

from pydantic import BaseModel, ConfigDict, Field

from ramp.manifest.store import MANIFEST_FILENAME


# ============================================================================
# Configuration Models
# ============================================================================


class GeneratorSettings(BaseModel):
    """``[generator]`` table of ramp.toml."""

    schema_path: str | None = Field(default=None, alias="schema")
    output: str | None = None
    templates: str | None = None
    extension: str = "tsx"

    model_config = ConfigDict(populate_by_name=True)


class ManifestSettings(BaseModel):
    """``[manifest]`` table of ramp.toml."""

    file: str = MANIFEST_FILENAME
    lock_timeout: float = Field(default=30.0, ge=0)


class GeneratorConfig(BaseModel):
    """Complete configuration from ramp.toml."""

    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    manifest: ManifestSettings = Field(default_factory=ManifestSettings)

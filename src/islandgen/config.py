"""Island generation configuration models."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .biomes import BiomePreset, get_preset, resolve_preset


class _CamelModel(BaseModel):
    """Accepts camelCase keys (as written by preview tooling) and snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LakeConfig(_CamelModel):
    """Depression-to-lake conversion parameters."""

    min_lake_depth: float = Field(default=0.05, description="Minimum depression depth to become a lake")
    min_lake_corners: int = Field(default=5, description="Minimum filled corners in a depression")
    max_lakes: int = Field(default=8, description="Maximum number of lakes created")


class RiverConfig(_CamelModel):
    """Drainage and river network parameters."""

    rainfall: float = Field(default=1.0, description="Water added per land corner")
    threshold: float = Field(default=15.0, description="Accumulated flow needed at a river mouth")
    min_tributary: float = Field(default=3.0, description="Minimum flow to keep tracing upstream")
    lakes: LakeConfig = Field(default_factory=LakeConfig)


class MoistureConfig(_CamelModel):
    """Moisture propagation parameters."""

    decay: float = Field(default=0.9, description="Moisture multiplier per step")
    uphill_penalty: float = Field(default=0.7, description="Extra multiplier when moving uphill")
    river_moisture: float = Field(default=0.8, description="Initial moisture of river-adjacent land")


class DomainWarpConfig(_CamelModel):
    """Domain warping of elevation noise coordinates."""

    enabled: bool = Field(default=False, description="Warp elevation sample coordinates")
    amplitude: float = Field(default=1524.0, description="Maximum displacement in world units")
    frequency: float = Field(default=0.00004, description="Warp noise frequency")


class IslandConfig(_CamelModel):
    """Complete island generation configuration."""

    seed: int = Field(default=42, description="Random seed for reproducibility")
    radius: float = Field(default=15000.0, gt=0, description="Island radius in world units")
    region_count: int = Field(default=2000, ge=3, description="Number of interior regions")
    lloyd_iterations: int = Field(default=2, ge=0, description="Lloyd relaxation passes")
    center: tuple[float, float] = Field(default=(0.0, 0.0), description="Island center")

    # Shape and elevation
    interior_boost: float = Field(default=0.35, description="Elevation boost at the center")
    noise_amplitude: float = Field(default=0.4, description="Elevation noise amplitude")
    noise_frequency: float = Field(default=0.00008, description="Elevation noise frequency")
    falloff_start: float = Field(
        default=0.7, gt=0, lt=1, description="Normalized radius where the edge falloff begins"
    )
    shape_variation: float = Field(default=0.3, description="Coastline irregularity")
    noise_octaves: int = Field(default=4, ge=1, description="Number of octaves for fBm")
    noise_lacunarity: float = Field(default=2.0, description="Frequency multiplier per octave")
    noise_gain: float = Field(default=0.5, description="Amplitude multiplier per octave")
    ridged_weight: float = Field(
        default=0.0, ge=0, le=1, description="Blend of ridged noise into elevation noise"
    )
    domain_warp: DomainWarpConfig = Field(default_factory=DomainWarpConfig)

    rivers: RiverConfig = Field(default_factory=RiverConfig)
    moisture: MoistureConfig = Field(default_factory=MoistureConfig)
    biome_config: str | BiomePreset = Field(
        default="tropical", description="Biome preset name or inline preset"
    )

    @field_validator("biome_config")
    @classmethod
    def _known_preset(cls, value: str | BiomePreset) -> str | BiomePreset:
        if isinstance(value, str):
            get_preset(value)
        return value

    @property
    def biome_preset(self) -> BiomePreset:
        """Resolved biome preset."""
        return resolve_preset(self.biome_config)


def load_config(config_path: Path) -> IslandConfig:
    """Load configuration from a TOML file.

    The file may name a template (``template = "atoll"``) whose values are
    then overridden by the remaining keys, or hold a complete configuration.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed IslandConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        UnknownTemplateError: If the named template doesn't exist.
    """
    with open(config_path, "rb") as f:
        data: dict[str, Any] = tomllib.load(f)

    template = data.pop("template", None)
    if template is not None:
        from .templates import merge_template

        return merge_template(template, data)
    return IslandConfig.model_validate(data)

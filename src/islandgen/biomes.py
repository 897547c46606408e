"""Biome classification from region elevation and moisture.

A biome preset defines ascending elevation bands, ascending moisture bands
and a lookup matrix from (elevation band, moisture band) to a biome tag.
"""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel, to_snake

from .exceptions import UnknownBiomePresetError


class IslandBiome(str, Enum):
    """Biome tags assigned to island regions."""

    # Ocean
    DEEP_OCEAN = "deep_ocean"
    OCEAN = "ocean"
    REEF = "reef"

    # Inland water
    LAKE = "lake"

    # Coastal
    SANDY_BEACH = "sandy_beach"
    BEACH = "beach"
    MANGROVE = "mangrove"

    # Lowland
    GRASSLAND = "grassland"
    WOODLAND = "woodland"
    JUNGLE = "jungle"

    # Midland
    SHRUBLAND = "shrubland"
    FOREST = "forest"
    RAINFOREST = "rainforest"

    # Highland
    ROCKY = "rocky"
    ALPINE_MEADOW = "alpine_meadow"
    CLOUD_FOREST = "cloud_forest"

    # Peak
    BARE_ROCK = "bare_rock"
    SNOW = "snow"


# Band names in ascending order; anything above the last threshold is "peak"
ELEVATION_BANDS = ("deep_ocean", "ocean", "beach", "low", "mid", "high")
ELEVATION_BAND_NAMES = ELEVATION_BANDS + ("peak",)
MOISTURE_BANDS = ("dry", "moderate")
MOISTURE_BAND_NAMES = MOISTURE_BANDS + ("wet",)

BIOME_COLORS: dict[IslandBiome, str] = {
    IslandBiome.DEEP_OCEAN: "#0a2463",
    IslandBiome.OCEAN: "#1a4a7a",
    IslandBiome.REEF: "#2c81b6",
    IslandBiome.LAKE: "#1a8a8a",
    IslandBiome.SANDY_BEACH: "#dfd0ba",
    IslandBiome.BEACH: "#c9b896",
    IslandBiome.MANGROVE: "#3a5f4a",
    IslandBiome.GRASSLAND: "#9abf7f",
    IslandBiome.WOODLAND: "#7a9f5f",
    IslandBiome.JUNGLE: "#2d5a27",
    IslandBiome.SHRUBLAND: "#8a9a6a",
    IslandBiome.FOREST: "#376b30",
    IslandBiome.RAINFOREST: "#1a4a1a",
    IslandBiome.ROCKY: "#7a7a7a",
    IslandBiome.ALPINE_MEADOW: "#8aaa8a",
    IslandBiome.CLOUD_FOREST: "#2a5a3a",
    IslandBiome.BARE_ROCK: "#6b6b6b",
    IslandBiome.SNOW: "#dae2df",
}

UNKNOWN_BIOME_COLOR = "#ff00ff"


def _check_ascending(values: Iterable[float], what: str) -> None:
    values = list(values)
    for lower, upper in zip(values, values[1:]):
        if not lower < upper:
            raise ValueError(f"{what} thresholds must be strictly ascending: {values}")


class ElevationBands(BaseModel):
    """Upper (exclusive) elevation bound of each band."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    deep_ocean: float
    ocean: float
    beach: float
    low: float
    mid: float
    high: float

    @model_validator(mode="after")
    def _ascending(self) -> "ElevationBands":
        _check_ascending((getattr(self, name) for name in ELEVATION_BANDS), "Elevation")
        return self


class MoistureBands(BaseModel):
    """Upper (exclusive) moisture bound of each band."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    dry: float
    moderate: float

    @model_validator(mode="after")
    def _ascending(self) -> "MoistureBands":
        _check_ascending((self.dry, self.moderate), "Moisture")
        return self


class BiomePreset(BaseModel):
    """Complete biome lookup table for one climate."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    elevation: ElevationBands
    moisture: MoistureBands
    matrix: dict[str, dict[str, IslandBiome]]

    @field_validator("matrix", mode="before")
    @classmethod
    def _normalize_band_names(cls, value: dict) -> dict:
        # Accept "deepOcean" as well as "deep_ocean"
        if not isinstance(value, dict):
            return value
        return {to_snake(band): row for band, row in value.items()}

    @model_validator(mode="after")
    def _complete_matrix(self) -> "BiomePreset":
        for band in ELEVATION_BAND_NAMES:
            row = self.matrix.get(band)
            if row is None:
                raise ValueError(f"Biome matrix missing elevation band '{band}'")
            missing = [m for m in MOISTURE_BAND_NAMES if m not in row]
            if missing:
                raise ValueError(
                    f"Biome matrix band '{band}' missing moisture bands {missing}"
                )
        return self


def _row(dry: IslandBiome, moderate: IslandBiome, wet: IslandBiome) -> dict[str, IslandBiome]:
    return {"dry": dry, "moderate": moderate, "wet": wet}


B = IslandBiome

TROPICAL_PRESET = BiomePreset(
    name="tropical",
    # Ocean boundary at 0.0 matches the sea level used for is_ocean
    elevation=ElevationBands(deep_ocean=-0.4, ocean=0.0, beach=0.05, low=0.3, mid=0.6, high=0.85),
    moisture=MoistureBands(dry=0.2, moderate=0.5),
    matrix={
        "deep_ocean": _row(B.DEEP_OCEAN, B.DEEP_OCEAN, B.DEEP_OCEAN),
        "ocean": _row(B.OCEAN, B.OCEAN, B.REEF),
        "beach": _row(B.SANDY_BEACH, B.BEACH, B.MANGROVE),
        "low": _row(B.GRASSLAND, B.WOODLAND, B.JUNGLE),
        "mid": _row(B.SHRUBLAND, B.FOREST, B.RAINFOREST),
        "high": _row(B.ROCKY, B.ALPINE_MEADOW, B.CLOUD_FOREST),
        "peak": _row(B.BARE_ROCK, B.SNOW, B.SNOW),
    },
)

TEMPERATE_PRESET = BiomePreset(
    name="temperate",
    elevation=ElevationBands(deep_ocean=-0.4, ocean=0.0, beach=0.05, low=0.25, mid=0.5, high=0.75),
    moisture=MoistureBands(dry=0.25, moderate=0.55),
    matrix={
        "deep_ocean": _row(B.DEEP_OCEAN, B.DEEP_OCEAN, B.DEEP_OCEAN),
        "ocean": _row(B.OCEAN, B.OCEAN, B.OCEAN),
        "beach": _row(B.SANDY_BEACH, B.BEACH, B.BEACH),
        "low": _row(B.GRASSLAND, B.GRASSLAND, B.WOODLAND),
        "mid": _row(B.SHRUBLAND, B.FOREST, B.FOREST),
        "high": _row(B.ROCKY, B.ALPINE_MEADOW, B.FOREST),
        "peak": _row(B.BARE_ROCK, B.SNOW, B.SNOW),
    },
)

ARCTIC_PRESET = BiomePreset(
    name="arctic",
    elevation=ElevationBands(deep_ocean=-0.4, ocean=0.0, beach=0.05, low=0.2, mid=0.4, high=0.6),
    moisture=MoistureBands(dry=0.3, moderate=0.6),
    matrix={
        "deep_ocean": _row(B.DEEP_OCEAN, B.DEEP_OCEAN, B.DEEP_OCEAN),
        "ocean": _row(B.OCEAN, B.OCEAN, B.OCEAN),
        "beach": _row(B.BEACH, B.BEACH, B.BEACH),
        "low": _row(B.ROCKY, B.GRASSLAND, B.GRASSLAND),
        "mid": _row(B.ROCKY, B.ALPINE_MEADOW, B.ALPINE_MEADOW),
        "high": _row(B.BARE_ROCK, B.SNOW, B.SNOW),
        "peak": _row(B.SNOW, B.SNOW, B.SNOW),
    },
)

BIOME_PRESETS: dict[str, BiomePreset] = {
    "tropical": TROPICAL_PRESET,
    "temperate": TEMPERATE_PRESET,
    "arctic": ARCTIC_PRESET,
}


def get_preset(name: str) -> BiomePreset:
    """Look up a biome preset by name.

    Raises:
        UnknownBiomePresetError: If no preset has this name.
    """
    try:
        return BIOME_PRESETS[name]
    except KeyError:
        raise UnknownBiomePresetError(
            f"Unknown biome preset '{name}'. Available presets: {sorted(BIOME_PRESETS)}"
        ) from None


def resolve_preset(config: str | BiomePreset) -> BiomePreset:
    """Return the preset for a name, or the preset itself if given inline."""
    if isinstance(config, BiomePreset):
        return config
    return get_preset(config)


def elevation_band(elevation: float, bands: ElevationBands) -> str:
    """Name of the elevation band containing an elevation."""
    for name in ELEVATION_BANDS:
        if elevation < getattr(bands, name):
            return name
    return "peak"


def moisture_band(moisture: float, bands: MoistureBands) -> str:
    """Name of the moisture band containing a moisture value."""
    for name in MOISTURE_BANDS:
        if moisture < getattr(bands, name):
            return name
    return "wet"


def classify_biome(elevation: float, moisture: float, preset: BiomePreset) -> IslandBiome:
    """Classify a single region.

    Args:
        elevation: Region elevation, roughly [-1, 1].
        moisture: Region moisture in [0, 1].
        preset: Biome preset providing bands and lookup matrix.

    Returns:
        The biome tag for this elevation/moisture combination.
    """
    elev_band = elevation_band(elevation, preset.elevation)
    moist_band = moisture_band(moisture, preset.moisture)
    return preset.matrix[elev_band][moist_band]


def assign_biomes(regions: list, preset: BiomePreset) -> None:
    """Assign a biome to every region draft in place.

    Lakes bypass the lookup table and always receive ``IslandBiome.LAKE``.
    """
    for region in regions:
        if region.is_lake:
            region.biome = IslandBiome.LAKE
        else:
            region.biome = classify_biome(region.elevation, region.moisture, preset)


def biome_color(biome: IslandBiome | str | None) -> str:
    """Hex color for a biome tag, magenta for anything unknown."""
    try:
        return BIOME_COLORS[IslandBiome(biome)]
    except ValueError:
        return UNKNOWN_BIOME_COLOR

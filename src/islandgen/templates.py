"""Named island templates: full default configurations for common island types."""

import copy
from typing import Any, Mapping

from pydantic.alias_generators import to_snake

from .config import IslandConfig
from .exceptions import UnknownTemplateError

# Central peak with radial drainage, dense jungle lowlands
TROPICAL_VOLCANIC: dict[str, Any] = {
    "name": "Tropical Volcanic",
    "region_count": 2000,
    "radius": 30000,
    "lloyd_iterations": 2,
    "interior_boost": 0.4,
    "noise_amplitude": 0.35,
    "noise_frequency": 0.0003,
    "falloff_start": 0.6,
    "shape_variation": 0.25,
    "rivers": {
        "rainfall": 1.0,
        "threshold": 12,
        "lakes": {"min_lake_depth": 0.04, "min_lake_corners": 4, "max_lakes": 6},
    },
    "moisture": {"decay": 0.92, "uphill_penalty": 0.7, "river_moisture": 0.85},
    "biome_config": "tropical",
}

# Several small landmasses with shallow seas between them
ARCHIPELAGO: dict[str, Any] = {
    "name": "Archipelago",
    "region_count": 2500,
    "radius": 35000,
    "lloyd_iterations": 2,
    "interior_boost": 0.15,
    "noise_amplitude": 0.5,
    "noise_frequency": 0.0004,
    "falloff_start": 0.5,
    "shape_variation": 0.4,
    "rivers": {
        "rainfall": 0.8,
        "threshold": 10,
        "lakes": {"min_lake_depth": 0.03, "min_lake_corners": 3, "max_lakes": 10},
    },
    "moisture": {"decay": 0.95, "uphill_penalty": 0.8, "river_moisture": 0.7},
    "biome_config": "tropical",
}

# Mountain range with perpendicular river valleys, strong rain shadow
CONTINENTAL: dict[str, Any] = {
    "name": "Continental",
    "region_count": 3000,
    "radius": 40000,
    "lloyd_iterations": 2,
    "interior_boost": 0.3,
    "noise_amplitude": 0.45,
    "noise_frequency": 0.00025,
    "falloff_start": 0.65,
    "shape_variation": 0.2,
    "rivers": {
        "rainfall": 1.2,
        "threshold": 18,
        "lakes": {"min_lake_depth": 0.06, "min_lake_corners": 6, "max_lakes": 5},
    },
    "moisture": {"decay": 0.88, "uphill_penalty": 0.6, "river_moisture": 0.75},
    "biome_config": "temperate",
}

ARCTIC: dict[str, Any] = {
    "name": "Arctic",
    "region_count": 1500,
    "radius": 25000,
    "lloyd_iterations": 2,
    "interior_boost": 0.2,
    "noise_amplitude": 0.3,
    "noise_frequency": 0.0003,
    "falloff_start": 0.7,
    "shape_variation": 0.15,
    "rivers": {
        "rainfall": 0.5,
        "threshold": 8,
        "lakes": {"min_lake_depth": 0.03, "min_lake_corners": 4, "max_lakes": 8},
    },
    "moisture": {"decay": 0.85, "uphill_penalty": 0.9, "river_moisture": 0.6},
    "biome_config": "arctic",
}

# Ring-shaped, very low elevation, central lagoon
ATOLL: dict[str, Any] = {
    "name": "Atoll",
    "region_count": 1200,
    "radius": 20000,
    "lloyd_iterations": 2,
    "interior_boost": 0.08,
    "noise_amplitude": 0.15,
    "noise_frequency": 0.0005,
    "falloff_start": 0.4,
    "shape_variation": 0.3,
    "rivers": {
        "rainfall": 0.3,
        "threshold": 15,
        "lakes": {"min_lake_depth": 0.02, "min_lake_corners": 3, "max_lakes": 3},
    },
    "moisture": {"decay": 0.95, "uphill_penalty": 0.9, "river_moisture": 0.9},
    "biome_config": "tropical",
}

ISLAND_TEMPLATES: dict[str, dict[str, Any]] = {
    "tropical_volcanic": TROPICAL_VOLCANIC,
    "archipelago": ARCHIPELAGO,
    "continental": CONTINENTAL,
    "arctic": ARCTIC,
    "atoll": ATOLL,
}


def get_template_names() -> list[str]:
    """List available template names."""
    return list(ISLAND_TEMPLATES)


def get_template(name: str) -> dict[str, Any]:
    """Return a copy of a template's raw values.

    Raises:
        UnknownTemplateError: If no template has this name.
    """
    try:
        return copy.deepcopy(ISLAND_TEMPLATES[name])
    except KeyError:
        raise UnknownTemplateError(
            f"Unknown template '{name}'. Available templates: {get_template_names()}"
        ) from None


def _normalize_keys(values: Mapping[str, Any]) -> dict[str, Any]:
    """Convert camelCase keys to snake_case, recursing into nested sections."""
    result: dict[str, Any] = {}
    for key, value in values.items():
        key = to_snake(key)
        # Inline biome presets carry their own aliases; leave them to pydantic
        if isinstance(value, Mapping) and key != "biome_config":
            value = _normalize_keys(value)
        result[key] = value
    return result


def _deep_merge(base: dict[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge overrides into base; nested sections are merged, not replaced."""
    merged = dict(base)
    for key, value in overrides.items():
        if (
            isinstance(value, Mapping)
            and isinstance(merged.get(key), dict)
            and key != "biome_config"
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_template(
    template_name: str,
    overrides: Mapping[str, Any] | None = None,
) -> IslandConfig:
    """Build a configuration from a template with field-by-field overrides.

    Nested sections (``rivers``, ``rivers.lakes``, ``moisture``,
    ``domain_warp``) are merged key by key rather than replaced.

    Args:
        template_name: Template name, e.g. ``"tropical_volcanic"``.
        overrides: Values replacing the template's, in snake_case or camelCase.

    Returns:
        Validated IslandConfig.

    Raises:
        UnknownTemplateError: If the template doesn't exist.
        UnknownBiomePresetError: If the merged biome preset name is unknown.
    """
    template = get_template(template_name)
    template.pop("name", None)
    merged = _deep_merge(template, _normalize_keys(overrides or {}))
    return IslandConfig.model_validate(merged)

"""Tests for configuration models, templates and TOML loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from islandgen.biomes import ARCTIC_PRESET, TROPICAL_PRESET
from islandgen.config import IslandConfig, load_config
from islandgen.exceptions import UnknownBiomePresetError, UnknownTemplateError
from islandgen.templates import get_template, get_template_names, merge_template


class TestIslandConfig:
    """Tests for IslandConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = IslandConfig()
        assert config.radius == 15000
        assert config.region_count == 2000
        assert config.lloyd_iterations == 2
        assert config.center == (0.0, 0.0)
        assert config.interior_boost == 0.35
        assert config.noise_frequency == 0.00008
        assert config.rivers.threshold == 15
        assert config.rivers.lakes.max_lakes == 8
        assert config.moisture.decay == 0.9
        assert config.domain_warp.enabled is False
        assert config.biome_preset is TROPICAL_PRESET

    def test_camel_case_keys(self) -> None:
        """JSON-style camelCase keys are accepted."""
        config = IslandConfig.model_validate(
            {"regionCount": 400, "interiorBoost": 0.2, "rivers": {"minTributary": 5}}
        )
        assert config.region_count == 400
        assert config.interior_boost == 0.2
        assert config.rivers.min_tributary == 5

    def test_unknown_biome_preset(self) -> None:
        with pytest.raises(UnknownBiomePresetError):
            IslandConfig(biome_config="desert")

    def test_inline_preset(self) -> None:
        config = IslandConfig(biome_config=ARCTIC_PRESET.model_dump())
        assert config.biome_preset == ARCTIC_PRESET

    @pytest.mark.parametrize(
        "field, value",
        [("radius", 0), ("region_count", 2), ("falloff_start", 1.0), ("ridged_weight", 1.5)],
    )
    def test_invalid_values(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            IslandConfig(**{field: value})


class TestTemplates:
    """Tests for named templates."""

    def test_names(self) -> None:
        assert get_template_names() == [
            "tropical_volcanic",
            "archipelago",
            "continental",
            "arctic",
            "atoll",
        ]

    def test_every_template_validates(self) -> None:
        for name in get_template_names():
            assert isinstance(merge_template(name), IslandConfig)

    def test_tropical_volcanic_values(self) -> None:
        config = merge_template("tropical_volcanic")
        assert config.region_count == 2000
        assert config.radius == 30000
        assert config.interior_boost == 0.4
        assert config.falloff_start == 0.6
        assert config.rivers.threshold == 12
        assert config.rivers.lakes.min_lake_corners == 4
        assert config.moisture.river_moisture == 0.85
        assert config.biome_config == "tropical"

    def test_overrides_replace_top_level(self) -> None:
        config = merge_template("atoll", {"seed": 99, "radius": 5000})
        assert config.seed == 99
        assert config.radius == 5000
        assert config.region_count == 1200

    def test_nested_overrides_merge(self) -> None:
        """Overriding one nested key keeps the template's siblings."""
        config = merge_template("continental", {"rivers": {"lakes": {"max_lakes": 1}}})
        assert config.rivers.lakes.max_lakes == 1
        assert config.rivers.lakes.min_lake_corners == 6
        assert config.rivers.threshold == 18

    def test_camel_case_overrides(self) -> None:
        config = merge_template("arctic", {"regionCount": 300, "moisture": {"uphillPenalty": 0.5}})
        assert config.region_count == 300
        assert config.moisture.uphill_penalty == 0.5
        assert config.moisture.decay == 0.85

    def test_template_not_mutated(self) -> None:
        merge_template("archipelago", {"rivers": {"threshold": 1}})
        assert get_template("archipelago")["rivers"]["threshold"] == 10

    def test_unknown_template(self) -> None:
        with pytest.raises(UnknownTemplateError, match="volcano"):
            merge_template("volcano")

    def test_unknown_biome_in_override(self) -> None:
        with pytest.raises(UnknownBiomePresetError):
            merge_template("atoll", {"biome_config": "desert"})


class TestLoadConfig:
    """Tests for TOML config files."""

    def test_plain_config(self, tmp_path: Path) -> None:
        path = tmp_path / "island.toml"
        path.write_text(
            "seed = 5\nregion_count = 600\n\n[rivers]\nthreshold = 9.0\n"
        )
        config = load_config(path)
        assert config.seed == 5
        assert config.region_count == 600
        assert config.rivers.threshold == 9.0
        assert config.rivers.min_tributary == 3.0

    def test_template_config(self, tmp_path: Path) -> None:
        path = tmp_path / "island.toml"
        path.write_text('template = "atoll"\nseed = 8\n\n[moisture]\ndecay = 0.5\n')
        config = load_config(path)
        assert config.seed == 8
        assert config.region_count == 1200
        assert config.moisture.decay == 0.5
        assert config.moisture.river_moisture == 0.9

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

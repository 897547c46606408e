"""Tests for noise sampling."""

import pytest

from islandgen.config import DomainWarpConfig, IslandConfig
from islandgen.noise import DomainWarp, FractalNoise, IslandNoise, smoothstep

SAMPLE_POINTS = [(x * 1234.5, y * 987.6) for x in range(-5, 6) for y in range(-5, 6)]


class TestFractalNoise:
    """Tests for the fBm and ridged channels."""

    def test_deterministic_with_same_seed(self) -> None:
        """Same seed produces identical samples."""
        a = FractalNoise(123, 0.0003)
        b = FractalNoise(123, 0.0003)
        assert [a.fbm(x, y) for x, y in SAMPLE_POINTS] == [b.fbm(x, y) for x, y in SAMPLE_POINTS]

    def test_different_seed_different_output(self) -> None:
        """Different seeds produce different samples."""
        a = FractalNoise(123, 0.0003)
        b = FractalNoise(456, 0.0003)
        assert [a.fbm(x, y) for x, y in SAMPLE_POINTS] != [b.fbm(x, y) for x, y in SAMPLE_POINTS]

    def test_fbm_range(self) -> None:
        """fBm stays roughly within [-1, 1]."""
        noise = FractalNoise(42, 0.0005, octaves=5)
        for x, y in SAMPLE_POINTS:
            assert -1.5 <= noise.fbm(x, y) <= 1.5

    def test_ridged_range(self) -> None:
        """Ridged noise is within [0, 1]."""
        noise = FractalNoise(42, 0.0005)
        for x, y in SAMPLE_POINTS:
            assert 0.0 <= noise.ridged(x, y) <= 1.0

    def test_single_octave_normalization(self) -> None:
        """With one octave the amplitude sum is 1, so fbm is the raw noise."""
        noise = FractalNoise(9, 0.001, octaves=1)
        assert noise._max_amplitude == 1.0


class TestDomainWarp:
    """Tests for coordinate warping."""

    def test_displacement_bounded_by_amplitude(self) -> None:
        """Warped coordinates move at most by the amplitude on each axis."""
        warp = DomainWarp(5, amplitude=1524.0, frequency=0.00004)
        for x, y in SAMPLE_POINTS:
            wx, wy = warp.warp(x, y)
            assert abs(wx - x) <= 1524.0 + 1e-9
            assert abs(wy - y) <= 1524.0 + 1e-9

    def test_zero_amplitude_is_identity(self) -> None:
        """Zero amplitude leaves coordinates unchanged."""
        warp = DomainWarp(5, amplitude=0.0, frequency=0.00004)
        assert warp.warp(100.0, -200.0) == (100.0, -200.0)


class TestIslandNoise:
    """Tests for the per-generation noise bundle."""

    def test_from_config_defaults(self) -> None:
        """Default config builds no warp and no ridged channel."""
        noise = IslandNoise.from_config(8042, IslandConfig())
        assert noise.warp is None
        assert noise.ridged is None
        assert noise.ridged_weight == 0.0

    def test_from_config_with_warp_and_ridges(self) -> None:
        """Enabled warp and ridged weight create their channels."""
        config = IslandConfig(domain_warp=DomainWarpConfig(enabled=True), ridged_weight=0.3)
        noise = IslandNoise.from_config(8042, config)
        assert noise.warp is not None
        assert noise.ridged is not None
        assert noise.ridged_weight == 0.3

    def test_warp_changes_elevation(self) -> None:
        """Enabling the warp moves where elevation is sampled."""
        plain = IslandNoise.from_config(8042, IslandConfig())
        warped = IslandNoise.from_config(
            8042, IslandConfig(domain_warp=DomainWarpConfig(enabled=True, amplitude=3000.0))
        )
        differing = sum(
            plain.sample_elevation(x, y) != warped.sample_elevation(x, y) for x, y in SAMPLE_POINTS
        )
        assert differing > len(SAMPLE_POINTS) // 2

    def test_ridged_weight_changes_elevation(self) -> None:
        """A ridged weight blends the ridged channel into elevation."""
        plain = IslandNoise.from_config(8042, IslandConfig())
        ridged = IslandNoise.from_config(8042, IslandConfig(ridged_weight=0.5))
        for x, y in SAMPLE_POINTS:
            ridge = ridged.ridged.ridged(x, y) * 2.0 - 1.0
            expected = plain.sample_elevation(x, y) * 0.5 + ridge * 0.5
            assert ridged.sample_elevation(x, y) == pytest.approx(expected)
        assert any(
            plain.sample_elevation(x, y) != ridged.sample_elevation(x, y) for x, y in SAMPLE_POINTS
        )

    def test_instances_are_independent(self) -> None:
        """Building a second bundle does not change the first one's samples."""
        first = IslandNoise.from_config(1, IslandConfig())
        before = first.sample_elevation(500.0, 700.0)
        IslandNoise.from_config(2, IslandConfig())
        assert first.sample_elevation(500.0, 700.0) == before

    def test_shape_channel_seeded_separately(self) -> None:
        """Shape samples differ from elevation samples at the same point."""
        noise = IslandNoise.from_config(77, IslandConfig(noise_frequency=0.5))
        points = [(0.3, 1.1), (1.7, -0.4), (-1.2, 0.9)]
        assert any(noise.sample_elevation(x, y) != noise.sample_shape(x, y) for x, y in points)


class TestSmoothstep:
    """Tests for smoothstep interpolation."""

    @pytest.mark.parametrize(
        "x, expected",
        [(-1.0, 0.0), (0.0, 0.0), (0.5, 0.5), (1.0, 1.0), (2.0, 1.0)],
    )
    def test_values(self, x: float, expected: float) -> None:
        """Clamped Hermite curve through the key points."""
        assert smoothstep(0.0, 1.0, x) == pytest.approx(expected)

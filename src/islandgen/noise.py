"""Noise sampling for island elevation and coastline shape.

Provides fBm (fractal Brownian motion), ridged multifractal and domain
warping on top of seeded OpenSimplex noise. Every sampler is an explicitly
constructed object; nothing is kept in module state, so generations with
different seeds never interfere.
"""

from opensimplex import OpenSimplex

from .config import IslandConfig

# Seed offsets of the independent channels, relative to the noise seed
SHAPE_SEED_OFFSET = 1000
WARP_SEED_OFFSET = 100
RIDGED_SEED_OFFSET = 500

# Shape channel; the island mask samples it on a circle of radius 2
SHAPE_FREQUENCY = 0.5
SHAPE_OCTAVES = 3


class FractalNoise:
    """Seeded fractal noise channel.

    Each octave uses its own OpenSimplex generator (seed + octave index),
    so octaves are decorrelated.
    """

    def __init__(
        self,
        seed: int,
        frequency: float,
        octaves: int = 4,
        lacunarity: float = 2.0,
        gain: float = 0.5,
    ):
        """Initialize the channel.

        Args:
            seed: Random seed for the channel.
            frequency: Frequency of the base octave (multiplies coordinates).
            octaves: Number of noise layers to sum.
            lacunarity: Frequency multiplier between octaves.
            gain: Amplitude multiplier between octaves.
        """
        self.seed = seed
        self.frequency = frequency
        self.octaves = octaves
        self.lacunarity = lacunarity
        self.gain = gain
        self._generators = [OpenSimplex(seed=seed + i) for i in range(octaves)]

        max_amplitude = 0.0
        amplitude = 1.0
        for _ in range(octaves):
            max_amplitude += amplitude
            amplitude *= gain
        self._max_amplitude = max_amplitude

    def fbm(self, x: float, y: float) -> float:
        """Sample fBm noise, roughly in [-1, 1]."""
        total = 0.0
        frequency = self.frequency
        amplitude = 1.0
        for generator in self._generators:
            total += amplitude * generator.noise2(x * frequency, y * frequency)
            frequency *= self.lacunarity
            amplitude *= self.gain
        return total / self._max_amplitude

    def ridged(self, x: float, y: float, offset: float = 1.0) -> float:
        """Sample ridged multifractal noise, in [0, 1].

        Creates sharp ridges by taking absolute value and inverting,
        useful for mountain ranges.
        """
        total = 0.0
        frequency = self.frequency
        amplitude = 1.0
        weight = 1.0
        for generator in self._generators:
            signal = offset - abs(generator.noise2(x * frequency, y * frequency))
            signal = signal * signal * weight
            total += signal * amplitude

            weight = min(max(signal * 2.0, 0.0), 1.0)
            frequency *= self.lacunarity
            amplitude *= self.gain
        return total / self._max_amplitude


class DomainWarp:
    """Offsets sample coordinates using two independent noise channels."""

    def __init__(self, seed: int, amplitude: float, frequency: float, octaves: int = 3):
        self.amplitude = amplitude
        self._warp_x = FractalNoise(seed, frequency, octaves=octaves)
        self._warp_y = FractalNoise(seed + 1, frequency, octaves=octaves)

    def warp(self, x: float, y: float) -> tuple[float, float]:
        """Return warped coordinates, displaced by at most ``amplitude``."""
        return (
            x + self._warp_x.fbm(x, y) * self.amplitude,
            y + self._warp_y.fbm(x, y) * self.amplitude,
        )


class IslandNoise:
    """The noise channels used by one island generation.

    Holds the elevation channel (with optional warp and ridged blend) and
    the lower-frequency shape channel for coastline variation.
    """

    def __init__(
        self,
        elevation: FractalNoise,
        shape: FractalNoise,
        warp: DomainWarp | None = None,
        ridged: FractalNoise | None = None,
        ridged_weight: float = 0.0,
    ):
        self.elevation = elevation
        self.shape = shape
        self.warp = warp
        self.ridged = ridged
        self.ridged_weight = ridged_weight if ridged is not None else 0.0

    @classmethod
    def from_config(cls, seed: int, config: IslandConfig) -> "IslandNoise":
        """Build all channels for a generation.

        Args:
            seed: Noise seed (already offset from the world seed by the caller).
            config: Island configuration.

        Returns:
            Fresh IslandNoise instance.
        """
        elevation = FractalNoise(
            seed,
            config.noise_frequency,
            octaves=config.noise_octaves,
            lacunarity=config.noise_lacunarity,
            gain=config.noise_gain,
        )
        shape = FractalNoise(
            seed + SHAPE_SEED_OFFSET,
            SHAPE_FREQUENCY,
            octaves=SHAPE_OCTAVES,
        )

        warp = None
        if config.domain_warp.enabled:
            warp = DomainWarp(
                seed + WARP_SEED_OFFSET,
                config.domain_warp.amplitude,
                config.domain_warp.frequency,
            )

        ridged = None
        if config.ridged_weight > 0:
            ridged = FractalNoise(
                seed + RIDGED_SEED_OFFSET,
                config.noise_frequency,
                octaves=config.noise_octaves,
                lacunarity=config.noise_lacunarity,
                gain=config.noise_gain,
            )

        return cls(elevation, shape, warp=warp, ridged=ridged, ridged_weight=config.ridged_weight)

    def sample_elevation(self, x: float, y: float) -> float:
        """Sample elevation noise at world coordinates, roughly [-1, 1]."""
        if self.warp is not None:
            x, y = self.warp.warp(x, y)

        value = self.elevation.fbm(x, y)
        if self.ridged is not None and self.ridged_weight > 0:
            # Rescale ridged [0, 1] to [-1, 1] before blending
            ridge = self.ridged.ridged(x, y) * 2.0 - 1.0
            value = value * (1.0 - self.ridged_weight) + ridge * self.ridged_weight
        return value

    def sample_shape(self, x: float, y: float) -> float:
        """Sample coastline shape noise.

        Intended for points on a small circle (cos(angle) * 2, sin(angle) * 2)
        so the result has no seam where the angle wraps.
        """
        return self.shape.fbm(x, y)


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    """Smooth Hermite interpolation between 0 and 1."""
    t = min(max((x - edge0) / (edge1 - edge0), 0.0), 1.0)
    return t * t * (3.0 - 2.0 * t)

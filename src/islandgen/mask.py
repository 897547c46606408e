"""Radial island mask: land near the center, ocean beyond a noisy coastline."""

import math

from .noise import IslandNoise, smoothstep

# Depth reached at the effective coastline
EDGE_DEPTH = 0.8


def island_mask(
    x: float,
    y: float,
    center: tuple[float, float],
    radius: float,
    noise: IslandNoise,
    shape_variation: float = 0.3,
    interior_boost: float = 0.25,
    falloff_start: float = 0.7,
) -> float:
    """Elevation contribution of the island shape at a point.

    The effective radius varies with the angle around the center using the
    shape noise channel, which makes the coastline irregular.

    Args:
        x: World X coordinate.
        y: World Y coordinate.
        center: Island center.
        radius: Base island radius.
        noise: Noise channels; only the shape channel is sampled.
        shape_variation: Fractional radius variation.
        interior_boost: Elevation added at the center.
        falloff_start: Normalized distance where the descent to the sea begins.

    Returns:
        A value in [-1, interior_boost]: positive in the interior, falling to
        -0.8 at the effective radius and -1 beyond it.
    """
    dx = x - center[0]
    dy = y - center[1]
    dist = math.sqrt(dx * dx + dy * dy)

    angle = math.atan2(dy, dx)
    shape = noise.sample_shape(math.cos(angle) * 2.0, math.sin(angle) * 2.0)
    effective_radius = radius * (1.0 + shape * shape_variation)

    d = dist / effective_radius
    if d > 1.0:
        return -1.0
    if d < falloff_start:
        return interior_boost * (1.0 - d / falloff_start)

    t = (d - falloff_start) / (1.0 - falloff_start)
    return -smoothstep(0.0, 1.0, t) * EDGE_DEPTH

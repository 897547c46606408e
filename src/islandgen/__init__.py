"""Procedural polygonal island generation.

Builds an island as a graph of Voronoi regions, edges and corners carrying
elevation, drainage (rivers and lakes), moisture and biomes, from a seed and
a small set of shape and climate parameters.
"""

from .biomes import BIOME_PRESETS, BiomePreset, IslandBiome, biome_color, classify_biome
from .config import IslandConfig, LakeConfig, MoistureConfig, RiverConfig, load_config
from .exceptions import GraphFormatError, IslandError, UnknownBiomePresetError, UnknownTemplateError
from .generator import generate
from .graph import Corner, Edge, IslandGraph, Region
from .persistence import load_graph, save_graph
from .templates import get_template_names, merge_template
from .validation import ValidationResult, validate_graph

__all__ = [
    "BIOME_PRESETS",
    "BiomePreset",
    "Corner",
    "Edge",
    "GraphFormatError",
    "IslandBiome",
    "IslandConfig",
    "IslandError",
    "IslandGraph",
    "LakeConfig",
    "MoistureConfig",
    "Region",
    "RiverConfig",
    "UnknownBiomePresetError",
    "UnknownTemplateError",
    "ValidationResult",
    "biome_color",
    "classify_biome",
    "generate",
    "get_template_names",
    "load_config",
    "load_graph",
    "merge_template",
    "save_graph",
    "validate_graph",
]

from __future__ import annotations

from whittaker.analysis import DiscontinuityReport, discontinuity_report
from whittaker.biome import BIOME_COUNT, Biome, BiomeConfig, BiomeType
from whittaker.config import (
    load_biome_config,
    load_biome_configs,
    load_climate_configs,
    load_diagram,
    load_noise_config,
)
from whittaker.defaults import default_sampler
from whittaker.diagram import WhittakerDiagram, build_diagram
from whittaker.errors import ConfigurationError
from whittaker.grid import TerrainGrid, chunk_origin, generate_chunk, generate_terrain
from whittaker.palette import BIOME_COLORS, biome_rgb, shade_rgb
from whittaker.sampler import (
    SamplerSettings,
    TerrainSampler,
    mean_disagreeing_height,
    mean_height,
    vote_biomes,
)

__all__ = [
    "BIOME_COLORS",
    "BIOME_COUNT",
    "Biome",
    "BiomeConfig",
    "BiomeType",
    "ConfigurationError",
    "DiscontinuityReport",
    "SamplerSettings",
    "TerrainGrid",
    "TerrainSampler",
    "WhittakerDiagram",
    "biome_rgb",
    "build_diagram",
    "chunk_origin",
    "default_sampler",
    "discontinuity_report",
    "generate_chunk",
    "generate_terrain",
    "load_biome_config",
    "load_biome_configs",
    "load_climate_configs",
    "load_diagram",
    "load_noise_config",
    "mean_disagreeing_height",
    "mean_height",
    "shade_rgb",
    "vote_biomes",
]

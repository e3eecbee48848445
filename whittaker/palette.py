from __future__ import annotations

from typing import Mapping

import numpy as np

from whittaker.biome import BIOME_COUNT, BiomeType

RGB = tuple[int, int, int]

BIOME_COLORS: Mapping[BiomeType, RGB] = {
    BiomeType.TUNDRA: (255, 255, 255),
    BiomeType.TAIGA: (169, 169, 169),
    BiomeType.TEMPERATE_GRASSLAND: (47, 79, 79),
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: (0, 100, 0),
    BiomeType.TROPICAL_SEASONAL_FOREST: (50, 205, 50),
    BiomeType.DESERT: (255, 255, 0),
    BiomeType.SAVANNA: (189, 183, 107),
    BiomeType.TROPICAL_RAINFOREST: (173, 255, 47),
    BiomeType.MOUNTAIN: (139, 0, 0),
    BiomeType.COLD_OCEAN: (0, 0, 139),
    BiomeType.WARM_OCEAN: (0, 191, 255),
}


def color_lut(colors: Mapping[BiomeType, RGB] = BIOME_COLORS) -> np.ndarray:
    """Ordinal-indexed (BIOME_COUNT, 3) float table in [0, 1]."""

    lut = np.zeros((BIOME_COUNT, 3), dtype=np.float64)
    for t in BiomeType:
        lut[int(t)] = np.asarray(colors[t], dtype=np.float64) / 255.0
    return lut


def biome_rgb(biome: np.ndarray, colors: Mapping[BiomeType, RGB] = BIOME_COLORS) -> np.ndarray:
    b = np.asarray(biome)
    if b.ndim != 2:
        raise ValueError("biome must be HxW")
    return color_lut(colors)[b.astype(np.intp)]


def shade_rgb(
    biome: np.ndarray,
    height: np.ndarray,
    *,
    colors: Mapping[BiomeType, RGB] = BIOME_COLORS,
    floor: float = 0.2,
) -> np.ndarray:
    """Darken each biome color by relative height.

    Scaling HSB brightness with hue and saturation fixed is a uniform RGB
    scale, so the factor ``floor + (1 - floor) * t`` multiplies the color
    directly. ``t`` is the height normalized over ``[min(0, hmin),
    max(255, hmax)]``.
    """

    b = np.asarray(biome)
    h = np.asarray(height, dtype=np.float64)
    if b.ndim != 2:
        raise ValueError("biome must be HxW")
    if h.shape != b.shape:
        raise ValueError("height must match biome shape")

    floor = float(np.clip(float(floor), 0.0, 1.0))
    lo = min(0.0, float(np.min(h))) if h.size else 0.0
    hi = max(255.0, float(np.max(h))) if h.size else 255.0
    t = (h - lo) / (hi - lo)
    factor = floor + (1.0 - floor) * t
    rgb = biome_rgb(b, colors) * factor[..., None]
    return np.clip(rgb, 0.0, 1.0)

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from whittaker.sampler import TerrainSampler

logger = logging.getLogger(__name__)

DEFAULT_BAND_ROWS = 32


@dataclass(frozen=True)
class TerrainGrid:
    """Dense generation output; row ``j`` holds world ``y = origin_y + j``."""

    biome: np.ndarray
    height: np.ndarray
    temperature: np.ndarray
    humidity: np.ndarray
    origin: tuple[int, int] = (0, 0)

    @property
    def shape(self) -> tuple[int, int]:
        return self.biome.shape


def _bands(height: int, band_rows: int) -> list[tuple[int, int]]:
    return [(r, min(r + band_rows, height)) for r in range(0, height, band_rows)]


def generate_terrain(
    sampler: TerrainSampler,
    width: int,
    height: int,
    *,
    origin: tuple[int, int] = (0, 0),
    workers: int | None = None,
    band_rows: int = DEFAULT_BAND_ROWS,
) -> TerrainGrid:
    """Sample a width x height block of integer coordinates.

    Rows are split into bands evaluated on a thread pool. Each band reads
    only the sampler's immutable state and writes only its own rows, so no
    locking is needed. ``workers=1`` evaluates inline.
    """

    width = int(width)
    height = int(height)
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be > 0")
    band_rows = int(band_rows)
    if band_rows <= 0:
        raise ValueError("band_rows must be > 0")
    if workers is None:
        workers = min(8, os.cpu_count() or 1)
    workers = max(int(workers), 1)

    ox, oy = int(origin[0]), int(origin[1])
    xs = np.arange(width, dtype=np.float64) + ox

    biome = np.zeros((height, width), dtype=np.uint8)
    heights = np.zeros((height, width), dtype=np.int32)
    temp = np.zeros((height, width), dtype=np.float64)
    hum = np.zeros((height, width), dtype=np.float64)

    def run(band: tuple[int, int]) -> None:
        r0, r1 = band
        ys = np.arange(r0, r1, dtype=np.float64) + oy
        xg, yg = np.meshgrid(xs, ys)
        block = sampler.sample_grid(xg, yg)
        biome[r0:r1] = block.biome
        heights[r0:r1] = block.height
        temp[r0:r1] = block.temperature
        hum[r0:r1] = block.humidity

    bands = _bands(height, band_rows)
    t0 = time.perf_counter()
    if workers == 1 or len(bands) == 1:
        for band in bands:
            run(band)
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # list() re-raises the first worker exception.
            list(pool.map(run, bands))
    logger.info(
        "generated %dx%d terrain at (%d, %d) in %.1f ms (%d bands, %d workers)",
        width,
        height,
        ox,
        oy,
        (time.perf_counter() - t0) * 1000.0,
        len(bands),
        workers,
    )

    return TerrainGrid(
        biome=biome, height=heights, temperature=temp, humidity=hum, origin=(ox, oy)
    )


def chunk_origin(*, chunk_x: int, chunk_y: int, chunk_size: int) -> tuple[int, int]:
    s = int(chunk_size)
    if s <= 0:
        raise ValueError("chunk_size must be > 0")
    return int(chunk_x) * s, int(chunk_y) * s


def generate_chunk(
    sampler: TerrainSampler,
    *,
    chunk_x: int,
    chunk_y: int,
    chunk_size: int,
    workers: int | None = 1,
) -> TerrainGrid:
    """Chunk contract: (sampler, chunk_x, chunk_y, chunk_size) -> deterministic grid."""

    origin = chunk_origin(chunk_x=chunk_x, chunk_y=chunk_y, chunk_size=chunk_size)
    return generate_terrain(
        sampler, int(chunk_size), int(chunk_size), origin=origin, workers=workers
    )

"""Biome classification with boundary smoothing.

Every coordinate is classified nine times: once at the coordinate itself
(the home sample) and once at each of eight offsets around it. The offsets
move only the climate lookup; every height is evaluated at the undisplaced
coordinate with the classified biome's own height function. The biome label
is decided by vote and the height by averaging, which removes the hard steps
that appear where the polygon classification flips.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from coherent.config import NoiseConfig
from coherent.field import make_domain_warp, make_noise
from whittaker.biome import BIOME_COUNT, Biome, BiomeType
from whittaker.diagram import WhittakerDiagram
from whittaker.errors import ConfigurationError

logger = logging.getLogger(__name__)

_D = math.sqrt(0.5)

OFFSET_DIRECTIONS = np.array(
    [
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [_D, _D],
        [-_D, _D],
        [_D, -_D],
        [-_D, -_D],
    ],
    dtype=np.float64,
)


@dataclass(frozen=True)
class SamplerSettings:
    """Tunables of the smoothing filter.

    ``displacement_step`` scales the eight offsets and should roughly match
    the distance over which the climate fields cross a biome polygon.
    ``chunk_size`` > 1 classifies the home sample once per chunk (at the
    chunk origin) and reuses it for every cell of the chunk.
    ``skip_same_biome`` drops offsets agreeing with the home biome from the
    height average and counts the home height twice instead.
    """

    displacement_step: float = 5.0
    skip_same_biome: bool = False
    chunk_size: int = 1

    def validate(self) -> None:
        step = self.displacement_step
        if isinstance(step, bool) or not isinstance(step, (int, float)):
            raise ValueError("displacement_step must be a number")
        if not math.isfinite(float(step)) or step <= 0.0:
            raise ValueError("displacement_step must be > 0")
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int):
            raise ValueError("chunk_size must be an integer")
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

    @property
    def offsets(self) -> np.ndarray:
        return OFFSET_DIRECTIONS * float(self.displacement_step)


@dataclass(frozen=True)
class SampleBlock:
    biome: np.ndarray
    height: np.ndarray
    temperature: np.ndarray
    humidity: np.ndarray


def vote_biomes(labels: np.ndarray) -> np.ndarray:
    """Majority label along axis 0; ties go to the lowest type ordinal."""

    labels = np.asarray(labels)
    counts = np.stack([(labels == k).sum(axis=0) for k in range(BIOME_COUNT)])
    # argmax returns the first maximum.
    return np.argmax(counts, axis=0).astype(np.uint8)


def _trunc_div(total: np.ndarray, count: np.ndarray) -> np.ndarray:
    total = np.asarray(total, dtype=np.int64)
    return np.sign(total) * (np.abs(total) // np.asarray(count, dtype=np.int64))


def mean_height(heights: np.ndarray) -> np.ndarray:
    """Mean along axis 0, truncated toward zero."""

    heights = np.asarray(heights, dtype=np.int64)
    return _trunc_div(heights.sum(axis=0), heights.shape[0])


def mean_disagreeing_height(
    home_label: np.ndarray,
    home_height: np.ndarray,
    labels: np.ndarray,
    heights: np.ndarray,
) -> np.ndarray:
    """Home height weighted twice plus offsets whose biome differs from home."""

    home_label = np.asarray(home_label)
    home_height = np.asarray(home_height, dtype=np.int64)
    labels = np.asarray(labels)
    heights = np.asarray(heights, dtype=np.int64)
    if labels.shape != heights.shape or labels.shape[1:] != home_label.shape:
        raise ValueError("labels/heights must be (k, ...) matching home_label")

    disagree = labels != home_label[None, ...]
    total = 2 * home_height + np.where(disagree, heights, 0).sum(axis=0)
    count = 2 + disagree.sum(axis=0)
    return _trunc_div(total, count)


class ClimateAxis:
    """One climate field: domain warp, then base noise, normalized to [0, 1]."""

    def __init__(self, name: str, config: NoiseConfig):
        self.name = name
        self.config = config
        self.noise = make_noise(config)
        self.warp = make_domain_warp(config)

    def value01(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        xw, yw = self.warp.warp(x, y)
        return np.clip((self.noise.sample(xw, yw) + 1.0) * 0.5, 0.0, 1.0)


class TerrainSampler:
    def __init__(
        self,
        diagram: WhittakerDiagram,
        temperature: NoiseConfig | None,
        humidity: NoiseConfig | None,
        *,
        settings: SamplerSettings | None = None,
    ):
        if diagram is None:
            raise ConfigurationError("sampler needs a Whittaker diagram")
        settings = settings if settings is not None else SamplerSettings()
        try:
            settings.validate()
        except ValueError as e:
            raise ConfigurationError(f"invalid sampler settings: {e}") from e

        axes = {}
        for name, config in (("temperature", temperature), ("humidity", humidity)):
            if config is None:
                raise ConfigurationError(f"missing {name} noise config")
            if not isinstance(config, NoiseConfig):
                raise ConfigurationError(
                    f"{name} noise config must be a NoiseConfig, got {type(config).__name__}"
                )
            try:
                axes[name] = ClimateAxis(name, config)
            except ValueError as e:
                raise ConfigurationError(f"invalid {name} noise config: {e}") from e

        self.diagram = diagram
        self.settings = settings
        self.temperature = axes["temperature"]
        self.humidity = axes["humidity"]
        logger.debug(
            "terrain sampler ready: step=%g chunk=%d skip_same=%s",
            settings.displacement_step,
            settings.chunk_size,
            settings.skip_same_biome,
        )

    def climate(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        return self.temperature.value01(x, y), self.humidity.value01(x, y)

    def classify(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        t, h = self.climate(x, y)
        return self.diagram.classify(t, h)

    def raw(self, x: float, y: float) -> tuple[Biome, int]:
        """Unfiltered single-sample biome and height."""

        t, h = self.climate(float(x), float(y))
        biome = self.diagram.get_biome(float(t), float(h))
        return biome, biome.height(x, y)

    def _chunk_labels(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        # Quantize to chunk origins and classify each distinct chunk once.
        c = float(self.settings.chunk_size)
        keys = np.stack([np.floor(x / c) * c, np.floor(y / c) * c], axis=1)
        origins, inverse = np.unique(keys, axis=0, return_inverse=True)
        labels = self.classify(origins[:, 0], origins[:, 1])
        return labels[inverse.reshape(-1)]

    def _heights(self, labels: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        # Each biome's height is evaluated once per cell that needs it.
        heights = np.zeros(labels.shape, dtype=np.int64)
        for k in np.unique(labels):
            mask = labels == k
            cells = np.any(mask, axis=0)
            h = self.diagram.biome(BiomeType(int(k))).height(x[cells], y[cells])
            heights[:, cells] = np.where(mask[:, cells], h[None, :], heights[:, cells])
        return heights

    def sample_grid(self, x: np.ndarray, y: np.ndarray) -> SampleBlock:
        """Filtered biome labels and heights for arrays of coordinates."""

        x, y = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)
        )
        shape = x.shape
        x = x.ravel()
        y = y.ravel()

        offsets = self.settings.offsets
        labels = np.empty((1 + offsets.shape[0], x.size), dtype=np.uint8)

        t, h = self.climate(x, y)
        if self.settings.chunk_size > 1:
            labels[0] = self._chunk_labels(x, y)
        else:
            labels[0] = self.diagram.classify(t, h)
        for i, (dx, dy) in enumerate(offsets, start=1):
            labels[i] = self.classify(x + dx, y + dy)

        heights = self._heights(labels, x, y)
        biome = vote_biomes(labels)
        if self.settings.skip_same_biome:
            height = mean_disagreeing_height(labels[0], heights[0], labels[1:], heights[1:])
        else:
            height = mean_height(heights)

        return SampleBlock(
            biome=biome.reshape(shape),
            height=height.reshape(shape),
            temperature=t.reshape(shape),
            humidity=h.reshape(shape),
        )

    def sample(self, x: int, y: int) -> tuple[BiomeType, int]:
        block = self.sample_grid(np.array([x]), np.array([y]))
        return BiomeType(int(block.biome[0])), int(block.height[0])

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping, Sequence

import numpy as np

from coherent.config import NoiseConfig
from coherent.field import make_domain_warp, make_noise
from whittaker.errors import ConfigurationError

logger = logging.getLogger(__name__)


class BiomeType(IntEnum):
    TUNDRA = 0
    TAIGA = 1
    TEMPERATE_GRASSLAND = 2
    TEMPERATE_DECIDUOUS_FOREST = 3
    TROPICAL_SEASONAL_FOREST = 4
    DESERT = 5
    SAVANNA = 6
    TROPICAL_RAINFOREST = 7
    MOUNTAIN = 8
    COLD_OCEAN = 9
    WARM_OCEAN = 10

    @property
    def label(self) -> str:
        """CamelCase name used for config files, e.g. ``TemperateGrassland``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def from_label(cls, label: str) -> BiomeType:
        for t in cls:
            if t.label == label or t.name == label:
                return t
        raise ValueError(f"unknown biome type: {label!r}")


# Table sizing only; never a biome.
BIOME_COUNT = len(BiomeType)

Point = tuple[float, float]


@dataclass(frozen=True)
class BiomeConfig:
    name: str
    type: BiomeType
    points: tuple[Point, ...]
    base_height: int
    height_amplitude: int
    noise: NoiseConfig = field(default_factory=NoiseConfig)

    def validate(self) -> None:
        if len(self.points) < 3:
            raise ValueError(f"{self.name}: polygon needs at least 3 points, got {len(self.points)}")
        for p in self.points:
            if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in p):
                raise ValueError(f"{self.name}: polygon point {p!r} is not numeric")
            if not all(math.isfinite(v) for v in p):
                raise ValueError(f"{self.name}: polygon point {p!r} is not finite")
        for name in ("base_height", "height_amplitude"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{self.name}: {name} must be an integer")
        self.noise.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.label,
            "points": [[x, y] for x, y in self.points],
            "base_height": self.base_height,
            "height_amplitude": self.height_amplitude,
            "noise": self.noise.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BiomeConfig:
        if not isinstance(data, Mapping):
            raise ValueError("biome config must be a JSON object")
        required = ("name", "type", "points", "base_height", "height_amplitude", "noise")
        missing = [k for k in required if k not in data]
        if missing:
            raise ValueError(f"missing biome config keys: {', '.join(missing)}")

        points = []
        for p in data["points"]:
            if len(p) != 2:
                raise ValueError(f"polygon point must be [x, y], got {p!r}")
            points.append((p[0], p[1]))

        config = cls(
            name=str(data["name"]),
            type=BiomeType.from_label(str(data["type"])),
            points=tuple(points),
            base_height=data["base_height"],
            height_amplitude=data["height_amplitude"],
            noise=NoiseConfig.from_dict(data["noise"]),
        )
        config.validate()
        return config


def edge_cross(
    x0: float, y0: float, x1: float, y1: float, px: np.ndarray, py: np.ndarray
) -> np.ndarray:
    """2D cross product of edge (p0 -> p1) against the point; > 0 means left."""
    return (y0 - py) * (x1 - x0) - (x0 - px) * (y1 - y0)


class Biome:
    """One Whittaker region: a convex polygon plus its own height noise.

    The polygon lives in (temperature, humidity) space and must be wound
    consistently (clockwise or counter-clockwise). The bounding box and
    centroid are cached at construction because ``inside`` runs for every
    sample of every grid cell.
    """

    def __init__(self, config: BiomeConfig):
        try:
            config.validate()
        except ValueError as e:
            raise ConfigurationError(f"invalid biome {config.name!r}: {e}") from e

        self.config = config
        self._type = config.type
        self.name = config.name
        self._points: tuple[Point, ...] = tuple((float(x), float(y)) for x, y in config.points)
        self._base_height = int(config.base_height)
        self._height_amplitude = int(config.height_amplitude)

        xs = np.array([p[0] for p in self._points], dtype=np.float64)
        ys = np.array([p[1] for p in self._points], dtype=np.float64)
        self._bbox = (float(xs.min()), float(xs.max()), float(ys.min()), float(ys.max()))
        self._centroid: Point = (float(xs.mean()), float(ys.mean()))

        self.noise = make_noise(config.noise)
        self.warp = make_domain_warp(config.noise)
        logger.debug("biome %s ready, centroid=(%.3f, %.3f)", self.name, *self._centroid)

    @property
    def type(self) -> BiomeType:
        return self._type

    @property
    def points(self) -> tuple[Point, ...]:
        return self._points

    @property
    def base_height(self) -> int:
        return self._base_height

    @property
    def height_amplitude(self) -> int:
        return self._height_amplitude

    @property
    def centroid(self) -> Point:
        return self._centroid

    @property
    def min_x(self) -> float:
        return self._bbox[0]

    @property
    def max_x(self) -> float:
        return self._bbox[1]

    @property
    def min_y(self) -> float:
        return self._bbox[2]

    @property
    def max_y(self) -> float:
        return self._bbox[3]

    def __repr__(self) -> str:
        return f"Biome({self.name!r}, {self._type.label})"

    def edges(self) -> list[tuple[Point, Point]]:
        n = len(self.points)
        return [(self.points[i], self.points[(i + 1) % n]) for i in range(n)]

    def inside(self, x, y):
        """Sign-consistency containment test.

        Scalars give a ``bool``; arrays give a bool array. Points outside the
        bounding box are rejected before any edge is evaluated. Points on an
        edge, or polygons with collinear vertices, may be misreported; the
        diagram's nearest-centroid fallback covers them.
        """

        px = np.asarray(x, dtype=np.float64)
        py = np.asarray(y, dtype=np.float64)
        in_box = (px >= self.min_x) & (px <= self.max_x) & (py >= self.min_y) & (py <= self.max_y)
        if not np.any(in_box):
            return bool(in_box) if in_box.ndim == 0 else in_box

        left = np.zeros(in_box.shape, dtype=np.int32)
        right = np.zeros(in_box.shape, dtype=np.int32)
        for (x0, y0), (x1, y1) in self.edges():
            is_left = edge_cross(x0, y0, x1, y1, px, py) > 0.0
            left += is_left
            right += ~is_left

        out = in_box & ((left == 0) | (right == 0))
        return bool(out) if out.ndim == 0 else out

    def height(self, x, y):
        """``base_height + trunc(height_amplitude * noise(warp(x, y)))``."""

        xw, yw = self.warp.warp(x, y)
        v = self.noise.sample(xw, yw)
        h = self.base_height + np.trunc(self.height_amplitude * v).astype(np.int64)
        return int(h) if np.ndim(h) == 0 else h

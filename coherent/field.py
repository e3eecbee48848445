from __future__ import annotations

import logging

import numpy as np

from .basis import make_basis
from .config import NoiseConfig
from .fractal import fractal2, fractal_bounding

logger = logging.getLogger(__name__)

# Decorrelate the x and y offset fields drawn from one warp basis.
_WARP_OFFSET_X = (19.1, 47.2)
_WARP_OFFSET_Y = (-11.8, 7.3)


class NoiseField:
    """Base coherent-noise field: ``sample(x, y)`` in [-1, 1]."""

    def __init__(self, config: NoiseConfig):
        config.validate()
        self.config = config
        self.basis = make_basis(config.noise_type, seed=config.seed)
        logger.debug(
            "noise field %s/%s seed=%d freq=%g",
            config.noise_type,
            config.fractal_type,
            config.seed,
            config.frequency,
        )

    def sample(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        c = self.config
        x = np.asarray(x, dtype=np.float64) * float(c.frequency)
        y = np.asarray(y, dtype=np.float64) * float(c.frequency)
        v = fractal2(
            self.basis,
            x,
            y,
            fractal_type=c.fractal_type,
            octaves=int(c.fractal_octaves),
            lacunarity=float(c.fractal_lacunarity),
            gain=float(c.fractal_gain),
            weighted_strength=float(c.fractal_weighted_strength),
            ping_pong_strength=float(c.fractal_ping_pong_strength),
        )
        return np.clip(v, -1.0, 1.0)


class DomainWarp:
    """Coordinate perturbation: ``warp(x, y) -> (x', y')``.

    Uses its own basis seeded with ``config.warp_seed``. ``progressive`` warps
    feed each octave the coordinate produced by the previous one;
    ``independent`` warps evaluate every octave at the input coordinate and
    sum the offsets.
    """

    def __init__(self, config: NoiseConfig):
        config.validate()
        self.config = config
        self.seed = config.warp_seed
        self.basis = make_basis(config.domain_warp_type, seed=self.seed)
        logger.debug(
            "domain warp %s/%s seed=%d amp=%g",
            config.domain_warp_type,
            config.domain_warp_fractal_type,
            self.seed,
            config.domain_warp_amp,
        )

    def warp(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        c = self.config
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        x, y = np.broadcast_arrays(x, y)

        xw = x.copy()
        yw = y.copy()
        if float(c.domain_warp_amp) == 0.0:
            return xw, yw

        progressive = c.domain_warp_fractal_type == "progressive"
        gain = float(c.fractal_gain)
        lacunarity = float(c.fractal_lacunarity)
        amp = float(c.domain_warp_amp) * fractal_bounding(
            octaves=int(c.domain_warp_octaves), gain=gain
        )
        freq = float(c.domain_warp_frequency)

        for _ in range(int(c.domain_warp_octaves)):
            sx, sy = (xw, yw) if progressive else (x, y)
            dx = self.basis.noise(sx * freq + _WARP_OFFSET_X[0], sy * freq + _WARP_OFFSET_X[1])
            dy = self.basis.noise(sx * freq + _WARP_OFFSET_Y[0], sy * freq + _WARP_OFFSET_Y[1])
            xw = xw + amp * dx
            yw = yw + amp * dy
            amp *= gain
            freq *= lacunarity

        return xw, yw


def make_noise(config: NoiseConfig) -> NoiseField:
    return NoiseField(config)


def make_domain_warp(config: NoiseConfig) -> DomainWarp:
    return DomainWarp(config)

"""Single-octave 2D noise bases.

Every basis exposes ``noise(x, y)`` over numpy arrays and returns values in
roughly [-1, 1]. Fractal layering and frequency scaling live in
:mod:`coherent.fractal` and :mod:`coherent.field`.
"""

from __future__ import annotations

import math
from typing import Protocol

import numpy as np
from opensimplex import OpenSimplex

from .core import fade, grad2_from_hash, grad2_table, lattice_hash, lerp, make_permutation

NOISE_TYPES = ("perlin", "value", "opensimplex2")

# Unit-length gradients peak at sqrt(0.5); rescale so the basis spans [-1, 1].
_PERLIN_SCALE = math.sqrt(2.0)


class Noise2D(Protocol):
    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:  # pragma: no cover
        ...


class Perlin2D:
    def __init__(self, *, seed: int = 0, grad_set: str = "diag8"):
        self.seed = int(seed)
        self.perm = make_permutation(self.seed)
        self.grad_set = str(grad_set)
        self.grad_table = grad2_table(self.grad_set)

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        x0 = np.floor(x)
        y0 = np.floor(y)
        xi0 = x0.astype(np.int64)
        yi0 = y0.astype(np.int64)

        xf = x - x0
        yf = y - y0
        u = fade(xf)
        v = fade(yf)

        p = self.perm
        aa = lattice_hash(p, xi0, yi0)
        ab = lattice_hash(p, xi0, yi0 + 1)
        ba = lattice_hash(p, xi0 + 1, yi0)
        bb = lattice_hash(p, xi0 + 1, yi0 + 1)

        gxaa, gyaa = grad2_from_hash(aa, grad_table=self.grad_table)
        gxab, gyab = grad2_from_hash(ab, grad_table=self.grad_table)
        gxba, gyba = grad2_from_hash(ba, grad_table=self.grad_table)
        gxbb, gybb = grad2_from_hash(bb, grad_table=self.grad_table)

        d00 = gxaa * xf + gyaa * yf
        d01 = gxab * xf + gyab * (yf - 1.0)
        d10 = gxba * (xf - 1.0) + gyba * yf
        d11 = gxbb * (xf - 1.0) + gybb * (yf - 1.0)

        n = lerp(lerp(d00, d10, u), lerp(d01, d11, u), v)
        return n * _PERLIN_SCALE


class ValueNoise2D:
    """2D value noise (lattice values + smooth interpolation)."""

    def __init__(self, *, seed: int = 0):
        self.seed = int(seed)
        self.perm = make_permutation(self.seed)

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        x0 = np.floor(x)
        y0 = np.floor(y)
        xi0 = x0.astype(np.int64)
        yi0 = y0.astype(np.int64)
        u = fade(x - x0)
        v = fade(y - y0)

        p = self.perm

        def corner(dx: int, dy: int) -> np.ndarray:
            # Map hashed values into [-1, 1].
            h = lattice_hash(p, xi0 + dx, yi0 + dy)
            return (h.astype(np.float64) / 255.0) * 2.0 - 1.0

        return lerp(lerp(corner(0, 0), corner(1, 0), u), lerp(corner(0, 1), corner(1, 1), u), v)


class OpenSimplex2D:
    """Adapter exposing the ``opensimplex`` generator through ``noise(x, y)``."""

    def __init__(self, *, seed: int = 0):
        self.seed = int(seed)
        self._gen = OpenSimplex(seed=self.seed & 0xFFFFFFFF)
        self._noise2 = np.vectorize(self._gen.noise2, otypes=[np.float64])

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if x.size == 0:
            return np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
        return self._noise2(x, y)


def make_basis(noise_type: str, *, seed: int, grad_set: str = "diag8") -> Noise2D:
    noise_type = str(noise_type)
    if noise_type == "perlin":
        return Perlin2D(seed=int(seed), grad_set=grad_set)
    if noise_type == "value":
        return ValueNoise2D(seed=int(seed))
    if noise_type == "opensimplex2":
        return OpenSimplex2D(seed=int(seed))
    raise ValueError(f"unknown noise type: {noise_type}")

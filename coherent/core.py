from __future__ import annotations

import numpy as np


def fade(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve used by Improved Perlin Noise (2002)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def make_permutation(seed: int) -> np.ndarray:
    # Seeds may be negative after the warp XOR; numpy wants a non-negative int.
    rng = np.random.default_rng(int(seed) & 0xFFFFFFFF)
    p = rng.permutation(256).astype(np.int32)
    return np.concatenate([p, p])


_GRAD2_DIAG8 = np.array(
    [
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [1.0, 1.0],
        [-1.0, 1.0],
        [1.0, -1.0],
        [-1.0, -1.0],
    ],
    dtype=np.float64,
)
_GRAD2_DIAG8 /= np.linalg.norm(_GRAD2_DIAG8, axis=1, keepdims=True)

_GRAD2_CIRCLE16 = np.stack(
    [
        np.cos(np.linspace(0.0, 2.0 * np.pi, 16, endpoint=False, dtype=np.float64)),
        np.sin(np.linspace(0.0, 2.0 * np.pi, 16, endpoint=False, dtype=np.float64)),
    ],
    axis=1,
)


def grad2_table(name: str) -> np.ndarray:
    name = str(name)
    if name in {"diag8", "default"}:
        return _GRAD2_DIAG8
    if name in {"circle16"}:
        return _GRAD2_CIRCLE16
    raise ValueError(f"unknown 2D gradient set: {name}")


def grad2_from_hash(
    h: np.ndarray, *, grad_table: np.ndarray = _GRAD2_DIAG8
) -> tuple[np.ndarray, np.ndarray]:
    n = int(grad_table.shape[0])
    idx = (h % n).astype(np.int32)
    g = grad_table[idx]
    return g[..., 0], g[..., 1]


def lattice_hash(
    perm: np.ndarray, xi: np.ndarray, yi: np.ndarray
) -> np.ndarray:
    """Hash integer lattice coordinates through a doubled permutation table."""
    return perm[perm[xi & 255] + (yi & 255)]

from __future__ import annotations

import numpy as np

from .basis import Noise2D
from .core import lerp

FRACTAL_TYPES = ("none", "fbm", "ridged", "ping_pong")


def fractal_bounding(*, octaves: int, gain: float) -> float:
    """Reciprocal of the summed octave amplitudes, keeping fractals in [-1, 1]."""

    gain = abs(float(gain))
    amp = gain
    total = 1.0
    for _ in range(1, max(int(octaves), 1)):
        total += amp
        amp *= gain
    return 1.0 / total


def ping_pong(t: np.ndarray) -> np.ndarray:
    t = t - np.trunc(t * 0.5) * 2.0
    return np.where(t < 1.0, t, 2.0 - t)


def fbm2(
    noise: Noise2D,
    x: np.ndarray,
    y: np.ndarray,
    *,
    octaves: int = 3,
    lacunarity: float = 2.0,
    gain: float = 0.5,
    weighted_strength: float = 0.0,
) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    gain = float(gain)
    lacunarity = float(lacunarity)
    weighted_strength = float(weighted_strength)

    amp = fractal_bounding(octaves=octaves, gain=gain)
    freq = 1.0
    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)

    for _ in range(max(int(octaves), 1)):
        n = noise.noise(x * freq, y * freq)
        total += n * amp
        amp = amp * lerp(1.0, np.minimum(n + 1.0, 2.0) * 0.5, weighted_strength)
        amp = amp * gain
        freq *= lacunarity

    return total


def ridged2(
    noise: Noise2D,
    x: np.ndarray,
    y: np.ndarray,
    *,
    octaves: int = 3,
    lacunarity: float = 2.0,
    gain: float = 0.5,
    weighted_strength: float = 0.0,
) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    gain = float(gain)
    lacunarity = float(lacunarity)
    weighted_strength = float(weighted_strength)

    amp = fractal_bounding(octaves=octaves, gain=gain)
    freq = 1.0
    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)

    for _ in range(max(int(octaves), 1)):
        n = np.abs(noise.noise(x * freq, y * freq))
        total += (1.0 - 2.0 * n) * amp
        amp = amp * lerp(1.0, 1.0 - n, weighted_strength)
        amp = amp * gain
        freq *= lacunarity

    return total


def ping_pong2(
    noise: Noise2D,
    x: np.ndarray,
    y: np.ndarray,
    *,
    octaves: int = 3,
    lacunarity: float = 2.0,
    gain: float = 0.5,
    weighted_strength: float = 0.0,
    strength: float = 2.0,
) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    gain = float(gain)
    lacunarity = float(lacunarity)
    weighted_strength = float(weighted_strength)
    strength = float(strength)

    amp = fractal_bounding(octaves=octaves, gain=gain)
    freq = 1.0
    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)

    for _ in range(max(int(octaves), 1)):
        n = ping_pong((noise.noise(x * freq, y * freq) + 1.0) * strength)
        total += (n - 0.5) * 2.0 * amp
        amp = amp * lerp(1.0, n, weighted_strength)
        amp = amp * gain
        freq *= lacunarity

    return total


def fractal2(
    noise: Noise2D,
    x: np.ndarray,
    y: np.ndarray,
    *,
    fractal_type: str,
    octaves: int,
    lacunarity: float,
    gain: float,
    weighted_strength: float,
    ping_pong_strength: float,
) -> np.ndarray:
    fractal_type = str(fractal_type)
    if fractal_type == "none":
        return np.asarray(noise.noise(x, y), dtype=np.float64)
    if fractal_type == "fbm":
        return fbm2(
            noise,
            x,
            y,
            octaves=octaves,
            lacunarity=lacunarity,
            gain=gain,
            weighted_strength=weighted_strength,
        )
    if fractal_type == "ridged":
        return ridged2(
            noise,
            x,
            y,
            octaves=octaves,
            lacunarity=lacunarity,
            gain=gain,
            weighted_strength=weighted_strength,
        )
    if fractal_type == "ping_pong":
        return ping_pong2(
            noise,
            x,
            y,
            octaves=octaves,
            lacunarity=lacunarity,
            gain=gain,
            weighted_strength=weighted_strength,
            strength=ping_pong_strength,
        )
    raise ValueError(f"unknown fractal type: {fractal_type}")

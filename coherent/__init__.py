from .basis import OpenSimplex2D, Perlin2D, ValueNoise2D, make_basis
from .config import WARP_SEED_XOR, NoiseConfig
from .field import DomainWarp, NoiseField, make_domain_warp, make_noise
from .fractal import fbm2, fractal2, ping_pong2, ridged2

__all__ = [
    "DomainWarp",
    "NoiseConfig",
    "NoiseField",
    "OpenSimplex2D",
    "Perlin2D",
    "ValueNoise2D",
    "WARP_SEED_XOR",
    "fbm2",
    "fractal2",
    "make_basis",
    "make_domain_warp",
    "make_noise",
    "ping_pong2",
    "ridged2",
]

from __future__ import annotations

import pytest

from coherent.config import NoiseConfig
from whittaker.biome import Biome, BiomeConfig, BiomeType
from whittaker.config import load_diagram
from whittaker.diagram import build_diagram

FAST_NOISE = NoiseConfig(
    noise_type="value",
    fractal_type="fbm",
    fractal_octaves=1,
    frequency=0.05,
    seed=5,
    domain_warp_type="value",
    domain_warp_amp=2.0,
    domain_warp_octaves=1,
    domain_warp_frequency=0.05,
)


def square(x0: float, y0: float, size: float) -> tuple[tuple[float, float], ...]:
    return ((x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size))


def make_biome(
    biome_type: BiomeType,
    points,
    *,
    base_height: int = 10,
    height_amplitude: int = 5,
    noise: NoiseConfig = FAST_NOISE,
) -> Biome:
    return Biome(
        BiomeConfig(
            name=biome_type.label,
            type=biome_type,
            points=tuple(points),
            base_height=base_height,
            height_amplitude=height_amplitude,
            noise=noise,
        )
    )


def far_biomes(**placed) -> list[Biome]:
    """One biome per type; types named in ``placed`` get the given polygon,
    the rest sit far outside [0, 1]^2."""

    out = []
    for t in BiomeType:
        pts = placed.get(t.name, square(100.0 + 10.0 * int(t), 100.0, 1.0))
        out.append(make_biome(t, pts, base_height=10 * int(t)))
    return out


@pytest.fixture(scope="session")
def default_diagram():
    return load_diagram()


@pytest.fixture()
def banded_diagram():
    # Temperature bands: cold [0, 0.5) -> TUNDRA, warm [0.5, 1] -> DESERT.
    return build_diagram(
        far_biomes(
            TUNDRA=((0.0, 0.0), (0.5, 0.0), (0.5, 1.0), (0.0, 1.0)),
            DESERT=((0.5, 0.0), (1.0, 0.0), (1.0, 1.0), (0.5, 1.0)),
        )
    )

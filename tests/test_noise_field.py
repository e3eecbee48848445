from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from coherent.basis import Perlin2D
from coherent.config import WARP_SEED_XOR, NoiseConfig
from coherent.field import DomainWarp, NoiseField
from coherent.fractal import fbm2, fractal_bounding, ping_pong, ridged2

PERLIN = NoiseConfig(noise_type="perlin", domain_warp_type="perlin", frequency=0.05)


def _grid() -> tuple[np.ndarray, np.ndarray]:
    return np.meshgrid(np.arange(-20.0, 20.0, 1.5), np.arange(0.0, 30.0, 1.25))


def test_noise_config_round_trip_is_exact() -> None:
    config = dataclasses.replace(PERLIN, seed=-42, fractal_gain=0.37, domain_warp_amp=12.5)
    again = NoiseConfig.from_dict(config.to_dict())
    assert again == config


def test_noise_config_rejects_unknown_and_missing_keys() -> None:
    data = PERLIN.to_dict()
    data["extra"] = 1
    with pytest.raises(ValueError):
        NoiseConfig.from_dict(data)

    data = PERLIN.to_dict()
    del data["seed"]
    with pytest.raises(ValueError):
        NoiseConfig.from_dict(data)


@pytest.mark.parametrize(
    "field, value",
    [
        ("noise_type", "cellular"),
        ("fractal_type", "fractal"),
        ("fractal_octaves", 0),
        ("frequency", 0.0),
        ("domain_warp_fractal_type", "basic"),
        ("fractal_weighted_strength", 1.5),
        ("seed", 1.5),
    ],
)
def test_noise_config_validate_rejects(field: str, value) -> None:
    with pytest.raises(ValueError):
        dataclasses.replace(PERLIN, **{field: value}).validate()


def test_warp_seed_differs_from_base_seed() -> None:
    assert WARP_SEED_XOR != 0
    for seed in (0, 1, 1337, -5):
        c = dataclasses.replace(PERLIN, seed=seed)
        assert c.warp_seed == seed ^ WARP_SEED_XOR
        assert c.warp_seed != seed
    assert DomainWarp(PERLIN).seed == PERLIN.warp_seed


@pytest.mark.parametrize("fractal_type", ["none", "fbm", "ridged", "ping_pong"])
def test_noise_field_bounded_and_deterministic(fractal_type: str) -> None:
    config = dataclasses.replace(PERLIN, fractal_type=fractal_type, fractal_weighted_strength=0.5)
    xg, yg = _grid()
    z1 = NoiseField(config).sample(xg, yg)
    z2 = NoiseField(config).sample(xg, yg)
    assert z1.shape == xg.shape
    assert np.isfinite(z1).all()
    assert float(np.min(z1)) >= -1.0
    assert float(np.max(z1)) <= 1.0
    assert np.array_equal(z1, z2)


def test_noise_field_scalar_input() -> None:
    f = NoiseField(PERLIN)
    v = f.sample(3.5, -7.25)
    assert np.ndim(v) == 0
    assert float(v) == float(f.sample(np.array([3.5]), np.array([-7.25]))[0])


def test_noise_field_applies_frequency() -> None:
    slow = NoiseField(dataclasses.replace(PERLIN, frequency=0.05))
    fast = NoiseField(dataclasses.replace(PERLIN, frequency=0.1))
    x = np.array([3.0, 11.0])
    y = np.array([5.0, 13.0])
    assert np.allclose(slow.sample(2.0 * x, 2.0 * y), fast.sample(x, y))


def test_domain_warp_deterministic_and_moves_points() -> None:
    xg, yg = _grid()
    w = DomainWarp(PERLIN)
    xw1, yw1 = w.warp(xg, yg)
    xw2, yw2 = DomainWarp(PERLIN).warp(xg, yg)
    assert np.array_equal(xw1, xw2)
    assert np.array_equal(yw1, yw2)
    assert not np.allclose(xw1, xg)
    assert float(np.max(np.abs(xw1 - xg))) <= PERLIN.domain_warp_amp * 2.0


def test_domain_warp_zero_amplitude_is_identity() -> None:
    xg, yg = _grid()
    xw, yw = DomainWarp(dataclasses.replace(PERLIN, domain_warp_amp=0.0)).warp(xg, yg)
    assert np.array_equal(xw, xg)
    assert np.array_equal(yw, yg)


def test_domain_warp_progressive_differs_from_independent() -> None:
    xg, yg = _grid()
    prog = DomainWarp(dataclasses.replace(PERLIN, domain_warp_fractal_type="progressive"))
    ind = DomainWarp(dataclasses.replace(PERLIN, domain_warp_fractal_type="independent"))
    assert not np.allclose(prog.warp(xg, yg)[0], ind.warp(xg, yg)[0])


def test_single_octave_warp_modes_agree() -> None:
    xg, yg = _grid()
    base = dataclasses.replace(PERLIN, domain_warp_octaves=1)
    prog = DomainWarp(dataclasses.replace(base, domain_warp_fractal_type="progressive"))
    ind = DomainWarp(dataclasses.replace(base, domain_warp_fractal_type="independent"))
    assert np.allclose(prog.warp(xg, yg)[0], ind.warp(xg, yg)[0])


def test_fractal_bounding_normalizes_amplitudes() -> None:
    assert fractal_bounding(octaves=1, gain=0.5) == 1.0
    assert np.isclose(fractal_bounding(octaves=3, gain=0.5), 1.0 / 1.75)


def test_ping_pong_folds_into_unit_interval() -> None:
    t = np.array([0.0, 0.5, 1.0, 1.5, 2.0, 3.25])
    assert np.allclose(ping_pong(t), [0.0, 0.5, 1.0, 0.5, 0.0, 0.75])


def test_fbm2_single_octave_is_basis() -> None:
    p = Perlin2D(seed=0)
    x = np.array([0.3, 1.7])
    y = np.array([2.2, 0.4])
    assert np.allclose(fbm2(p, x, y, octaves=1), p.noise(x, y))
    assert np.allclose(ridged2(p, x, y, octaves=1), 1.0 - 2.0 * np.abs(p.noise(x, y)))

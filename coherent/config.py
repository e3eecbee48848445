from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

from .basis import NOISE_TYPES
from .fractal import FRACTAL_TYPES

WARP_FRACTAL_TYPES = ("progressive", "independent")

# Warp instances never share the base seed.
WARP_SEED_XOR = 1010101


@dataclass(frozen=True)
class NoiseConfig:
    """Parameters for one base noise field and its domain warp.

    Mirrors the JSON noise block: the base half (``noise_type`` through
    ``fractal_ping_pong_strength``) drives :class:`coherent.field.NoiseField`,
    the ``domain_warp_*`` half drives :class:`coherent.field.DomainWarp`.
    """

    noise_type: str = "opensimplex2"
    fractal_type: str = "fbm"
    fractal_octaves: int = 3
    fractal_lacunarity: float = 2.0
    fractal_gain: float = 0.5
    frequency: float = 0.01
    seed: int = 1337
    fractal_weighted_strength: float = 0.0
    fractal_ping_pong_strength: float = 2.0
    domain_warp_type: str = "opensimplex2"
    domain_warp_fractal_type: str = "progressive"
    domain_warp_amp: float = 20.0
    domain_warp_octaves: int = 3
    domain_warp_frequency: float = 0.1

    @property
    def warp_seed(self) -> int:
        return int(self.seed) ^ WARP_SEED_XOR

    def validate(self) -> None:
        if self.noise_type not in NOISE_TYPES:
            raise ValueError(f"noise_type must be one of {NOISE_TYPES}, got {self.noise_type!r}")
        if self.fractal_type not in FRACTAL_TYPES:
            raise ValueError(
                f"fractal_type must be one of {FRACTAL_TYPES}, got {self.fractal_type!r}"
            )
        if self.domain_warp_type not in NOISE_TYPES:
            raise ValueError(
                f"domain_warp_type must be one of {NOISE_TYPES}, got {self.domain_warp_type!r}"
            )
        if self.domain_warp_fractal_type not in WARP_FRACTAL_TYPES:
            raise ValueError(
                "domain_warp_fractal_type must be one of "
                f"{WARP_FRACTAL_TYPES}, got {self.domain_warp_fractal_type!r}"
            )

        for name in ("fractal_octaves", "domain_warp_octaves", "seed"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
        if self.fractal_octaves < 1 or self.domain_warp_octaves < 1:
            raise ValueError("octave counts must be >= 1")

        for name in (
            "fractal_lacunarity",
            "fractal_gain",
            "frequency",
            "fractal_weighted_strength",
            "fractal_ping_pong_strength",
            "domain_warp_amp",
            "domain_warp_frequency",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number")
            if not math.isfinite(float(value)):
                raise ValueError(f"{name} must be finite")

        if self.frequency <= 0.0 or self.domain_warp_frequency <= 0.0:
            raise ValueError("frequencies must be > 0")
        if self.fractal_lacunarity <= 0.0:
            raise ValueError("fractal_lacunarity must be > 0")
        if not 0.0 <= self.fractal_weighted_strength <= 1.0:
            raise ValueError("fractal_weighted_strength must be in [0, 1]")
        if self.fractal_ping_pong_strength <= 0.0:
            raise ValueError("fractal_ping_pong_strength must be > 0")
        if self.domain_warp_amp < 0.0:
            raise ValueError("domain_warp_amp must be >= 0")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NoiseConfig:
        if not isinstance(data, Mapping):
            raise ValueError("noise config must be a JSON object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown noise config keys: {', '.join(unknown)}")
        missing = sorted(known - set(data))
        if missing:
            raise ValueError(f"missing noise config keys: {', '.join(missing)}")
        config = cls(**dict(data))
        config.validate()
        return config

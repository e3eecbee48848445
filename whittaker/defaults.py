from __future__ import annotations

from pathlib import Path

from whittaker.config import BIOME_DIR_NAME, DEFAULT_DATA_DIR, load_climate_configs, load_diagram
from whittaker.sampler import SamplerSettings, TerrainSampler


def default_sampler(
    settings: SamplerSettings | None = None,
    data_dir: str | Path | None = None,
) -> TerrainSampler:
    """Build diagram and sampler from the JSON shipped in ``whittaker/data``."""

    data_dir = Path(data_dir) if data_dir is not None else DEFAULT_DATA_DIR
    diagram = load_diagram(data_dir / BIOME_DIR_NAME)
    temperature, humidity = load_climate_configs(data_dir)
    return TerrainSampler(diagram, temperature, humidity, settings=settings)

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from coherent.config import NoiseConfig
from whittaker.biome import Biome, BiomeConfig, BiomeType
from whittaker.diagram import ColorTable, WhittakerDiagram, build_diagram
from whittaker.errors import ConfigurationError
from whittaker.palette import BIOME_COLORS

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"
BIOME_DIR_NAME = "biomes"
TEMPERATURE_FILE = "temperature.json"
HUMIDITY_FILE = "humidity.json"


def _read_json(path: Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"missing config file: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"unreadable config file {path}: {e}") from e


def load_noise_config(path: str | Path) -> NoiseConfig:
    path = Path(path)
    try:
        return NoiseConfig.from_dict(_read_json(path))
    except ConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid noise config {path}: {e}") from e


def load_biome_config(path: str | Path) -> BiomeConfig:
    path = Path(path)
    try:
        return BiomeConfig.from_dict(_read_json(path))
    except ConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid biome config {path}: {e}") from e


def biome_config_path(directory: str | Path, biome_type: BiomeType) -> Path:
    return Path(directory) / f"{biome_type.label}.json"


def load_biome_configs(directory: str | Path) -> list[BiomeConfig]:
    """Read one ``<TypeName>.json`` per biome type, in type order."""

    configs = []
    for t in BiomeType:
        path = biome_config_path(directory, t)
        config = load_biome_config(path)
        if config.type != t:
            raise ConfigurationError(f"{path} declares type {config.type.label}, expected {t.label}")
        configs.append(config)
    return configs


def dump_biome_config(config: BiomeConfig) -> str:
    return json.dumps(config.to_dict(), indent=2)


def dump_noise_config(config: NoiseConfig) -> str:
    return json.dumps(config.to_dict(), indent=2)


def load_diagram(
    directory: str | Path | None = None, *, colors: ColorTable = BIOME_COLORS
) -> WhittakerDiagram:
    directory = Path(directory) if directory is not None else DEFAULT_DATA_DIR / BIOME_DIR_NAME
    configs = load_biome_configs(directory)
    logger.info("loaded %d biome configs from %s", len(configs), directory)
    return build_diagram([Biome(c) for c in configs], colors)


def load_climate_configs(
    data_dir: str | Path | None = None,
) -> tuple[NoiseConfig, NoiseConfig]:
    data_dir = Path(data_dir) if data_dir is not None else DEFAULT_DATA_DIR
    return (
        load_noise_config(data_dir / TEMPERATURE_FILE),
        load_noise_config(data_dir / HUMIDITY_FILE),
    )

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from viz.export import (  # noqa: E402
    array_to_csv_bytes,
    array_to_npy_bytes,
    array_to_png_bytes,
    heightmap_to_png_bytes,
    rgb_to_png_bytes,
)
from whittaker.analysis import discontinuity_report  # noqa: E402
from whittaker.biome import BiomeType  # noqa: E402
from whittaker.config import BIOME_DIR_NAME, DEFAULT_DATA_DIR, load_diagram  # noqa: E402
from whittaker.defaults import default_sampler  # noqa: E402
from whittaker.grid import generate_terrain  # noqa: E402
from whittaker.palette import biome_rgb, shade_rgb  # noqa: E402
from whittaker.sampler import SamplerSettings  # noqa: E402

logger = logging.getLogger("generate_maps")


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("wrote %s (%d bytes)", path, len(data))


def cmd_map(args: argparse.Namespace) -> None:
    settings = SamplerSettings(
        displacement_step=args.step,
        skip_same_biome=args.skip_same_biome,
        chunk_size=args.chunk_size,
    )
    t0 = time.perf_counter()
    sampler = default_sampler(settings=settings, data_dir=args.data_dir)
    grid = generate_terrain(sampler, args.width, args.height, workers=args.workers)

    out = Path(args.out)
    i = args.index
    _write(out / f"biome_{i}.png", rgb_to_png_bytes(shade_rgb(grid.biome, grid.height)))
    _write(out / f"heights_{i}.png", heightmap_to_png_bytes(grid.height))
    _write(out / f"heights_csv_{i}.csv", array_to_csv_bytes(grid.height))
    _write(out / f"temperature_{i}.png", array_to_png_bytes(grid.temperature))
    _write(out / f"humidity_{i}.png", array_to_png_bytes(grid.humidity))
    if args.npy:
        _write(out / f"heights_{i}.npy", array_to_npy_bytes(grid.height))
        _write(out / f"biome_{i}.npy", array_to_npy_bytes(grid.biome))

    logger.info(
        "temperature: %.4f %.4f", float(grid.temperature.min()), float(grid.temperature.max())
    )
    logger.info("humidity: %.4f %.4f", float(grid.humidity.min()), float(grid.humidity.max()))
    for line in discontinuity_report(grid, threshold=args.threshold).lines():
        logger.info(line)
    for line in sampler.diagram.describe():
        logger.debug(line)
    logger.info("execution time: %.0f ms", (time.perf_counter() - t0) * 1000.0)


def cmd_diagram(args: argparse.Namespace) -> None:
    data_dir = Path(args.data_dir) if args.data_dir else DEFAULT_DATA_DIR
    diagram = load_diagram(data_dir / BIOME_DIR_NAME)
    labels = diagram.raster(args.size)
    _write(Path(args.out) / "biome_map.png", rgb_to_png_bytes(biome_rgb(labels, diagram.colors)))


def cmd_biome(args: argparse.Namespace) -> None:
    data_dir = Path(args.data_dir) if args.data_dir else DEFAULT_DATA_DIR
    diagram = load_diagram(data_dir / BIOME_DIR_NAME)
    biome = diagram.biome(BiomeType.from_label(args.type))
    xg, yg = np.meshgrid(np.arange(args.size), np.arange(args.size))
    _write(Path(args.out) / f"{biome.type.label}.png", heightmap_to_png_bytes(biome.height(xg, yg)))


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Whittaker biome and heightmap generator")
    ap.add_argument("--data-dir", default=None, help="directory with biomes/ and climate JSON")
    ap.add_argument("--out", default="output")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    m = sub.add_parser("map", help="generate a filtered biome + height map")
    m.add_argument("--width", type=int, default=800)
    m.add_argument("--height", type=int, default=800)
    m.add_argument("--index", type=int, default=1)
    m.add_argument("--step", type=float, default=5.0, help="displacement step of the filter")
    m.add_argument("--chunk-size", type=int, default=1)
    m.add_argument("--skip-same-biome", action="store_true")
    m.add_argument("--workers", type=int, default=None)
    m.add_argument("--threshold", type=int, default=8, help="discontinuity threshold")
    m.add_argument("--npy", action="store_true", help="also write raw .npy arrays")
    m.set_defaults(func=cmd_map)

    d = sub.add_parser("diagram", help="render the temperature x humidity diagram")
    d.add_argument("--size", type=int, default=400)
    d.set_defaults(func=cmd_diagram)

    b = sub.add_parser("biome", help="render one biome's standalone heightmap")
    b.add_argument("type", help="biome type, e.g. Mountain")
    b.add_argument("--size", type=int, default=400)
    b.set_defaults(func=cmd_biome)
    return ap


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()

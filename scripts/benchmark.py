from __future__ import annotations

import sys
import time
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from whittaker.defaults import default_sampler  # noqa: E402
from whittaker.grid import generate_terrain  # noqa: E402
from whittaker.sampler import SamplerSettings  # noqa: E402


def _timeit(label: str, fn) -> float:
    t0 = time.perf_counter()
    fn()
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0
    print(f"{label}: {ms:.2f} ms")
    return ms


def main() -> None:
    """Quick CPU benchmark of the filtered sampler.

    Compares the full nine-sample filter against chunk reuse, single-threaded
    and on a thread pool.
    """

    full = default_sampler()
    chunked = default_sampler(SamplerSettings(skip_same_biome=True, chunk_size=16))

    def run(sampler, workers: int) -> None:
        grid = generate_terrain(sampler, 256, 256, workers=workers)
        _ = float(np.mean(grid.height))

    _timeit("Filtered 256x256 (1 worker)", lambda: run(full, 1))
    _timeit("Filtered 256x256 (4 workers)", lambda: run(full, 4))
    _timeit("Chunk reuse 256x256 (1 worker)", lambda: run(chunked, 1))
    _timeit("Chunk reuse 256x256 (4 workers)", lambda: run(chunked, 4))


if __name__ == "__main__":
    main()

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from whittaker.biome import BiomeType
from whittaker.grid import TerrainGrid


@dataclass
class DiscontinuityReport:
    threshold: int
    total: int = 0
    pairs: dict[tuple[BiomeType, BiomeType], int] = field(default_factory=dict)

    def lines(self) -> list[str]:
        out = [f"discontinuities (> {self.threshold}): {self.total}"]
        for (a, b), n in sorted(self.pairs.items()):
            out.append(f"  {a.label} / {b.label}: {n}")
        return out


def discontinuity_report(grid: TerrainGrid, *, threshold: int = 8) -> DiscontinuityReport:
    """Count neighbouring cells whose heights jump by more than ``threshold``.

    Both horizontal and vertical neighbours are checked; jumps are tallied
    per unordered pair of biome types.
    """

    h = np.asarray(grid.height, dtype=np.int64)
    b = np.asarray(grid.biome)
    if h.ndim != 2 or b.shape != h.shape:
        raise ValueError("grid height/biome must be matching 2D arrays")

    report = DiscontinuityReport(threshold=int(threshold))
    a_parts = []
    b_parts = []
    for axis in (0, 1):
        jump = np.abs(np.diff(h, axis=axis)) > threshold
        lo = b[:-1, :] if axis == 0 else b[:, :-1]
        hi = b[1:, :] if axis == 0 else b[:, 1:]
        a_parts.append(lo[jump])
        b_parts.append(hi[jump])

    first = np.concatenate(a_parts).astype(np.int64)
    second = np.concatenate(b_parts).astype(np.int64)
    report.total = int(first.size)
    if first.size:
        pair = np.stack([np.minimum(first, second), np.maximum(first, second)], axis=1)
        keys, counts = np.unique(pair, axis=0, return_counts=True)
        for (i, j), n in zip(keys, counts):
            report.pairs[(BiomeType(int(i)), BiomeType(int(j)))] = int(n)
    return report

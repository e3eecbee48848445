from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence, Union

import numpy as np

from whittaker.biome import BIOME_COUNT, Biome, BiomeType
from whittaker.errors import ConfigurationError
from whittaker.palette import BIOME_COLORS, RGB

logger = logging.getLogger(__name__)

ColorTable = Union[Mapping[BiomeType, RGB], Sequence[RGB]]


class WhittakerDiagram:
    """Ordinal-ordered table of biomes resolving (temperature, humidity).

    ``biomes[i]`` must be the biome of type ``i``, one per :class:`BiomeType`.
    :func:`build_diagram` (or :func:`whittaker.config.load_diagram`) accepts
    biomes in any order and sorts them first.
    """

    def __init__(self, biomes: Sequence[Biome], colors: ColorTable = BIOME_COLORS):
        biomes = tuple(biomes)
        if len(biomes) != BIOME_COUNT:
            raise ConfigurationError(
                f"diagram needs {BIOME_COUNT} biomes, one per type; got {len(biomes)}"
            )
        for t, b in zip(BiomeType, biomes):
            if not isinstance(b, Biome):
                raise ConfigurationError(f"slot {t.label} holds {b!r}, not a Biome")
            if b.type != t:
                raise ConfigurationError(
                    f"slot {int(t)} must hold {t.label}, got {b.type.label} ({b.name!r})"
                )
        self._biomes = biomes
        self.colors = MappingProxyType(_color_mapping(colors))
        self._centroids = np.array([b.centroid for b in self._biomes], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._biomes)

    def __iter__(self) -> Iterator[Biome]:
        return iter(self._biomes)

    def biome(self, biome_type: BiomeType) -> Biome:
        i = int(biome_type)
        if not 0 <= i < len(self._biomes) or self._biomes[i].type != biome_type:
            raise ConfigurationError(f"diagram has no biome for {biome_type!r}")
        return self._biomes[i]

    def nearest(self, temperature: float, humidity: float) -> Biome:
        best = self._biomes[0]
        best_d = float("inf")
        for b in self._biomes:
            dx = b.centroid[0] - temperature
            dy = b.centroid[1] - humidity
            d = dx * dx + dy * dy
            if d < best_d:
                best, best_d = b, d
        return best

    def get_biome(self, temperature: float, humidity: float) -> Biome:
        """First biome (ascending type order) containing the point.

        Points no polygon claims resolve to the nearest centroid, ties going
        to the lowest type, so this never fails.
        """

        t = float(temperature)
        h = float(humidity)
        for b in self._biomes:
            if b.inside(t, h):
                return b
        return self.nearest(t, h)

    def classify(self, temperature: np.ndarray, humidity: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`get_biome` returning type ordinals (uint8)."""

        t, h = np.broadcast_arrays(
            np.asarray(temperature, dtype=np.float64),
            np.asarray(humidity, dtype=np.float64),
        )
        shape = t.shape
        t = t.ravel()
        h = h.ravel()

        out = np.full(t.shape, -1, dtype=np.int16)
        for b in self._biomes:
            todo = np.flatnonzero(out < 0)
            if todo.size == 0:
                break
            hit = b.inside(t[todo], h[todo])
            out[todo[hit]] = int(b.type)

        rest = np.flatnonzero(out < 0)
        if rest.size:
            dx = self._centroids[:, 0][:, None] - t[rest][None, :]
            dy = self._centroids[:, 1][:, None] - h[rest][None, :]
            # argmin keeps the first minimum, i.e. the lowest ordinal.
            out[rest] = np.argmin(dx * dx + dy * dy, axis=0)

        return out.astype(np.uint8).reshape(shape)

    def raster(self, size: int) -> np.ndarray:
        """Classify a size x size lattice over [0, 1)^2.

        Temperature runs along columns, humidity along rows with the wettest
        row on top.
        """

        size = int(size)
        if size <= 0:
            raise ValueError("size must be > 0")
        axis = np.arange(size, dtype=np.float64) / float(size)
        t, h = np.meshgrid(axis, axis[::-1])
        return self.classify(t, h)

    def describe(self) -> list[str]:
        lines = []
        for b in self._biomes:
            pts = ", ".join(f"({x:g}, {y:g})" for x, y in b.points)
            lines.append(
                f"{b.type.label}: name={b.name!r} base={b.base_height} "
                f"amplitude={b.height_amplitude} polygon=[{pts}]"
            )
        return lines


def _color_mapping(colors: ColorTable) -> dict[BiomeType, RGB]:
    if isinstance(colors, Mapping):
        keys = set(colors)
        missing = [t.label for t in BiomeType if t not in keys]
        extra = [k for k in keys if not isinstance(k, BiomeType)]
        if missing or extra or len(colors) != BIOME_COUNT:
            raise ConfigurationError(
                f"color table must have one entry per biome type ({BIOME_COUNT}); "
                f"missing={missing} extra={extra}"
            )
        table = {t: colors[t] for t in BiomeType}
    else:
        colors = list(colors)
        if len(colors) != BIOME_COUNT:
            raise ConfigurationError(
                f"color table has {len(colors)} entries, expected {BIOME_COUNT}"
            )
        table = {t: colors[int(t)] for t in BiomeType}

    out = {}
    for t, rgb in table.items():
        if isinstance(rgb, (str, bytes)) or not isinstance(rgb, Sequence) or len(rgb) != 3:
            raise ConfigurationError(f"invalid color for {t.label}: {rgb!r} is not (r, g, b)")
        for c in rgb:
            if isinstance(c, bool) or not isinstance(c, (int, np.integer)):
                raise ConfigurationError(f"invalid color for {t.label}: {c!r} is not an integer")
            if not 0 <= c <= 255:
                raise ConfigurationError(f"invalid color for {t.label}: {c!r} is outside 0..255")
        out[t] = (int(rgb[0]), int(rgb[1]), int(rgb[2]))
    return out


def build_diagram(
    biomes: Mapping[BiomeType, Biome] | Iterable[Biome],
    colors: ColorTable = BIOME_COLORS,
) -> WhittakerDiagram:
    """Validate the biome and color tables and build the diagram.

    Every :class:`BiomeType` needs exactly one biome and one color.
    """

    table = _color_mapping(colors)

    if isinstance(biomes, Mapping):
        for key, b in biomes.items():
            if b.type != key:
                raise ConfigurationError(f"biome {b.name!r} is {b.type.label}, keyed as {key!r}")
        items = list(biomes.values())
    else:
        items = list(biomes)

    by_type: dict[BiomeType, Biome] = {}
    for b in items:
        if b.type in by_type:
            raise ConfigurationError(f"duplicate biome for {b.type.label}")
        by_type[b.type] = b

    missing = [t.label for t in BiomeType if t not in by_type]
    if missing:
        raise ConfigurationError(f"missing biomes: {', '.join(missing)}")

    diagram = WhittakerDiagram([by_type[t] for t in BiomeType], table)
    logger.info("built Whittaker diagram with %d biomes", len(diagram))
    return diagram

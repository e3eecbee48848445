from __future__ import annotations

import json
import shutil

import numpy as np
import pytest

from conftest import far_biomes, make_biome, square
from whittaker.biome import BIOME_COUNT, Biome, BiomeType
from whittaker.config import DEFAULT_DATA_DIR, load_biome_configs, load_diagram
from whittaker.diagram import WhittakerDiagram, build_diagram
from whittaker.errors import ConfigurationError
from whittaker.palette import BIOME_COLORS


def test_get_biome_is_total_over_unit_square(default_diagram) -> None:
    for t in np.linspace(0.0, 1.0, 21):
        for h in np.linspace(0.0, 1.0, 21):
            b = default_diagram.get_biome(float(t), float(h))
            assert isinstance(b, Biome)


def test_classify_matches_get_biome(default_diagram) -> None:
    t, h = np.meshgrid(np.linspace(-0.1, 1.1, 37), np.linspace(-0.1, 1.1, 29))
    labels = default_diagram.classify(t, h)
    assert labels.shape == t.shape
    assert labels.dtype == np.uint8
    assert int(labels.max()) < BIOME_COUNT
    expected = np.vectorize(lambda a, b: int(default_diagram.get_biome(a, b).type))(t, h)
    assert np.array_equal(labels, expected)


@pytest.mark.parametrize(
    "t, h, expected",
    [
        (0.1, 0.1, BiomeType.TUNDRA),
        (0.1, 0.6, BiomeType.TAIGA),
        (0.5, 0.05, BiomeType.MOUNTAIN),
        (0.5, 0.25, BiomeType.TEMPERATE_GRASSLAND),
        (0.5, 0.5, BiomeType.TEMPERATE_DECIDUOUS_FOREST),
        (0.5, 0.75, BiomeType.TROPICAL_SEASONAL_FOREST),
        (0.8, 0.2, BiomeType.DESERT),
        (0.8, 0.5, BiomeType.SAVANNA),
        (0.8, 0.7, BiomeType.TROPICAL_RAINFOREST),
        (0.2, 0.95, BiomeType.COLD_OCEAN),
        (0.9, 0.95, BiomeType.WARM_OCEAN),
    ],
)
def test_default_diagram_layout(default_diagram, t: float, h: float, expected: BiomeType) -> None:
    assert default_diagram.get_biome(t, h).type is expected


def test_first_match_wins_in_type_order() -> None:
    # TAIGA and DESERT overlap; the lower ordinal claims the overlap.
    d = build_diagram(
        far_biomes(
            TAIGA=square(0.0, 0.0, 0.6),
            DESERT=square(0.4, 0.4, 0.6),
        )
    )
    assert d.get_biome(0.5, 0.5).type is BiomeType.TAIGA
    assert d.get_biome(0.9, 0.9).type is BiomeType.DESERT


def test_fallback_nearest_centroid_ties_to_lowest_ordinal() -> None:
    # Centroids (0.25, 0.25) and (1.25, 0.25); (0.75, 0.25) is equidistant
    # and outside both polygons.
    d = build_diagram(
        far_biomes(
            DESERT=square(0.0, 0.0, 0.5),
            TEMPERATE_DECIDUOUS_FOREST=square(1.0, 0.0, 0.5),
        )
    )
    assert d.get_biome(0.75, 0.25).type is BiomeType.TEMPERATE_DECIDUOUS_FOREST
    assert d.get_biome(0.7, 0.25).type is BiomeType.DESERT
    labels = d.classify(np.array([0.75, 0.7]), np.array([0.25, 0.25]))
    assert labels.tolist() == [int(BiomeType.TEMPERATE_DECIDUOUS_FOREST), int(BiomeType.DESERT)]


def test_biome_lookup_by_type(default_diagram) -> None:
    for t in BiomeType:
        assert default_diagram.biome(t).type is t
    assert [b.type for b in default_diagram] == list(BiomeType)
    assert len(default_diagram) == BIOME_COUNT


def test_color_table_length_mismatch_raises() -> None:
    biomes = far_biomes()
    short = [BIOME_COLORS[t] for t in BiomeType][:-1]
    with pytest.raises(ConfigurationError):
        build_diagram(biomes, short)

    long = [BIOME_COLORS[t] for t in BiomeType] + [(1, 2, 3)]
    with pytest.raises(ConfigurationError):
        build_diagram(biomes, long)

    partial = {t: c for t, c in BIOME_COLORS.items() if t is not BiomeType.WARM_OCEAN}
    with pytest.raises(ConfigurationError):
        build_diagram(biomes, partial)


def test_color_table_as_sequence_is_ordinal_indexed() -> None:
    colors = [(i, i, i) for i in range(BIOME_COUNT)]
    d = build_diagram(far_biomes(), colors)
    assert d.colors[BiomeType.MOUNTAIN] == (8, 8, 8)


@pytest.mark.parametrize("bad", [("red", 0, 0), 7, (True, 0, 0), (0, 0, 256), (1.5, 0, 0), "rgb"])
def test_malformed_color_entry_raises(bad) -> None:
    colors = [BIOME_COLORS[t] for t in BiomeType]
    colors[int(BiomeType.TEMPERATE_DECIDUOUS_FOREST)] = bad
    with pytest.raises(ConfigurationError):
        build_diagram(far_biomes(), colors)


def test_constructor_rejects_unordered_or_partial_biomes() -> None:
    biomes = far_biomes(TAIGA=square(0.0, 0.0, 1.0))
    with pytest.raises(ConfigurationError):
        WhittakerDiagram(list(reversed(biomes)), BIOME_COLORS)
    with pytest.raises(ConfigurationError):
        WhittakerDiagram(biomes[:-1], BIOME_COLORS)
    with pytest.raises(ConfigurationError):
        WhittakerDiagram(biomes, {BiomeType.TUNDRA: (0, 0, 0)})


def test_constructor_in_type_order_agrees_with_classify() -> None:
    d = WhittakerDiagram(far_biomes(TAIGA=square(0.0, 0.0, 1.0)), BIOME_COLORS)
    assert d.get_biome(0.9, 0.9).type is BiomeType.TAIGA
    assert int(d.classify(np.array([0.9]), np.array([0.9]))[0]) == int(BiomeType.TAIGA)



def test_missing_or_duplicate_biome_raises() -> None:
    biomes = far_biomes()
    with pytest.raises(ConfigurationError):
        build_diagram(biomes[:-1])
    with pytest.raises(ConfigurationError):
        build_diagram(biomes + [make_biome(BiomeType.TUNDRA, square(0.0, 0.0, 1.0))])


def test_mapping_key_must_match_type() -> None:
    biomes = {b.type: b for b in far_biomes()}
    biomes[BiomeType.TUNDRA], biomes[BiomeType.TAIGA] = biomes[BiomeType.TAIGA], biomes[BiomeType.TUNDRA]
    with pytest.raises(ConfigurationError):
        build_diagram(biomes)


def test_raster_orientation(default_diagram) -> None:
    r = default_diagram.raster(40)
    assert r.shape == (40, 40)
    # Bottom-left is cold and dry, top-right hot and wet.
    assert r[-1, 0] == int(BiomeType.TUNDRA)
    assert r[0, -1] == int(BiomeType.WARM_OCEAN)


def test_describe_lists_every_biome(default_diagram) -> None:
    lines = default_diagram.describe()
    assert len(lines) == BIOME_COUNT
    assert lines[int(BiomeType.MOUNTAIN)].startswith("Mountain:")


def test_load_diagram_missing_file_is_fatal(tmp_path) -> None:
    src = DEFAULT_DATA_DIR / "biomes"
    dst = tmp_path / "biomes"
    shutil.copytree(src, dst)
    (dst / "Savanna.json").unlink()
    with pytest.raises(ConfigurationError):
        load_diagram(dst)


def test_load_diagram_malformed_file_is_fatal(tmp_path) -> None:
    dst = tmp_path / "biomes"
    shutil.copytree(DEFAULT_DATA_DIR / "biomes", dst)
    (dst / "Desert.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_diagram(dst)


def test_load_diagram_rejects_short_polygon(tmp_path) -> None:
    dst = tmp_path / "biomes"
    shutil.copytree(DEFAULT_DATA_DIR / "biomes", dst)
    path = dst / "Taiga.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data["points"] = data["points"][:2]
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_diagram(dst)


def test_load_biome_configs_in_type_order() -> None:
    configs = load_biome_configs(DEFAULT_DATA_DIR / "biomes")
    assert [c.type for c in configs] == list(BiomeType)
    for c in configs:
        assert len(c.points) >= 3

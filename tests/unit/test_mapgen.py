"""Tests for procedural map generation."""

import pytest

from radix_tribes.domain.enums import TerrainType
from radix_tribes.domain.mapgen import FALLBACK_LOCATION, build_map, fallback_map, generate_map
from radix_tribes.domain.models import MapSettings
from radix_tribes.domain.world import default_map_settings


def test_same_inputs_same_map() -> None:
    settings = default_map_settings()
    first = generate_map(6, 99, settings)
    second = generate_map(6, 99, settings)
    assert first.hexes == second.hexes
    assert first.starting_locations == second.starting_locations


def test_different_seeds_differ() -> None:
    settings = default_map_settings()
    first = generate_map(6, 1, settings)
    second = generate_map(6, 2, settings)
    assert [h.terrain for h in first.hexes] != [h.terrain for h in second.hexes]


def test_hexes_respect_bounds() -> None:
    radius = 8
    generated = generate_map(radius, 7, default_map_settings())
    assert generated.hexes
    for h in generated.hexes:
        assert abs(h.q) <= radius
        assert abs(h.r) <= radius
        assert abs(h.q) + abs(h.r) <= radius * 1.5
    coords = [h.coord for h in generated.hexes]
    assert len(coords) == len(set(coords))


def test_at_least_five_distinct_starting_locations_on_the_map() -> None:
    for seed in range(10):
        generated = generate_map(2, seed, default_map_settings())
        coords = {h.coord for h in generated.hexes}
        assert len(generated.starting_locations) >= 5
        assert len(set(generated.starting_locations)) == len(generated.starting_locations)
        assert set(generated.starting_locations) <= coords


def test_single_terrain_bias() -> None:
    settings = MapSettings(biases={TerrainType.FOREST: 1.0})
    generated = generate_map(4, 3, settings)
    assert {h.terrain for h in generated.hexes} == {TerrainType.FOREST}


@pytest.mark.parametrize("radius", [0, -3])
def test_non_positive_radius_rejected(radius: int) -> None:
    with pytest.raises(ValueError):
        generate_map(radius, 1, default_map_settings())


def test_fallback_map_shape() -> None:
    generated = fallback_map()
    assert generated.fallback is True
    assert [h.coord for h in generated.hexes] == [FALLBACK_LOCATION]
    assert generated.hexes[0].terrain == TerrainType.PLAINS
    assert generated.starting_locations == ["000.000"]


def test_build_map_degrades_to_fallback_when_biases_are_unusable() -> None:
    generated = build_map(5, 1, MapSettings(biases={}))
    assert generated.fallback is True
    assert generated.starting_locations == [FALLBACK_LOCATION]


def test_build_map_returns_generated_map() -> None:
    generated = build_map(3, 1, default_map_settings())
    assert generated.fallback is False
    assert len(generated.hexes) > 1

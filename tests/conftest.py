"""Shared test fixtures for hexworld tests."""

import pytest

from hexworld.config import MapConfig
from hexworld.generation.context import GenerationContext, HexTile, map_coords
from hexworld.generation.generator import HexMap, MapGenerator
from hexworld.generation.noise import SeededNoiseSource
from hexworld.generation.terrain import synthesize_terrain
from hexworld.tile_types import Biome, TerrainTile


def make_context(config: MapConfig) -> GenerationContext:
    """Empty context for a config, seeded like the generator does it."""
    return GenerationContext(config=config, noise=SeededNoiseSource(config.seed))


@pytest.fixture
def small_config() -> MapConfig:
    """16x16 map with a couple of rivers and a few sites."""
    return MapConfig(seed=1234, width=16, height=16, river_count=2)


@pytest.fixture
def terrain_context(small_config: MapConfig) -> GenerationContext:
    """Context after terrain synthesis only."""
    ctx = make_context(small_config)
    synthesize_terrain(ctx)
    return ctx


@pytest.fixture
def grass_context() -> GenerationContext:
    """8x8 context where every tile is flat grassland.

    Rows 0..7, row r spans q in [-r//2, 8 - r//2).
    """
    ctx = make_context(MapConfig(width=8, height=8))
    for coord in map_coords(8, 8):
        ctx.tiles[coord] = HexTile(
            coord=coord,
            biome=Biome.GRASSLAND,
            base_tile=TerrainTile.GRASS,
            elevation=0.5,
            moisture=0.5,
        )
    return ctx


@pytest.fixture
def default_map() -> HexMap:
    """Map generated from the default config."""
    return MapGenerator().generate()


@pytest.fixture
def context_for():
    """Factory building an empty context for a config."""
    return make_context

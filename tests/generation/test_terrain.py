"""Tests for terrain synthesis."""

import pytest

from hexworld.config import MapConfig
from hexworld.generation.context import (
    GenerationContext,
    in_map_bounds,
    is_on_map_edge,
    map_coords,
)
from hexworld.generation.terrain import (
    determine_biome,
    select_terrain_tile,
    synthesize_terrain,
)
from hexworld.hexgrid import HexCoord
from hexworld.tile_types import Biome, TerrainTile


class TestMapLayout:
    """Tests for the rectangular tile layout."""

    def test_coord_count(self) -> None:
        """Layout has width*height distinct coordinates."""
        coords = list(map_coords(7, 5))
        assert len(coords) == 35
        assert len(set(coords)) == 35

    def test_rows_shift_left(self) -> None:
        """Row r starts at q = -(r // 2)."""
        coords = list(map_coords(4, 4))
        assert coords[0] == HexCoord(0, 0)
        assert HexCoord(-1, 2) in coords
        assert HexCoord(-1, 3) in coords
        assert HexCoord(3, 2) not in coords

    def test_bounds(self) -> None:
        """Bounds match the layout."""
        assert in_map_bounds(HexCoord(-1, 3), 4, 4)
        assert not in_map_bounds(HexCoord(3, 3), 4, 4)
        assert not in_map_bounds(HexCoord(0, 4), 4, 4)
        assert not in_map_bounds(HexCoord(0, -1), 4, 4)

    def test_edges(self) -> None:
        """Edge tiles are first/last rows and row ends."""
        assert is_on_map_edge(HexCoord(2, 0), 6, 6)
        assert is_on_map_edge(HexCoord(-1, 2), 6, 6)
        assert is_on_map_edge(HexCoord(4, 2), 6, 6)
        assert not is_on_map_edge(HexCoord(1, 2), 6, 6)


class TestDetermineBiome:
    """Tests for biome classification order."""

    @pytest.fixture
    def config(self) -> MapConfig:
        return MapConfig()

    def test_riverside_wins(self, config: MapConfig) -> None:
        """High moisture is riverside even when high and dry-biome."""
        assert determine_biome(0.1, 0.8, 0.9, config) == Biome.RIVERSIDE

    def test_badlands(self, config: MapConfig) -> None:
        """High elevation is badlands."""
        assert determine_biome(0.6, 0.5, 0.8, config) == Biome.BADLANDS

    def test_desert(self, config: MapConfig) -> None:
        """Low biome value and dry is desert."""
        assert determine_biome(0.1, 0.3, 0.1, config) == Biome.DESERT

    def test_grassland_by_biome_value(self, config: MapConfig) -> None:
        """Mid biome value is grassland."""
        assert determine_biome(0.4, 0.3, 0.2, config) == Biome.GRASSLAND

    def test_grassland_by_moisture(self, config: MapConfig) -> None:
        """Moist tiles are grassland regardless of biome value."""
        assert determine_biome(0.9, 0.5, 0.2, config) == Biome.GRASSLAND

    def test_dry_high_biome_falls_back_to_desert(self, config: MapConfig) -> None:
        """Unmatched tiles fall back to desert."""
        assert determine_biome(0.9, 0.3, 0.2, config) == Biome.DESERT
        assert determine_biome(0.9, 0.4, 0.2, config) == Biome.DESERT

    def test_thresholds_from_config(self) -> None:
        """Thresholds come from the config."""
        config = MapConfig(riverside_moisture=0.5)
        assert determine_biome(0.4, 0.6, 0.2, config) == Biome.RIVERSIDE


class TestSelectTerrainTile:
    """Tests for terrain variant rolls."""

    @pytest.mark.parametrize(
        "variation,expected",
        [(0.1, TerrainTile.SAND), (0.4, TerrainTile.SAND_DESERT), (0.9, TerrainTile.SAND_ROCKS)],
    )
    def test_desert(self, variation: float, expected: TerrainTile) -> None:
        """Desert rolls sand variants."""
        assert select_terrain_tile(Biome.DESERT, 0.2, 0.2, variation) == expected

    def test_grassland(self) -> None:
        """Hills need elevation; forests are a low roll."""
        assert select_terrain_tile(Biome.GRASSLAND, 0.6, 0.5, 0.1) == TerrainTile.GRASS_HILL
        assert select_terrain_tile(Biome.GRASSLAND, 0.3, 0.5, 0.1) == TerrainTile.GRASS_FOREST
        assert select_terrain_tile(Biome.GRASSLAND, 0.6, 0.5, 0.5) == TerrainTile.GRASS

    def test_badlands(self) -> None:
        """Very high badlands are mountains."""
        assert select_terrain_tile(Biome.BADLANDS, 0.9, 0.2, 0.9) == TerrainTile.STONE_MOUNTAIN
        assert select_terrain_tile(Biome.BADLANDS, 0.75, 0.2, 0.1) == TerrainTile.STONE_HILL
        assert select_terrain_tile(Biome.BADLANDS, 0.75, 0.2, 0.4) == TerrainTile.STONE_ROCKS
        assert select_terrain_tile(Biome.BADLANDS, 0.75, 0.2, 0.9) == TerrainTile.STONE

    def test_riverside(self) -> None:
        """Riverside rolls water features, open water, grass or dirt."""
        assert select_terrain_tile(Biome.RIVERSIDE, 0.2, 0.8, 0.05) == TerrainTile.WATER_ISLAND
        assert select_terrain_tile(Biome.RIVERSIDE, 0.2, 0.8, 0.15) == TerrainTile.WATER_ROCKS
        assert select_terrain_tile(Biome.RIVERSIDE, 0.2, 0.95, 0.5) == TerrainTile.WATER
        assert select_terrain_tile(Biome.RIVERSIDE, 0.2, 0.8, 0.3) == TerrainTile.GRASS
        assert select_terrain_tile(Biome.RIVERSIDE, 0.2, 0.8, 0.7) == TerrainTile.DIRT


class TestSynthesizeTerrain:
    """Tests for the terrain phase."""

    def test_one_tile_per_coord(self, terrain_context: GenerationContext) -> None:
        """Every in-bounds coordinate gets exactly one tile."""
        config = terrain_context.config
        assert len(terrain_context) == config.width * config.height
        assert set(terrain_context.tiles) == set(map_coords(config.width, config.height))

    def test_fields_in_range(self, terrain_context: GenerationContext) -> None:
        """Elevation and moisture are in [0, 1]."""
        for tile in terrain_context:
            assert 0.0 <= tile.elevation <= 1.0
            assert 0.0 <= tile.moisture <= 1.0

    def test_features_unset(self, terrain_context: GenerationContext) -> None:
        """Terrain leaves river, path and building fields empty."""
        for tile in terrain_context:
            assert tile.river_shape is None
            assert tile.path_shape is None
            assert tile.building_site is None
            assert tile.building is None

    def test_biome_consistent_with_fields(self, terrain_context: GenerationContext) -> None:
        """Riverside and badlands follow the stored fields."""
        config = terrain_context.config
        for tile in terrain_context:
            if tile.moisture > config.riverside_moisture:
                assert tile.biome == Biome.RIVERSIDE
            elif tile.elevation > config.badlands_elevation:
                assert tile.biome == Biome.BADLANDS

    def test_rerun_replaces_tiles(self, terrain_context: GenerationContext) -> None:
        """Running the phase again rebuilds the same table."""
        before = {c: t.to_dict() for c, t in terrain_context.tiles.items()}
        terrain_context._rngs.clear()
        synthesize_terrain(terrain_context)
        after = {c: t.to_dict() for c, t in terrain_context.tiles.items()}
        assert before == after

    def test_single_tile_map(self, context_for) -> None:
        """A 1x1 map has one tile at the origin."""
        ctx = context_for(MapConfig(width=1, height=1))
        synthesize_terrain(ctx)
        assert list(ctx.tiles) == [HexCoord(0, 0)]

"""Terrain synthesis: biome classification and terrain variant selection."""

from collections import Counter

import numpy as np
import structlog

from ..config import MapConfig
from ..hexgrid import hex_to_world
from ..tile_types import Biome, TerrainTile
from .context import GenerationContext, HexTile, map_coords
from .noise import NoiseField, StreamOffset

logger = structlog.get_logger()

# Moisture bound separating dry desert from grassland
DRY_MOISTURE = 0.4

# Grassland hills only appear above this elevation
HILL_ELEVATION = 0.5

# Badlands above this elevation are always mountains
MOUNTAIN_ELEVATION = 0.8

# Riverside tiles this wet become open water
OPEN_WATER_MOISTURE = 0.9


def determine_biome(
    biome_value: float,
    moisture: float,
    elevation: float,
    config: MapConfig,
) -> Biome:
    """Classify a tile's biome by fixed-order threshold checks.

    Riverside wins over badlands, badlands over desert, desert over
    grassland. Anything left unmatched falls back to desert, so the
    function is total over [0, 1]^3.
    """
    if moisture > config.riverside_moisture:
        return Biome.RIVERSIDE

    if elevation > config.badlands_elevation:
        return Biome.BADLANDS

    if biome_value < config.desert_threshold and moisture < DRY_MOISTURE:
        return Biome.DESERT

    if biome_value < config.grassland_threshold or moisture > DRY_MOISTURE:
        return Biome.GRASSLAND

    return Biome.DESERT


def select_terrain_tile(
    biome: Biome,
    elevation: float,
    moisture: float,
    variation: float,
) -> TerrainTile:
    """Pick a terrain variant within a biome from a uniform roll in [0, 1).

    Riverside rolls check water-island (below 0.1) before water-rocks
    (below 0.2); the reverse order would make islands unreachable.
    """
    if biome == Biome.DESERT:
        if variation < 0.3:
            return TerrainTile.SAND
        if variation < 0.6:
            return TerrainTile.SAND_DESERT
        return TerrainTile.SAND_ROCKS

    if biome == Biome.GRASSLAND:
        if elevation > HILL_ELEVATION and variation < 0.3:
            return TerrainTile.GRASS_HILL
        if variation < 0.2:
            return TerrainTile.GRASS_FOREST
        return TerrainTile.GRASS

    if biome == Biome.BADLANDS:
        if elevation > MOUNTAIN_ELEVATION:
            return TerrainTile.STONE_MOUNTAIN
        if variation < 0.3:
            return TerrainTile.STONE_HILL
        if variation < 0.6:
            return TerrainTile.STONE_ROCKS
        return TerrainTile.STONE

    # Riverside
    if variation < 0.1:
        return TerrainTile.WATER_ISLAND
    if variation < 0.2:
        return TerrainTile.WATER_ROCKS
    if moisture > OPEN_WATER_MOISTURE:
        return TerrainTile.WATER
    if variation < 0.5:
        return TerrainTile.GRASS
    return TerrainTile.DIRT


def synthesize_terrain(ctx: GenerationContext) -> None:
    """Phase 1: create exactly one tile per in-bounds coordinate.

    Samples the biome, moisture and elevation fields at each hex center
    and stores the classified biome and terrain variant. River, path and
    building fields are left unset.
    """
    config = ctx.config
    rng = ctx.rng(StreamOffset.TERRAIN)
    ctx.tiles.clear()

    for coord in map_coords(config.width, config.height):
        x, z = hex_to_world(coord, config.hex_size)

        biome_value = ctx.noise.sample(NoiseField.BIOME, x, z, config.biome_scale)
        moisture = ctx.noise.sample(NoiseField.MOISTURE, x, z, config.moisture_scale)
        elevation = ctx.noise.sample(
            NoiseField.ELEVATION, x, z, config.elevation_scale
        )

        biome = determine_biome(biome_value, moisture, elevation, config)
        base_tile = select_terrain_tile(biome, elevation, moisture, float(rng.random()))

        ctx.tiles[coord] = HexTile(
            coord=coord,
            biome=biome,
            base_tile=base_tile,
            elevation=elevation,
            moisture=moisture,
        )

    _log_biome_stats(ctx)


def _log_biome_stats(ctx: GenerationContext) -> None:
    """Log biome distribution and field ranges."""
    counts = Counter(tile.biome.value for tile in ctx)
    elevations = np.fromiter((tile.elevation for tile in ctx), dtype=np.float64)
    logger.info(
        "terrain_synthesized",
        tiles=len(ctx),
        biomes=dict(sorted(counts.items())),
        elevation_min=round(float(elevations.min()), 3) if len(elevations) else None,
        elevation_max=round(float(elevations.max()), 3) if len(elevations) else None,
    )

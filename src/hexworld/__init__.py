"""Deterministic procedural hex world generation."""

from .config import MapConfig, find_config, list_configs, load_config
from .exceptions import HexWorldError, InvalidConfigError
from .generation import (
    HexMap,
    HexTile,
    MapGenerator,
    create_map_generator,
    generate_hex_map,
    validate_map,
)
from .hexgrid import (
    HexCoord,
    HexDirection,
    hex_distance,
    hex_key,
    hex_line,
    hex_neighbor,
    hex_neighbors,
    hex_ring,
    hex_round,
    hex_to_world,
    parse_hex_key,
    world_to_hex,
)
from .tile_types import (
    Biome,
    BuildingToken,
    PathShape,
    RiverShape,
    SiteArchetype,
    TerrainTile,
)

__all__ = [
    "Biome",
    "BuildingToken",
    "HexCoord",
    "HexDirection",
    "HexMap",
    "HexTile",
    "HexWorldError",
    "InvalidConfigError",
    "MapConfig",
    "MapGenerator",
    "PathShape",
    "RiverShape",
    "SiteArchetype",
    "TerrainTile",
    "create_map_generator",
    "find_config",
    "generate_hex_map",
    "hex_distance",
    "hex_key",
    "hex_line",
    "hex_neighbor",
    "hex_neighbors",
    "hex_ring",
    "hex_round",
    "hex_to_world",
    "list_configs",
    "load_config",
    "parse_hex_key",
    "validate_map",
    "world_to_hex",
]

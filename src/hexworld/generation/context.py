"""Tile records and the shared generation arena passed through every phase."""

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from ..config import MapConfig
from ..hexgrid import HexCoord, hex_key
from ..tile_types import (
    Biome,
    BuildingToken,
    PathShape,
    RiverShape,
    SiteArchetype,
    TerrainTile,
)
from .noise import SeededNoiseSource, StreamOffset


@dataclass(slots=True)
class HexTile:
    """One map tile.

    Created by terrain synthesis, then mutated in place by the later
    phases. River, path and building fields stay None until a phase sets
    them.
    """

    coord: HexCoord
    biome: Biome
    base_tile: TerrainTile
    elevation: float
    moisture: float
    river_shape: RiverShape | None = None
    river_rotation: int | None = None
    path_shape: PathShape | None = None
    path_rotation: int | None = None
    building_site: SiteArchetype | None = None
    building: BuildingToken | None = None

    @property
    def has_river(self) -> bool:
        return self.river_shape is not None

    @property
    def has_path(self) -> bool:
        return self.path_shape is not None

    @property
    def rotation(self) -> int:
        """Rotation a renderer should apply: path first, then river, else 0."""
        if self.path_rotation is not None:
            return self.path_rotation
        if self.river_rotation is not None:
            return self.river_rotation
        return 0

    def copy(self) -> "HexTile":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation with enum values as strings."""
        return {
            "coord": {"q": self.coord.q, "r": self.coord.r},
            "biome": self.biome.value,
            "base_tile": self.base_tile.value,
            "elevation": self.elevation,
            "moisture": self.moisture,
            "river_shape": self.river_shape.value if self.river_shape else None,
            "river_rotation": self.river_rotation,
            "path_shape": self.path_shape.value if self.path_shape else None,
            "path_rotation": self.path_rotation,
            "building_site": self.building_site.value if self.building_site else None,
            "building": self.building.value if self.building else None,
        }


def row_offset(r: int) -> int:
    """Leftmost q of row ``r`` is ``-row_offset(r)``."""
    return r // 2


def map_coords(width: int, height: int) -> Iterator[HexCoord]:
    """Every in-bounds coordinate, row-major."""
    for r in range(height):
        offset = row_offset(r)
        for q in range(-offset, width - offset):
            yield HexCoord(q, r)


def in_map_bounds(coord: HexCoord, width: int, height: int) -> bool:
    q, r = coord
    if not 0 <= r < height:
        return False
    offset = row_offset(r)
    return -offset <= q < width - offset


def is_on_map_edge(coord: HexCoord, width: int, height: int) -> bool:
    """True for tiles in the first/last row or at either end of a row."""
    q, r = coord
    offset = row_offset(r)
    return r == 0 or r == height - 1 or q == -offset or q == width - 1 - offset


@dataclass
class GenerationContext:
    """Arena shared by all phases of one ``generate()`` call.

    Owns the tile table and the per-phase PRNG streams. Phases read and
    mutate it in strict order; nothing here outlives the call.
    """

    config: MapConfig
    noise: SeededNoiseSource
    tiles: dict[HexCoord, HexTile] = field(default_factory=dict)
    _rngs: dict[StreamOffset, np.random.Generator] = field(default_factory=dict)

    def rng(self, stream: StreamOffset) -> np.random.Generator:
        """PRNG for a phase, forked from the seed on first use."""
        if stream not in self._rngs:
            self._rngs[stream] = self.noise.rng(stream)
        return self._rngs[stream]

    def get(self, coord: HexCoord) -> HexTile | None:
        return self.tiles.get(coord)

    def in_bounds(self, coord: HexCoord) -> bool:
        return in_map_bounds(coord, self.config.width, self.config.height)

    def is_edge(self, coord: HexCoord) -> bool:
        return is_on_map_edge(coord, self.config.width, self.config.height)

    def sites(self) -> list[HexTile]:
        """Tiles carrying a building site, in tile order."""
        return [tile for tile in self.tiles.values() if tile.building_site is not None]

    def snapshot(self) -> dict[HexCoord, HexTile]:
        """Detached copies of every tile, keyed like the table."""
        return {coord: tile.copy() for coord, tile in self.tiles.items()}

    def __iter__(self) -> Iterator[HexTile]:
        return iter(self.tiles.values())

    def __len__(self) -> int:
        return len(self.tiles)

    def describe(self, coord: HexCoord) -> str:
        """Short label for log output."""
        tile = self.tiles.get(coord)
        if tile is None:
            return f"{hex_key(coord)}:missing"
        return f"{hex_key(coord)}:{tile.biome.value}/{tile.base_tile.value}"

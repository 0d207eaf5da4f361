"""Main map generation orchestration."""

import json
from collections.abc import Iterator, Mapping
from typing import Any

import structlog

from ..config import MapConfig
from ..exceptions import InvalidConfigError
from ..hexgrid import HexCoord, hex_key, parse_hex_key
from ..tile_types import Biome, SiteArchetype
from .buildings import assign_buildings
from .context import GenerationContext, HexTile
from .hydrology import River, carve_rivers
from .noise import SeededNoiseSource
from .roads import Road, build_roads
from .settlements import (
    FARM_MOISTURE_BAND,
    SettlementSite,
    plan_settlements,
    target_site_count,
)
from .terrain import DRY_MOISTURE, synthesize_terrain

logger = structlog.get_logger()


class HexMap(Mapping[HexCoord, HexTile]):
    """Finished map: a read-only coordinate -> tile mapping.

    Also carries the config it was generated from and the rivers, roads
    and sites produced along the way. The tiles are owned by this object;
    the generator keeps no reference to them.
    """

    def __init__(
        self,
        tiles: dict[HexCoord, HexTile],
        config: MapConfig,
        rivers: list[River],
        roads: list[Road],
        sites: list[SettlementSite],
    ):
        self._tiles = tiles
        self.config = config
        self.rivers = rivers
        self.roads = roads
        self.sites = sites

    def __getitem__(self, coord: HexCoord) -> HexTile:
        return self._tiles[coord]

    def __iter__(self) -> Iterator[HexCoord]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def get_tile(self, q: int, r: int) -> HexTile | None:
        return self._tiles.get(HexCoord(q, r))

    def by_key(self, key: str) -> HexTile | None:
        """Look up a tile by its ``"q,r"`` key."""
        return self._tiles.get(parse_hex_key(key))

    def river_tiles(self) -> list[HexTile]:
        return [tile for tile in self._tiles.values() if tile.has_river]

    def path_tiles(self) -> list[HexTile]:
        return [tile for tile in self._tiles.values() if tile.has_path]

    def site_tiles(self) -> list[HexTile]:
        return [tile for tile in self._tiles.values() if tile.building_site is not None]

    def biome_counts(self) -> dict[str, int]:
        counts = {biome.value: 0 for biome in Biome}
        for tile in self._tiles.values():
            counts[tile.biome.value] += 1
        return counts

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """JSON-friendly ``{"q,r": tile}`` mapping in tile order."""
        return {hex_key(coord): tile.to_dict() for coord, tile in self._tiles.items()}

    def to_json(self) -> str:
        """Canonical JSON text; equal maps produce identical strings."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def check_site_archetypes(config: MapConfig) -> None:
    """Reject configs where a settlement archetype can never find a tile.

    Only applies when the config asks for at least one site.

    Raises:
        InvalidConfigError: If a town, mine or farm candidate set is empty
            by construction of the biome thresholds.
    """
    if target_site_count(config) == 0:
        return

    empty: list[str] = []

    # Towns need riverside tiles off the river; only noise moisture above
    # the threshold or a promoted river neighbor can provide one.
    if config.riverside_moisture >= 1.0:
        empty.append(f"{SiteArchetype.TOWN.value} (riverside_moisture >= 1)")

    # Mines need badlands (stone only occurs there)
    if config.badlands_elevation >= 1.0:
        empty.append(f"{SiteArchetype.MINE.value} (badlands_elevation >= 1)")

    farm_low, _ = FARM_MOISTURE_BAND
    if config.riverside_moisture <= farm_low:
        empty.append(f"{SiteArchetype.FARM.value} (riverside_moisture <= {farm_low})")
    elif config.badlands_elevation <= 0.0:
        empty.append(f"{SiteArchetype.FARM.value} (badlands_elevation <= 0)")
    elif (
        config.riverside_moisture <= DRY_MOISTURE
        and config.grassland_threshold <= config.desert_threshold
    ):
        empty.append(
            f"{SiteArchetype.FARM.value} (grassland unreachable below "
            f"moisture {DRY_MOISTURE})"
        )

    if empty:
        raise InvalidConfigError(
            "Settlement archetypes have no possible candidates: " + ", ".join(empty)
        )


class MapGenerator:
    """Deterministic hex map generator.

    Runs terrain synthesis, hydrology, settlement planning, road building
    and building assignment strictly in that order over one shared tile
    table. Identical configs give identical maps, on any instance and any
    number of calls. Not safe to call ``generate()`` concurrently on one
    instance; separate instances are independent.
    """

    def __init__(self, config: MapConfig | None = None, **overrides: Any):
        base = config if config is not None else MapConfig()
        self.config = base.with_overrides(**overrides) if overrides else base
        check_site_archetypes(self.config)
        self._noise = SeededNoiseSource(self.config.seed)

    def generate(self) -> HexMap:
        """Generate a complete map from the current config."""
        config = self.config
        ctx = GenerationContext(config=config, noise=self._noise)

        logger.info(
            "map_generation_started",
            seed=config.seed,
            width=config.width,
            height=config.height,
        )

        synthesize_terrain(ctx)
        rivers = carve_rivers(ctx)
        sites = plan_settlements(ctx)
        roads = build_roads(ctx)
        assign_buildings(ctx)

        hex_map = HexMap(
            tiles=ctx.snapshot(),
            config=config,
            rivers=rivers,
            roads=roads,
            sites=sites,
        )

        logger.info(
            "map_generated",
            seed=config.seed,
            tiles=len(hex_map),
            rivers=len(rivers),
            sites=len(sites),
            roads=len(roads),
        )
        return hex_map

    def reseed(self, seed: int) -> None:
        """Switch to a new seed.

        Previously returned maps are unaffected; call ``generate()`` again
        to get the map for the new seed.
        """
        self.config = self.config.with_overrides(seed=seed)
        self._noise = SeededNoiseSource(seed)
        logger.info("generator_reseeded", seed=seed)

    def get_config(self) -> MapConfig:
        return self.config


def generate_hex_map(config: MapConfig | None = None, **overrides: Any) -> HexMap:
    """Generate a map in one call."""
    return MapGenerator(config, **overrides).generate()


def create_map_generator(config: MapConfig | None = None, **overrides: Any) -> MapGenerator:
    """Create a generator for repeated or reseeded generation."""
    return MapGenerator(config, **overrides)

"""Settlement site planning under a global minimum-spacing rule."""

import math
from dataclasses import dataclass

import numpy as np
import structlog

from ..config import MapConfig
from ..hexgrid import HexCoord, hex_distance, hex_neighbors
from ..tile_types import Biome, SiteArchetype
from .context import GenerationContext
from .noise import StreamOffset

logger = structlog.get_logger()

# Minimum hex distance between any two town/mine/farm sites
MIN_SITE_SPACING = 5

# Crossings only need this much room from any placed site
MIN_CROSSING_SPACING = 3

# Chance an unclaimed river tile becomes a crossing without a nearby path
CROSSING_CHANCE = 0.05

# Share of the site budget per archetype, in placement order
SITE_SHARES: tuple[tuple[SiteArchetype, float], ...] = (
    (SiteArchetype.TOWN, 0.3),
    (SiteArchetype.MINE, 0.3),
    (SiteArchetype.FARM, 0.4),
)

TOWN_MAX_ELEVATION = 0.5
MINE_MIN_ELEVATION = 0.5
FARM_MOISTURE_BAND = (0.3, 0.7)


@dataclass(frozen=True)
class SettlementSite:
    """A placed settlement site; immutable once assigned."""

    coord: HexCoord
    archetype: SiteArchetype


def collect_candidates(ctx: GenerationContext) -> dict[SiteArchetype, list[HexCoord]]:
    """Bucket tiles into candidate lists per archetype in one pass.

    Buckets are not exclusive: one tile may qualify for several.
    """
    candidates: dict[SiteArchetype, list[HexCoord]] = {
        archetype: [] for archetype, _ in SITE_SHARES
    }
    low, high = FARM_MOISTURE_BAND

    for tile in ctx:
        if (
            tile.biome == Biome.RIVERSIDE
            and tile.elevation < TOWN_MAX_ELEVATION
            and not tile.has_river
        ):
            candidates[SiteArchetype.TOWN].append(tile.coord)

        if (
            tile.biome == Biome.BADLANDS or tile.base_tile.is_stone
        ) and tile.elevation > MINE_MIN_ELEVATION:
            candidates[SiteArchetype.MINE].append(tile.coord)

        if tile.biome == Biome.GRASSLAND and low < tile.moisture < high:
            candidates[SiteArchetype.FARM].append(tile.coord)

    return candidates


def target_site_count(config: MapConfig) -> int:
    """Total settlement sites aimed for: map area times density."""
    return math.floor(config.width * config.height * config.building_site_density)


def site_quotas(config: MapConfig) -> dict[SiteArchetype, int]:
    """Per-archetype quota, rounding each share up."""
    total = target_site_count(config)
    return {archetype: math.ceil(total * share) for archetype, share in SITE_SHARES}


def _too_close(coord: HexCoord, placed: list[SettlementSite], spacing: int) -> bool:
    return any(hex_distance(coord, site.coord) < spacing for site in placed)


def place_sites_of_type(
    ctx: GenerationContext,
    candidates: list[HexCoord],
    archetype: SiteArchetype,
    quota: int,
    placed: list[SettlementSite],
    rng: np.random.Generator,
    min_spacing: int = MIN_SITE_SPACING,
) -> list[SettlementSite]:
    """Greedily place sites from shuffled candidates.

    A candidate is accepted only if it is at least ``min_spacing`` from
    every site already in ``placed`` (of any archetype) and its tile has no
    site yet. ``placed`` is extended in place.

    Returns:
        Sites placed by this call; may be fewer than ``quota``.
    """
    new_sites: list[SettlementSite] = []
    if quota <= 0 or not candidates:
        return new_sites

    for index in rng.permutation(len(candidates)):
        if len(new_sites) >= quota:
            break

        coord = candidates[int(index)]
        if _too_close(coord, placed, min_spacing):
            continue

        tile = ctx.get(coord)
        if tile is None or tile.building_site is not None:
            continue

        tile.building_site = archetype
        site = SettlementSite(coord=coord, archetype=archetype)
        placed.append(site)
        new_sites.append(site)

    return new_sites


def place_crossing_outposts(
    ctx: GenerationContext,
    placed: list[SettlementSite],
    rng: np.random.Generator,
) -> list[SettlementSite]:
    """Mark some unclaimed river tiles as crossing sites.

    A river tile qualifies when a neighbor already carries a path, or by a
    small independent chance, and no placed site lies within the crossing
    spacing.
    """
    crossings: list[SettlementSite] = []

    for tile in ctx:
        if not tile.has_river or tile.building_site is not None:
            continue

        near_path = False
        for neighbor in hex_neighbors(tile.coord):
            neighbor_tile = ctx.get(neighbor)
            if neighbor_tile is not None and neighbor_tile.has_path:
                near_path = True
                break

        if not near_path and rng.random() >= CROSSING_CHANCE:
            continue

        if _too_close(tile.coord, placed, MIN_CROSSING_SPACING):
            continue

        tile.building_site = SiteArchetype.CROSSING
        site = SettlementSite(coord=tile.coord, archetype=SiteArchetype.CROSSING)
        placed.append(site)
        crossings.append(site)
        logger.debug("crossing_placed", coord=str(tile.coord), near_path=near_path)

    return crossings


def plan_settlements(ctx: GenerationContext) -> list[SettlementSite]:
    """Phase 3: place town, mine and farm sites, then river crossings.

    Under-quota placement is logged, never raised.
    """
    rng = ctx.rng(StreamOffset.SETTLEMENTS)
    candidates = collect_candidates(ctx)
    quotas = site_quotas(ctx.config)
    placed: list[SettlementSite] = []

    for archetype, _ in SITE_SHARES:
        quota = quotas[archetype]
        new_sites = place_sites_of_type(
            ctx, candidates[archetype], archetype, quota, placed, rng
        )
        if len(new_sites) < quota:
            logger.info(
                "sites_under_quota",
                archetype=archetype.value,
                quota=quota,
                placed=len(new_sites),
                candidates=len(candidates[archetype]),
            )

    crossings = place_crossing_outposts(ctx, placed, rng)

    logger.info(
        "settlements_planned",
        target=target_site_count(ctx.config),
        placed=len(placed) - len(crossings),
        crossings=len(crossings),
    )
    return placed

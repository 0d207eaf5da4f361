"""Building assignment: one token per settlement site."""

from collections import Counter

import numpy as np
import structlog

from ..tile_types import BuildingToken, SiteArchetype
from .context import GenerationContext
from .noise import StreamOffset

logger = structlog.get_logger()

# Archetype -> (token on heads, token on tails); equal tokens skip the flip
BUILDING_CHOICES: dict[SiteArchetype, tuple[BuildingToken, BuildingToken]] = {
    SiteArchetype.TOWN: (BuildingToken.VILLAGE, BuildingToken.MARKET),
    SiteArchetype.MINE: (BuildingToken.MINE, BuildingToken.MINE),
    SiteArchetype.FARM: (BuildingToken.FARM, BuildingToken.CABIN),
    SiteArchetype.OUTPOST: (BuildingToken.TOWER, BuildingToken.CABIN),
}

# Chance a crossing gets a mill instead of staying a bare marker
CROSSING_MILL_CHANCE = 0.3


def choose_building(
    archetype: SiteArchetype,
    rng: np.random.Generator,
) -> BuildingToken | None:
    """Pick the building token for one site, or None for a bare crossing."""
    if archetype == SiteArchetype.CROSSING:
        return BuildingToken.MILL if rng.random() < CROSSING_MILL_CHANCE else None

    heads, tails = BUILDING_CHOICES[archetype]
    if heads == tails:
        return heads
    return heads if rng.random() < 0.5 else tails


def assign_buildings(ctx: GenerationContext) -> int:
    """Phase 5: place a building on every site that gets one.

    Returns:
        Number of buildings placed.
    """
    rng = ctx.rng(StreamOffset.BUILDINGS)
    counts: Counter[str] = Counter()

    for tile in ctx.sites():
        tile.building = choose_building(tile.building_site, rng)
        if tile.building is not None:
            counts[tile.building.value] += 1

    total = sum(counts.values())
    logger.info("buildings_assigned", total=total, tokens=dict(sorted(counts.items())))
    return total

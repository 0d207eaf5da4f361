"""Hydrology: edge-sourced rivers traced by steepest descent over hex tiles.

Each river starts from the highest of a few sampled points along a random
map edge and flows to the unvisited neighbor with the lowest jittered
elevation until it runs out of room, hits the length cap, or leaves the
map through an edge.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from ..config import MapConfig
from ..hexgrid import HexCoord, hex_direction, hex_neighbors, hex_ring
from ..tile_types import Biome, RiverShape, TerrainTile
from .context import GenerationContext, row_offset
from .noise import StreamOffset

logger = structlog.get_logger()

# Candidate start points sampled along the chosen edge
SOURCE_CANDIDATES = 5

# Max random amount subtracted from neighbor elevation during descent
FLOW_JITTER = 0.1

# Rivers may only exit through an edge once they are longer than this
MIN_EDGE_EXIT_LENGTH = 5

# Moisture floor for tiles a river runs through
RIVER_MOISTURE = 0.8

# Moisture floor for adjacent tiles; drops by the falloff per extra ring
NEIGHBOR_MOISTURE = 0.6
NEIGHBOR_MOISTURE_FALLOFF = 0.2

# Map edges, in the order a random edge index selects them
EDGE_TOP, EDGE_RIGHT, EDGE_BOTTOM, EDGE_LEFT = range(4)


@dataclass
class River:
    """A carved river and the edge it was sourced from."""

    path: list[HexCoord]
    source_edge: int

    @property
    def length(self) -> int:
        return len(self.path)


def river_length_cap(config: MapConfig) -> int:
    """Longest path a single river may take."""
    return max(config.width, config.height) * 2


def edge_start_point(
    edge: int,
    width: int,
    height: int,
    rng: np.random.Generator,
) -> HexCoord:
    """Random point along one map edge, kept away from the corners.

    Points are drawn along the longer map dimension, so on non-square maps
    some land outside the map; callers skip those.
    """
    span = max(width, height)
    pos = int(np.floor(rng.random() * span * 0.6)) + int(np.floor(span * 0.2))

    if edge == EDGE_TOP:
        return HexCoord(pos, 0)
    if edge == EDGE_RIGHT:
        return HexCoord(width - 1 - row_offset(pos), pos)
    if edge == EDGE_BOTTOM:
        return HexCoord(pos - row_offset(height - 1), height - 1)
    return HexCoord(-row_offset(pos), pos)


def choose_river_source(
    ctx: GenerationContext,
    rng: np.random.Generator,
) -> tuple[HexCoord | None, int]:
    """Pick the highest of several sampled points on a random edge.

    Returns:
        Tuple of (source coordinate or None if no sample hit the map, edge).
    """
    config = ctx.config
    edge = int(rng.integers(4))

    best: HexCoord | None = None
    best_elevation = -1.0
    for _ in range(SOURCE_CANDIDATES):
        candidate = edge_start_point(edge, config.width, config.height, rng)
        tile = ctx.get(candidate)
        if tile is not None and tile.elevation > best_elevation:
            best_elevation = tile.elevation
            best = candidate

    return best, edge


def trace_river(
    ctx: GenerationContext,
    source: HexCoord,
    rng: np.random.Generator,
    max_length: int,
) -> list[HexCoord]:
    """Follow steepest descent from ``source``.

    Each step moves to the unvisited in-bounds neighbor with the lowest
    effective elevation (elevation minus a small random jitter). Tracing
    stops when no unvisited neighbor remains, the length cap is reached,
    or an edge tile is reached after the minimum length.

    Returns:
        Loop-free list of adjacent coordinates starting at ``source``.
    """
    path: list[HexCoord] = []
    visited: set[HexCoord] = set()
    current = source

    while len(path) < max_length:
        if current in visited:
            break
        visited.add(current)
        path.append(current)

        if ctx.is_edge(current) and len(path) > MIN_EDGE_EXIT_LENGTH:
            break

        lowest: HexCoord | None = None
        lowest_elevation = float("inf")
        for neighbor in hex_neighbors(current):
            if neighbor in visited:
                continue
            tile = ctx.get(neighbor)
            if tile is None:
                continue

            effective = tile.elevation - float(rng.random()) * FLOW_JITTER
            if effective < lowest_elevation:
                lowest_elevation = effective
                lowest = neighbor

        if lowest is None:
            break
        current = lowest

    return path


def _direction_index(from_coord: HexCoord, to_coord: HexCoord) -> int:
    direction = hex_direction(from_coord, to_coord)
    return int(direction) if direction is not None else 0


def determine_flow_shape(
    current: HexCoord,
    prev: HexCoord | None,
    next_: HexCoord | None,
) -> tuple[bool, int]:
    """Shape of a segment from its incoming and outgoing neighbors.

    Shared by rivers and roads.

    Returns:
        Tuple of (is_straight, rotation 0-5). Segments with a missing
        neighbor are straight along the one known direction; otherwise a
        segment is straight when the two directions are opposite and a
        corner rotated toward ``prev`` when they are not.
    """
    prev_dir = _direction_index(current, prev) if prev is not None else None
    next_dir = _direction_index(current, next_) if next_ is not None else None

    if prev_dir is None or next_dir is None:
        if next_dir is not None:
            return True, next_dir
        return True, prev_dir if prev_dir is not None else 0

    if abs(next_dir - prev_dir) == 3:
        return True, min(prev_dir, next_dir)

    return False, prev_dir


def stamp_river(
    ctx: GenerationContext,
    path: list[HexCoord],
    rng: np.random.Generator,
) -> int:
    """Write a river path into the tile table.

    River tiles become riverside with moisture of at least 0.8. Tiles
    within ``river_moisture_radius`` rings get a moisture floor that falls
    off with distance; adjacent tiles whose moisture then exceeds the
    riverside threshold are promoted to riverside. Promotion does not
    spread any further.

    Returns:
        Number of neighbors promoted to riverside.
    """
    config = ctx.config
    promoted = 0

    for i, coord in enumerate(path):
        tile = ctx.get(coord)
        if tile is None:
            continue

        prev = path[i - 1] if i > 0 else None
        next_ = path[i + 1] if i < len(path) - 1 else None
        straight, rotation = determine_flow_shape(coord, prev, next_)

        tile.river_shape = RiverShape.STRAIGHT if straight else RiverShape.CORNER
        tile.river_rotation = rotation
        tile.biome = Biome.RIVERSIDE
        tile.moisture = max(tile.moisture, RIVER_MOISTURE)

        for radius in range(1, config.river_moisture_radius + 1):
            floor = NEIGHBOR_MOISTURE - NEIGHBOR_MOISTURE_FALLOFF * (radius - 1)
            if floor <= 0:
                break
            for neighbor in hex_ring(coord, radius):
                neighbor_tile = ctx.get(neighbor)
                if neighbor_tile is None or neighbor_tile.biome == Biome.RIVERSIDE:
                    continue

                neighbor_tile.moisture = max(neighbor_tile.moisture, floor)
                if (
                    radius == 1
                    and neighbor_tile.moisture > config.riverside_moisture
                    and not neighbor_tile.has_river
                ):
                    neighbor_tile.biome = Biome.RIVERSIDE
                    neighbor_tile.base_tile = (
                        TerrainTile.GRASS if rng.random() < 0.5 else TerrainTile.DIRT
                    )
                    promoted += 1

    return promoted


def carve_rivers(ctx: GenerationContext) -> list[River]:
    """Phase 2: trace and stamp up to ``river_count`` rivers.

    Rivers with no valid first step are dropped, so fewer rivers than
    requested is a normal outcome.
    """
    config = ctx.config
    rng = ctx.rng(StreamOffset.HYDROLOGY)
    max_length = river_length_cap(config)
    rivers: list[River] = []

    for index in range(config.river_count):
        source, edge = choose_river_source(ctx, rng)
        if source is None:
            logger.debug("river_dropped", index=index, reason="no_source", edge=edge)
            continue

        path = trace_river(ctx, source, rng, max_length)
        if len(path) < 2:
            logger.debug(
                "river_dropped",
                index=index,
                reason="no_first_step",
                source=ctx.describe(source),
            )
            continue

        promoted = stamp_river(ctx, path, rng)
        rivers.append(River(path=path, source_edge=edge))
        logger.debug(
            "river_carved",
            index=index,
            length=len(path),
            source=ctx.describe(source),
            promoted=promoted,
        )

    logger.info(
        "rivers_carved",
        requested=config.river_count,
        carved=len(rivers),
        lengths=[river.length for river in rivers],
    )
    return rivers

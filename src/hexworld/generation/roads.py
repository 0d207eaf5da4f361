"""Road network: approximate MST over settlement sites, resolved with A*."""

import heapq
import math
from dataclasses import dataclass

import numpy as np
import structlog

from ..hexgrid import HexCoord, hex_distance, hex_line, hex_neighbors
from ..tile_types import PathShape, TerrainTile
from .context import GenerationContext, HexTile
from .hydrology import determine_flow_shape
from .noise import StreamOffset

logger = structlog.get_logger()

# Extra random edges per site, for route redundancy
EXTRA_EDGE_RATIO = 0.3

# Extra edges are only kept between sites closer than this
EXTRA_EDGE_MAX_DISTANCE = 15

# A* step costs
COST_DEFAULT = 1
COST_WATER = 5
COST_MOUNTAIN = 3
COST_RIVER = 2


@dataclass
class Road:
    """One resolved road edge between two sites."""

    start: HexCoord
    end: HexCoord
    path: list[HexCoord]
    fallback: bool = False  # True if A* failed and a straight line was used


def minimal_connections(
    sites: list[HexCoord],
    rng: np.random.Generator,
) -> list[tuple[HexCoord, HexCoord]]:
    """Connect every site, then add a few redundant edges.

    Grows a spanning tree from the first site by repeatedly taking the
    shortest hex-distance edge between the connected and remaining sets
    (ties keep the first pair found). Then draws
    ``floor(0.3 * len(sites))`` random site pairs and keeps those that are
    distinct and closer than the extra-edge distance cap. Duplicate edges
    are allowed.
    """
    if len(sites) < 2:
        return []

    connections: list[tuple[HexCoord, HexCoord]] = []
    connected: list[HexCoord] = [sites[0]]
    remaining: list[HexCoord] = list(sites[1:])

    while remaining:
        best_from: HexCoord | None = None
        best_index = -1
        best_distance = math.inf

        for from_coord in connected:
            for index, to_coord in enumerate(remaining):
                distance = hex_distance(from_coord, to_coord)
                if distance < best_distance:
                    best_distance = distance
                    best_from = from_coord
                    best_index = index

        if best_from is None:
            break
        best_to = remaining.pop(best_index)
        connections.append((best_from, best_to))
        connected.append(best_to)

    extra = math.floor(len(sites) * EXTRA_EDGE_RATIO)
    for _ in range(extra):
        from_coord = sites[int(rng.integers(len(sites)))]
        to_coord = sites[int(rng.integers(len(sites)))]
        if (
            from_coord != to_coord
            and hex_distance(from_coord, to_coord) < EXTRA_EDGE_MAX_DISTANCE
        ):
            connections.append((from_coord, to_coord))

    return connections


def step_cost(tile: HexTile) -> int:
    """Cost of stepping onto a tile.

    Crossing a river is discouraged but cheaper than fording open water
    or climbing a mountain; river cost takes precedence.
    """
    if tile.has_river:
        return COST_RIVER
    if tile.base_tile.is_water:
        return COST_WATER
    if tile.base_tile == TerrainTile.STONE_MOUNTAIN:
        return COST_MOUNTAIN
    return COST_DEFAULT


def find_path(
    ctx: GenerationContext,
    start: HexCoord,
    goal: HexCoord,
) -> tuple[list[HexCoord], bool]:
    """Terrain-weighted A* between two in-map hexes.

    The heuristic is hex distance, which never overestimates because every
    step costs at least 1. Ties between equal-f nodes are broken by
    insertion order.

    Returns:
        Tuple of (path from start to goal, found). When the search is
        exhausted, the path is a straight interpolated hex line and
        ``found`` is False.
    """
    counter = 0
    open_heap: list[tuple[int, int, HexCoord]] = [(hex_distance(start, goal), counter, start)]
    g_score: dict[HexCoord, int] = {start: 0}
    parent: dict[HexCoord, HexCoord] = {}
    closed: set[HexCoord] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        closed.add(current)

        if current == goal:
            path = [current]
            while current in parent:
                current = parent[current]
                path.append(current)
            path.reverse()
            return path, True

        for neighbor in hex_neighbors(current):
            if neighbor in closed:
                continue
            tile = ctx.get(neighbor)
            if tile is None:
                continue

            g = g_score[current] + step_cost(tile)
            if g < g_score.get(neighbor, math.inf):
                g_score[neighbor] = g
                parent[neighbor] = current
                counter += 1
                heapq.heappush(open_heap, (g + hex_distance(neighbor, goal), counter, neighbor))

    logger.info("path_fallback_line", start=str(start), goal=str(goal))
    return hex_line(start, goal), False


def stamp_road(ctx: GenerationContext, path: list[HexCoord]) -> None:
    """Write a road path into the tile table.

    River tiles get a crossing path shape and keep their river. Other
    tiles get a straight or corner shape; a tile already holding a
    different road shape becomes a crossing (junction). Walkable terrain
    under the road is repaved as dirt; water and stone are left alone.
    """
    for i, coord in enumerate(path):
        tile = ctx.get(coord)
        if tile is None:
            continue

        if tile.has_river:
            tile.path_shape = PathShape.CROSSING
            continue

        prev = path[i - 1] if i > 0 else None
        next_ = path[i + 1] if i < len(path) - 1 else None
        straight, rotation = determine_flow_shape(coord, prev, next_)
        shape = PathShape.STRAIGHT if straight else PathShape.CORNER

        if tile.path_shape is not None and (tile.path_shape, tile.path_rotation) != (
            shape,
            rotation,
        ):
            shape, rotation = PathShape.CROSSING, 0

        tile.path_shape = shape
        tile.path_rotation = rotation

        if tile.base_tile.road_surface:
            tile.base_tile = TerrainTile.DIRT


def build_roads(ctx: GenerationContext) -> list[Road]:
    """Phase 4: connect all settlement sites with roads."""
    sites = [tile.coord for tile in ctx.sites()]
    if len(sites) < 2:
        logger.info("roads_skipped", sites=len(sites))
        return []

    rng = ctx.rng(StreamOffset.ROADS)
    connections = minimal_connections(sites, rng)

    roads: list[Road] = []
    for start, end in connections:
        path, found = find_path(ctx, start, end)
        stamp_road(ctx, path)
        roads.append(Road(start=start, end=end, path=path, fallback=not found))

    path_tiles = sum(1 for tile in ctx if tile.has_path)
    logger.info(
        "roads_built",
        sites=len(sites),
        edges=len(roads),
        spanning_edges=len(sites) - 1,
        fallbacks=sum(1 for road in roads if road.fallback),
        path_tiles=path_tiles,
    )
    return roads

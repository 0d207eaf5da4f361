"""Post-generation map validation."""

from dataclasses import dataclass, field
from itertools import combinations

import numpy as np
import structlog
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from ..hexgrid import hex_distance, hex_neighbors
from ..tile_types import Biome, SiteArchetype
from .context import in_map_bounds
from .generator import HexMap
from .hydrology import river_length_cap
from .settlements import MIN_CROSSING_SPACING, MIN_SITE_SPACING

logger = structlog.get_logger()


@dataclass
class ValidationResult:
    """Problems found on a map; any error fails it, warnings do not."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


def validate_map(hex_map: HexMap) -> ValidationResult:
    """Check a generated map against its structural guarantees.

    Problems are recorded on the result, never raised.

    Args:
        hex_map: Map returned by ``MapGenerator.generate()``.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    # Check 1: One tile per in-bounds coordinate
    _check_tile_table(hex_map, result)

    # Check 2: Every biome comes from the enumeration
    _check_biomes(hex_map, result)

    # Check 3: Rivers are loop-free, adjacent and capped
    _check_rivers(hex_map, result)

    # Check 4: Site spacing and building placement
    _check_site_spacing(hex_map, result)
    _check_buildings(hex_map, result)

    # Check 5: Roads connect every site
    _check_road_connectivity(hex_map, result)

    # Check 6: Path coverage sanity
    _check_path_coverage(hex_map, result)

    if result.passed:
        logger.info("map_validation_passed", warnings=len(result.warnings))
    else:
        logger.warning("map_validation_failed", errors=result.errors)

    for warning in result.warnings:
        logger.warning("map_validation_warning", message=warning)

    return result


def _check_tile_table(hex_map: HexMap, result: ValidationResult) -> None:
    """Check tile count and coordinate bounds."""
    config = hex_map.config
    expected = config.width * config.height
    if len(hex_map) != expected:
        result.add_error(f"Map has {len(hex_map)} tiles, expected {expected}")

    out_of_bounds = 0
    mismatched = 0
    for coord, tile in hex_map.items():
        if not in_map_bounds(coord, config.width, config.height):
            out_of_bounds += 1
        if tile.coord != coord:
            mismatched += 1

    if out_of_bounds:
        result.add_error(f"{out_of_bounds} tiles lie outside the map bounds")
    if mismatched:
        result.add_error(f"{mismatched} tiles are stored under the wrong coordinate")


def _check_biomes(hex_map: HexMap, result: ValidationResult) -> None:
    """Check every tile has a declared biome."""
    invalid = sum(1 for tile in hex_map.values() if not isinstance(tile.biome, Biome))
    if invalid:
        result.add_error(f"{invalid} tiles have an unknown biome")


def _check_rivers(hex_map: HexMap, result: ValidationResult) -> None:
    """Check river paths."""
    cap = river_length_cap(hex_map.config)

    for index, river in enumerate(hex_map.rivers):
        path = river.path
        if len(set(path)) != len(path):
            result.add_error(f"River {index} revisits a tile")
        if len(path) > cap:
            result.add_error(f"River {index} has length {len(path)} over cap {cap}")

        gaps = sum(1 for a, b in zip(path, path[1:]) if hex_distance(a, b) != 1)
        if gaps:
            result.add_error(f"River {index} has {gaps} non-adjacent steps")

        unstamped = sum(
            1 for coord in path if coord in hex_map and not hex_map[coord].has_river
        )
        if unstamped:
            result.add_error(f"River {index} has {unstamped} tiles without a river shape")


def _check_site_spacing(hex_map: HexMap, result: ValidationResult) -> None:
    """Check pairwise site spacing."""
    violations = 0
    for a, b in combinations(hex_map.sites, 2):
        if SiteArchetype.CROSSING in (a.archetype, b.archetype):
            spacing = MIN_CROSSING_SPACING
        else:
            spacing = MIN_SITE_SPACING
        if hex_distance(a.coord, b.coord) < spacing:
            violations += 1

    if violations:
        result.add_error(f"{violations} site pairs are closer than the minimum spacing")


def _check_buildings(hex_map: HexMap, result: ValidationResult) -> None:
    """Check buildings only sit on sites."""
    stray = sum(
        1
        for tile in hex_map.values()
        if tile.building is not None and tile.building_site is None
    )
    if stray:
        result.add_error(f"{stray} buildings are not on a settlement site")


def _check_road_connectivity(hex_map: HexMap, result: ValidationResult) -> None:
    """Check all sites share one connected component of path tiles."""
    site_coords = [site.coord for site in hex_map.sites]
    if len(site_coords) < 2:
        return

    path_coords = [tile.coord for tile in hex_map.path_tiles()]
    index = {coord: i for i, coord in enumerate(path_coords)}

    missing = [coord for coord in site_coords if coord not in index]
    if missing:
        result.add_error(f"{len(missing)} sites are not on any road")
        return

    rows: list[int] = []
    cols: list[int] = []
    for coord, i in index.items():
        for neighbor in hex_neighbors(coord):
            j = index.get(neighbor)
            if j is not None:
                rows.append(i)
                cols.append(j)

    size = len(path_coords)
    graph = coo_matrix(
        (np.ones(len(rows), dtype=np.int8), (rows, cols)), shape=(size, size)
    )
    _, labels = connected_components(graph, directed=False)

    site_labels = {int(labels[index[coord]]) for coord in site_coords}
    if len(site_labels) > 1:
        result.add_error(f"Sites are split across {len(site_labels)} road networks")


def _check_path_coverage(hex_map: HexMap, result: ValidationResult) -> None:
    """Warn when roads cover far more of the map than the configured density."""
    if not hex_map:
        return
    coverage = len(hex_map.path_tiles()) / len(hex_map)
    expected = hex_map.config.path_density
    if coverage > 2 * expected:
        result.add_warning(
            f"Path coverage {coverage:.1%} is more than twice the expected {expected:.1%}"
        )

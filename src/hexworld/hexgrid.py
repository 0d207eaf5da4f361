"""Axial/cube hex coordinate math for pointy-top hex grids."""

import math
from enum import IntEnum
from typing import NamedTuple

SQRT3 = math.sqrt(3.0)


class HexCoord(NamedTuple):
    """Integer axial hex coordinate (q = column, r = row).

    The tuple itself is the canonical map key.
    """

    q: int
    r: int

    def __str__(self) -> str:
        return hex_key(self)


class CubeCoord(NamedTuple):
    """Cube coordinate with x + y + z == 0."""

    x: float
    y: float
    z: float


class HexDirection(IntEnum):
    """Six hex directions, counter-clockwise from east.

    The integer value doubles as the tile rotation index (60 degree steps).
    """

    EAST = 0
    NORTHEAST = 1
    NORTHWEST = 2
    WEST = 3
    SOUTHWEST = 4
    SOUTHEAST = 5

    @property
    def opposite(self) -> "HexDirection":
        """Direction pointing the other way."""
        return HexDirection((self + 3) % 6)


# Axial deltas, indexed by HexDirection
HEX_DIRECTION_DELTAS: dict[HexDirection, tuple[int, int]] = {
    HexDirection.EAST: (1, 0),
    HexDirection.NORTHEAST: (1, -1),
    HexDirection.NORTHWEST: (0, -1),
    HexDirection.WEST: (-1, 0),
    HexDirection.SOUTHWEST: (-1, 1),
    HexDirection.SOUTHEAST: (0, 1),
}

_DELTA_TO_DIRECTION: dict[tuple[int, int], HexDirection] = {
    delta: direction for direction, delta in HEX_DIRECTION_DELTAS.items()
}


def hex_key(coord: HexCoord) -> str:
    """Stable string key, e.g. ``"5,-3"``."""
    return f"{coord[0]},{coord[1]}"


def parse_hex_key(key: str) -> HexCoord:
    """Parse a ``"q,r"`` key back into a coordinate.

    Raises:
        ValueError: If the key is not two comma separated integers.
    """
    parts = key.split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid hex key: {key!r} (expected 'q,r')")
    return HexCoord(int(parts[0]), int(parts[1]))


def axial_to_cube(coord: tuple[float, float]) -> CubeCoord:
    """Convert axial (q, r) to cube (x, y, z)."""
    x = coord[0]
    z = coord[1]
    return CubeCoord(x, -x - z, z)


def cube_to_axial(cube: CubeCoord) -> HexCoord:
    """Convert cube (x, y, z) back to axial (q, r)."""
    return HexCoord(cube.x, cube.z)


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Number of hex steps between two coordinates."""
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return max(abs(dq), abs(dr), abs(dq + dr))


def hex_neighbor(coord: HexCoord, direction: int) -> HexCoord:
    """Neighbor of ``coord`` in ``direction`` (taken modulo 6)."""
    dq, dr = HEX_DIRECTION_DELTAS[HexDirection(direction % 6)]
    return HexCoord(coord[0] + dq, coord[1] + dr)


def hex_neighbors(coord: HexCoord) -> list[HexCoord]:
    """All six neighbors, in HexDirection order."""
    q, r = coord
    return [HexCoord(q + dq, r + dr) for dq, dr in HEX_DIRECTION_DELTAS.values()]


def hex_direction(from_coord: HexCoord, to_coord: HexCoord) -> HexDirection | None:
    """Direction of an adjacent step, or None if the hexes are not adjacent."""
    delta = (to_coord[0] - from_coord[0], to_coord[1] - from_coord[1])
    return _DELTA_TO_DIRECTION.get(delta)


def hex_ring(center: HexCoord, radius: int) -> list[HexCoord]:
    """Hexes at exactly ``radius`` steps from ``center``.

    Radius 0 returns the center itself.
    """
    if radius == 0:
        return [HexCoord(center[0], center[1])]

    results: list[HexCoord] = []
    dq, dr = HEX_DIRECTION_DELTAS[HexDirection.SOUTHWEST]
    coord = HexCoord(center[0] + dq * radius, center[1] + dr * radius)
    for direction in HexDirection:
        for _ in range(radius):
            results.append(coord)
            coord = hex_neighbor(coord, direction)
    return results


def _round_half_up(value: float) -> int:
    # Matches Math.round semantics so ties resolve the same way everywhere
    return int(math.floor(value + 0.5))


def hex_round(coord: tuple[float, float]) -> HexCoord:
    """Round fractional axial coordinates to the nearest hex.

    The cube component with the largest rounding error is recomputed
    from the other two so the x + y + z == 0 constraint holds.
    """
    cube = axial_to_cube(coord)
    rx = _round_half_up(cube.x)
    ry = _round_half_up(cube.y)
    rz = _round_half_up(cube.z)

    x_diff = abs(rx - cube.x)
    y_diff = abs(ry - cube.y)
    z_diff = abs(rz - cube.z)

    if x_diff > y_diff and x_diff > z_diff:
        rx = -ry - rz
    elif y_diff > z_diff:
        ry = -rx - rz
    else:
        rz = -rx - ry

    return cube_to_axial(CubeCoord(rx, ry, rz))


def hex_to_world(coord: HexCoord, hex_size: float = 1.0) -> tuple[float, float]:
    """Center of a hex in world units as (x, z)."""
    q, r = coord
    x = hex_size * (SQRT3 * q + (SQRT3 / 2.0) * r)
    z = hex_size * (1.5 * r)
    return x, z


def world_to_hex(world_x: float, world_z: float, hex_size: float = 1.0) -> HexCoord:
    """Hex containing a world position."""
    q = ((SQRT3 / 3.0) * world_x - (1.0 / 3.0) * world_z) / hex_size
    r = ((2.0 / 3.0) * world_z) / hex_size
    return hex_round((q, r))


def hex_line(from_coord: HexCoord, to_coord: HexCoord) -> list[HexCoord]:
    """Straight run of adjacent hexes from ``from_coord`` to ``to_coord``.

    Endpoints are nudged by a tiny epsilon so samples that land exactly on
    a hex edge always round to the same side.
    """
    distance = hex_distance(from_coord, to_coord)
    if distance == 0:
        return [HexCoord(from_coord[0], from_coord[1])]

    eps = 1e-6
    q0, r0 = from_coord[0] + eps, from_coord[1] + eps
    q1, r1 = to_coord[0] + eps, to_coord[1] + eps

    line: list[HexCoord] = []
    for i in range(distance + 1):
        t = i / distance
        line.append(hex_round((q0 + (q1 - q0) * t, r0 + (r1 - r0) * t)))
    return line

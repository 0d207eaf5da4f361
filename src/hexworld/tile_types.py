"""Tile vocabulary: biomes, terrain variants, river/path shapes, sites, buildings."""

from enum import Enum


class Biome(str, Enum):
    """Thematic terrain category driving variants and settlement suitability."""

    DESERT = "desert"
    GRASSLAND = "grassland"
    BADLANDS = "badlands"
    RIVERSIDE = "riverside"


class TerrainTile(str, Enum):
    """Concrete base terrain variants (one renderable tile each)."""

    GRASS = "grass"
    GRASS_FOREST = "grass-forest"
    GRASS_HILL = "grass-hill"
    DIRT = "dirt"
    DIRT_LUMBER = "dirt-lumber"
    SAND = "sand"
    SAND_DESERT = "sand-desert"
    SAND_ROCKS = "sand-rocks"
    STONE = "stone"
    STONE_HILL = "stone-hill"
    STONE_MOUNTAIN = "stone-mountain"
    STONE_ROCKS = "stone-rocks"
    WATER = "water"
    WATER_ISLAND = "water-island"
    WATER_ROCKS = "water-rocks"

    @property
    def is_water(self) -> bool:
        """Water family: any variant whose name contains 'water'."""
        return "water" in self.value

    @property
    def is_stone(self) -> bool:
        """Stone family: any variant whose name starts with 'stone'."""
        return self.value.startswith("stone")

    @property
    def road_surface(self) -> bool:
        """Whether a road may repave this tile as dirt."""
        return not (self.is_water or self.is_stone)


class RiverShape(str, Enum):
    """River segment shapes."""

    STRAIGHT = "river-straight"
    CORNER = "river-corner"


class PathShape(str, Enum):
    """Road segment shapes."""

    STRAIGHT = "path-straight"
    CORNER = "path-corner"
    CROSSING = "path-crossing"


class SiteArchetype(str, Enum):
    """Settlement site archetypes."""

    TOWN = "town"
    MINE = "mine"
    FARM = "farm"
    OUTPOST = "outpost"
    CROSSING = "crossing"


class BuildingToken(str, Enum):
    """Building tokens placed on settlement sites."""

    CABIN = "building-cabin"
    FARM = "building-farm"
    MINE = "building-mine"
    MILL = "building-mill"
    MARKET = "building-market"
    TOWER = "building-tower"
    VILLAGE = "building-village"

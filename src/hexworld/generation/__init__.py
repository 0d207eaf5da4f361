"""Procedural hex map generation package.

Runs five phases over one shared tile table: terrain synthesis, river
carving, settlement planning, road building and building assignment.
"""

from .context import GenerationContext, HexTile
from .generator import (
    HexMap,
    MapGenerator,
    check_site_archetypes,
    create_map_generator,
    generate_hex_map,
)
from .hydrology import River
from .roads import Road
from .settlements import SettlementSite
from .validation import ValidationResult, validate_map

__all__ = [
    "GenerationContext",
    "HexMap",
    "HexTile",
    "MapGenerator",
    "River",
    "Road",
    "SettlementSite",
    "ValidationResult",
    "check_site_archetypes",
    "create_map_generator",
    "generate_hex_map",
    "validate_map",
]

"""Command-line interface for hex map generation."""

import argparse
import logging
import sys
import time
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from .generator import HexMap

# Preview glyphs, most specific feature first
_BIOME_GLYPHS = {
    "desert": ".",
    "grassland": ",",
    "badlands": "^",
    "riverside": '"',
}
_SITE_GLYPHS = {
    "town": "T",
    "mine": "M",
    "farm": "F",
    "outpost": "O",
    "crossing": "X",
}


def render_ascii(hex_map: "HexMap") -> str:
    """Render a map as text, one line per row, odd rows shifted right."""
    from .context import row_offset

    config = hex_map.config
    lines: list[str] = []
    for r in range(config.height):
        offset = row_offset(r)
        glyphs: list[str] = []
        for q in range(-offset, config.width - offset):
            tile = hex_map.get_tile(q, r)
            if tile.building_site is not None:
                glyphs.append(_SITE_GLYPHS[tile.building_site.value])
            elif tile.has_river:
                glyphs.append("~")
            elif tile.has_path:
                glyphs.append("#")
            else:
                glyphs.append(_BIOME_GLYPHS[tile.biome.value])
        lines.append((" " if r % 2 else "") + " ".join(glyphs))
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for map generation."""
    parser = argparse.ArgumentParser(
        description="Generate a deterministic procedural hex map"
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="Config name or TOML path"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=None, help="Map width in hexes")
    parser.add_argument("--height", type=int, default=None, help="Map height in hexes")
    parser.add_argument(
        "--rivers", type=int, default=None, help="Number of rivers to attempt"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate the generated map"
    )
    parser.add_argument(
        "--json", action="store_true", help="Print tile JSON instead of a preview"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    # Configure structlog for CLI; logs go to stderr so --json stays clean
    level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    # Import here to avoid slow startup for --help
    from pydantic import ValidationError

    from ..config import MapConfig, find_config, load_config
    from ..exceptions import InvalidConfigError
    from .generator import MapGenerator
    from .validation import validate_map

    if args.config:
        try:
            config = load_config(find_config(args.config))
        except (FileNotFoundError, ValidationError) as e:
            parser.error(str(e))
    else:
        config = MapConfig()

    overrides = {
        "seed": args.seed,
        "width": args.width,
        "height": args.height,
        "river_count": args.rivers,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    try:
        generator = MapGenerator(config, **overrides)
    except (InvalidConfigError, ValidationError) as e:
        parser.error(str(e))

    start_time = time.time()
    hex_map = generator.generate()
    gen_time = time.time() - start_time

    if args.json:
        print(hex_map.to_json())
    else:
        cfg = hex_map.config
        print(f"Generated {cfg.width}x{cfg.height} hex map with seed {cfg.seed}")
        print(f"  tiles:  {len(hex_map)}")
        print(f"  rivers: {len(hex_map.rivers)} {[r.length for r in hex_map.rivers]}")
        print(f"  sites:  {len(hex_map.sites)}")
        print(f"  roads:  {len(hex_map.roads)} ({len(hex_map.path_tiles())} path tiles)")
        for biome, count in hex_map.biome_counts().items():
            print(f"  {biome}: {count} ({count / len(hex_map):.1%})")
        print(f"Generation complete in {gen_time:.2f}s")
        print()
        print(render_ascii(hex_map))

    if args.validate:
        result = validate_map(hex_map)
        if not result.passed:
            for error in result.errors:
                print(f"error: {error}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

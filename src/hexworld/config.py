"""Map generation configuration and TOML loading."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MapConfig(BaseModel):
    """Immutable hex map generation parameters.

    Every field has a default, so partial overrides are enough:
    ``MapConfig(seed=7, width=16)``. Unknown keys are rejected rather
    than ignored.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    seed: int = Field(default=42, description="Random seed for reproducibility")
    width: int = Field(default=32, gt=0, description="Map width in hex cells")
    height: int = Field(default=32, gt=0, description="Map height in hex cells")
    hex_size: float = Field(default=1.0, gt=0, description="Hex size in world units")

    # Noise scales (frequency multipliers on world position)
    biome_scale: float = Field(default=0.08, gt=0, description="Biome noise scale")
    moisture_scale: float = Field(default=0.05, gt=0, description="Moisture noise scale")
    elevation_scale: float = Field(
        default=0.03, gt=0, description="Elevation noise scale"
    )

    # Feature density
    river_count: int = Field(default=3, ge=0, description="Rivers to attempt")
    path_density: float = Field(
        default=0.15, ge=0, le=1, description="Expected fraction of path tiles"
    )
    building_site_density: float = Field(
        default=0.02, ge=0, le=1, description="Settlement sites per tile"
    )

    # Biome thresholds
    desert_threshold: float = Field(
        default=0.3, ge=0, le=1, description="Biome value below this may be desert"
    )
    grassland_threshold: float = Field(
        default=0.5, ge=0, le=1, description="Biome value below this is grassland"
    )
    badlands_elevation: float = Field(
        default=0.7, ge=0, le=1, description="Elevation above this is badlands"
    )
    riverside_moisture: float = Field(
        default=0.75, ge=0, le=1, description="Moisture above this is riverside"
    )

    river_moisture_radius: int = Field(
        default=2, ge=1, description="Rings of neighbors moistened around rivers"
    )

    def with_overrides(self, **overrides: Any) -> "MapConfig":
        """Return a validated copy with some fields replaced."""
        data = self.model_dump()
        data.update(overrides)
        return MapConfig.model_validate(data)

    @property
    def tile_count(self) -> int:
        """Number of tiles the map will hold."""
        return self.width * self.height


def load_config(config_path: Path) -> MapConfig:
    """Load a map configuration from a TOML file.

    Keys may sit at the top level or under a ``[map]`` table.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed MapConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return MapConfig.model_validate(data.get("map", data))


# Bundled map configs live beside src/ at the repository root
CONFIGS_DIR = Path(__file__).parent.parent.parent / "configs"


def find_config(name: str) -> Path:
    """Resolve a map config name to a TOML file.

    ``name`` is taken as a file path when it names a ``.toml`` file or
    contains a path separator; otherwise it is looked up in the bundled
    configs directory, with or without the ``.toml`` suffix.

    Raises:
        FileNotFoundError: If nothing matches.
    """
    if "/" in name or name.endswith(".toml"):
        candidates = [Path(name)]
    else:
        candidates = [CONFIGS_DIR / f"{name}.toml", CONFIGS_DIR / name]

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    known = ", ".join(list_configs()) or "none"
    raise FileNotFoundError(f"No map config named {name!r} (bundled: {known})")


def list_configs() -> list[str]:
    """Names of the bundled map configs."""
    return sorted(path.stem for path in CONFIGS_DIR.glob("*.toml"))

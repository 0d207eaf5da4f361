"""Tests for map configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hexworld.config import MapConfig, find_config, list_configs, load_config


class TestMapConfig:
    """Tests for MapConfig validation."""

    def test_defaults(self) -> None:
        """Defaults give a 32x32 map with three rivers."""
        config = MapConfig()
        assert config.seed == 42
        assert (config.width, config.height) == (32, 32)
        assert config.river_count == 3
        assert config.tile_count == 1024

    @pytest.mark.parametrize(
        "field,value",
        [
            ("width", 0),
            ("height", -1),
            ("river_count", -1),
            ("riverside_moisture", 1.5),
            ("building_site_density", -0.1),
        ],
    )
    def test_out_of_range_rejected(self, field: str, value: float) -> None:
        """Out-of-range values raise ValidationError."""
        with pytest.raises(ValidationError):
            MapConfig(**{field: value})

    def test_frozen(self) -> None:
        """Configs cannot be mutated."""
        config = MapConfig()
        with pytest.raises(ValidationError):
            config.seed = 1

    def test_unknown_key_rejected(self) -> None:
        """Unknown or camelCase keys fail instead of being ignored."""
        with pytest.raises(ValidationError):
            MapConfig(riverCount=0)
        with pytest.raises(ValidationError):
            MapConfig().with_overrides(rivers=2)

    def test_with_overrides(self) -> None:
        """Overrides return a new config and leave the original alone."""
        config = MapConfig()
        changed = config.with_overrides(seed=9, width=10)
        assert changed.seed == 9
        assert changed.width == 10
        assert changed.height == config.height
        assert config.seed == 42

    def test_with_overrides_validates(self) -> None:
        """Overrides go through validation."""
        with pytest.raises(ValidationError):
            MapConfig().with_overrides(height=0)


class TestLoadConfig:
    """Tests for TOML loading."""

    def test_map_table(self, tmp_path: Path) -> None:
        """Values under [map] are loaded."""
        path = tmp_path / "custom.toml"
        path.write_text("[map]\nseed = 5\nwidth = 20\nriver_count = 0\n")
        config = load_config(path)
        assert config.seed == 5
        assert config.width == 20
        assert config.river_count == 0
        assert config.height == 32

    def test_top_level(self, tmp_path: Path) -> None:
        """Values may also sit at the top level."""
        path = tmp_path / "flat.toml"
        path.write_text("seed = 11\nheight = 8\n")
        config = load_config(path)
        assert config.seed == 11
        assert config.height == 8

    def test_invalid_values(self, tmp_path: Path) -> None:
        """Invalid values in the file raise ValidationError."""
        path = tmp_path / "bad.toml"
        path.write_text("[map]\nwidth = 0\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_unknown_key_in_file(self, tmp_path: Path) -> None:
        """Misspelled keys in a file raise ValidationError."""
        path = tmp_path / "typo.toml"
        path.write_text("[map]\nseed = 5\nriver_cuont = 0\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")


class TestFindConfig:
    """Tests for config discovery."""

    def test_bundled_configs_listed(self) -> None:
        """Bundled configs are discoverable by name."""
        assert {"default", "frontier", "tiny"} <= set(list_configs())

    def test_find_by_name(self) -> None:
        """Names resolve to files in the configs directory."""
        config = load_config(find_config("frontier"))
        assert config.seed == 1849
        assert (config.width, config.height) == (64, 48)

    def test_default_matches_builtin(self) -> None:
        """The default config file matches MapConfig defaults."""
        assert load_config(find_config("default")) == MapConfig()

    def test_find_by_path(self, tmp_path: Path) -> None:
        """Paths are used as-is."""
        path = tmp_path / "mine.toml"
        path.write_text("[map]\nseed = 3\n")
        assert find_config(str(path)) == path

    def test_unknown_name(self) -> None:
        """Unknown names raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            find_config("no-such-config")

from pathlib import Path

import pytest

from level_baker.config import LevelConfig, load_level_configs, parse_level_configs
from level_baker.errors import ConfigError
from level_baker.types import RasterLayout


def test_parse_level_configs() -> None:
    configs = parse_level_configs(
        """
        [mansion]
        character_half_width = 12
        character_half_height = 6

        [crypt]
        character_half_width = 3
        character_half_height = 0
        collision_layout = "luma_alpha"
        """
    )
    assert configs["mansion"] == LevelConfig(12, 6, RasterLayout.RGBA)
    assert configs["crypt"] == LevelConfig(3, 0, RasterLayout.LUMA_ALPHA)
    assert "attic" not in configs


def test_configs_are_immutable() -> None:
    configs = parse_level_configs(
        "[a]\ncharacter_half_width = 1\ncharacter_half_height = 1\n"
    )
    with pytest.raises(TypeError):
        configs["b"] = configs["a"]  # type: ignore[index]


@pytest.mark.parametrize(
    "text",
    [
        "[a]\ncharacter_half_width = 1\n",
        "[a]\ncharacter_half_width = -1\ncharacter_half_height = 1\n",
        "[a]\ncharacter_half_width = 1.5\ncharacter_half_height = 1\n",
        "[a]\ncharacter_half_width = true\ncharacter_half_height = 1\n",
        '[a]\ncharacter_half_width = 1\ncharacter_half_height = 1\ncollision_layout = "rgb"\n',
        "a = 3\n",
        "[a\n",
    ],
)
def test_invalid_configs_are_rejected(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_level_configs(text)


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="levels.toml"):
        load_level_configs(tmp_path / "levels.toml")


def test_load_file(tmp_path: Path) -> None:
    path = tmp_path / "levels.toml"
    path.write_text("[hall]\ncharacter_half_width = 2\ncharacter_half_height = 4\n")
    assert load_level_configs(path)["hall"].character_half_height == 4

import os

import pytest

from tileblast.config import BoardConfig, load_config
from tileblast.constants import GROUP_SIZE_TIERS
from tileblast.errors import ConfigError

ROOT = os.path.dirname(os.path.dirname(__file__))


def test_defaults():
    config = load_config()
    assert (config.width, config.height, config.color_count) == (10, 10, 6)
    assert config.group_size_tiers == GROUP_SIZE_TIERS
    assert config.cell_count == 100


def test_shipped_config_loads():
    config = load_config(os.path.join(ROOT, "board_config.yaml"))
    assert config == BoardConfig()


def test_yaml_values_are_read(tmp_path):
    path = tmp_path / "board.yaml"
    path.write_text(
        "board:\n"
        "  width: 6\n"
        "  height: 4\n"
        "  color_count: 3\n"
        "  group_size_tiers: [3, 5, 6]\n"
        "  seed: 17\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert (config.width, config.height, config.color_count) == (6, 4, 3)
    assert config.group_size_tiers == (3, 5, 6)
    assert config.seed == 17


def test_missing_board_section_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == BoardConfig()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize("data", [
    {"width": 0},
    {"color_count": 0},
    {"group_size_tiers": [4, 4, 9]},
    {"group_size_tiers": [1, 7, 9]},
    {"group_size_tiers": [4, 7]},
    {"group_size_tiers": "4,7,9"},
    {"max_reshuffle_attempts": 0},
    {"width": "wide"},
    {"colour_count": 3},
])
def test_invalid_values_raise_config_error(data):
    with pytest.raises(ConfigError):
        BoardConfig.from_mapping(data)


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        BoardConfig(height=-1)

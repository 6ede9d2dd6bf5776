"""
Board Configuration
===================

Loads and validates board settings from YAML, providing typed access to the
options a session recognises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

import yaml

from tileblast.constants import (
    COLOR_COUNT,
    GRID_HEIGHT,
    GRID_WIDTH,
    GROUP_SIZE_TIERS,
    MAX_RESHUFFLE_ATTEMPTS,
    MIN_GROUP_SIZE,
)
from tileblast.errors import ConfigError


@dataclass(frozen=True)
class BoardConfig:
    """Board geometry, palette size and recovery limits."""
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    color_count: int = COLOR_COUNT               # Palette size, colour ids are 0..color_count-1
    group_size_tiers: Tuple[int, int, int] = field(default=GROUP_SIZE_TIERS)
    max_reshuffle_attempts: int = MAX_RESHUFFLE_ATTEMPTS
    seed: Optional[int] = None                   # Fixed seed for reproducible boards

    def __post_init__(self) -> None:
        _validate_config(self)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BoardConfig":
        """Build a config from a plain mapping, falling back to defaults for missing keys."""
        if not isinstance(data, Mapping):
            raise ConfigError(f"Board config must be a mapping, got {type(data).__name__}")
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigError(f"Unknown board config keys: {sorted(unknown)}")
        try:
            tiers = data.get("group_size_tiers", GROUP_SIZE_TIERS)
            seed = data.get("seed")
            return cls(
                width=int(data.get("width", GRID_WIDTH)),
                height=int(data.get("height", GRID_HEIGHT)),
                color_count=int(data.get("color_count", COLOR_COUNT)),
                group_size_tiers=_parse_tiers(tiers),
                max_reshuffle_attempts=int(data.get("max_reshuffle_attempts", MAX_RESHUFFLE_ATTEMPTS)),
                seed=None if seed is None else int(seed),
            )
        except (TypeError, ValueError) as exc:
            if isinstance(exc, ConfigError):
                raise
            raise ConfigError(f"Invalid board config value: {exc}") from exc


_KNOWN_KEYS = {"width", "height", "color_count", "group_size_tiers", "max_reshuffle_attempts", "seed"}


def _parse_tiers(tiers_data: Any) -> Tuple[int, int, int]:
    """Parse the three group size thresholds from YAML."""
    if isinstance(tiers_data, (str, bytes)) or not hasattr(tiers_data, "__len__"):
        raise ConfigError(f"group_size_tiers must be a list of 3 integers, got {tiers_data!r}")
    if len(tiers_data) != 3:
        raise ConfigError(f"group_size_tiers must have 3 values [A, B, C], got {list(tiers_data)}")
    return (int(tiers_data[0]), int(tiers_data[1]), int(tiers_data[2]))


def _validate_config(config: BoardConfig) -> None:
    """Validate configuration consistency."""
    if config.width < 1 or config.height < 1:
        raise ConfigError(f"Board dimensions must be positive, got {config.width}x{config.height}")
    if config.color_count < 1:
        raise ConfigError(f"color_count must be at least 1, got {config.color_count}")
    tiers = tuple(config.group_size_tiers)
    if len(tiers) != 3:
        raise ConfigError(f"group_size_tiers must have 3 values, got {tiers}")
    if tiers[0] < MIN_GROUP_SIZE or not (tiers[0] < tiers[1] < tiers[2]):
        raise ConfigError(
            f"group_size_tiers must be strictly ascending and start at {MIN_GROUP_SIZE} or more, got {tiers}"
        )
    if config.max_reshuffle_attempts < 1:
        raise ConfigError(f"max_reshuffle_attempts must be at least 1, got {config.max_reshuffle_attempts}")


def load_config(config_path: Optional[Union[str, Path]] = None) -> BoardConfig:
    """
    Load and validate board configuration from YAML.

    Args:
        config_path: Path to a YAML file with a ``board:`` section. If None,
            the defaults from ``constants`` are returned.

    Returns:
        Validated BoardConfig instance.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file content is invalid.
    """
    if config_path is None:
        return BoardConfig()
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return BoardConfig.from_mapping(data.get("board", {}))

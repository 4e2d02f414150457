from __future__ import annotations

import pytest

from falling_blocks.game import Cell, ConfigError, GameConfig, PieceKind
from falling_blocks.game.pieces import default_kick_tables


def test_defaults() -> None:
    config = GameConfig()
    assert config.spawn_row == 20
    assert config.overflow_height == 20
    assert config.spawn_cell == Cell(4, 20)
    assert len(config.kick_tables) == 16


def test_defaults_follow_ground_level() -> None:
    config = GameConfig(ground_level=3, height=10)
    assert config.spawn_row == 13
    assert config.overflow_height == 13


def test_to_world_scales_by_grid_unit() -> None:
    assert GameConfig(grid_unit=100).to_world(Cell(2, 3)) == (200.0, 300.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0},
        {"height": -1},
        {"piece_kinds": ()},
        {"piece_kinds": (PieceKind.T, PieceKind.T)},
        {"spawn_column": 0},  # J and L reach column -1
        {"spawn_column": 8},  # I reaches column 10
        {"lock_delay": -0.1},
        {"grid_unit": 0},
        {"preview_size": 0},
        {"overflow_height": 0},
    ],
)
def test_invalid_configs_raise(kwargs) -> None:
    with pytest.raises(ConfigError):
        GameConfig(**kwargs)


def test_empty_or_missing_kick_table_raises() -> None:
    tables = default_kick_tables()
    tables[(True, 2, 3)] = ()
    with pytest.raises(ConfigError):
        GameConfig(kick_tables=tables)

    tables = default_kick_tables()
    del tables[(False, 0, 1)]
    with pytest.raises(ConfigError):
        GameConfig(kick_tables=tables)


def test_config_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        GameConfig(width=0)

"""Tests for DodgeConfig validation and the variant presets."""

from __future__ import annotations

import numpy as np
import pytest

from election_dodge.config import DodgeConfig, VARIANTS, variant_config, variant_label
from election_dodge.engine import DodgeEngine
from election_dodge.errors import ConfigError


pytestmark = pytest.mark.unit


class TestDefaults:
    def test_matches_original_constants(self):
        cfg = DodgeConfig()
        assert (cfg.field_width, cfg.field_height) == (500, 600)
        assert (cfg.player_width, cfg.player_height) == (60, 80)
        assert cfg.obstacle_size == 50
        assert cfg.player_speed == 8
        assert cfg.spawn_probability == 0.02
        assert (cfg.obstacle_speed_min, cfg.obstacle_speed_max) == (3, 5)
        assert cfg.victory_threshold is None

    def test_collision_band(self):
        assert DodgeConfig().collision_band == (510, 590)

    def test_player_starts_at_field_centre(self):
        cfg = DodgeConfig()
        assert cfg.default_player_x == 250
        assert cfg.max_player_x == 440

    @pytest.mark.parametrize("start, expected", [(-20, 0), (100, 100), (1000, 440)])
    def test_start_position_is_clamped(self, start, expected):
        assert DodgeConfig(player_start_x=start).default_player_x == expected

    def test_config_is_frozen(self):
        cfg = DodgeConfig()
        with pytest.raises(AttributeError):
            cfg.player_speed = 12


class TestValidation:
    @pytest.mark.parametrize("overrides", [
        {"field_width": 0},
        {"player_height": -1},
        {"obstacle_size": 0},
        {"player_width": 501},
        {"obstacle_size": 600},
        {"player_height": 595},
        {"player_speed": -1},
        {"spawn_probability": 1.5},
        {"spawn_probability": -0.1},
        {"obstacle_speed_min": -1},
        {"obstacle_speed_min": 6, "obstacle_speed_max": 5},
        {"max_obstacles": 0},
        {"collision_margin": -5},
        {"victory_threshold": 0},
        {"victory_threshold": 2.5},
        {"victory_threshold": True},
        {"obstacle_speed_max": float("inf")},
        {"obstacle_speed_min": float("nan")},
        {"player_speed": float("nan")},
        {"player_speed": float("inf")},
        {"collision_margin": float("nan")},
        {"spawn_probability": float("nan")},
        {"player_start_x": float("inf")},
        {"max_obstacles": "64"},
    ])
    def test_rejects_bad_values(self, overrides):
        with pytest.raises(ConfigError):
            DodgeConfig(**overrides)

    def test_config_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            DodgeConfig(spawn_probability=2)

    def test_with_overrides_validates(self):
        cfg = DodgeConfig()
        assert cfg.with_overrides(player_speed=4).player_speed == 4
        with pytest.raises(ConfigError):
            cfg.with_overrides(spawn_probability=3)

    def test_edge_values_are_accepted(self):
        DodgeConfig(spawn_probability=1.0, obstacle_speed_min=0, obstacle_speed_max=0, collision_margin=0)


class TestVariants:
    def test_classic_has_no_threshold(self):
        assert variant_config("classic").victory_threshold is None
        assert variant_label("classic") == "Score"

    def test_election_counts_votes_to_ten(self):
        assert variant_config("election").victory_threshold == 10
        assert variant_label("election") == "Votes"

    def test_overrides_apply_to_preset(self):
        cfg = variant_config("election", victory_threshold=3, spawn_probability=0)
        assert cfg.victory_threshold == 3
        assert VARIANTS["election"]["config"].victory_threshold == 10

    def test_unknown_variant(self):
        with pytest.raises(ConfigError):
            variant_config("referendum")
        with pytest.raises(ConfigError):
            variant_label("referendum")


class TestNumericTypes:
    def test_numpy_numbers_are_accepted(self):
        cfg = DodgeConfig(player_speed=np.float64(6.5), victory_threshold=np.int64(4))
        assert cfg.victory_threshold == 4

    def test_infinite_speed_never_reaches_the_engine(self):
        with pytest.raises(ConfigError):
            DodgeEngine(DodgeConfig(spawn_probability=1.0, obstacle_speed_max=float("inf")), seed=1)

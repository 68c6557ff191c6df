"""Fixed configuration for a dodge game engine.

All distances are pixels and all speeds are pixels per tick. A config is
validated once when it is built and never changes afterwards.
"""

import math
import numbers
from dataclasses import dataclass, fields, replace
from typing import Optional

from .errors import ConfigError


@dataclass(frozen=True)
class DodgeConfig:
    # --- Playfield ---
    field_width: int = 500
    field_height: int = 600

    # --- Player ---
    player_width: int = 60
    player_height: int = 80
    player_speed: float = 8.0
    player_start_x: Optional[float] = None

    # --- Obstacles ---
    obstacle_size: int = 50
    spawn_probability: float = 0.02
    obstacle_speed_min: float = 3.0
    obstacle_speed_max: float = 5.0
    max_obstacles: int = 64

    # --- Rules ---
    collision_margin: float = 10.0
    victory_threshold: Optional[int] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
                raise ConfigError(f"{f.name} must be a finite number, got {value!r}")
        for name in ("field_width", "field_height", "player_width", "player_height", "obstacle_size"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.player_width > self.field_width:
            raise ConfigError("player_width must not exceed field_width")
        if self.obstacle_size > self.field_width:
            raise ConfigError("obstacle_size must not exceed field_width")
        if self.player_height + self.collision_margin > self.field_height:
            raise ConfigError("player_height plus collision_margin must fit inside field_height")
        if self.player_speed < 0:
            raise ConfigError("player_speed must not be negative")
        if not 0.0 <= self.spawn_probability <= 1.0:
            raise ConfigError(f"spawn_probability must be within [0, 1], got {self.spawn_probability}")
        if self.obstacle_speed_min < 0:
            raise ConfigError("obstacle_speed_min must not be negative")
        if self.obstacle_speed_max < self.obstacle_speed_min:
            raise ConfigError("obstacle_speed_max must be >= obstacle_speed_min")
        if self.max_obstacles <= 0:
            raise ConfigError("max_obstacles must be positive")
        if self.collision_margin < 0:
            raise ConfigError("collision_margin must not be negative")
        if self.victory_threshold is not None and (
            not isinstance(self.victory_threshold, numbers.Integral) or self.victory_threshold <= 0
        ):
            raise ConfigError("victory_threshold must be a positive integer when set")

    @property
    def max_player_x(self):
        return self.field_width - self.player_width

    @property
    def default_player_x(self):
        """Starting left edge of the player, clamped into the field."""
        x = self.field_width / 2 if self.player_start_x is None else self.player_start_x
        return min(max(0.0, float(x)), float(self.max_player_x))

    @property
    def collision_band(self):
        """(top, bottom) of the vertical zone where obstacles can hit the player."""
        bottom = self.field_height - self.collision_margin
        return bottom - self.player_height, bottom

    def with_overrides(self, **overrides):
        return replace(self, **overrides)


# Named presets. "election" is the votes variant with a victory popup.
VARIANTS = {
    "classic": {"label": "Score", "config": DodgeConfig()},
    "election": {"label": "Votes", "config": DodgeConfig(victory_threshold=10)},
}


def variant_config(name, **overrides):
    """Return the preset config called ``name`` with ``overrides`` applied."""
    try:
        base = VARIANTS[name]["config"]
    except KeyError:
        raise ConfigError(f"unknown variant {name!r}; choose from {sorted(VARIANTS)}") from None
    return base.with_overrides(**overrides) if overrides else base


def variant_label(name):
    if name not in VARIANTS:
        raise ConfigError(f"unknown variant {name!r}; choose from {sorted(VARIANTS)}")
    return VARIANTS[name]["label"]

"""Falling-obstacle dodge game: a pure simulation engine plus a pygame/gymnasium front end."""

from loguru import logger

from .config import DodgeConfig, VARIANTS, variant_config, variant_label
from .engine import (
    Controls,
    DodgeEngine,
    EventKind,
    GameEvent,
    GameSnapshot,
    GameState,
    Obstacle,
    ObstacleView,
    Phase,
    TickResult,
)
from .errors import ConfigError, DodgeError, InvalidPhaseError

logger.disable("election_dodge")

__version__ = "0.1.0"

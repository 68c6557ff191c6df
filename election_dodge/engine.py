"""Simulation core of the dodge game.

The engine owns every piece of mutable game state and advances it once
per call to :meth:`DodgeEngine.tick`. It never draws, plays sounds or
sleeps: the driver supplies the held-key state, and gets back a snapshot
to render plus the events of that tick (collision, score increments,
victory) to turn into side effects.

Phases::

    IDLE --start--> PLAYING --collision--> GAME_OVER --reset--> IDLE
                       |                      |
                       |                      +--start--> PLAYING
                       +--threshold--> VICTORY_INTERSTITIAL
                                           |
                                           +--continue_after_victory--> PLAYING
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from .config import DodgeConfig
from .errors import InvalidPhaseError


class Phase(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    VICTORY_INTERSTITIAL = "victory_interstitial"


class EventKind(Enum):
    COLLISION = "collision"
    SCORE_INCREMENT = "score_increment"
    VICTORY_REACHED = "victory_reached"


@dataclass(frozen=True)
class Controls:
    """Directional keys currently held down, sampled once per frame."""

    move_left: bool = False
    move_right: bool = False

    @classmethod
    def from_action(cls, action):
        """Build controls from a ``[left_held, right_held]`` action."""
        return cls(move_left=bool(action[0]), move_right=bool(action[1]))


@dataclass
class Obstacle:
    id: int
    x: float
    y: float
    speed: float
    width: float
    height: float

    def advance(self, dt=1.0):
        self.y += self.speed * dt

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def right(self):
        return self.x + self.width

    def view(self):
        return ObstacleView(self.id, self.x, self.y, self.speed, self.width, self.height)


@dataclass(frozen=True)
class ObstacleView:
    """Frozen copy of an obstacle as it stood when a snapshot was taken."""

    id: int
    x: float
    y: float
    speed: float
    width: float
    height: float

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def right(self):
        return self.x + self.width


@dataclass
class GameState:
    phase: Phase
    player_x: float
    obstacles: List[Obstacle] = field(default_factory=list)
    score: int = 0
    victory_reached: bool = False


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of the state handed to renderers."""

    phase: Phase
    player_x: float
    obstacles: Tuple[ObstacleView, ...]
    score: int
    victory_reached: bool


@dataclass(frozen=True)
class GameEvent:
    kind: EventKind
    obstacle_id: Optional[int] = None
    score: int = 0


@dataclass(frozen=True)
class TickResult:
    snapshot: GameSnapshot
    events: Tuple[GameEvent, ...] = ()

    def kinds(self):
        return [event.kind for event in self.events]


class DodgeEngine:
    """Single-threaded dodge simulation.

    The engine is not thread safe. A host that ticks from more than one
    thread must hold one lock around every call.
    """

    def __init__(self, config=None, rng=None, seed=None):
        self.config = config if config is not None else DodgeConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._next_id = 1
        self.state = GameState(phase=Phase.IDLE, player_x=self.config.default_player_x)

    @property
    def phase(self):
        return self.state.phase

    def seed(self, seed=None):
        self.rng = np.random.default_rng(seed)

    # --- Phase commands ---

    def start(self):
        if self.state.phase in (Phase.PLAYING, Phase.VICTORY_INTERSTITIAL):
            raise InvalidPhaseError("start", self.state.phase)
        self._reset_round(Phase.PLAYING)

    def continue_after_victory(self):
        if self.state.phase is not Phase.VICTORY_INTERSTITIAL:
            raise InvalidPhaseError("continue_after_victory", self.state.phase)
        self._reset_round(Phase.PLAYING)

    def reset(self):
        """Return to the menu. Accepted from any phase."""
        self._reset_round(Phase.IDLE)

    def _reset_round(self, phase):
        previous = self.state.phase
        self.state.phase = phase
        self.state.player_x = self.config.default_player_x
        self.state.obstacles.clear()
        self.state.score = 0
        self.state.victory_reached = False
        if previous is not phase:
            logger.info("phase {} -> {}", previous.name, phase.name)

    # --- Simulation ---

    def tick(self, controls, dt=1.0) -> TickResult:
        """Advance the game by one frame.

        ``dt`` scales every speed; 1.0 is one full frame. Outside the
        PLAYING phase this does nothing and returns no events.
        """
        state = self.state
        if state.phase is not Phase.PLAYING:
            return TickResult(self.snapshot())

        cfg = self.config
        dt = max(0.0, float(dt))
        events = []

        # Collisions are judged against where the player stood last frame.
        previous_x = state.player_x
        state.player_x = self._move_player(previous_x, controls, dt)

        for obstacle in state.obstacles:
            obstacle.advance(dt)

        hit = self._find_collision(previous_x)
        if hit is not None:
            state.obstacles.remove(hit)
            state.phase = Phase.GAME_OVER
            events.append(GameEvent(EventKind.COLLISION, hit.id, state.score))
            logger.info("obstacle {} hit the player; final score {}", hit.id, state.score)
            logger.info("phase {} -> {}", Phase.PLAYING.name, Phase.GAME_OVER.name)
            return TickResult(self.snapshot(), tuple(events))

        remaining = []
        for obstacle in state.obstacles:
            if obstacle.y > cfg.field_height:
                state.score += 1
                events.append(GameEvent(EventKind.SCORE_INCREMENT, obstacle.id, state.score))
            else:
                remaining.append(obstacle)
        state.obstacles[:] = remaining

        if self.rng.random() < cfg.spawn_probability:
            self._spawn_obstacle()

        threshold = cfg.victory_threshold
        if threshold is not None and not state.victory_reached and state.score >= threshold:
            state.victory_reached = True
            state.phase = Phase.VICTORY_INTERSTITIAL
            events.append(GameEvent(EventKind.VICTORY_REACHED, None, state.score))
            logger.info("victory threshold {} reached", threshold)
            logger.info("phase {} -> {}", Phase.PLAYING.name, Phase.VICTORY_INTERSTITIAL.name)

        return TickResult(self.snapshot(), tuple(events))

    def _move_player(self, x, controls, dt):
        # Left first, then right on top of the result; holding both
        # keys therefore cancels out except against a wall.
        step = self.config.player_speed * dt
        if controls.move_left:
            x = max(0.0, x - step)
        if controls.move_right:
            x = min(float(self.config.max_player_x), x + step)
        return x

    def _find_collision(self, player_x):
        for obstacle in self.state.obstacles:
            if self.in_collision_band(obstacle) and self.overlaps_player(obstacle, player_x):
                return obstacle
        return None

    def in_collision_band(self, obstacle):
        top, bottom = self.config.collision_band
        return obstacle.bottom > top and obstacle.y < bottom

    def overlaps_player(self, obstacle, player_x):
        return obstacle.right > player_x and obstacle.x < player_x + self.config.player_width

    def _spawn_obstacle(self):
        cfg = self.config
        if len(self.state.obstacles) >= cfg.max_obstacles:
            logger.debug("obstacle cap {} reached, spawn skipped", cfg.max_obstacles)
            return None

        size = cfg.obstacle_size
        obstacle = Obstacle(
            id=self._next_id,
            x=float(self.rng.uniform(0, cfg.field_width - size)),
            y=float(-size),
            speed=float(self.rng.uniform(cfg.obstacle_speed_min, cfg.obstacle_speed_max)),
            width=size,
            height=size,
        )
        self._next_id += 1
        self.state.obstacles.append(obstacle)
        return obstacle

    def snapshot(self) -> GameSnapshot:
        state = self.state
        return GameSnapshot(
            phase=state.phase,
            player_x=state.player_x,
            obstacles=tuple(obstacle.view() for obstacle in state.obstacles),
            score=state.score,
            victory_reached=state.victory_reached,
        )

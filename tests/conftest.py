"""Shared fixtures for the dodge game tests."""

from __future__ import annotations

import os

# Headless pygame: no window and no sound card in CI.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from election_dodge.config import DodgeConfig
from election_dodge.engine import DodgeEngine, Obstacle


@pytest.fixture
def quiet_config() -> DodgeConfig:
    """Default field with spawning switched off, so tests place every obstacle."""
    return DodgeConfig(spawn_probability=0.0)


@pytest.fixture
def engine(quiet_config) -> DodgeEngine:
    eng = DodgeEngine(quiet_config, seed=1234)
    eng.start()
    return eng


def place(engine: DodgeEngine, x: float, y: float, speed: float = 0.0) -> Obstacle:
    """Drop an obstacle straight into the engine's state."""
    size = engine.config.obstacle_size
    obstacle = Obstacle(id=engine._next_id, x=x, y=y, speed=speed, width=size, height=size)
    engine._next_id += 1
    engine.state.obstacles.append(obstacle)
    return obstacle

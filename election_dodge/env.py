import os

import gymnasium as gym
from gymnasium.spaces import MultiDiscrete, Box
import numpy as np
import pygame
from loguru import logger

from .config import variant_config, variant_label
from .engine import Controls, DodgeEngine, EventKind, Phase

# False when the caller picked a video driver before this module was imported.
DUMMY_VIDEO_DEFAULTED = "SDL_VIDEODRIVER" not in os.environ
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"]}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: Hold ← or → to move. Space starts, Enter continues after a win, R returns to the menu."
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Dodge the falling obstacles! Each one that passes you adds to your score."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = True

    # --- Rewards ---
    DODGE_REWARD = 1.0
    COLLISION_PENALTY = -10.0
    VICTORY_REWARD = 100.0

    # --- Colors ---
    COLOR_BG = (186, 230, 253)
    COLOR_BORDER = (31, 41, 55)
    COLOR_GROUND = (21, 128, 61)
    COLOR_PLAYER = (255, 237, 213)
    COLOR_PLAYER_BORDER = (249, 115, 22)
    COLOR_OBSTACLE = (209, 213, 219)
    COLOR_OBSTACLE_BORDER = (55, 65, 81)
    COLOR_TEXT = (30, 58, 138)
    COLOR_OVERLAY_TEXT = (255, 255, 255)
    COLOR_GAME_OVER = (239, 68, 68)
    COLOR_VICTORY = (250, 204, 21)
    GROUND_HEIGHT = 8

    def __init__(self, render_mode="rgb_array", seed=None, variant="classic", config=None, max_steps=5000):
        super().__init__()
        self.render_mode = render_mode
        self.variant = variant
        self.label = variant_label(variant)
        self.config = config if config is not None else variant_config(variant)
        self.max_steps = max_steps
        self.engine = DodgeEngine(self.config, seed=seed)
        self._init_seed = seed

        self.SCREEN_WIDTH = self.config.field_width
        self.SCREEN_HEIGHT = self.config.field_height

        self.observation_space = Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        # [left held, right held]
        self.action_space = MultiDiscrete([2, 2])

        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.font_large = pygame.font.Font(None, 56)
        self.font_main = pygame.font.Font(None, 32)
        self.font_small = pygame.font.Font(None, 24)

        self.steps = 0
        self.last_events = ()

    def reset(self, seed=None, options=None):
        if seed is None and self._init_seed is not None:
            seed, self._init_seed = self._init_seed, None
        super().reset(seed=seed)
        self.engine.rng = self.np_random

        self.steps = 0
        self.last_events = ()
        self.engine.reset()
        if (options or {}).get("autostart", True):
            self.engine.start()

        return self._get_observation(), self._get_info()

    def step(self, action):
        was_playing = self.engine.phase is Phase.PLAYING
        result = self.engine.tick(Controls.from_action(action))
        self.last_events = result.events

        reward = 0.0
        for event in result.events:
            if event.kind is EventKind.SCORE_INCREMENT:
                reward += self.DODGE_REWARD
            elif event.kind is EventKind.COLLISION:
                reward += self.COLLISION_PENALTY
            elif event.kind is EventKind.VICTORY_REACHED:
                reward += self.VICTORY_REWARD

        if was_playing:
            self.steps += 1

        phase = self.engine.phase
        terminated = phase in (Phase.GAME_OVER, Phase.VICTORY_INTERSTITIAL)
        truncated = self.steps >= self.max_steps

        return (
            self._get_observation(),
            reward,
            terminated,
            truncated,
            self._get_info()
        )

    def render(self):
        return self._get_observation()

    def _get_observation(self):
        snapshot = self.engine.snapshot()

        self.screen.fill(self.COLOR_BG)
        self._render_ground()
        self._render_obstacles(snapshot)
        self._render_player(snapshot)
        self._render_ui(snapshot)

        if snapshot.phase is Phase.IDLE:
            self._render_idle_overlay()
        elif snapshot.phase is Phase.GAME_OVER:
            self._render_game_over_overlay(snapshot)
        elif snapshot.phase is Phase.VICTORY_INTERSTITIAL:
            self._render_victory_overlay(snapshot)

        pygame.draw.rect(self.screen, self.COLOR_BORDER, self.screen.get_rect(), 4)

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _render_ground(self):
        ground = pygame.Rect(0, self.SCREEN_HEIGHT - self.GROUND_HEIGHT, self.SCREEN_WIDTH, self.GROUND_HEIGHT)
        pygame.draw.rect(self.screen, self.COLOR_GROUND, ground)

    def _render_obstacles(self, snapshot):
        for obs in snapshot.obstacles:
            rect = pygame.Rect(int(obs.x), int(obs.y), int(obs.width), int(obs.height))
            pygame.draw.rect(self.screen, self.COLOR_OBSTACLE, rect, border_radius=8)
            pygame.draw.rect(self.screen, self.COLOR_OBSTACLE_BORDER, rect, 2, border_radius=8)

    def _render_player(self, snapshot):
        cfg = self.config
        # The sprite sits on the collision margin above the bottom edge.
        top = self.SCREEN_HEIGHT - cfg.collision_margin - cfg.player_height
        rect = pygame.Rect(int(snapshot.player_x), int(top), cfg.player_width, cfg.player_height)
        pygame.draw.rect(self.screen, self.COLOR_PLAYER, rect, border_radius=8)
        pygame.draw.rect(self.screen, self.COLOR_PLAYER_BORDER, rect, 2, border_radius=8)

    def _render_ui(self, snapshot):
        score_text = self.font_main.render(f"{self.label}: {snapshot.score}", True, self.COLOR_TEXT)
        self.screen.blit(score_text, (12, 12))

        threshold = self.config.victory_threshold
        if threshold is not None and not snapshot.victory_reached:
            goal_text = self.font_small.render(f"Goal: {threshold}", True, self.COLOR_TEXT)
            self.screen.blit(goal_text, (self.SCREEN_WIDTH - goal_text.get_width() - 12, 16))

    def _render_overlay(self, alpha, lines):
        overlay = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, alpha))
        self.screen.blit(overlay, (0, 0))

        y = self.SCREEN_HEIGHT / 2 - 60
        for font, text, color in lines:
            surf = font.render(text, True, color)
            rect = surf.get_rect(center=(self.SCREEN_WIDTH / 2, y))
            self.screen.blit(surf, rect)
            y += rect.height + 18

    def _render_idle_overlay(self):
        self._render_overlay(128, [
            (self.font_large, "DODGE GAME", self.COLOR_OVERLAY_TEXT),
            (self.font_main, "Press SPACE to start", self.COLOR_OVERLAY_TEXT),
            (self.font_small, "Hold LEFT / RIGHT to move", self.COLOR_OVERLAY_TEXT),
        ])

    def _render_game_over_overlay(self, snapshot):
        self._render_overlay(180, [
            (self.font_large, "GAME OVER!", self.COLOR_GAME_OVER),
            (self.font_main, f"Final {self.label}: {snapshot.score}", self.COLOR_OVERLAY_TEXT),
            (self.font_small, "Press R to play again", self.COLOR_OVERLAY_TEXT),
        ])

    def _render_victory_overlay(self, snapshot):
        self._render_overlay(160, [
            (self.font_large, "YOU WIN!", self.COLOR_VICTORY),
            (self.font_main, f"{snapshot.score} {self.label.lower()} collected", self.COLOR_OVERLAY_TEXT),
            (self.font_small, "Press ENTER to keep going", self.COLOR_OVERLAY_TEXT),
        ])

    def _get_info(self):
        return {
            "score": self.engine.state.score,
            "steps": self.steps,
            "phase": self.engine.phase.value,
            "events": [event.kind.value for event in self.last_events],
        }

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        assert self.action_space.shape == (2,)
        assert self.action_space.nvec.tolist() == [2, 2]
        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8
        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert isinstance(trunc, bool)
        assert isinstance(info, dict)
        logger.info("implementation validated for variant {}", self.variant)

"""Play the dodge game in a window.

Held LEFT/RIGHT keys are sampled once per frame and fed to the engine;
collision and victory events are turned into sounds here, never inside
the engine.
"""

import argparse
import os

import numpy as np
import pygame
from loguru import logger

from .config import VARIANTS
from .engine import Controls, EventKind, Phase
from . import env as env_module
from .env import GameEnv


class AudioCues:
    """Plays the sound registered for each event kind, restarting it if busy."""

    def __init__(self, sounds=None):
        self.sounds = dict(sounds or {})

    @classmethod
    def load(cls, paths):
        paths = {kind: path for kind, path in paths.items() if path}
        if not paths:
            return cls()
        try:
            pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("audio disabled: {}", exc)
            return cls()

        sounds = {}
        for kind, path in paths.items():
            try:
                sounds[kind] = pygame.mixer.Sound(path)
            except (pygame.error, FileNotFoundError) as exc:
                logger.warning("could not load {} sound from {}: {}", kind.value, path, exc)
        return cls(sounds)

    def handle(self, events):
        for event in events:
            sound = self.sounds.get(event.kind)
            if sound is not None:
                sound.stop()
                sound.play()


def controls_from_keys(keys):
    return Controls(move_left=bool(keys[pygame.K_LEFT]), move_right=bool(keys[pygame.K_RIGHT]))


def handle_keydown(engine, key):
    """Apply a menu key to the engine. Returns True if it changed the phase."""
    phase = engine.phase
    if key == pygame.K_SPACE and phase in (Phase.IDLE, Phase.GAME_OVER):
        engine.start()
        return True
    if key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE) and phase is Phase.VICTORY_INTERSTITIAL:
        engine.continue_after_victory()
        return True
    if key == pygame.K_r and phase is Phase.GAME_OVER:
        engine.reset()
        return True
    return False


def use_real_display():
    """Undo the dummy video driver env.py installs, unless the caller chose it.

    Returns True if the display was re-initialised.
    """
    if not env_module.DUMMY_VIDEO_DEFAULTED or os.environ.get("SDL_VIDEODRIVER") != "dummy":
        return False
    os.environ.pop("SDL_VIDEODRIVER")
    pygame.display.quit()
    pygame.display.init()
    return True


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="election-dodge", description=GameEnv.game_description)
    parser.add_argument("--variant", choices=sorted(VARIANTS), default="classic")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--collision-sound", default=None, help="sound played when an obstacle hits you")
    parser.add_argument("--victory-sound", default=None, help="sound played when the victory threshold is reached")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger.enable("election_dodge")

    env = GameEnv(seed=args.seed, variant=args.variant, max_steps=float("inf"))
    obs, info = env.reset(options={"autostart": False})

    use_real_display()
    screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))
    pygame.display.set_caption("Dodge Game")
    clock = pygame.time.Clock()
    audio = AudioCues.load({
        EventKind.COLLISION: args.collision_sound,
        EventKind.VICTORY_REACHED: args.victory_sound,
    })

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    handle_keydown(env.engine, event.key)

        controls = controls_from_keys(pygame.key.get_pressed())
        obs, reward, terminated, truncated, info = env.step([int(controls.move_left), int(controls.move_right)])
        audio.handle(env.last_events)

        frame = np.transpose(obs, (1, 0, 2))
        surf = pygame.surfarray.make_surface(frame)
        screen.blit(surf, (0, 0))
        pygame.display.flip()
        clock.tick(args.fps)

    env.close()
    return 0

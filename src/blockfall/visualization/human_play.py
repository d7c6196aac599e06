from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict

import pygame

from blockfall.game import Action, GameConfig, GameState
from blockfall.services import HighScoreTable, SoundService
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_a: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_d: Action.RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_w: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_q: Action.ROTATE_CCW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_s: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}

KEY_TO_COMMAND: Dict[int, Callable[[GameState], bool]] = {
    pygame.K_p: GameState.toggle_pause,
    pygame.K_m: GameState.toggle_mute,
    pygame.K_RETURN: GameState.request_new_game,
    pygame.K_r: GameState.request_new_game,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Blockfall with the keyboard")
    p.add_argument("--width", type=int, default=12)
    p.add_argument("--height", type=int, default=24)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=24)
    p.add_argument("--muted", action="store_true")
    p.add_argument("--log-level", default="INFO")
    return p


def run() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("blockfall.play")

    pygame.init()
    sound = None
    try:
        clock = pygame.time.Clock()
        game = GameState(GameConfig(width=args.width, height=args.height, random_seed=args.seed))
        sound = SoundService(muted=args.muted)
        sound.attach(game.events)
        high_scores = HighScoreTable()
        high_scores.attach(game.events)
        if args.muted:
            game.request_mute()

        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Blockfall")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_TO_COMMAND:
                        KEY_TO_COMMAND[event.key](game)
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            game.apply(action)

            # Gravity
            game.advance(clock.tick(60))

            renderer.draw(screen, game)

        for rank, entry in enumerate(high_scores.top(), start=1):
            logger.info("#%d score %d lines %d level %d", rank, entry.score, entry.lines, entry.level)
    finally:
        if sound is not None:
            sound.close()
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()

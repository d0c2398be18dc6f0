from __future__ import annotations

import argparse
import logging
from typing import Dict

import pygame

from falling_blocks.game import Action, FallingBlocksGame, GameClock, GameConfig
from .renderer import Renderer

logger = logging.getLogger(__name__)


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_SPACE: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_RETURN: Action.HARD_DROP,
    pygame.K_p: Action.PAUSE,
    pygame.K_r: Action.RESET,
}


def run(config: GameConfig | None = None, cell_size: int = 30) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = FallingBlocksGame(config)
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game.board.width, game.board.height))
        pygame.display.set_caption("Falling Blocks")
        gravity = GameClock(game, pygame.time.get_ticks())

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                        continue
                    action = KEY_TO_ACTION.get(event.key)
                    if action is None:
                        continue
                    game.step(action)
                    if action in (Action.PAUSE, Action.RESET):
                        gravity.cancel()
                    gravity.sync(pygame.time.get_ticks())

            gravity.advance(pygame.time.get_ticks())
            renderer.draw(screen, game.snapshot(), game.ghost_position())
            clock.tick(60)
        logger.info("final score %d at level %d", game.score, game.level)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--clear-delay", type=int, default=300, help="Line clear animation in milliseconds")
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(GameConfig(random_seed=args.seed, clear_delay_ms=args.clear_delay), cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()

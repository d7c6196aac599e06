import pygame

from blockfall.game import GameConfig, GameState
from blockfall.visualization.human_play import KEY_TO_ACTION, KEY_TO_COMMAND, build_parser
from blockfall.visualization.renderer import Renderer


def test_window_fits_board_and_panel():
    game = GameState(GameConfig(width=12, height=24, random_seed=0))
    renderer = Renderer(cell_size=20, margin=10, panel_width=150)
    assert renderer.window_size(game) == (12 * 20 + 30 + 150, 24 * 20 + 20)


def test_speed_bar_grows_with_level():
    game = GameState(GameConfig(random_seed=0))
    renderer = Renderer()
    assert renderer._speed_fraction(game) == 0.0
    game.level = 30
    assert renderer._speed_fraction(game) == 1.0


def test_grid_surface_matches_board():
    game = GameState(GameConfig(width=6, height=8, random_seed=0))
    surf = Renderer(cell_size=10)._grid_surface(game.get_state(), game.current_ghost_cells())
    assert surf.get_size() == (60, 80)


def test_keyboard_commands_drive_the_game():
    game = GameState(GameConfig(random_seed=0))
    KEY_TO_COMMAND[pygame.K_p](game)
    assert game.paused
    KEY_TO_COMMAND[pygame.K_m](game)
    assert game.muted
    KEY_TO_COMMAND[pygame.K_RETURN](game)
    assert not game.paused
    assert game.apply(KEY_TO_ACTION[pygame.K_LEFT])


def test_parser_defaults_match_reference_board():
    args = build_parser().parse_args([])
    assert (args.width, args.height, args.seed, args.muted) == (12, 24, None, False)

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional

import numpy as np

from .events import EventBus, GameEvent
from .grid import GameGrid
from .pieces import Coordinate, Piece, random_kind
from .rules import ScoringRules
from .timer import GravityTimer


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


class Phase(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    LINE_CLEARING = "line_clearing"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 12
    height: int = 24
    random_seed: Optional[int] = None
    spawn_y: int = -1


LOCKED_CELL = 8


class GameState:
    """One play session: spawn, fall, lock, clear, repeat until a spawn fails.

    Every command returns True when it changed the game and False when it was
    rejected. Rejections (blocked transforms, commands while paused or after
    game over) are silent: nothing mutates and no event is emitted.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.events = events or EventBus()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.gravity = GravityTimer()
        self.score = 0
        self.lines = 0
        self.level = 1
        self.paused = False
        self.muted = False
        self.phase = Phase.SPAWNING
        self.current_piece: Optional[Piece] = None
        self._session = 0
        self._start_session()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def gravity_interval_ms(self) -> int:
        return self.rules.gravity_interval_ms(self.level)

    @property
    def spawn_x(self) -> int:
        return (self.grid.width >> 1) - 2

    def current_piece_cells(self) -> List[Coordinate]:
        if self.current_piece is None:
            return []
        return self.current_piece.cells()

    def current_ghost_cells(self) -> List[Coordinate]:
        if self.current_piece is None:
            return []
        return self.current_piece.cells(0, self.grid.drop_distance(self.current_piece))

    def board_occupancy(self) -> np.ndarray:
        return self.grid.occupancy()

    def get_state(self) -> np.ndarray:
        """Board as int8: 0 empty, LOCKED_CELL locked, -kind for the falling piece."""
        state = np.where(self.grid.grid, LOCKED_CELL, 0).astype(np.int8)
        for x, y in self.current_piece_cells():
            if 0 <= y < self.grid.height and 0 <= x < self.grid.width:
                state[y, x] = -int(self.current_piece.kind)
        return state

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _accepting_play(self) -> bool:
        return not self.paused and self.phase is Phase.FALLING and self.current_piece is not None

    def request_move(self, dx: int, dy: int) -> bool:
        if not self._accepting_play():
            logger.debug("Move (%d, %d) ignored in phase %s (paused=%s)", dx, dy, self.phase.value, self.paused)
            return False
        if self.grid.can_place(self.current_piece, dx, dy, 0):
            self.current_piece.translate(dx, dy)
            self.events.emit(GameEvent.MOVED, dx, dy)
            return True
        if dx == 0 and dy > 0:
            self._lock_piece()
        return False

    def request_rotate(self, delta: int) -> bool:
        if delta not in (-1, 1):
            logger.debug("Rotation delta %r rejected", delta)
            return False
        if not self._accepting_play():
            logger.debug("Rotate %d ignored in phase %s (paused=%s)", delta, self.phase.value, self.paused)
            return False
        if not self.grid.can_place(self.current_piece, 0, 0, delta):
            return False
        self.current_piece.rotate(delta)
        self.events.emit(GameEvent.ROTATED, delta)
        return True

    def request_hard_drop(self) -> bool:
        if not self._accepting_play():
            logger.debug("Hard drop ignored in phase %s (paused=%s)", self.phase.value, self.paused)
            return False
        dy = self.grid.drop_distance(self.current_piece)
        if dy > 0:
            self.current_piece.translate(0, dy)
        self.events.emit(GameEvent.HARD_DROPPED, dy)
        self._lock_piece()
        return True

    def request_pause(self) -> bool:
        if self.paused or self.game_over:
            return False
        self.paused = True
        self.gravity.cancel()
        self.events.emit(GameEvent.PAUSED, True)
        return True

    def request_resume(self) -> bool:
        if not self.paused or self.game_over:
            return False
        self.paused = False
        self.gravity.start(self.gravity_interval_ms)
        self.events.emit(GameEvent.PAUSED, False)
        return True

    def toggle_pause(self) -> bool:
        if self.paused:
            return self.request_resume()
        return self.request_pause()

    def request_mute(self) -> bool:
        if self.muted:
            return False
        self.muted = True
        self.events.emit(GameEvent.MUTED, True)
        return True

    def request_unmute(self) -> bool:
        if not self.muted:
            return False
        self.muted = False
        self.events.emit(GameEvent.MUTED, False)
        return True

    def toggle_mute(self) -> bool:
        if self.muted:
            return self.request_unmute()
        return self.request_mute()

    def request_new_game(self) -> bool:
        logger.info("Starting new game (previous score %d, lines %d, level %d)", self.score, self.lines, self.level)
        self._start_session()
        return True

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.request_new_game()

    def advance(self, elapsed_ms: int) -> int:
        """Feed wall-clock time to gravity; returns the number of gravity steps taken."""
        self.gravity.elapse(elapsed_ms)
        steps = 0
        while self.gravity.consume():
            steps += 1
            self.request_move(0, 1)
        return steps

    def apply(self, action: Action) -> bool:
        if action == Action.LEFT:
            return self.request_move(-1, 0)
        if action == Action.RIGHT:
            return self.request_move(1, 0)
        if action == Action.ROTATE_CW:
            return self.request_rotate(1)
        if action == Action.ROTATE_CCW:
            return self.request_rotate(-1)
        if action == Action.SOFT_DROP:
            return self.request_move(0, 1)
        if action == Action.HARD_DROP:
            return self.request_hard_drop()
        return False

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _start_session(self) -> None:
        self._session += 1
        session = self._session
        self.gravity.cancel()
        self.grid.reset()
        self.current_piece = None
        self.score = 0
        self.lines = 0
        self.level = 1
        was_paused = self.paused
        self.paused = False
        self.events.emit(GameEvent.NEW_GAME)
        if was_paused:
            self.events.emit(GameEvent.PAUSED, False)
        self.events.emit(GameEvent.SCORE_CHANGED, self.score)
        self.events.emit(GameEvent.LEVEL_CHANGED, self.level)
        self._spawn_piece()
        # A listener may have started another session or paused this one
        if self._session == session and not self.game_over and not self.paused:
            self.gravity.start(self.gravity_interval_ms)

    def _spawn_piece(self) -> None:
        self.phase = Phase.SPAWNING
        piece = Piece(random_kind(self.rng), x=self.spawn_x, y=self.config.spawn_y)
        if not self.grid.can_place(piece):
            self._end_game()
            return
        self.current_piece = piece
        self.phase = Phase.FALLING
        logger.debug("Spawned %s at (%d, %d)", piece.kind.name, piece.x, piece.y)
        self.events.emit(GameEvent.SPAWNED, piece)

    def _lock_piece(self) -> None:
        assert self.current_piece is not None
        piece = self.current_piece
        session = self._session
        self.phase = Phase.LOCKING
        # No active piece until the next spawn; re-entrant play commands are no-ops
        self.current_piece = None
        cells = piece.cells()
        if any(y < 0 for _, y in cells):
            logger.info("Lock out: %s came to rest above the board at %s", piece.kind.name, cells)
            self._end_game()
            return
        self.grid.merge(piece)
        logger.debug("Locked %s at %s", piece.kind.name, cells)
        self.events.emit(GameEvent.LOCKED, cells)
        if self._session != session:
            return

        self.phase = Phase.LINE_CLEARING
        result = self.grid.clear_full_lines()
        if result.count > 0:
            self.score += self.rules.score_for_lines(result.count)
            self.lines += result.count
            self.events.emit(GameEvent.LINES_CLEARED, result.count, list(result.rows))
            if self._session != session:
                return
            self.events.emit(GameEvent.SCORE_CHANGED, self.score)
            if self._session != session:
                return
            new_level = self.rules.level_for_lines(self.lines)
            if new_level != self.level:
                self.level = new_level
                logger.info("Level %d reached, gravity every %d ms", self.level, self.gravity_interval_ms)
                if not self.paused:
                    self.gravity.start(self.gravity_interval_ms)
                self.events.emit(GameEvent.LEVEL_CHANGED, self.level)
                if self._session != session:
                    return

        self._spawn_piece()

    def _end_game(self) -> None:
        self.phase = Phase.GAME_OVER
        self.current_piece = None
        self.gravity.cancel()
        logger.info("Game over: score %d, lines %d, level %d", self.score, self.lines, self.level)
        self.events.emit(GameEvent.GAME_OVER, self.score, self.lines, self.level)

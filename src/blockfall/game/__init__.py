"""Game module for Blockfall.

Exports the falling-block engine and supporting classes:
- GameGrid: Occupancy grid, collision test, merge and line clearing
- Piece: Tetromino with its four precomputed rotation masks
- TetrominoType: Enum of available piece types
- ScoringRules: Score table, level and gravity interval policy
- EventBus / GameEvent: Notifications consumed by rendering, audio and scores
- GameState: Session state machine and command/query surface
"""

from .errors import InvalidConfiguration
from .grid import ClearResult, GameGrid
from .pieces import Piece, TetrominoType, random_kind
from .rules import ScoringRules
from .events import EventBus, GameEvent
from .timer import GravityTimer
from .core import Action, GameConfig, GameState, Phase

__all__ = [
    "InvalidConfiguration",
    "ClearResult",
    "GameGrid",
    "Piece",
    "TetrominoType",
    "random_kind",
    "ScoringRules",
    "EventBus",
    "GameEvent",
    "GravityTimer",
    "Action",
    "GameConfig",
    "GameState",
    "Phase",
]

"""Session-scoped collaborators that listen to a game's event bus."""

from .audio import SoundService
from .highscores import HighScoreEntry, HighScoreTable

__all__ = ["SoundService", "HighScoreEntry", "HighScoreTable"]

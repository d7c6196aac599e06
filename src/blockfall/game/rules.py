from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10
    base_interval_ms: int = 1000
    interval_decay: float = 0.85
    min_interval_ms: int = 120

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if lines > len(self.line_clear_scores):
            # A 4x4 piece cannot complete more rows than it spans
            raise ValueError(f"Cannot clear {lines} rows in a single lock")
        return self.line_clear_scores[lines - 1]

    def level_for_lines(self, lines: int) -> int:
        return lines // self.lines_per_level + 1

    def gravity_interval_ms(self, level: int) -> int:
        """Milliseconds between gravity steps; shrinks per level down to a floor."""
        interval = math.floor(self.base_interval_ms * self.interval_decay ** (level - 1))
        return max(self.min_interval_ms, interval)

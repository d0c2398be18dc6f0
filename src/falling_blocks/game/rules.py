from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_line: int = 100
    points_per_level: int = 500
    initial_speed_ms: int = 1000
    speed_step_ms: int = 50
    min_speed_ms: int = 100

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return lines * self.points_per_line

    def level_for_score(self, score: int) -> int:
        return score // self.points_per_level + 1

    def speed_for_level(self, level: int) -> int:
        """Milliseconds between automatic soft drops at ``level``."""
        return max(self.initial_speed_ms - (level - 1) * self.speed_step_ms, self.min_speed_ms)

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    line_clear_points: int = 100
    lines_per_level: int = 10

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        return lines * self.line_clear_points * level

    def level_for_lines(self, lines_cleared: int) -> int:
        return max(0, lines_cleared) // self.lines_per_level + 1

"""
Source positions for diagnostics.

A Position is a plain value: advancing produces a new one, nothing is
mutated in place. Column 0 means "before the first character".
"""

from __future__ import annotations
from dataclasses import dataclass

__all__ = ['Position', 'UNKNOWN_FILE']

UNKNOWN_FILE = "(unknown)"


@dataclass(frozen=True, order=True)
class Position:
    filename: str = UNKNOWN_FILE
    line: int = 1
    column: int = 0

    def __post_init__(self):
        if self.line < 1:
            raise ValueError(f"line must be >= 1, got {self.line}")

    def advance(self, num_chars: int = 1) -> Position:
        return Position(self.filename, self.line, self.column + num_chars)

    def next_line(self) -> Position:
        return Position(self.filename, self.line + 1, 1)

    def __str__(self):
        return f"{self.filename}:{self.line}:{self.column}"

"""Puzzle source backed by the ``py-sudoku`` generator.

The engine only needs ``generate(difficulty) -> Puzzle``; anything with that
method can stand in for :class:`SudokuSource` (tests use a fixed grid).
"""

from typing import Dict, List, Optional

from sudoku import Sudoku

from .errors import GenerationError, SolveError
from .state import Puzzle

# Share of cells blanked out by the generator
DIFFICULTY_LEVELS: Dict[str, float] = {
    'EASY': 0.4,
    'MEDIUM': 0.5,
    'HARD': 0.6,
    'EXPERT': 0.7,
}


def _as_grid(board) -> List[List[int]]:
    # py-sudoku marks blanks with None
    return [[value or 0 for value in row] for row in board]


class SudokuSource:
    def __init__(self, box_size: int = 3, levels: Optional[Dict[str, float]] = None):
        self.box_size = box_size
        self.levels = dict(levels or DIFFICULTY_LEVELS)

    @property
    def size(self) -> int:
        return self.box_size * self.box_size

    def generate(self, difficulty: str = 'EASY') -> Puzzle:
        level = self.levels.get(str(difficulty).upper())
        if level is None:
            raise GenerationError(f'Failed to generate sudoku: unknown difficulty {difficulty!r}')

        try:
            puzzle = Sudoku(self.box_size).difficulty(level)
        except Exception as exc:
            raise GenerationError(f'Failed to generate sudoku: {exc}') from exc
        grid = _as_grid(puzzle.board)

        try:
            solved = _as_grid(puzzle.solve().board)
        except Exception as exc:
            raise SolveError(f'Failed to solve generated sudoku: {exc}') from exc
        if len(solved) != self.size or any(not 1 <= value <= self.size for row in solved for value in row):
            raise SolveError('Failed to solve generated sudoku')

        return Puzzle(grid=grid, solution=[value for row in solved for value in row])

import copy
from dataclasses import dataclass
from typing import List

from .errors import GenerationError, SolveError

Grid = List[List[int]]


@dataclass(frozen=True)
class Puzzle:
    """A generated puzzle grid (0 = blank) and its flattened solution."""
    grid: Grid
    solution: List[int]


@dataclass
class Session:
    """The state of one round.

    ``board`` is the only mutable part. ``template`` and ``solution`` are
    fixed at creation and a new round always gets a new ``Session``.
    """
    round_id: int
    board: Grid
    template: Grid
    solution: List[int]
    blank_count: int
    start_time: float
    end_time: float

    @classmethod
    def create(cls, round_id: int, puzzle: Puzzle, start_time: float, duration_sec: float) -> 'Session':
        """Build a session from a freshly generated puzzle.

        Fails with ``GenerationError`` for a malformed or already solved grid
        and with ``SolveError`` when the solution disagrees with a fixed cell,
        since progress is computed on the assumption that fixed cells are
        always correct.
        """
        grid = puzzle.grid
        size = len(grid)
        if size == 0 or any(len(row) != size for row in grid):
            raise GenerationError('Generated puzzle is not a square grid')
        if len(puzzle.solution) != size * size:
            raise SolveError(f'Solution has {len(puzzle.solution)} cells, expected {size * size}')

        for y, row in enumerate(grid):
            for x, value in enumerate(row):
                if value != 0 and value != puzzle.solution[y * size + x]:
                    raise SolveError(f'Solution disagrees with fixed cell ({x}, {y})')

        blank_count = sum(1 for row in grid for value in row if value == 0)
        if blank_count == 0:
            raise GenerationError('Generated puzzle has no blank cells')
        if duration_sec <= 0:
            raise ValueError('Round duration must be positive')

        return cls(
            round_id=round_id,
            board=copy.deepcopy(grid),
            template=copy.deepcopy(grid),
            solution=list(puzzle.solution),
            blank_count=blank_count,
            start_time=start_time,
            end_time=start_time + duration_sec,
        )

    @property
    def size(self) -> int:
        return len(self.template)

    def is_fixed(self, x: int, y: int) -> bool:
        return self.template[y][x] != 0

    def fixed_mask(self) -> List[List[bool]]:
        return [[value != 0 for value in row] for row in self.template]

    def board_copy(self) -> Grid:
        return [list(row) for row in self.board]

class PuzzleError(Exception):
    """A round could not be started from the puzzle the source produced."""


class GenerationError(PuzzleError):
    """The puzzle source failed to produce a puzzle."""


class SolveError(PuzzleError):
    """The puzzle source could not fully solve the puzzle it generated."""

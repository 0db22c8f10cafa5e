"""Puzzle room domain services: session state, progress and the round engine.

Everything in here is transport-agnostic. Socket handlers and HTTP routes
feed parsed events into the engine, and the engine talks back through a
broadcaster, keeping Socket.IO concerns out of the core round mechanics.
"""

from .errors import PuzzleError, GenerationError, SolveError
from .state import Puzzle, Session
from .progress import Completion, Timing, evaluate_completion, evaluate_time
from .engine import SessionEngine

__all__ = [
    'PuzzleError',
    'GenerationError',
    'SolveError',
    'Puzzle',
    'Session',
    'Completion',
    'Timing',
    'evaluate_completion',
    'evaluate_time',
    'SessionEngine',
]

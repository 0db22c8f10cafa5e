import math
from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class Completion:
    percent_complete: int
    is_complete: bool


@dataclass(frozen=True)
class Timing:
    percent_time: int
    time_remaining: int
    is_outta_time: bool


def evaluate_completion(board: Sequence[Sequence[int]], solution: List[int], blank_count: int) -> Completion:
    """Score the board against the solution.

    Fixed cells always match, so only blank cells filled correctly move the
    percentage. It is quantized down to a multiple of 10 and wrong guesses
    simply don't count.
    """
    total = len(solution)
    flat = [value for row in board for value in row]
    correct = sum(1 for value, expected in zip(flat, solution) if value == expected)
    solved_blanks = correct + blank_count - total
    percent_complete = (solved_blanks * 10 // blank_count) * 10
    return Completion(percent_complete=percent_complete, is_complete=correct == total)


def evaluate_time(start_time: float, end_time: float, now: float) -> Timing:
    """Time used (percent, halves rounded up) and whole minutes left, rounded up."""
    interval = end_time - start_time
    elapsed = now - start_time
    percent_time = math.floor(elapsed / interval * 100 + 0.5)
    time_remaining = math.ceil((interval - elapsed) / 60)
    return Timing(percent_time=percent_time, time_remaining=time_remaining, is_outta_time=time_remaining <= 0)

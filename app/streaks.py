"""Current and best streaks derived from a habit's completion dates.

Nothing here is stored; streaks are recomputed from completions on every
request so editing or deleting a completion can never leave them stale.
Dates are canonical ``YYYY-MM-DD`` strings, which sort chronologically.
"""

from dataclasses import dataclass
from typing import Iterable

from app.local_date import previous_date


@dataclass(frozen=True)
class StreakResult:
    current: int
    best: int


def current_streak(dates_desc: Iterable[str], reference_date: str) -> int:
    """Consecutive days with a completion ending at ``reference_date``.

    ``dates_desc`` must be sorted newest first. Dates after the reference date
    never belong to the run and are skipped, as are repeats of a date that was
    already counted.
    """
    expected = reference_date
    count = 0
    for completed_on in dates_desc:
        if completed_on > reference_date:
            continue
        if completed_on == expected:
            count += 1
            previous = previous_date(expected)
            if previous is None:
                break
            expected = previous
            continue
        if completed_on < expected:
            break
    return count


def best_streak(dates: Iterable[str]) -> int:
    """Longest run of consecutive calendar days anywhere in the history.

    Input order does not matter; dates are de-duplicated and walked ascending.
    """
    best = 0
    run = 0
    last_seen = None
    for completed_on in sorted(set(dates)):
        if last_seen is not None and previous_date(completed_on) == last_seen:
            run += 1
        else:
            run = 1
        best = max(best, run)
        last_seen = completed_on
    return best


def compute_streaks(dates_desc: list[str], reference_date: str) -> StreakResult:
    return StreakResult(
        current=current_streak(dates_desc, reference_date),
        best=best_streak(dates_desc),
    )

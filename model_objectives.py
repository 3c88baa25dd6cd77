"""Soft preferences: how otherwise-legal candidates for a day are ranked.

Candidates are ordered lexicographically:
  1. anyone who wants the day comes before anyone who does not; among
     wanting workers the lower rank goes first,
  2. then the integer score (lower is better),
  3. then a seeded jitter, so different seeds can pick different rosters,
  4. then rank, to keep the order total.

Scores are built from the integer weights in constants.SCORE_WEIGHTS; jitter is
compared only when two scores are exactly equal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from constants import PREF_AVOID, PREF_WANT, SCORE_WEIGHTS
from models import Worker
from utils import weekday

if TYPE_CHECKING:
    from scheduler_builders import RosterContext
    from solve_state import SolveState

_MASK32 = 0xFFFFFFFF


def make_rng(seed: Optional[str]) -> Callable[[], int]:
    """Deterministic jitter source.

    FNV-1a hashes the seed into the starting state of a 32-bit xorshift
    generator. Without a seed every draw is 0 and ties fall through to rank.
    """
    if not seed:
        return lambda: 0

    h = 2166136261
    for ch in seed:
        h ^= ord(ch)
        h = (h * 16777619) & _MASK32
    state = h

    def next_value() -> int:
        nonlocal state
        state ^= (state << 13) & _MASK32
        state ^= state >> 17
        state ^= (state << 5) & _MASK32
        return state

    return next_value


def score_candidate(ctx: RosterContext, state: SolveState, day: int, worker: Worker) -> int:
    score = 0
    pref = ctx.request.preference(worker.id, day)
    if pref == PREF_WANT:
        score += SCORE_WEIGHTS['want']
    elif pref == PREF_AVOID:
        score += SCORE_WEIGHTS['avoid']

    # Every-other-day pattern
    if state.assignments.get(day - 2) == worker.id:
        score += SCORE_WEIGHTS['every_other_day']
    if state.assignments.get(day + 2) == worker.id:
        score += SCORE_WEIGHTS['every_other_day']

    next_count = state.counts.get(worker.id, 0) + 1
    score += abs(next_count - ctx.targets[worker.id]) * SCORE_WEIGHTS['target_deviation']

    next_weekday = (weekday(ctx.request.year, ctx.request.month, day) + 1) % 7
    if next_weekday in worker.clinic_weekdays:
        score += SCORE_WEIGHTS['pre_clinic']

    return score


def candidate_sort_key(
    ctx: RosterContext,
    state: SolveState,
    day: int,
    worker: Worker,
    jitter: int,
    want_first: bool = True,
) -> tuple:
    if want_first and ctx.request.preference(worker.id, day) == PREF_WANT:
        return (0, worker.rank, 0, 0)
    return (1, score_candidate(ctx, state, day, worker), jitter, worker.rank)


def order_candidates(
    ctx: RosterContext,
    state: SolveState,
    day: int,
    candidates: list[Worker],
    rng: Callable[[], int],
    want_first: bool = True,
) -> list[Worker]:
    """Return candidates best-first. Draws one jitter value per candidate.

    With `want_first=False` wanting workers only get their score bonus and
    compete on score like everyone else.
    """
    keyed = [(candidate_sort_key(ctx, state, day, w, rng(), want_first), w) for w in candidates]
    keyed.sort(key=lambda item: item[0])
    return [w for _key, w in keyed]

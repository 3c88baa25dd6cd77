"""Post-search stages: the partial proposal fallback and roster statistics.

These sit between the search and the app-facing result: when both search
passes fail, `build_partial_proposal` produces a best-effort draft with the
undecided days spelled out; when a roster is complete, `build_stats` derives
the totals shown next to it.
"""

from __future__ import annotations

from typing import Callable, Optional

from model_constraints import DRAFT, SearchPolicy, discussion_candidates, hard_candidates
from model_objectives import order_candidates
from models import PartialProposal, ScheduleStats, UnresolvedDay
from scheduler_builders import RosterContext
from solve_state import SolveState
from utils import is_friday, is_weekend_service_day
from logger import get_logger

_pipeline_logger = get_logger('schedule_pipeline')


def build_partial_proposal(
    ctx: RosterContext,
    rng: Callable[[], int],
    policy: SearchPolicy = DRAFT,
) -> PartialProposal:
    """Single forward pass over the month, no backtracking.

    Each day takes the best-scored legal worker. When nobody is legal the day
    falls back to the discussion-safe rules (bans, roles and rest still hold,
    caps do not): the lowest-ranked such worker is filled in provisionally so
    the draft stays as full as possible, and the day is recorded together with
    the whole discussion-safe pool. A day with an empty pool stays unassigned.
    """
    state = SolveState.fresh((w.id for w in ctx.workers), ctx.block_keys)
    assignments: dict[int, Optional[int]] = {}
    unresolved: list[UnresolvedDay] = []

    for day in ctx.day_range:
        candidates = hard_candidates(ctx, state, day, policy)
        if candidates:
            chosen = order_candidates(ctx, state, day, candidates, rng, want_first=False)[0]
            assignments[day] = chosen.id
            state.apply(day, chosen.id)
            continue

        pool = discussion_candidates(ctx, state, day)
        if pool:
            assignments[day] = pool[0].id
            state.apply(day, pool[0].id)
        else:
            assignments[day] = None
        unresolved.append(UnresolvedDay(day=day, candidate_ids=[w.id for w in pool]))

    if unresolved:
        _pipeline_logger.info(
            f"Draft leaves {len(unresolved)} day(s) for discussion: {[u.day for u in unresolved]}"
        )
    return PartialProposal(assignments=assignments, unresolved_days=unresolved)


def build_stats(ctx: RosterContext, assignments: dict[int, int]) -> ScheduleStats:
    year, month = ctx.request.year, ctx.request.month
    total_by_worker = {w.id: 0 for w in ctx.workers}
    weekend_by_worker = {w.id: 0 for w in ctx.workers}

    for day, worker_id in assignments.items():
        total_by_worker[worker_id] = total_by_worker.get(worker_id, 0) + 1
        if is_weekend_service_day(year, month, day):
            weekend_by_worker[worker_id] = weekend_by_worker.get(worker_id, 0) + 1

    # Same worker on Friday and Sunday with someone else on the Saturday
    fri_sun_pairings = 0
    for day in range(1, ctx.days - 1):
        if not is_friday(year, month, day):
            continue
        fri = assignments.get(day)
        sat = assignments.get(day + 1)
        sun = assignments.get(day + 2)
        if fri is not None and fri == sun and sat is not None and sat != fri:
            fri_sun_pairings += 1

    return ScheduleStats(
        total_by_worker=total_by_worker,
        weekend_by_worker=weekend_by_worker,
        fri_sun_pairings=fri_sun_pairings,
    )

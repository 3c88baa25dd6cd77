"""Hard roster rules.

One predicate decides whether a worker may take a day. The lock validator,
both search passes and the proposal builder all go through the functions in
this module, so they can never disagree about what is legal.

Rules, in the order they are checked:
  1. a forced 'want' for the day binds it to the wanting worker
  2. a locked day only admits the locked worker
  3. 'cannot' is an absolute ban
  4. the previous month's last worker rests on day 1
  5. leadership never serves Fri/Sat/Sun
  6. only certified workers serve Tue/Thu
  7. count + 1 <= cap
  8. count + 1 <= target (strict pass only)
  9. no shift on the day before or after an existing shift
 10. at most MAX_WEEKEND_BLOCKS distinct weekend blocks

Rules 2-6 do not depend on search state and are evaluated once per request
(see scheduler_builders.build_context).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from constants import MAX_WEEKEND_BLOCKS, PREF_CANNOT
from models import ScheduleRequest, Worker
from utils import is_tuesday_or_thursday, is_weekend_service_day

if TYPE_CHECKING:
    from scheduler_builders import RosterContext
    from solve_state import SolveState

RULE_CANNOT = "cannot"
RULE_LEADERSHIP_WEEKEND = "leadership_weekend"
RULE_CERTIFICATION = "certification"
RULE_CROSS_MONTH_REST = "cross_month_rest"


@dataclass(frozen=True)
class SearchPolicy:
    """Which of the state-dependent rules a pass enforces."""
    name: str
    enforce_targets: bool
    honor_wants: bool = True


STRICT = SearchPolicy("strict", enforce_targets=True)
RELAXED = SearchPolicy("relaxed", enforce_targets=False)
# Proposal drafting treats 'want' as a soft preference only.
DRAFT = SearchPolicy("draft", enforce_targets=False, honor_wants=False)


def static_violations(request: ScheduleRequest, day: int, worker: Worker) -> list[str]:
    """Codes of the state-independent rules (3-6) this worker breaks on this day."""
    violations = []
    if request.preference(worker.id, day) == PREF_CANNOT:
        violations.append(RULE_CANNOT)
    if worker.is_leadership and is_weekend_service_day(request.year, request.month, day):
        violations.append(RULE_LEADERSHIP_WEEKEND)
    if is_tuesday_or_thursday(request.year, request.month, day) and not worker.certified:
        violations.append(RULE_CERTIFICATION)
    if day == 1 and request.previous_last_worker_id == worker.id:
        violations.append(RULE_CROSS_MONTH_REST)
    return violations


def passes_static_rules(request: ScheduleRequest, day: int, worker: Worker) -> bool:
    locked = request.locked_worker(day)
    if locked is not None and locked != worker.id:
        return False
    return not static_violations(request, day, worker)


def forced_want_worker(
    day: int,
    wanted_by_day: dict[int, tuple[int, ...]],
    counts: dict[int, int],
    targets: dict[int, int],
) -> Optional[int]:
    """The worker a 'want' currently binds this day to, or None.

    Wanting workers are tried in rank order; the first one still below their
    target wins. Once every wanting worker has reached their target the want
    is no longer binding. `counts` must be the live running counts.
    """
    for worker_id in wanted_by_day.get(day, ()):
        if counts.get(worker_id, 0) < targets.get(worker_id, 0):
            return worker_id
    return None


def rest_and_weekend_ok(ctx: RosterContext, state: SolveState, day: int, worker_id: int) -> bool:
    """Rules 9 and 10."""
    if state.assignments.get(day - 1) == worker_id:
        return False
    if state.assignments.get(day + 1) == worker_id:
        return False
    key = ctx.block_keys.get(day)
    if key is not None and not state.has_block(worker_id, key):
        if state.block_total(worker_id) >= MAX_WEEKEND_BLOCKS:
            return False
    return True


def is_hard_allowed(
    ctx: RosterContext,
    state: SolveState,
    day: int,
    worker: Worker,
    policy: SearchPolicy,
) -> bool:
    if policy.honor_wants:
        forced = forced_want_worker(day, ctx.wanted_by_day, state.counts, ctx.targets)
        if forced is not None and forced != worker.id:
            return False

    if worker.id not in ctx.static_allowed[day]:
        return False

    next_count = state.counts.get(worker.id, 0) + 1
    if next_count > ctx.caps[worker.id]:
        return False
    if policy.enforce_targets and next_count > ctx.targets[worker.id]:
        return False

    return rest_and_weekend_ok(ctx, state, day, worker.id)


def is_discussion_allowed(ctx: RosterContext, state: SolveState, day: int, worker: Worker) -> bool:
    """Rules 2-6, 9 and 10: never breaks bans, roles or rest, may exceed caps."""
    if worker.id not in ctx.static_allowed[day]:
        return False
    return rest_and_weekend_ok(ctx, state, day, worker.id)


def hard_candidates(ctx: RosterContext, state: SolveState, day: int, policy: SearchPolicy) -> list[Worker]:
    return [w for w in ctx.workers if is_hard_allowed(ctx, state, day, w, policy)]


def has_hard_candidate(ctx: RosterContext, state: SolveState, day: int, policy: SearchPolicy) -> bool:
    return any(is_hard_allowed(ctx, state, day, w, policy) for w in ctx.workers)


def discussion_candidates(ctx: RosterContext, state: SolveState, day: int) -> list[Worker]:
    """Discussion-safe candidates in ascending rank order."""
    return [w for w in ctx.workers if is_discussion_allowed(ctx, state, day, w)]

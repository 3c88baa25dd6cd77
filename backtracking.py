"""Backtracking search for a complete roster.

Most-constrained day first, with a global forward check after every
assignment: as soon as any unassigned day is left without a legal worker, or
the caps left over cannot cover the days left over, the branch is abandoned. The same search serves the strict pass (targets are a
hard bound and must be met exactly) and the relaxed pass (only caps bound the
counts); the difference is carried by a `SearchPolicy`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from constants import NO_SOLUTION_UNDER_CAPS, TARGET_SUM_MISMATCH
from model_constraints import SearchPolicy, has_hard_candidate, hard_candidates
from model_objectives import order_candidates
from models import Worker
from scheduler_builders import RosterContext
from solve_state import SolveState
from logger import get_logger

logger = get_logger('backtracking')


@dataclass
class SearchOutcome:
    ok: bool
    assignments: dict[int, int] = field(default_factory=dict)
    reason: str = ""
    nodes: int = 0


class RosterSearch:
    """One search invocation. Owns its working state; not reusable."""

    def __init__(self, ctx: RosterContext, policy: SearchPolicy, rng: Callable[[], int]):
        self.ctx = ctx
        self.policy = policy
        self.rng = rng
        self.state = SolveState.fresh((w.id for w in ctx.workers), ctx.block_keys)
        self.nodes = 0

    def run(self) -> SearchOutcome:
        if self.policy.enforce_targets:
            total = sum(self.ctx.targets.values())
            if total != self.ctx.days:
                logger.info(f"Strict pass skipped: targets sum to {total}, month has {self.ctx.days} days")
                return SearchOutcome(ok=False, reason=TARGET_SUM_MISMATCH.format(total=total, days=self.ctx.days))

        if not self._caps_reachable():
            logger.info(f"{self.policy.name} search skipped: caps cannot cover {self.ctx.days} days")
            return SearchOutcome(ok=False, reason=NO_SOLUTION_UNDER_CAPS)

        solved = self._search()
        logger.debug(f"{self.policy.name} search visited {self.nodes} nodes (solved={solved})")
        if not solved:
            return SearchOutcome(ok=False, reason=NO_SOLUTION_UNDER_CAPS, nodes=self.nodes)
        return SearchOutcome(ok=True, assignments=dict(sorted(self.state.assignments.items())), nodes=self.nodes)

    def _search(self) -> bool:
        self.nodes += 1
        if self.state.assigned_count == self.ctx.days:
            return self._targets_met()

        day, candidates = self._most_constrained_day()
        if day is None:
            return False

        for worker in order_candidates(self.ctx, self.state, day, candidates, self.rng):
            self.state.apply(day, worker.id)
            if (self._forward_check() and self._caps_reachable()
                    and self._targets_reachable() and self._search()):
                return True
            self.state.undo(day, worker.id)

        return False

    def _most_constrained_day(self) -> tuple[Optional[int], list[Worker]]:
        """Unassigned day with the fewest candidates; (None, []) if any day has none."""
        best_day = None
        best_candidates: list[Worker] = []
        for day in self.ctx.day_range:
            if day in self.state.assignments:
                continue
            candidates = hard_candidates(self.ctx, self.state, day, self.policy)
            if not candidates:
                return None, []
            if best_day is None or len(candidates) < len(best_candidates):
                best_day = day
                best_candidates = candidates
        return best_day, best_candidates

    def _forward_check(self) -> bool:
        for day in self.ctx.day_range:
            if day in self.state.assignments:
                continue
            if not has_hard_candidate(self.ctx, self.state, day, self.policy):
                return False
        return True

    def _caps_reachable(self) -> bool:
        """Remaining cap headroom must cover the remaining days."""
        remaining_days = self.ctx.days - self.state.assigned_count
        headroom = sum(max(0, cap - self.state.counts.get(worker_id, 0))
                       for worker_id, cap in self.ctx.caps.items())
        return headroom >= remaining_days

    def _targets_reachable(self) -> bool:
        if not self.policy.enforce_targets:
            return True
        remaining_days = self.ctx.days - self.state.assigned_count
        shortfall = 0
        for worker_id, target in self.ctx.targets.items():
            current = self.state.counts.get(worker_id, 0)
            if current > target:
                return False
            shortfall += target - current
        return shortfall <= remaining_days

    def _targets_met(self) -> bool:
        if not self.policy.enforce_targets:
            return True
        return all(self.state.counts.get(wid, 0) == target for wid, target in self.ctx.targets.items())


def solve_roster(ctx: RosterContext, policy: SearchPolicy, rng: Callable[[], int]) -> SearchOutcome:
    return RosterSearch(ctx, policy, rng).run()

"""Pure builder helpers for roster generation.

This module derives everything the search needs from a `ScheduleRequest` once,
up front: sanitized caps and targets, the per-day list of workers who want a
day, the weekend-block key of every day, and the set of workers that pass the
static (state-independent) rules on each day.

Nothing here depends on search state, so the result is shared read-only by the
lock validator, both search passes and the proposal builder.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from constants import DEFAULT_CAP, PREF_WANT, ROLE_FIXED_CAPS
from model_constraints import passes_static_rules
from models import ScheduleRequest, Worker
from utils import days_in_month, weekend_block_key


def cap_for(worker: Worker, configured) -> int:
    """Maximum shifts per month for a worker.

    Leadership caps are fixed by role. Regular workers use the configured
    value floored and clamped at zero, or DEFAULT_CAP if it is missing or
    not a finite number.
    """
    if worker.role in ROLE_FIXED_CAPS:
        return ROLE_FIXED_CAPS[worker.role]
    if not _is_finite(configured):
        return DEFAULT_CAP
    return max(0, math.floor(configured))


def target_for(requested) -> int:
    """Requested shift count floored and clamped at zero (0 if missing)."""
    if not _is_finite(requested):
        return 0
    return max(0, math.floor(requested))


def initial_caps(workers: list[Worker], max_shifts: dict[int, float]) -> dict[int, int]:
    return {w.id: cap_for(w, max_shifts.get(w.id)) for w in workers}


def sanitize_targets(workers: list[Worker], target_shifts: dict[int, float]) -> dict[int, int]:
    return {w.id: target_for(target_shifts.get(w.id)) for w in workers}


def wanted_workers_by_day(request: ScheduleRequest) -> dict[int, tuple[int, ...]]:
    """For every day, the ids of workers with a 'want' preference, by ascending rank."""
    by_rank = sorted(request.workers, key=lambda w: (w.rank, w.id))
    return {
        day: tuple(w.id for w in by_rank if request.preference(w.id, day) == PREF_WANT)
        for day in range(1, request.days_in_month + 1)
    }


def weekend_keys_by_day(year: int, month: int) -> dict[int, Optional[date]]:
    return {day: weekend_block_key(year, month, day) for day in range(1, days_in_month(year, month) + 1)}


@dataclass(frozen=True)
class RosterContext:
    """Read-only, per-request view used by every component of the engine."""
    request: ScheduleRequest
    days: int
    workers: tuple[Worker, ...]
    workers_by_id: dict[int, Worker]
    caps: dict[int, int]
    targets: dict[int, int]
    wanted_by_day: dict[int, tuple[int, ...]]
    block_keys: dict[int, Optional[date]]
    static_allowed: dict[int, frozenset[int]]

    @property
    def day_range(self) -> range:
        return range(1, self.days + 1)

    def worker(self, worker_id: int) -> Optional[Worker]:
        return self.workers_by_id.get(worker_id)

    def name_of(self, worker_id: Optional[int]) -> str:
        worker = self.workers_by_id.get(worker_id)
        return worker.name if worker else f"unknown worker #{worker_id}"


def build_context(request: ScheduleRequest) -> RosterContext:
    workers = tuple(sorted(request.workers, key=lambda w: (w.rank, w.id)))
    days = request.days_in_month
    static_allowed = {
        day: frozenset(w.id for w in workers if passes_static_rules(request, day, w))
        for day in range(1, days + 1)
    }
    return RosterContext(
        request=request,
        days=days,
        workers=workers,
        workers_by_id={w.id: w for w in workers},
        caps=initial_caps(list(workers), request.max_shifts),
        targets=sanitize_targets(list(workers), request.target_shifts),
        wanted_by_day=wanted_workers_by_day(request),
        block_keys=weekend_keys_by_day(request.year, request.month),
        static_allowed=static_allowed,
    )


def _is_finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)

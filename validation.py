"""Pre-flight lock validation and post-hoc roster validation."""

from __future__ import annotations

from datetime import date
from typing import Optional

from constants import MAX_WEEKEND_BLOCKS, PREF_CANNOT
from model_constraints import (
    RULE_CANNOT,
    RULE_CERTIFICATION,
    RULE_CROSS_MONTH_REST,
    RULE_LEADERSHIP_WEEKEND,
    forced_want_worker,
    static_violations,
)
from scheduler_builders import RosterContext
from logger import get_logger

logger = get_logger('validation')


def _static_message(code: str, day: int, name: str) -> str:
    if code == RULE_CANNOT:
        return f"Day {day}: lock conflicts with 'cannot' ({name})."
    if code == RULE_LEADERSHIP_WEEKEND:
        return f"Day {day}: {name} cannot serve Fri/Sat/Sun."
    if code == RULE_CERTIFICATION:
        return (f"Day {day}: {name} is not certified; Tuesdays and Thursdays "
                f"must be covered by certified workers.")
    if code == RULE_CROSS_MONTH_REST:
        return f"Day 1: {name} is resting after the last shift of the previous month."
    return f"Day {day}: {name} breaks rule '{code}'."


def validate_locks(ctx: RosterContext) -> list[str]:
    """Statically check every locked day.

    Walks the locks in day order with a running per-worker lock count and
    collects every problem instead of stopping at the first one. An empty
    list means the locks are jointly consistent with the static rules.
    """
    request = ctx.request
    issues: list[str] = []
    running_counts: dict[int, int] = {}

    for day in ctx.day_range:
        worker_id = request.locked_worker(day)
        if worker_id is None:
            continue
        worker = ctx.worker(worker_id)
        if worker is None:
            issues.append(f"Day {day}: locked worker #{worker_id} does not exist.")
            continue

        forced = forced_want_worker(day, ctx.wanted_by_day, running_counts, ctx.targets)
        if forced is not None and forced != worker_id:
            issues.append(
                f"Day {day}: lock ({worker.name}) conflicts with the priority 'want' of {ctx.name_of(forced)}."
            )

        for code in static_violations(request, day, worker):
            issues.append(_static_message(code, day, worker.name))

        if day > 1 and request.locked_worker(day - 1) == worker_id:
            issues.append(f"Days {day - 1} and {day}: {worker.name} cannot serve two days in a row.")

        running_counts[worker_id] = running_counts.get(worker_id, 0) + 1

    lock_counts: dict[int, int] = {}
    lock_blocks: dict[int, set[date]] = {}
    for day in ctx.day_range:
        worker_id = request.locked_worker(day)
        if worker_id is None:
            continue
        lock_counts[worker_id] = lock_counts.get(worker_id, 0) + 1
        key = ctx.block_keys[day]
        if key is not None:
            lock_blocks.setdefault(worker_id, set()).add(key)

    for worker in ctx.workers:
        cap = ctx.caps[worker.id]
        if lock_counts.get(worker.id, 0) > cap:
            issues.append(f"{worker.name}: locked shifts exceed the cap of {cap}.")
        if len(lock_blocks.get(worker.id, ())) > MAX_WEEKEND_BLOCKS:
            issues.append(
                f"{worker.name}: locked shifts exceed the limit of {MAX_WEEKEND_BLOCKS} weekend blocks (Fri-Sun)."
            )

    if issues:
        logger.warning(f"Lock validation found {len(issues)} issue(s)")
    return issues


def validate_roster(ctx: RosterContext, assignments: dict[int, Optional[int]]) -> list[str]:
    """Check a finished roster against every hard rule except 'want' forcing.

    Targets are not checked; a relaxed roster may legitimately miss them.

    Returns:
        Human-readable findings, empty if the roster is valid.
    """
    request = ctx.request
    findings: list[str] = []
    counts: dict[int, int] = {}
    blocks: dict[int, set[date]] = {}

    for day in ctx.day_range:
        worker_id = assignments.get(day)
        if worker_id is None:
            findings.append(f"Day {day}: no worker assigned.")
            continue
        worker = ctx.worker(worker_id)
        if worker is None:
            findings.append(f"Day {day}: assigned worker #{worker_id} does not exist.")
            continue

        counts[worker_id] = counts.get(worker_id, 0) + 1
        key = ctx.block_keys[day]
        if key is not None:
            blocks.setdefault(worker_id, set()).add(key)

        locked = request.locked_worker(day)
        if locked is not None and locked != worker_id:
            findings.append(f"Day {day}: locked to {ctx.name_of(locked)} but assigned to {worker.name}.")
        if request.preference(worker_id, day) == PREF_CANNOT:
            findings.append(f"Day {day}: {worker.name} cannot serve this day.")
        for code in static_violations(request, day, worker):
            if code == RULE_CANNOT:
                continue
            findings.append(_static_message(code, day, worker.name))
        if assignments.get(day + 1) == worker_id:
            findings.append(f"Days {day} and {day + 1}: {worker.name} serves two days in a row.")

    extra_days = sorted(d for d in assignments if d not in ctx.day_range)
    for day in extra_days:
        findings.append(f"Day {day} is outside the month.")

    for worker in ctx.workers:
        cap = ctx.caps[worker.id]
        if counts.get(worker.id, 0) > cap:
            findings.append(f"{worker.name}: {counts[worker.id]} shifts exceed the cap of {cap}.")
        if len(blocks.get(worker.id, ())) > MAX_WEEKEND_BLOCKS:
            findings.append(f"{worker.name}: more than {MAX_WEEKEND_BLOCKS} weekend blocks (Fri-Sun).")

    return findings

"""Roster generation: one month's request in, one result out.

    ValidateLocks --issues--> Invalid
        |
    StrictSearch --ok--> Success(strict)
        |
    RelaxedSearch --ok--> Success(relaxed)
        |
    PartialProposal --complete--> Success(draft)
        |
    Infeasible (draft and candidate pools attached)

The function is pure: no I/O, no clock, no shared state. The same request,
seed included, always yields the same result.
"""

from __future__ import annotations

from backtracking import solve_roster
from model_constraints import RELAXED, STRICT
from model_objectives import make_rng
from models import ScheduleFailure, ScheduleRequest, ScheduleResult, ScheduleSuccess
from schedule_pipeline import build_partial_proposal, build_stats
from scheduler_builders import build_context
from validation import validate_locks
from logger import get_logger, log_timing

logger = get_logger('engine')


def generate_schedule(request: ScheduleRequest) -> ScheduleResult:
    ctx = build_context(request)
    rng = make_rng(request.seed)
    seed_used = request.seed or None

    logger.info(
        f"Generating roster for {request.year}-{request.month:02d}: "
        f"{ctx.days} days, {len(ctx.workers)} workers, seed={seed_used!r}"
    )

    lock_issues = validate_locks(ctx)
    if lock_issues:
        logger.warning(f"Locks are inconsistent, search not attempted: {lock_issues}")
        return ScheduleFailure(conflicts=lock_issues, stage="invalid")

    with log_timing("strict search"):
        strict = solve_roster(ctx, STRICT, rng)
    if strict.ok:
        logger.info("Strict pass found a roster matching every target")
        return ScheduleSuccess(
            assignments=strict.assignments,
            stats=build_stats(ctx, strict.assignments),
            seed_used=seed_used,
            mode="strict",
        )

    with log_timing("relaxed search"):
        relaxed = solve_roster(ctx, RELAXED, rng)
    if relaxed.ok:
        logger.info(f"Relaxed pass found a roster ({strict.reason})")
        return ScheduleSuccess(
            assignments=relaxed.assignments,
            stats=build_stats(ctx, relaxed.assignments),
            seed_used=seed_used,
            mode="relaxed",
        )

    proposal = build_partial_proposal(ctx, rng)
    if proposal.is_complete:
        assignments = dict(proposal.assignments)
        logger.info("Draft pass filled every day without arbitration")
        return ScheduleSuccess(
            assignments=assignments,
            stats=build_stats(ctx, assignments),
            seed_used=seed_used,
            mode="draft",
        )

    logger.warning(
        f"No roster found; {len(proposal.unresolved_days)} day(s) need a decision, "
        f"{len(proposal.unassigned_days)} left empty"
    )
    return ScheduleFailure(
        conflicts=list(dict.fromkeys([strict.reason, relaxed.reason])),
        partial_proposal=proposal,
        stage="infeasible",
    )

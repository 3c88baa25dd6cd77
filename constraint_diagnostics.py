"""Constraint diagnostics for months with no roster.

When the search comes back empty-handed, this module helps explain why by:
1. Analyzing the request for obvious conflicts (empty candidate pools,
   capacity shortfalls, uncoverable Tuesdays/Thursdays or weekends)
2. Solving a CP-SAT model of the rules with one rule group removed at a time
3. Reporting which removals would make the month feasible

'Want' forcing depends on the order shifts are handed out and is not part of
the CP-SAT model; only the static and counting rules are.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ortools.sat.python import cp_model

from constants import DIAGNOSTIC_TIMEOUT_SECONDS, MAX_WEEKEND_BLOCKS, PREF_CANNOT, PREF_WANT
from model_constraints import static_violations
from scheduler_builders import RosterContext
from utils import is_tuesday_or_thursday, is_weekend_service_day
from logger import timed

RULE_GROUPS = (
    "caps",
    "rest_days",
    "weekend_blocks",
    "certification",
    "leadership_weekends",
    "cannot",
)


@dataclass
class ConstraintViolation:
    """Represents a single constraint violation or conflict."""
    category: str  # e.g., "coverage", "capacity", "certification"
    severity: str  # "error" (infeasible), "warning" (tight)
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.category}: {self.message}"


@dataclass
class DiagnosticReport:
    """Complete diagnostic report for constraint analysis."""
    is_feasible: bool
    violations: list[ConstraintViolation] = field(default_factory=list)
    relaxation_results: dict[str, bool] = field(default_factory=dict)
    baseline_feasible: Optional[bool] = None
    summary: str = ""

    def add_violation(self, violation: ConstraintViolation) -> None:
        self.violations.append(violation)

    def get_errors(self) -> list[ConstraintViolation]:
        return [v for v in self.violations if v.severity == "error"]

    def get_warnings(self) -> list[ConstraintViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_feasible": self.is_feasible,
            "violations": [
                {
                    "category": v.category,
                    "severity": v.severity,
                    "message": v.message,
                    "details": v.details,
                }
                for v in self.violations
            ],
            "relaxation_results": self.relaxation_results,
            "baseline_feasible": self.baseline_feasible,
            "summary": self.summary,
        }

    def format_report(self) -> str:
        """Format the report as a human-readable string."""
        lines = ["=" * 60, "ROSTER DIAGNOSTIC REPORT", "=" * 60, ""]

        if self.is_feasible:
            lines.append("Roster looks FEASIBLE")
        else:
            lines.append("Roster is INFEASIBLE")
        lines.append("")

        errors = self.get_errors()
        warnings = self.get_warnings()

        if errors:
            lines.append(f"ERRORS ({len(errors)}):")
            lines.append("-" * 40)
            for v in errors:
                lines.append(f"  * [{v.category}] {v.message}")
                for k, val in v.details.items():
                    lines.append(f"      {k}: {val}")
            lines.append("")

        if warnings:
            lines.append(f"WARNINGS ({len(warnings)}):")
            lines.append("-" * 40)
            for v in warnings:
                lines.append(f"  * [{v.category}] {v.message}")
            lines.append("")

        if self.relaxation_results:
            lines.append("RELAXATION ANALYSIS:")
            lines.append("-" * 40)
            for group, feasible in self.relaxation_results.items():
                status = "feasible" if feasible else "still infeasible"
                lines.append(f"  Without '{group}': {status}")
            lines.append("")

        if self.summary:
            lines.append("SUMMARY:")
            lines.append("-" * 40)
            lines.append(f"  {self.summary}")
            lines.append("")

        lines.append("=" * 60)
        return "\n".join(lines)


class RosterDiagnostics:
    """Analyzes a month's rules to identify why no roster exists."""

    def __init__(self, ctx: RosterContext):
        self.ctx = ctx
        self.request = ctx.request

    def analyze_pre_solve(self) -> DiagnosticReport:
        """Analyze the request before solving to detect obvious issues."""
        report = DiagnosticReport(is_feasible=True)

        self._check_day_coverage(report)
        self._check_capacity(report)
        self._check_certified_coverage(report)
        self._check_weekend_coverage(report)
        self._check_want_conflicts(report)

        if report.get_errors():
            report.is_feasible = False
            report.summary = f"Found {len(report.get_errors())} constraint violations that make the month infeasible."
        else:
            report.summary = "No obvious constraint violations detected."

        return report

    def _check_day_coverage(self, report: DiagnosticReport) -> None:
        """Check that every day has at least one statically allowed worker with a non-zero cap."""
        for day in self.ctx.day_range:
            pool = [
                w.name for w in self.ctx.workers
                if w.id in self.ctx.static_allowed[day] and self.ctx.caps[w.id] > 0
            ]
            if not pool:
                report.add_violation(ConstraintViolation(
                    category="coverage",
                    severity="error",
                    message=f"No worker can serve day {day}",
                    details={
                        "day": day,
                        "reason": "Every worker is banned, locked out, barred by role or certification, or has a zero cap",
                    }
                ))
            elif len(pool) == 1:
                report.add_violation(ConstraintViolation(
                    category="coverage",
                    severity="warning",
                    message=f"Only 1 worker can serve day {day}: {pool[0]}",
                    details={"day": day, "worker": pool[0]}
                ))

    def _check_capacity(self, report: DiagnosticReport) -> None:
        """Check that caps and targets add up to the month."""
        total_cap = sum(self.ctx.caps.values())
        if total_cap < self.ctx.days:
            report.add_violation(ConstraintViolation(
                category="capacity",
                severity="error",
                message=f"Caps allow {total_cap} shifts but the month has {self.ctx.days} days",
                details={"total_cap": total_cap, "days": self.ctx.days}
            ))

        total_target = sum(self.ctx.targets.values())
        if total_target != self.ctx.days:
            report.add_violation(ConstraintViolation(
                category="targets",
                severity="warning",
                message=f"Targets sum to {total_target} but the month has {self.ctx.days} days; exact targets are impossible",
                details={"total_target": total_target, "days": self.ctx.days}
            ))

    def _check_certified_coverage(self, report: DiagnosticReport) -> None:
        """Check that certified workers can cover every Tuesday and Thursday."""
        year, month = self.request.year, self.request.month
        tue_thu = [d for d in self.ctx.day_range if is_tuesday_or_thursday(year, month, d)]
        certified = [w for w in self.ctx.workers if w.certified]
        certified_cap = sum(self.ctx.caps[w.id] for w in certified)

        if len(tue_thu) > certified_cap:
            report.add_violation(ConstraintViolation(
                category="certification",
                severity="error",
                message=f"{len(tue_thu)} Tuesdays/Thursdays but certified workers can take only {certified_cap} shifts",
                details={
                    "days": tue_thu,
                    "certified_workers": [w.name for w in certified],
                }
            ))

    def _check_weekend_coverage(self, report: DiagnosticReport) -> None:
        """Check that non-leadership workers can cover every Fri/Sat/Sun.

        Within one block a worker can take at most Friday and Sunday, so each
        worker contributes at most two shifts per block.
        """
        year, month = self.request.year, self.request.month
        weekend_days = [d for d in self.ctx.day_range if is_weekend_service_day(year, month, d)]
        per_worker_limit = MAX_WEEKEND_BLOCKS * 2
        eligible = [w for w in self.ctx.workers if not w.is_leadership]
        capacity = sum(min(self.ctx.caps[w.id], per_worker_limit) for w in eligible)

        if len(weekend_days) > capacity:
            report.add_violation(ConstraintViolation(
                category="weekend_coverage",
                severity="error",
                message=f"{len(weekend_days)} weekend days but non-leadership workers can take at most {capacity}",
                details={"weekend_days": len(weekend_days), "capacity": capacity}
            ))
        elif len(weekend_days) == capacity:
            report.add_violation(ConstraintViolation(
                category="weekend_coverage",
                severity="warning",
                message=f"Weekend coverage is exactly at capacity ({capacity} shifts)",
                details={"weekend_days": len(weekend_days), "capacity": capacity}
            ))

    def _check_want_conflicts(self, report: DiagnosticReport) -> None:
        """Check for 'want' marks on days the worker can never take."""
        for worker in self.ctx.workers:
            for day in self.ctx.day_range:
                if self.request.preference(worker.id, day) != PREF_WANT:
                    continue
                reasons = static_violations(self.request, day, worker)
                locked = self.request.locked_worker(day)
                if locked is not None and locked != worker.id:
                    reasons.append("locked")
                if reasons:
                    report.add_violation(ConstraintViolation(
                        category="preferences",
                        severity="warning",
                        message=f"{worker.name} wants day {day} but cannot take it ({', '.join(reasons)})",
                        details={"worker": worker.name, "day": day, "rules": reasons}
                    ))

    @timed(name="relaxation analysis")
    def run_relaxation_analysis(self, logger=None) -> DiagnosticReport:
        """Run diagnostic solves with one rule group removed at a time."""
        report = self.analyze_pre_solve()

        report.baseline_feasible = self._is_feasible(frozenset())
        for group in RULE_GROUPS:
            feasible = self._is_feasible(frozenset({group}))
            report.relaxation_results[group] = feasible
            if feasible and logger:
                logger.info(f"Relaxation test: removing '{group}' makes the month feasible")

        feasible_when_relaxed = [k for k, v in report.relaxation_results.items() if v]
        if report.baseline_feasible:
            report.summary = ("A roster exists under caps and static rules; "
                              "the blocker is 'want' forcing or exact targets.")
        elif feasible_when_relaxed:
            report.is_feasible = False
            report.summary = f"Month becomes feasible when relaxing: {', '.join(feasible_when_relaxed)}"
        elif report.get_errors():
            report.is_feasible = False
            report.summary = "Pre-solve analysis found constraint violations. See errors above."
        else:
            report.is_feasible = False
            report.summary = "Could not identify a single rule group causing infeasibility."

        return report

    def _is_feasible(self, skip: frozenset) -> bool:
        model = self._build_model(skip)
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = DIAGNOSTIC_TIMEOUT_SECONDS
        solver.parameters.log_search_progress = False
        status = solver.Solve(model)
        return status in (cp_model.OPTIMAL, cp_model.FEASIBLE)

    def _build_model(self, skip: frozenset):
        """Build the roster model, leaving out the rule groups in `skip`."""
        ctx = self.ctx
        request = self.request
        year, month = request.year, request.month
        model = cp_model.CpModel()
        assigned = {
            (w.id, d): model.NewBoolVar(f"diag_ass_w{w.id}_d{d}")
            for w in ctx.workers for d in ctx.day_range
        }

        # Each day exactly one worker (always required)
        for d in ctx.day_range:
            model.AddExactlyOne(assigned[w.id, d] for w in ctx.workers)

        # Locks and cross-month rest (always required)
        for d in ctx.day_range:
            locked = request.locked_worker(d)
            if locked is not None and locked in ctx.workers_by_id:
                model.Add(assigned[locked, d] == 1)
        previous = request.previous_last_worker_id
        if previous in ctx.workers_by_id:
            model.Add(assigned[previous, 1] == 0)

        for w in ctx.workers:
            for d in ctx.day_range:
                if "cannot" not in skip and request.preference(w.id, d) == PREF_CANNOT:
                    model.Add(assigned[w.id, d] == 0)
                if ("leadership_weekends" not in skip and w.is_leadership
                        and is_weekend_service_day(year, month, d)):
                    model.Add(assigned[w.id, d] == 0)
                if ("certification" not in skip and not w.certified
                        and is_tuesday_or_thursday(year, month, d)):
                    model.Add(assigned[w.id, d] == 0)

        if "caps" not in skip:
            for w in ctx.workers:
                model.Add(sum(assigned[w.id, d] for d in ctx.day_range) <= ctx.caps[w.id])

        if "rest_days" not in skip:
            for w in ctx.workers:
                for d in range(1, ctx.days):
                    model.AddBoolOr([assigned[w.id, d].Not(), assigned[w.id, d + 1].Not()])

        if "weekend_blocks" not in skip:
            blocks: dict = {}
            for d in ctx.day_range:
                key = ctx.block_keys[d]
                if key is not None:
                    blocks.setdefault(key, []).append(d)
            for w in ctx.workers:
                touched = []
                for key, block_days in blocks.items():
                    in_block = model.NewBoolVar(f"diag_block_w{w.id}_{key.isoformat()}")
                    for d in block_days:
                        model.AddImplication(assigned[w.id, d], in_block)
                    touched.append(in_block)
                model.Add(sum(touched) <= MAX_WEEKEND_BLOCKS)

        return model


def run_diagnostics(
    ctx: RosterContext,
    logger=None,
    full_analysis: bool = True,
) -> DiagnosticReport:
    """
    Run roster diagnostics and return a report.

    Args:
        ctx: Request context built by scheduler_builders.build_context
        logger: Optional logger for output
        full_analysis: If True, run relaxation analysis (slower but more informative)

    Returns:
        DiagnosticReport with violations and analysis results
    """
    diagnostics = RosterDiagnostics(ctx)

    if full_analysis:
        report = diagnostics.run_relaxation_analysis(logger)
    else:
        report = diagnostics.analyze_pre_solve()

    if logger:
        for violation in report.get_errors():
            logger.error(str(violation))
        for violation in report.get_warnings():
            logger.warning(str(violation))

    return report

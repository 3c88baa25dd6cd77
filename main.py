#!/usr/bin/env python3
"""
Command-line entry point for the on-call roster scheduler.

Usage:
  # Roster from config.yaml, no preferences or locks
  python main.py --year 2026 --month 6

  # Roster from a stored request (YAML or JSON, ScheduleRequest.to_dict format)
  python main.py --year 2026 --month 6 --request june.yaml --seed abc --diagnose
"""

import argparse
import json
import logging
import sys

import yaml

from constants import ROLE_DISPLAY_NAMES
from models import ScheduleRequest
from scheduler_service import GenerationOutcome, SchedulerService
from utils import weekday_label
from logger import get_logger, setup_logging

logger = get_logger('main')


def load_request(path: str, year: int, month: int, seed=None) -> ScheduleRequest:
    """Read a stored request; --year/--month/--seed on the command line win."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    data["year"] = year
    data["month"] = month
    if seed is not None:
        data["seed"] = seed
    return ScheduleRequest.from_dict(data)


def print_outcome(request: ScheduleRequest, outcome: GenerationOutcome) -> None:
    names = {w.id: w.name for w in request.workers}
    result = outcome.result

    if result is None:
        print(f"Error: {outcome.error_message}")
        return

    if result.ok:
        print(f"Roster {request.year}-{request.month:02d} ({result.mode})")
        if result.seed_used:
            print(f"  seed: {result.seed_used}")
        print("-" * 40)
        for day, worker_id in result.assignments.items():
            label = weekday_label(request.year, request.month, day)
            print(f"  {day:2d} {label}  {names.get(worker_id, worker_id)}")
        print("-" * 40)
        print("Shifts per worker (weekend shifts):")
        for w in request.workers:
            total = result.stats.total_by_worker.get(w.id, 0)
            weekend = result.stats.weekend_by_worker.get(w.id, 0)
            print(f"  {w.name:<12} {ROLE_DISPLAY_NAMES[w.role]:<8} {total:2d} ({weekend})")
        print(f"Friday/Sunday pairings: {result.stats.fri_sun_pairings}")
        return

    print(f"No roster for {request.year}-{request.month:02d} ({result.stage})")
    print("Conflicts:")
    for conflict in result.conflicts:
        print(f"  {conflict}")

    proposal = result.partial_proposal
    if proposal is not None:
        pools = {u.day: u.candidate_ids for u in proposal.unresolved_days}
        print("Draft:")
        for day, worker_id in sorted(proposal.assignments.items()):
            label = weekday_label(request.year, request.month, day)
            shown = names.get(worker_id, "-") if worker_id is not None else "-"
            line = f"  {day:2d} {label}  {shown}"
            if day in pools:
                candidates = ", ".join(names.get(c, str(c)) for c in pools[day]) or "nobody"
                line += f"   [to discuss: {candidates}]"
            print(line)

    if outcome.diagnostic_report is not None:
        print()
        print(outcome.diagnostic_report.format_report())


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="On-call roster scheduler")
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--month", type=int, required=True)
    parser.add_argument("--request", help="YAML/JSON request file")
    parser.add_argument("--config", help="Roster config file (default: config.yaml)")
    parser.add_argument("--seed", default=None, help="Seed for reproducible variation")
    parser.add_argument("--diagnose", action="store_true", help="Explain infeasible months")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-file", action="store_true", help="Also log to logs/")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_to_file=args.log_file,
    )

    if not 1 <= args.month <= 12:
        parser.error(f"--month must be between 1 and 12, got {args.month}")

    service = SchedulerService(args.config)
    try:
        if args.request:
            request = load_request(args.request, args.year, args.month, args.seed)
        else:
            request = service.build_request(args.year, args.month, args.seed)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Could not read request: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outcome = service.generate_for_request(request, diagnose=args.diagnose)

    if args.json:
        payload = outcome.result.to_dict() if outcome.result is not None else {
            "ok": False, "error": outcome.error_message,
        }
        if outcome.diagnostic_report is not None:
            payload["diagnostics"] = outcome.diagnostic_report.to_dict()
        print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
    else:
        print_outcome(request, outcome)

    return 0 if outcome.is_feasible else 1


if __name__ == "__main__":
    sys.exit(main())

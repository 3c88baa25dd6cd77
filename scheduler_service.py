"""Scheduler Service - Business logic layer between front ends and the roster engine.

This module provides a clean API for roster operations, decoupling the CLI (or
any UI) from the scheduling core. The roster configuration, the month's
preferences and locks, and generation calls all go through this service.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import yaml

from constants import DEFAULT_CLINIC_WEEKDAYS, DEFAULT_WORKERS, PREFERENCE_LEVELS, PREF_NONE
from constraint_diagnostics import DiagnosticReport, run_diagnostics
from models import ScheduleRequest, ScheduleResult, Worker, default_cap_for, default_target_for
from scheduler_builders import build_context
from scheduling_engine import generate_schedule
from validation import validate_roster
from logger import get_logger

logger = get_logger('scheduler_service')


@dataclass
class GenerationOutcome:
    """Result of a roster generation call made through the service."""
    result: Optional[ScheduleResult] = None
    diagnostic_report: Optional[DiagnosticReport] = None
    error_message: str = ""

    @property
    def is_feasible(self) -> bool:
        """Check if a full roster was produced."""
        return self.result is not None and self.result.ok


class SchedulerService:
    """
    Service layer for roster operations.

    This class provides a clean API for:
    - Roster configuration (workers, caps, targets) persisted as YAML
    - Month inputs (preferences, locks, previous month's last worker)
    - Roster generation, with optional diagnostics on failure
    """

    DEFAULT_CONFIG_FILE = "config.yaml"

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the scheduler service.

        Args:
            config_path: Path to configuration file. If None, uses default.
        """
        self._config_path = config_path or self._get_default_config_path()
        self._workers: list[Worker] = []
        self._max_shifts: dict[int, float] = {}
        self._target_shifts: dict[int, float] = {}
        self._preferences: dict[int, dict[int, int]] = {}
        self._locks: dict[int, int] = {}
        self._previous_last_worker_id: Optional[int] = None

        self._load_config()

    @staticmethod
    def _get_default_config_path() -> str:
        """Get the default config file path."""
        return os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.yaml")

    # =========================================================================
    # Configuration Management
    # =========================================================================

    def _load_config(self) -> None:
        """Load configuration from file."""
        if not os.path.exists(self._config_path):
            logger.info(f"Config file not found at {self._config_path}, using defaults")
            self._use_defaults()
            return

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)

            if config and config.get('workers'):
                self._workers = [Worker.from_dict(w) for w in config['workers']]
            else:
                self._workers = self._get_default_workers()

            self._max_shifts = {int(k): v for k, v in (config or {}).get('max_shifts', {}).items()}
            self._target_shifts = {int(k): v for k, v in (config or {}).get('target_shifts', {}).items()}
            self._fill_defaults()
            logger.info(f"Configuration loaded from {self._config_path}")

        except Exception as e:
            logger.warning(f"Could not load config file: {e}")
            self._use_defaults()

    def _use_defaults(self) -> None:
        self._workers = self._get_default_workers()
        self._max_shifts = {}
        self._target_shifts = {}
        self._fill_defaults()

    def _fill_defaults(self) -> None:
        """Give every worker a cap and a target if the config left them out."""
        for worker in self._workers:
            self._max_shifts.setdefault(worker.id, default_cap_for(worker))
        for worker in self._workers:
            self._target_shifts.setdefault(worker.id, default_target_for(worker, self._max_shifts))

    @staticmethod
    def _get_default_workers() -> list[Worker]:
        """Return the default ten-worker roster."""
        return [
            Worker(clinic_weekdays=DEFAULT_CLINIC_WEEKDAYS.get(w['id'], ()), **w)
            for w in DEFAULT_WORKERS
        ]

    def save_config(self) -> bool:
        """Save current configuration to file.

        Returns:
            True if save was successful, False otherwise.
        """
        config = {
            'workers': [w.to_dict() for w in self._workers],
            'max_shifts': dict(self._max_shifts),
            'target_shifts': dict(self._target_shifts),
        }

        try:
            with open(self._config_path, 'w', encoding='utf-8') as f:
                yaml.dump(config, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
            logger.info(f"Configuration saved to {self._config_path}")
            return True
        except Exception as e:
            logger.error(f"Could not save config file: {e}")
            return False

    # =========================================================================
    # Worker Management
    # =========================================================================

    @property
    def workers(self) -> list[Worker]:
        """Get list of all workers."""
        return self._workers.copy()

    def get_worker(self, worker_id: int) -> Optional[Worker]:
        """Get a worker by id."""
        for w in self._workers:
            if w.id == worker_id:
                return w
        return None

    @property
    def max_shifts(self) -> dict[int, float]:
        return dict(self._max_shifts)

    @property
    def target_shifts(self) -> dict[int, float]:
        return dict(self._target_shifts)

    def set_max_shifts(self, worker_id: int, value: float) -> None:
        """Set a worker's cap. Leadership caps are fixed and ignore this."""
        self._require_worker(worker_id)
        self._max_shifts[worker_id] = value

    def set_target(self, worker_id: int, value: float) -> None:
        """Set how many shifts a worker should get this month."""
        self._require_worker(worker_id)
        self._target_shifts[worker_id] = value

    def _require_worker(self, worker_id: int) -> Worker:
        worker = self.get_worker(worker_id)
        if worker is None:
            raise ValueError(f"Unknown worker id {worker_id}")
        return worker

    # =========================================================================
    # Month Inputs
    # =========================================================================

    def set_preference(self, worker_id: int, day: int, level: int) -> None:
        """Mark a day for a worker; PREF_NONE clears the mark.

        Raises:
            ValueError: If the worker is unknown or the level is invalid.
        """
        self._require_worker(worker_id)
        if level not in PREFERENCE_LEVELS:
            raise ValueError(f"Preference level must be one of {PREFERENCE_LEVELS}, got {level}")
        days = self._preferences.setdefault(worker_id, {})
        if level == PREF_NONE:
            days.pop(day, None)
            if not days:
                del self._preferences[worker_id]
        else:
            days[day] = level

    def get_preferences(self, worker_id: int) -> dict[int, int]:
        return dict(self._preferences.get(worker_id, {}))

    def clear_preferences(self) -> None:
        self._preferences.clear()

    def set_lock(self, day: int, worker_id: Optional[int]) -> None:
        """Lock a day to a worker; None removes the lock.

        Locks are not checked here; unknown ids and rule breaks are reported
        by the lock validator when the roster is generated.
        """
        if worker_id is None:
            self._locks.pop(day, None)
        else:
            self._locks[day] = worker_id

    @property
    def locks(self) -> dict[int, int]:
        return dict(self._locks)

    def clear_locks(self) -> None:
        self._locks.clear()

    @property
    def previous_last_worker_id(self) -> Optional[int]:
        """Worker who served the last day of the previous month."""
        return self._previous_last_worker_id

    @previous_last_worker_id.setter
    def previous_last_worker_id(self, value: Optional[int]) -> None:
        self._previous_last_worker_id = value

    # =========================================================================
    # Roster Generation
    # =========================================================================

    def build_request(self, year: int, month: int, seed: Optional[str] = None) -> ScheduleRequest:
        """Assemble a request from the current configuration and month inputs."""
        return ScheduleRequest(
            year=year,
            month=month,
            workers=list(self._workers),
            max_shifts=dict(self._max_shifts),
            target_shifts=dict(self._target_shifts),
            preferences={wid: dict(days) for wid, days in self._preferences.items()},
            locks=dict(self._locks),
            previous_last_worker_id=self._previous_last_worker_id,
            seed=seed or None,
        )

    def generate(self, year: int, month: int, seed: Optional[str] = None,
                 diagnose: bool = False) -> GenerationOutcome:
        """Generate a roster for the given month.

        Args:
            year: Year to schedule
            month: Month to schedule (1-12)
            seed: Optional seed; equal seeds give equal rosters
            diagnose: Run constraint diagnostics when no roster is found

        Returns:
            GenerationOutcome with the result or error information
        """
        logger.info(f"Generating roster for {month}/{year} with {len(self._workers)} workers")
        return self.generate_for_request(self.build_request(year, month, seed), diagnose=diagnose)

    def generate_for_request(self, request: ScheduleRequest, diagnose: bool = False) -> GenerationOutcome:
        """Generate a roster for a request built elsewhere (e.g. loaded from a file)."""
        try:
            result = generate_schedule(request)

            if result.ok:
                findings = validate_roster(build_context(request), result.assignments)
                for finding in findings:
                    logger.error(f"Generated roster breaks a rule: {finding}")
                logger.info(f"Roster generated ({result.mode}) with {len(result.assignments)} days")
                return GenerationOutcome(result=result)

            logger.warning("No feasible roster found")
            error_msg = "; ".join(result.conflicts) or "No feasible roster found"
            diagnostic_report = None
            if diagnose and result.stage == "infeasible":
                diagnostic_report = run_diagnostics(build_context(request), logger=logger)
                error_msg += f". {diagnostic_report.summary}"

            return GenerationOutcome(
                result=result,
                diagnostic_report=diagnostic_report,
                error_message=error_msg,
            )

        except Exception as e:
            logger.error(f"Error generating roster: {e}", exc_info=True)
            return GenerationOutcome(error_message=str(e))

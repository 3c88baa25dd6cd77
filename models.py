"""Roster data model.

Everything that crosses the boundary of the scheduling core lives here: the
workers, the monthly schedule request, and the discriminated result
(`ScheduleSuccess` or `ScheduleFailure`).

`from_dict` / `to_dict` use plain dicts so requests can be stored as YAML or
JSON by whatever front end owns persistence. JSON turns integer keys into
strings; `from_dict` turns them back.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from constants import (
    CERTIFIED_RANK_LIMIT,
    DEFAULT_CAP,
    LEADERSHIP_ROLES,
    MAX_WORKERS,
    PREFERENCE_BY_NAME,
    PREFERENCE_LEVELS,
    PREF_NONE,
    ROLE_ALIASES,
    ROLE_FIXED_CAPS,
    ROLE_REGULAR,
    ROLES,
)
from utils import days_in_month


@dataclass
class Worker:
    """A worker on the on-call roster.

    `rank` is purely ordinal (lower = higher priority). `certified` is derived
    from it once, at construction, and gates Tuesday/Thursday shifts.
    """
    id: int
    rank: int
    name: str
    role: str = ROLE_REGULAR
    clinic_weekdays: tuple[int, ...] = ()
    certified: bool = field(init=False)

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown role '{self.role}' for worker {self.id}")
        self.clinic_weekdays = tuple(self.clinic_weekdays)
        self.certified = self.rank <= CERTIFIED_RANK_LIMIT

    @property
    def is_leadership(self) -> bool:
        return self.role in LEADERSHIP_ROLES

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "rank": self.rank,
            "name": self.name,
            "role": self.role,
            "clinic_weekdays": list(self.clinic_weekdays),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Worker":
        worker_id = _as_int(data["id"], "worker id")
        role = data.get("role", ROLE_REGULAR)
        role = ROLE_ALIASES.get(role, role)
        return cls(
            id=worker_id,
            rank=_as_int(data.get("rank", worker_id), "worker rank"),
            name=str(data.get("name", f"Worker {worker_id}")),
            role=role,
            clinic_weekdays=tuple(int(wd) for wd in data.get("clinic_weekdays", []) or []),
        )


def default_cap_for(worker: Worker) -> int:
    return ROLE_FIXED_CAPS.get(worker.role, DEFAULT_CAP)


def default_target_for(worker: Worker, max_shifts: dict[int, float]) -> int:
    if worker.role in ROLE_FIXED_CAPS:
        return ROLE_FIXED_CAPS[worker.role]
    raw = max_shifts.get(worker.id, DEFAULT_CAP)
    if not _is_finite(raw):
        raw = DEFAULT_CAP
    return max(0, math.floor(raw))


@dataclass
class ScheduleRequest:
    """Everything needed to build one month's roster."""
    year: int
    month: int
    workers: list[Worker]
    max_shifts: dict[int, float] = field(default_factory=dict)
    target_shifts: dict[int, float] = field(default_factory=dict)
    preferences: dict[int, dict[int, int]] = field(default_factory=dict)
    locks: dict[int, Optional[int]] = field(default_factory=dict)
    previous_last_worker_id: Optional[int] = None
    seed: Optional[str] = None

    @property
    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month)

    def preference(self, worker_id: int, day: int) -> int:
        return self.preferences.get(worker_id, {}).get(day, PREF_NONE)

    def locked_worker(self, day: int) -> Optional[int]:
        return self.locks.get(day)

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "workers": [w.to_dict() for w in self.workers],
            "max_shifts": dict(self.max_shifts),
            "target_shifts": dict(self.target_shifts),
            "preferences": {wid: dict(days) for wid, days in self.preferences.items() if days},
            "locks": {day: wid for day, wid in self.locks.items() if wid is not None},
            "previous_last_worker_id": self.previous_last_worker_id,
            "seed": self.seed or "",
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleRequest":
        """Build a request from stored form state.

        Missing caps and targets are filled with the role defaults; string keys
        and preference names are accepted.

        Raises:
            ValueError: If the month, a role, an id or a preference level is invalid.
        """
        year = _as_int(data["year"], "year")
        month = _as_int(data["month"], "month")
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")

        workers = [Worker.from_dict(w) for w in data.get("workers", [])]
        if len(workers) > MAX_WORKERS:
            raise ValueError(f"At most {MAX_WORKERS} workers are supported, got {len(workers)}")
        ids = [w.id for w in workers]
        if len(set(ids)) != len(ids):
            raise ValueError("Worker ids must be unique")

        max_shifts = {w.id: default_cap_for(w) for w in workers}
        max_shifts.update(_int_keys(data.get("max_shifts") or {}, "max_shifts"))
        target_shifts = {w.id: default_target_for(w, max_shifts) for w in workers}
        target_shifts.update(_int_keys(data.get("target_shifts") or {}, "target_shifts"))

        preferences: dict[int, dict[int, int]] = {}
        for worker_id, days in (data.get("preferences") or {}).items():
            levels = {}
            for day, value in (days or {}).items():
                level = _preference_level(value)
                if level != PREF_NONE:
                    levels[_as_int(day, "preference day")] = level
            if levels:
                preferences[_as_int(worker_id, "preference worker id")] = levels

        locks: dict[int, Optional[int]] = {}
        for day, worker_id in (data.get("locks") or {}).items():
            if worker_id is None or worker_id == "":
                continue
            locks[_as_int(day, "lock day")] = _as_int(worker_id, "lock worker id")

        previous = data.get("previous_last_worker_id")
        seed = data.get("seed") or None
        return cls(
            year=year,
            month=month,
            workers=workers,
            max_shifts=max_shifts,
            target_shifts=target_shifts,
            preferences=preferences,
            locks=locks,
            previous_last_worker_id=_as_int(previous, "previous worker id") if previous not in (None, "") else None,
            seed=str(seed) if seed is not None else None,
        )


@dataclass
class ScheduleStats:
    """Post-hoc totals for a completed roster."""
    total_by_worker: dict[int, int] = field(default_factory=dict)
    weekend_by_worker: dict[int, int] = field(default_factory=dict)
    fri_sun_pairings: int = 0

    def to_dict(self) -> dict:
        return {
            "total_by_worker": dict(self.total_by_worker),
            "weekend_by_worker": dict(self.weekend_by_worker),
            "fri_sun_pairings": self.fri_sun_pairings,
        }


@dataclass
class UnresolvedDay:
    """A day of a draft roster that needs a human decision."""
    day: int
    candidate_ids: list[int] = field(default_factory=list)


@dataclass
class PartialProposal:
    """Best-effort draft returned when no full roster was found."""
    assignments: dict[int, Optional[int]] = field(default_factory=dict)
    unresolved_days: list[UnresolvedDay] = field(default_factory=list)

    @property
    def unassigned_days(self) -> list[int]:
        return [day for day, worker_id in sorted(self.assignments.items()) if worker_id is None]

    @property
    def is_complete(self) -> bool:
        """True when every day was filled without human arbitration."""
        # Stricter than "no empty day": a fallback pick may break a cap or a want.
        return not self.unresolved_days and not self.unassigned_days

    def to_dict(self) -> dict:
        return {
            "assignments": dict(self.assignments),
            "unresolved_days": [
                {"day": u.day, "candidate_ids": list(u.candidate_ids)} for u in self.unresolved_days
            ],
        }


@dataclass
class ScheduleSuccess:
    assignments: dict[int, int]
    stats: ScheduleStats
    seed_used: Optional[str] = None
    mode: str = "strict"   # "strict", "relaxed" or "draft"
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "mode": self.mode,
            "assignments": dict(self.assignments),
            "stats": self.stats.to_dict(),
            "seed_used": self.seed_used,
        }


@dataclass
class ScheduleFailure:
    conflicts: list[str]
    partial_proposal: Optional[PartialProposal] = None
    stage: str = "infeasible"   # "invalid" (lock validation) or "infeasible" (search)
    ok: bool = field(default=False, init=False)

    def to_dict(self) -> dict:
        return {
            "ok": False,
            "stage": self.stage,
            "conflicts": list(self.conflicts),
            "partial_proposal": self.partial_proposal.to_dict() if self.partial_proposal else None,
        }


ScheduleResult = Union[ScheduleSuccess, ScheduleFailure]


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _as_int(value: Any, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {what}: {value!r}") from None


def _int_keys(mapping: dict, what: str) -> dict[int, Any]:
    return {_as_int(k, f"{what} key"): v for k, v in mapping.items()}


def _preference_level(value: Any) -> int:
    if isinstance(value, str) and not value.strip().isdigit():
        level = PREFERENCE_BY_NAME.get(value.strip().lower())
        if level is None:
            raise ValueError(f"Unknown preference '{value}'")
        return level
    level = _as_int(value, "preference level")
    if level not in PREFERENCE_LEVELS:
        raise ValueError(f"Preference level must be one of {PREFERENCE_LEVELS}, got {level}")
    return level

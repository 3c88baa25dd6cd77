"""Mutable working state of one search invocation.

A fresh `SolveState` is created for every solver or proposal run and thrown
away afterwards. `apply` and `undo` are exact inverses: applying and then
undoing the same (day, worker) leaves the state equal to what it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional


@dataclass
class SolveState:
    block_keys: dict[int, Optional[date]]
    assignments: dict[int, int] = field(default_factory=dict)
    counts: dict[int, int] = field(default_factory=dict)
    weekend_blocks: dict[int, dict[date, int]] = field(default_factory=dict)
    weekend_totals: dict[int, int] = field(default_factory=dict)

    @classmethod
    def fresh(cls, worker_ids: Iterable[int], block_keys: dict[int, Optional[date]]) -> "SolveState":
        ids = list(worker_ids)
        return cls(
            block_keys=block_keys,
            counts={wid: 0 for wid in ids},
            weekend_blocks={wid: {} for wid in ids},
            weekend_totals={wid: 0 for wid in ids},
        )

    @property
    def assigned_count(self) -> int:
        return len(self.assignments)

    def has_block(self, worker_id: int, key: date) -> bool:
        return self.weekend_blocks.get(worker_id, {}).get(key, 0) > 0

    def block_total(self, worker_id: int) -> int:
        return self.weekend_totals.get(worker_id, 0)

    def apply(self, day: int, worker_id: int) -> None:
        self.assignments[day] = worker_id
        self.counts[worker_id] = self.counts.get(worker_id, 0) + 1

        key = self.block_keys.get(day)
        if key is None:
            return
        blocks = self.weekend_blocks.setdefault(worker_id, {})
        previous = blocks.get(key, 0)
        blocks[key] = previous + 1
        if previous == 0:
            self.weekend_totals[worker_id] = self.weekend_totals.get(worker_id, 0) + 1

    def undo(self, day: int, worker_id: int) -> None:
        del self.assignments[day]
        self.counts[worker_id] -= 1

        key = self.block_keys.get(day)
        if key is None:
            return
        blocks = self.weekend_blocks[worker_id]
        previous = blocks.get(key, 0)
        if previous <= 1:
            blocks.pop(key, None)
            self.weekend_totals[worker_id] -= 1
        else:
            blocks[key] = previous - 1

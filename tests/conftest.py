"""
Pytest fixtures and configuration for roster scheduler tests.

Most tests use June 2026: the 1st is a Monday, weekend blocks are
{5,6,7}, {12,13,14}, {19,20,21}, {26,27,28} and Tuesdays/Thursdays are
2, 4, 9, 11, 16, 18, 23, 25, 30.
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from constants import DEFAULT_WORKERS
from models import ScheduleRequest, Worker, default_cap_for
from scheduler_builders import build_context
from solve_state import SolveState


@pytest.fixture
def roster_workers():
    """The default ten workers without clinic days."""
    return [Worker(**w) for w in DEFAULT_WORKERS]


@pytest.fixture
def legal_june_locks():
    """A full June 2026 roster that satisfies every hard rule."""
    return {
        1: 6, 2: 1, 3: 7, 4: 2, 5: 3, 6: 8, 7: 3, 8: 9, 9: 2, 10: 10,
        11: 4, 12: 5, 13: 6, 14: 5, 15: 7, 16: 3, 17: 8, 18: 4, 19: 9, 20: 10,
        21: 9, 22: 6, 23: 5, 24: 7, 25: 3, 26: 4, 27: 8, 28: 10, 29: 9, 30: 5,
    }


@pytest.fixture
def june_targets():
    """Per-worker shift counts of `legal_june_locks` (sums to 30)."""
    return {1: 1, 2: 2, 3: 4, 4: 3, 5: 4, 6: 3, 7: 3, 8: 3, 9: 4, 10: 3}


@pytest.fixture
def make_request(roster_workers, june_targets):
    """Factory for June 2026 requests; keyword arguments override fields."""
    def _make(**overrides):
        fields = {
            "year": 2026,
            "month": 6,
            "workers": roster_workers,
            "max_shifts": {w.id: default_cap_for(w) for w in roster_workers},
            "target_shifts": dict(june_targets),
        }
        fields.update(overrides)
        return ScheduleRequest(**fields)
    return _make


@pytest.fixture
def june_ctx(make_request):
    """Context for an unconstrained June 2026 request."""
    return build_context(make_request())


@pytest.fixture
def empty_state(june_ctx):
    """Fresh working state for `june_ctx`."""
    return SolveState.fresh((w.id for w in june_ctx.workers), june_ctx.block_keys)

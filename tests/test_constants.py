"""
Tests for constants.py - Configuration constants
"""

from constants import (
    CERTIFIED_RANK_LIMIT,
    DEFAULT_CAP,
    DEFAULT_CLINIC_WEEKDAYS,
    DEFAULT_WORKERS,
    LEADERSHIP_ROLES,
    MAX_WEEKEND_BLOCKS,
    MAX_WORKERS,
    PREFERENCE_BY_NAME,
    PREFERENCE_LEVELS,
    PREF_CANNOT,
    PREF_WANT,
    ROLE_ALIASES,
    ROLE_DISPLAY_NAMES,
    ROLE_FIXED_CAPS,
    ROLE_LEAD_DEPUTY,
    ROLE_LEAD_PRIMARY,
    ROLE_REGULAR,
    ROLES,
    SCORE_WEIGHTS,
)


class TestRoleConfiguration:
    """Tests for role constants."""

    def test_leadership_caps_fixed(self):
        """Head and deputy have fixed caps of 1 and 2."""
        assert ROLE_FIXED_CAPS == {ROLE_LEAD_PRIMARY: 1, ROLE_LEAD_DEPUTY: 2}

    def test_regular_default_cap(self):
        """Regular workers default to 5 shifts."""
        assert ROLE_REGULAR not in ROLE_FIXED_CAPS
        assert DEFAULT_CAP == 5

    def test_leadership_roles(self):
        """Only head and deputy are leadership."""
        assert LEADERSHIP_ROLES == {ROLE_LEAD_PRIMARY, ROLE_LEAD_DEPUTY}

    def test_aliases_map_to_known_roles(self):
        """Legacy role labels resolve to defined roles."""
        for role in ROLE_ALIASES.values():
            assert role in ROLES

    def test_every_role_has_display_name(self):
        """Every role has a display name."""
        assert set(ROLE_DISPLAY_NAMES) == set(ROLES)


class TestRuleLimits:
    """Tests for rule limits and weights."""

    def test_certification_and_block_limits(self):
        """Certification by rank 1..5 and two weekend blocks."""
        assert CERTIFIED_RANK_LIMIT == 5
        assert MAX_WEEKEND_BLOCKS == 2

    def test_score_weights(self):
        """Score weights are integers with a negative want bonus."""
        assert SCORE_WEIGHTS == {
            'want': -250,
            'avoid': 50,
            'every_other_day': 10,
            'target_deviation': 12,
            'pre_clinic': 18,
        }
        assert all(isinstance(v, int) for v in SCORE_WEIGHTS.values())

    def test_preference_levels(self):
        """Preference names round-trip to levels 0..3."""
        assert PREFERENCE_LEVELS == (0, 1, 2, 3)
        assert PREFERENCE_BY_NAME['cannot'] == PREF_CANNOT
        assert PREFERENCE_BY_NAME['want'] == PREF_WANT


class TestDefaultRoster:
    """Tests for the default ten-worker roster."""

    def test_ten_workers(self):
        """The default roster fills the worker limit."""
        assert len(DEFAULT_WORKERS) == MAX_WORKERS == 10

    def test_ranks_unique_and_ordered(self):
        """Ranks run 1..10 in list order."""
        assert [w['rank'] for w in DEFAULT_WORKERS] == list(range(1, 11))

    def test_leadership_at_top(self):
        """Rank 1 is the head, rank 2 the deputy."""
        assert DEFAULT_WORKERS[0]['role'] == ROLE_LEAD_PRIMARY
        assert DEFAULT_WORKERS[1]['role'] == ROLE_LEAD_DEPUTY
        assert all(w['role'] == ROLE_REGULAR for w in DEFAULT_WORKERS[2:])

    def test_clinic_weekdays_valid(self):
        """Clinic weekdays are Monday..Friday for known workers."""
        ids = {w['id'] for w in DEFAULT_WORKERS}
        for worker_id, weekdays in DEFAULT_CLINIC_WEEKDAYS.items():
            assert worker_id in ids
            assert all(0 <= wd <= 4 for wd in weekdays)

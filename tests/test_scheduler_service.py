"""
Tests for SchedulerService - the business logic layer.

These tests cover:
- Configuration loading and saving
- Worker caps and targets
- Month inputs (preferences, locks, previous worker)
- Roster generation and diagnostics
"""

import pytest
import yaml

from constants import PREF_CANNOT, PREF_NONE, PREF_WANT
from scheduler_service import GenerationOutcome, SchedulerService


@pytest.fixture
def service(tmp_path):
    """Service backed by a config path that does not exist yet."""
    return SchedulerService(str(tmp_path / "config.yaml"))


class TestConfiguration:
    """Tests for config loading and saving."""

    def test_missing_config_uses_defaults(self, service):
        """Without a config file the default roster is used."""
        workers = service.workers
        assert len(workers) == 10
        assert workers[0].name == "Primář"
        assert workers[7].clinic_weekdays == ()

    def test_defaults_fill_caps_and_targets(self, service):
        """Default caps and targets follow the roles."""
        assert service.max_shifts[1] == 1
        assert service.max_shifts[2] == 2
        assert service.max_shifts[5] == 5
        assert service.target_shifts[5] == 5

    def test_save_and_reload(self, tmp_path):
        """Saved settings survive a reload."""
        path = str(tmp_path / "config.yaml")
        first = SchedulerService(path)
        first.set_max_shifts(6, 3)
        first.set_target(6, 2)
        assert first.save_config()

        second = SchedulerService(path)
        assert second.max_shifts[6] == 3
        assert second.target_shifts[6] == 2
        assert [w.name for w in second.workers] == [w.name for w in first.workers]

    def test_partial_config(self, tmp_path):
        """Workers without caps or targets in the file get defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            'workers': [{'id': 1, 'rank': 1, 'name': 'Head', 'role': 'primar'},
                        {'id': 3, 'rank': 3, 'name': 'Tom'}],
            'max_shifts': {3: 4},
        }), encoding='utf-8')
        service = SchedulerService(str(path))
        assert [w.id for w in service.workers] == [1, 3]
        assert service.max_shifts == {1: 1, 3: 4}
        assert service.target_shifts == {1: 1, 3: 4}

    def test_broken_config_falls_back(self, tmp_path, caplog):
        """An unreadable config logs a warning and uses defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("workers: [ {id: 1, role: wizard} ]", encoding='utf-8')
        service = SchedulerService(str(path))
        assert len(service.workers) == 10
        assert "Could not load config file" in caplog.text


class TestMonthInputs:
    """Tests for preferences, locks and the previous worker."""

    def test_set_and_clear_preference(self, service):
        """PREF_NONE removes a preference."""
        service.set_preference(6, 12, PREF_WANT)
        assert service.get_preferences(6) == {12: PREF_WANT}
        service.set_preference(6, 12, PREF_NONE)
        assert service.get_preferences(6) == {}

    def test_invalid_preference(self, service):
        """Unknown workers and levels raise ValueError."""
        with pytest.raises(ValueError):
            service.set_preference(99, 1, PREF_WANT)
        with pytest.raises(ValueError):
            service.set_preference(6, 1, 9)

    def test_locks(self, service):
        """Locks are set, removed and cleared."""
        service.set_lock(3, 8)
        service.set_lock(5, 4)
        service.set_lock(5, None)
        assert service.locks == {3: 8}
        service.clear_locks()
        assert service.locks == {}

    def test_unknown_worker_cap(self, service):
        """Setting a cap for an unknown worker raises ValueError."""
        with pytest.raises(ValueError):
            service.set_max_shifts(42, 3)

    def test_build_request(self, service):
        """The request carries every month input."""
        service.set_preference(6, 1, PREF_CANNOT)
        service.set_lock(3, 8)
        service.previous_last_worker_id = 4
        request = service.build_request(2026, 6, seed="s1")
        assert request.preference(6, 1) == PREF_CANNOT
        assert request.locked_worker(3) == 8
        assert request.previous_last_worker_id == 4
        assert request.seed == "s1"
        assert len(request.workers) == 10


class TestGeneration:
    """Tests for roster generation through the service."""

    def test_generate_success(self, service):
        """A month with the default roster and balanced targets succeeds."""
        for worker_id, target in {3: 4, 4: 4, 5: 4, 6: 3, 7: 3, 8: 3, 9: 3, 10: 3}.items():
            service.set_target(worker_id, target)
        outcome = service.generate(2026, 6)
        assert isinstance(outcome, GenerationOutcome)
        assert outcome.is_feasible
        assert outcome.error_message == ""
        assert len(outcome.result.assignments) == 30

    def test_generate_invalid_locks(self, service):
        """Invalid locks come back as an error without diagnostics."""
        service.set_lock(6, 1)
        outcome = service.generate(2026, 6, diagnose=True)
        assert not outcome.is_feasible
        assert outcome.result.stage == "invalid"
        assert "cannot serve Fri/Sat/Sun" in outcome.error_message
        assert outcome.diagnostic_report is None

    def test_generate_with_diagnostics(self, service):
        """An infeasible month carries a diagnostic report when asked."""
        for worker_id in range(1, 11):
            service.set_preference(worker_id, 15, PREF_CANNOT)
        outcome = service.generate(2026, 6, diagnose=True)
        assert not outcome.is_feasible
        assert outcome.diagnostic_report is not None
        assert outcome.diagnostic_report.relaxation_results["cannot"] is True
        assert outcome.diagnostic_report.summary in outcome.error_message

    def test_generate_catches_errors(self, service, monkeypatch, caplog):
        """Unexpected exceptions become an error message."""
        def boom(request):
            raise RuntimeError("solver exploded")
        monkeypatch.setattr("scheduler_service.generate_schedule", boom)
        outcome = service.generate(2026, 6)
        assert outcome.result is None
        assert outcome.error_message == "solver exploded"
        assert not outcome.is_feasible
        assert "Error generating roster" in caplog.text

    def test_shipped_config_covers_long_months(self):
        """The shipped config yields a roster for a 31-day month."""
        outcome = SchedulerService().generate(2026, 1)
        assert outcome.is_feasible
        assert outcome.result.mode == "relaxed"
        assert len(outcome.result.assignments) == 31

"""
Tests for config file loading and saving
"""

import os

import pytest
import yaml

from models import Worker

CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "config.yaml"
)


@pytest.fixture
def config():
    if not os.path.exists(CONFIG_PATH):
        pytest.skip("config.yaml not found")
    with open(CONFIG_PATH, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


class TestConfigLoading:
    """Tests for the shipped config.yaml."""

    def test_yaml_worker_structure(self, config):
        """Worker YAML structure should be valid."""
        assert 'workers' in config
        assert isinstance(config['workers'], list)
        assert 0 < len(config['workers']) <= 10

    def test_workers_parse(self, config):
        """Every worker entry builds a Worker."""
        workers = [Worker.from_dict(w) for w in config['workers']]
        assert len({w.id for w in workers}) == len(workers)

    def test_caps_and_targets_cover_workers(self, config):
        """Every worker has a cap and a target."""
        ids = {w['id'] for w in config['workers']}
        assert set(config['max_shifts']) == ids
        assert set(config['target_shifts']) == ids

    def test_caps_cover_longest_month(self, config):
        """Configured caps can cover a 31-day month."""
        assert sum(config['max_shifts'].values()) >= 31

    def test_targets_fit_thirty_day_month(self, config):
        """Default targets add up to a 30-day month."""
        assert sum(config['target_shifts'].values()) == 30

    def test_targets_within_caps(self, config):
        """No target exceeds its cap."""
        for worker_id, target in config['target_shifts'].items():
            assert target <= config['max_shifts'][worker_id]


class TestConfigRoundTrip:
    """Tests for YAML persistence of roster data."""

    def test_unicode_names_survive(self, tmp_path):
        """Names with diacritics survive a dump/load cycle."""
        path = tmp_path / "roster.yaml"
        data = {'workers': [Worker(id=4, rank=4, name="Lukáš").to_dict()]}
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, allow_unicode=True, sort_keys=False)
        with open(path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f)
        assert Worker.from_dict(loaded['workers'][0]).name == "Lukáš"

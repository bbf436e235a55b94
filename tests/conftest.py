"""
Shared pytest fixtures for the scheduling engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.models import CostTable


@pytest.fixture
def eight_players():
    """Roster that fills two courts exactly."""
    return [f"P{i}" for i in range(1, 9)]


@pytest.fixture
def nine_players():
    """Roster with one player more than two courts hold."""
    return [f"P{i}" for i in range(1, 10)]


@pytest.fixture
def six_teams():
    return ["Team A", "Team B", "Team C", "Team D", "Team E", "Team F"]


@pytest.fixture
def empty_costs(eight_players):
    return CostTable(eight_players)


@pytest.fixture
def client():
    """Create a test client."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at an empty temporary data directory."""
    import app as app_module

    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    return str(data_dir)

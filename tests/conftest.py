"""Pytest configuration and fixtures."""
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
import structlog

from americano.models.config import ScheduleConfig
from americano.models.schedule import GeneratedRound, MatchAssignment


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Detach handlers added by setup_logging."""
    yield
    logger = logging.getLogger("americano")
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def eight_players():
    """Roster filling two courts exactly."""
    return [f"P{i}" for i in range(1, 9)]


@pytest.fixture
def ten_players():
    """Two courts with two players pausing each round."""
    return [f"P{i}" for i in range(1, 11)]


@pytest.fixture
def default_config(eight_players):
    """8 players, 2 courts, 10 rounds."""
    return ScheduleConfig(player_ids=eight_players, courts=2, total_rounds=10)


@pytest.fixture
def first_round():
    """Round 1 of an 8-player schedule: (P1,P2) v (P3,P4), (P5,P6) v (P7,P8)."""
    return GeneratedRound(
        round_number=1,
        matches=[
            MatchAssignment(court_index=0, team1=("P1", "P2"), team2=("P3", "P4")),
            MatchAssignment(court_index=1, team1=("P5", "P6"), team2=("P7", "P8")),
        ],
        paused_player_ids=[],
    )

"""Shared mock contracts for peg oracle tests."""

from unittest.mock import MagicMock

import pytest

NOW = 1_700_000_000


def _mock_feed(
    answer: int,
    updated_at: int = NOW,
    decimals: int = 8,
    round_id: int = 10,
    answered_in_round: int | None = None,
    started_at: int | None = None,
) -> MagicMock:
    """Build a mock aggregator contract answering latestRoundData/latestAnswer."""
    contract = MagicMock()
    contract.functions.decimals.return_value.call.return_value = decimals
    contract.functions.latestAnswer.return_value.call.return_value = answer
    contract.functions.latestRoundData.return_value.call.return_value = (
        round_id,
        answer,
        updated_at if started_at is None else started_at,
        updated_at,
        round_id if answered_in_round is None else answered_in_round,
    )
    return contract


def _mock_sequencer(status: int = 0, started_at: int = NOW - 7200) -> MagicMock:
    """Build a mock sequencer uptime feed."""
    contract = MagicMock()
    contract.functions.latestRoundData.return_value.call.return_value = (
        1,
        status,
        started_at,
        started_at,
        1,
    )
    return contract


@pytest.fixture
def make_feed():
    """Factory for mock aggregator feed contracts."""
    return _mock_feed


@pytest.fixture
def make_sequencer():
    """Factory for mock sequencer uptime feed contracts."""
    return _mock_sequencer

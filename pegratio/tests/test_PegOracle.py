"""Unit tests for PegOracle."""

from unittest.mock import MagicMock

import pytest

from pegratio.src.errors import InvalidOutputDecimalsError, LegDecimalsMismatchError
from pegratio.src.PegOracle import PegOracle
from pegratio.src.Reading import BlockContext, LegPolicy
from pegratio.src.SequencerGate import SequencerGate
from pegratio.src.sources import FeedSource, GetRateSource

NOW = 1_700_000_000
E8 = 10**8
E18 = 10**18
GRACE = 3600


def fixed_context(block: int = 19_000_000, timestamp: int = NOW):
    """Context function pinned to one block."""
    return lambda: BlockContext(block_identifier=block, timestamp=timestamp)


class TestPegOracleInit:
    """Test PegOracle construction."""

    def test_output_scale(self, make_feed) -> None:
        """output_scale() reports the configured precision."""
        oracle = PegOracle(
            FeedSource(make_feed(answer=E8), 8),
            FeedSource(make_feed(answer=E8), 8),
            output_decimals=8,
        )
        assert oracle.output_scale() == 8

    def test_default_output_scale(self, make_feed) -> None:
        """Default precision is 18 decimals."""
        oracle = PegOracle(FeedSource(make_feed(answer=E8), 8), FeedSource(make_feed(answer=E8), 8))
        assert oracle.output_scale() == 18

    def test_leg_decimals_mismatch(self, make_feed) -> None:
        """Legs with different scales are rejected."""
        with pytest.raises(LegDecimalsMismatchError, match="must share one scale"):
            PegOracle(
                FeedSource(make_feed(answer=E8, decimals=8), 8),
                GetRateSource(MagicMock(), 18),
            )

    def test_invalid_output_decimals(self, make_feed) -> None:
        """Negative output precision is rejected."""
        with pytest.raises(InvalidOutputDecimalsError):
            PegOracle(
                FeedSource(make_feed(answer=E8), 8),
                FeedSource(make_feed(answer=E8), 8),
                output_decimals=-1,
            )

    def test_default_description(self, make_feed) -> None:
        """Description falls back to the leg labels."""
        oracle = PegOracle(FeedSource(make_feed(answer=E8), 8), FeedSource(make_feed(answer=E8), 8))
        assert oracle.description == "feed / feed"


class TestPegOracleEvaluate:
    """Test evaluation against mocked feeds."""

    def _oracle(self, numerator, denominator, gate=None, **policies) -> PegOracle:
        return PegOracle(
            FeedSource(numerator, 8, policies.get("numerator_policy")),
            FeedSource(denominator, 8, policies.get("denominator_policy")),
            output_decimals=18,
            sequencer_gate=gate,
            context_fn=fixed_context(),
            description="stETH/ETH",
        )

    def test_perfect_peg(self, make_feed) -> None:
        """Equal legs evaluate to exactly 1e18."""
        oracle = self._oracle(make_feed(answer=100_000 * E8), make_feed(answer=100_000 * E8))
        assert oracle.evaluate() == E18

    def test_depegged(self, make_feed) -> None:
        """A 1% discount evaluates to 0.99e18."""
        oracle = self._oracle(make_feed(answer=99_000 * E8), make_feed(answer=100_000 * E8))
        assert oracle.evaluate() == 990_000_000_000_000_000

    def test_negative_answer_is_sentinel(self, make_feed) -> None:
        """A negative leg evaluates to 0."""
        oracle = self._oracle(make_feed(answer=-1), make_feed(answer=100_000 * E8))
        assert oracle.evaluate() == 0
        assert oracle.evaluate_result().reason == "numerator_non_positive_value"

    def test_stale_leg_is_sentinel(self, make_feed) -> None:
        """A stale leg evaluates to 0."""
        oracle = self._oracle(
            make_feed(answer=E8, updated_at=NOW - 86_401),
            make_feed(answer=E8),
            numerator_policy=LegPolicy(staleness_threshold=86_400),
        )
        assert oracle.evaluate() == 0

    def test_stale_round_is_sentinel(self, make_feed) -> None:
        """A carried-over answer evaluates to 0 when the round check is on."""
        oracle = self._oracle(
            make_feed(answer=E8),
            make_feed(answer=E8, round_id=9, answered_in_round=8),
            denominator_policy=LegPolicy(require_current_round=True),
        )
        assert oracle.evaluate_result().reason == "denominator_stale_round"

    def test_reads_pinned_to_one_block(self, make_feed) -> None:
        """Both legs are read at the context's block."""
        numerator = make_feed(answer=E8)
        denominator = make_feed(answer=E8)
        self._oracle(numerator, denominator).evaluate()
        numerator.functions.latestRoundData.return_value.call.assert_called_once_with(
            block_identifier=19_000_000
        )
        denominator.functions.latestRoundData.return_value.call.assert_called_once_with(
            block_identifier=19_000_000
        )

    def test_idempotent(self, make_feed) -> None:
        """Repeated evaluations against unchanged state agree."""
        oracle = self._oracle(make_feed(answer=101_000 * E8), make_feed(answer=100_000 * E8))
        first = oracle.evaluate()
        assert first == 1_010_000_000_000_000_000
        assert oracle.evaluate() == first
        assert oracle.evaluate() == first

    def test_not_cached(self, make_feed) -> None:
        """Every evaluation re-reads the sources."""
        numerator = make_feed(answer=100_000 * E8)
        oracle = self._oracle(numerator, make_feed(answer=100_000 * E8))
        assert oracle.evaluate() == E18

        numerator.functions.latestRoundData.return_value.call.return_value = (11, 99_000 * E8, NOW, NOW, 11)
        assert oracle.evaluate() == 990_000_000_000_000_000

    def test_feed_against_rate(self, make_feed) -> None:
        """A feed leg can be combined with a rate leg at the same scale."""
        rate = MagicMock()
        rate.functions.getRate.return_value.call.return_value = 1_200_000_000_000_000_000
        oracle = PegOracle(
            FeedSource(make_feed(answer=1_180_000_000_000_000_000, decimals=18), 18),
            GetRateSource(rate, 18),
            context_fn=fixed_context(),
        )
        assert oracle.evaluate() == 1_180_000_000_000_000_000 * E18 // 1_200_000_000_000_000_000


class TestPegOracleSequencer:
    """Test the sequencer gate inside evaluation."""

    def _oracle(self, make_feed, sequencer, numerator_answer: int = E8) -> tuple[PegOracle, MagicMock, MagicMock]:
        numerator = make_feed(answer=numerator_answer)
        denominator = make_feed(answer=E8)
        oracle = PegOracle(
            FeedSource(numerator, 8),
            FeedSource(denominator, 8),
            sequencer_gate=SequencerGate(sequencer, GRACE),
            context_fn=fixed_context(),
        )
        return oracle, numerator, denominator

    def test_up_past_grace(self, make_feed, make_sequencer) -> None:
        """A healthy sequencer lets the ratio through."""
        oracle, _, _ = self._oracle(make_feed, make_sequencer(started_at=NOW - GRACE - 1))
        assert oracle.evaluate() == E18

    def test_at_grace_boundary(self, make_feed, make_sequencer) -> None:
        """Exactly at the grace period the ratio is unavailable."""
        oracle, _, _ = self._oracle(make_feed, make_sequencer(started_at=NOW - GRACE))
        result = oracle.evaluate_result()
        assert result.answer == 0
        assert result.reason == "sequencer_unavailable"

    def test_down_short_circuits(self, make_feed, make_sequencer) -> None:
        """A down sequencer returns 0 without reading either leg."""
        oracle, numerator, denominator = self._oracle(make_feed, make_sequencer(status=1))
        assert oracle.evaluate() == 0
        numerator.functions.latestRoundData.assert_not_called()
        denominator.functions.latestRoundData.assert_not_called()

    def test_uninitialized_short_circuits(self, make_feed, make_sequencer) -> None:
        """An uninitialized uptime feed returns 0 without reading either leg."""
        oracle, numerator, denominator = self._oracle(make_feed, make_sequencer(started_at=0))
        assert oracle.evaluate() == 0
        numerator.functions.latestRoundData.assert_not_called()
        denominator.functions.latestRoundData.assert_not_called()

    def test_gate_does_not_mask_invalid_legs(self, make_feed, make_sequencer) -> None:
        """A passing gate still leaves leg validation in place."""
        oracle, _, _ = self._oracle(make_feed, make_sequencer(), numerator_answer=0)
        assert oracle.evaluate() == 0

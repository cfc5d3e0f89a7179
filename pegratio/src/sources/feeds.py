"""Chainlink-style aggregator feed sources.

Contract: AggregatorV2V3Interface
Timestamped: ``latestRoundData()`` (kind "feed")
Untimestamped: ``latestAnswer()`` (kind "answer")
"""

from ..Reading import BlockIdentifier, Reading
from .base import BaseSource, register_source


@register_source
class FeedSource(BaseSource):
    """Source reading ``latestRoundData()`` from an aggregator feed.

    Supports staleness and round-consistency checks.
    """

    kind = "feed"
    abi_name = "AggregatorV2V3Interface"
    timestamped = True

    def _load_decimals(self) -> int:
        return self.contract.functions.decimals().call()

    def read(self, block_identifier: BlockIdentifier = "latest") -> Reading:
        """Read the latest round from the feed.

        :param block_identifier: Block to read at (default: latest).
        :returns: Timestamped reading.
        """
        round_id, answer, started_at, updated_at, answered_in_round = (
            self.contract.functions.latestRoundData().call(block_identifier=block_identifier)
        )
        return Reading(
            value=answer,
            decimals=self.decimals,
            updated_at=updated_at,
            started_at=started_at,
            round_id=round_id,
            answered_in_round=answered_in_round,
        )


@register_source
class AnswerSource(BaseSource):
    """Source reading the bare ``latestAnswer()`` of an aggregator feed."""

    kind = "answer"
    abi_name = "AggregatorV2V3Interface"

    def _load_decimals(self) -> int:
        return self.contract.functions.decimals().call()

    def read(self, block_identifier: BlockIdentifier = "latest") -> Reading:
        answer = self.contract.functions.latestAnswer().call(block_identifier=block_identifier)
        return Reading(value=answer, decimals=self.decimals)

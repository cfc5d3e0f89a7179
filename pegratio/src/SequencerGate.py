"""SequencerGate: Blocks evaluation while an L2 sequencer is unavailable.

The gate reads a Chainlink sequencer uptime feed. Its ``latestRoundData()``
answer is 0 while the sequencer is up and nonzero while it is down, and
``startedAt`` is the time the current status began. A ``startedAt`` of zero
means the feed itself has not been initialized.

Readings are distrusted for a grace period after every restart:

.. code-block:: python

    >>> gate = SequencerGate(uptime_feed, grace_period=3600)
    >>> gate.is_usable(BlockContext("latest", timestamp=started_at + 3600))
    False
    >>> gate.is_usable(BlockContext("latest", timestamp=started_at + 3601))
    True
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import (
    GracePeriodWithoutSequencerFeedError,
    InvalidGracePeriodError,
    SequencerFeedWithoutGracePeriodError,
)
from .Reading import BlockContext

logger = logging.getLogger(__name__)

SEQUENCER_UP = 0


class SequencerGate:
    """Sequencer uptime check with a post-restart grace period.

    :ivar feed: Web3 contract of the sequencer uptime feed.
    :ivar grace_period: Seconds the sequencer must have been up before readings count.
    """

    def __init__(self, feed: Any, grace_period: int) -> None:
        """Initialize the gate.

        :param feed: Sequencer uptime feed contract.
        :param grace_period: Grace period in seconds.
        :raises InvalidGracePeriodError: If grace_period is negative or not an integer.
        """
        if isinstance(grace_period, bool) or not isinstance(grace_period, int) or grace_period < 0:
            raise InvalidGracePeriodError(
                f"grace_period must be a non-negative integer, got {grace_period!r}"
            )
        self.feed = feed
        self.grace_period = grace_period

    @classmethod
    def from_config(cls, feed: Any | None, grace_period: int | None) -> SequencerGate | None:
        """Build a gate from an optional feed and grace period.

        Both must be given together, or both left out.

        :param feed: Sequencer uptime feed contract, or None.
        :param grace_period: Grace period in seconds, or None.
        :returns: Configured gate, or None if neither is given.
        :raises SequencerFeedWithoutGracePeriodError: If only the feed is given.
        :raises GracePeriodWithoutSequencerFeedError: If only the grace period is given.
        """
        if feed is None and grace_period is None:
            return None
        if grace_period is None:
            raise SequencerFeedWithoutGracePeriodError(
                "A sequencer uptime feed requires a grace period"
            )
        if feed is None:
            raise GracePeriodWithoutSequencerFeedError(
                "A grace period requires a sequencer uptime feed"
            )
        return cls(feed, grace_period)

    def is_usable(self, context: BlockContext) -> bool:
        """Check whether readings can be trusted at the given block.

        :param context: Block snapshot of the current evaluation.
        :returns: True if the sequencer is up and past its grace period.
        """
        _, status, started_at, _, _ = self.feed.functions.latestRoundData().call(
            block_identifier=context.block_identifier
        )

        if started_at == 0:
            logger.debug("Sequencer uptime feed is not initialized")
            return False

        if status != SEQUENCER_UP:
            logger.debug(f"Sequencer is down (status={status})")
            return False

        elapsed = context.timestamp - started_at
        if elapsed <= self.grace_period:
            logger.debug(
                f"Sequencer restarted {elapsed}s ago, within {self.grace_period}s grace period"
            )
            return False

        return True

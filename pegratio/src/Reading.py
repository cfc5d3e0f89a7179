"""Reading: a single observation taken from an upstream source.

A reading is either timestamped (Chainlink-style ``latestRoundData``) or
untimestamped (a bare answer or a live exchange rate). Whether it can be
trusted is decided by :func:`check_reading` against the leg's
:class:`LegPolicy` and the evaluation's :class:`BlockContext`.

.. code-block:: python

    >>> reading = Reading(value=100_000 * 10**8, decimals=8, updated_at=1_700_000_000)
    >>> policy = LegPolicy(staleness_threshold=3600)
    >>> check_reading(reading, policy, now=1_700_003_600) is None
    True
    >>> check_reading(reading, policy, now=1_700_003_601)
    'stale'
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Union

from .errors import InvalidStalenessThresholdError

BlockIdentifier = Union[str, int]


@dataclass(frozen=True)
class Reading:
    """A value read from a source, normalized to the source's decimal scale.

    :ivar value: Raw integer value at ``decimals`` precision. May be zero or negative.
    :ivar decimals: Decimal scale of ``value``.
    :ivar updated_at: Unix timestamp of the last update, None if untimestamped.
    :ivar started_at: Unix timestamp the round started, None if untimestamped.
    :ivar round_id: Round the answer belongs to, None if not reported.
    :ivar answered_in_round: Round the answer was computed in, None if not reported.
    """

    value: int
    decimals: int
    updated_at: int | None = None
    started_at: int | None = None
    round_id: int | None = None
    answered_in_round: int | None = None


@dataclass(frozen=True)
class BlockContext:
    """The chain snapshot an evaluation is pinned to.

    :ivar block_identifier: Block number (or tag) every contract call uses.
    :ivar timestamp: Unix timestamp treated as "now" for staleness checks.
    """

    block_identifier: BlockIdentifier
    timestamp: int


def wallclock_context() -> BlockContext:
    """Build a context reading the latest block with the local clock as "now".

    :returns: BlockContext for the ``latest`` block tag.
    """
    return BlockContext(block_identifier="latest", timestamp=int(time.time()))


@dataclass(frozen=True)
class LegPolicy:
    """Validity rules applied to one leg's reading.

    :ivar staleness_threshold: Max tolerated age in seconds, None to skip staleness.
    :ivar require_current_round: Reject answers carried over from an older round.
    """

    staleness_threshold: int | None = None
    require_current_round: bool = False

    def __post_init__(self) -> None:
        if self.staleness_threshold is not None and (
            isinstance(self.staleness_threshold, bool)
            or not isinstance(self.staleness_threshold, int)
            or self.staleness_threshold <= 0
        ):
            raise InvalidStalenessThresholdError(
                f"staleness_threshold must be a positive integer, got {self.staleness_threshold!r}"
            )

    @property
    def needs_timestamp(self) -> bool:
        """Check if this policy can only be applied to timestamped readings."""
        return self.staleness_threshold is not None or self.require_current_round


def check_reading(reading: Reading, policy: LegPolicy, now: int) -> str | None:
    """Check a reading against a leg policy.

    :param reading: Reading to check.
    :param policy: Policy configured for the leg.
    :param now: Current unix timestamp.
    :returns: None if the reading is usable, otherwise a short reason string.
    """
    if reading.value <= 0:
        return "non_positive_value"

    if policy.staleness_threshold is not None:
        # updated_at of zero means the feed was never populated
        if not reading.updated_at:
            return "uninitialized_timestamp"
        if now - reading.updated_at > policy.staleness_threshold:
            return "stale"

    if policy.require_current_round:
        if (
            reading.round_id is None
            or reading.answered_in_round is None
            or reading.answered_in_round < reading.round_id
        ):
            return "stale_round"

    return None

"""RatioEngine: fixed-point division of two validated legs.

Algorithm:
    1. Check the numerator reading against its leg policy
    2. Check the denominator reading against its leg policy
    3. Compute floor(numerator * 10**output_decimals / denominator)
    4. Reject results outside the signed 256-bit range

Both legs share the same decimal scale, so it cancels and the result lands
exactly at ``output_decimals`` precision.

.. code-block:: python

    >>> engine = RatioEngine(output_decimals=18)
    >>> n = Reading(value=99_000 * 10**8, decimals=8)
    >>> d = Reading(value=100_000 * 10**8, decimals=8)
    >>> engine.compute(n, d, now=0).ratio
    990000000000000000
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidOutputDecimalsError
from .Reading import LegPolicy, Reading, check_reading

INT256_MAX = 2**255 - 1

# Distinguished answer meaning "no trustworthy ratio right now".
SENTINEL = 0


@dataclass(frozen=True)
class RatioResult:
    """Result of a ratio computation.

    :ivar ratio: Fixed-point ratio, or None if unavailable.
    :ivar reason: Why the ratio is unavailable, None on success.
    """

    ratio: int | None
    reason: str | None = None

    @classmethod
    def unavailable(cls, reason: str) -> RatioResult:
        """Build an unavailable result.

        :param reason: Short reason identifier (e.g., "stale").
        :returns: RatioResult without a ratio.
        """
        return cls(ratio=None, reason=reason)

    @property
    def available(self) -> bool:
        """Check if a ratio was produced."""
        return self.ratio is not None

    @property
    def answer(self) -> int:
        """Return the ratio using the zero-sentinel convention."""
        return self.ratio if self.ratio is not None else SENTINEL


class RatioEngine:
    """Combines a numerator and a denominator leg into a peg ratio.

    :ivar output_decimals: Decimal precision of the produced ratio.
    """

    def __init__(self, output_decimals: int = 18) -> None:
        """Initialize the engine.

        :param output_decimals: Decimal precision of the output (default: 18).
        :raises InvalidOutputDecimalsError: If output_decimals is negative.
        """
        if isinstance(output_decimals, bool) or not isinstance(output_decimals, int) or output_decimals < 0:
            raise InvalidOutputDecimalsError(
                f"output_decimals must be a non-negative integer, got {output_decimals!r}"
            )
        self.output_decimals = output_decimals
        self._unit = 10**output_decimals

    def compute(
        self,
        numerator: Reading,
        denominator: Reading,
        *,
        now: int,
        numerator_policy: LegPolicy | None = None,
        denominator_policy: LegPolicy | None = None,
    ) -> RatioResult:
        """Compute the ratio of two readings.

        :param numerator: Reading of the derivative asset leg.
        :param denominator: Reading of the reference asset leg.
        :param now: Current unix timestamp for staleness checks.
        :param numerator_policy: Policy for the numerator (default: value check only).
        :param denominator_policy: Policy for the denominator (default: value check only).
        :returns: RatioResult with the ratio, or an unavailable result with a reason.
        """
        reason = check_reading(numerator, numerator_policy or LegPolicy(), now)
        if reason is not None:
            return RatioResult.unavailable(f"numerator_{reason}")

        reason = check_reading(denominator, denominator_policy or LegPolicy(), now)
        if reason is not None:
            return RatioResult.unavailable(f"denominator_{reason}")

        # Both values are positive here, so floor division truncates
        ratio = numerator.value * self._unit // denominator.value
        if ratio > INT256_MAX:
            return RatioResult.unavailable("overflow")

        return RatioResult(ratio=ratio)

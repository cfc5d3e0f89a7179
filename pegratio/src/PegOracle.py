"""PegOracle: Per-asset peg ratio oracle.

This module composes the pieces of a peg ratio evaluation:
    - Optional sequencer gate, checked first
    - Numerator leg (derivative asset price or rate)
    - Denominator leg (reference asset price or rate)
    - RatioEngine combining the two legs

Every evaluation pins all contract calls to a single block and uses that
block's timestamp for staleness checks. Nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Callable

from .errors import LegDecimalsMismatchError
from .RatioEngine import RatioEngine, RatioResult
from .Reading import BlockContext, wallclock_context
from .SequencerGate import SequencerGate
from .sources import BaseSource

logger = logging.getLogger(__name__)


class PegOracle:
    """Peg ratio oracle for one derivative/reference asset pair.

    :ivar numerator: Source of the derivative asset leg.
    :ivar denominator: Source of the reference asset leg.
    :ivar engine: Ratio engine at the configured output precision.
    :ivar sequencer_gate: Optional sequencer uptime gate.
    :ivar description: Human readable label for logs.
    """

    def __init__(
        self,
        numerator: BaseSource,
        denominator: BaseSource,
        output_decimals: int = 18,
        sequencer_gate: SequencerGate | None = None,
        context_fn: Callable[[], BlockContext] | None = None,
        description: str = "",
    ) -> None:
        """Initialize the oracle.

        :param numerator: Source of the derivative asset leg.
        :param denominator: Source of the reference asset leg.
        :param output_decimals: Decimal precision of the ratio (default: 18).
        :param sequencer_gate: Optional sequencer uptime gate.
        :param context_fn: Callable returning the block snapshot for an
            evaluation (default: latest block, local clock).
        :param description: Human readable label (e.g., "wstETH/stETH").
        :raises LegDecimalsMismatchError: If the legs have different decimal scales.
        :raises InvalidOutputDecimalsError: If output_decimals is negative.
        """
        if numerator.scale() != denominator.scale():
            raise LegDecimalsMismatchError(
                f"Numerator has {numerator.scale()} decimals but denominator has "
                f"{denominator.scale()}; both legs must share one scale"
            )

        self.numerator = numerator
        self.denominator = denominator
        self.engine = RatioEngine(output_decimals)
        self.sequencer_gate = sequencer_gate
        self.context_fn = context_fn or wallclock_context
        self.description = description or f"{numerator.label} / {denominator.label}"

        logger.info(
            f"PegOracle initialized: {self.description} "
            f"(leg_decimals={numerator.scale()}, output_decimals={output_decimals}, "
            f"sequencer_gate={'on' if sequencer_gate else 'off'})"
        )

    def output_scale(self) -> int:
        """Return the decimal precision of evaluate() results."""
        return self.engine.output_decimals

    def evaluate_result(self) -> RatioResult:
        """Evaluate the peg ratio against current chain state.

        :returns: RatioResult with the ratio, or an unavailable result with a reason.
        """
        context = self.context_fn()

        if self.sequencer_gate is not None and not self.sequencer_gate.is_usable(context):
            result = RatioResult.unavailable("sequencer_unavailable")
        else:
            numerator = self.numerator.read(context.block_identifier)
            denominator = self.denominator.read(context.block_identifier)
            result = self.engine.compute(
                numerator,
                denominator,
                now=context.timestamp,
                numerator_policy=self.numerator.policy,
                denominator_policy=self.denominator.policy,
            )

        if not result.available:
            logger.debug(
                f"{self.description}: ratio unavailable ({result.reason}) "
                f"at block {context.block_identifier}"
            )
        return result

    def evaluate(self) -> int:
        """Evaluate the peg ratio, returning 0 when no trustworthy ratio exists.

        :returns: Fixed-point ratio at output_scale() decimals, or 0.
        """
        return self.evaluate_result().answer

"""OracleConfig: Declarative configuration for peg ratio oracles.

A leg is written as ``kind:address``, where kind is a registered source
kind:

.. code-block:: python

    >>> leg = LegConfig.from_string("feed:0x86392dC19c0b719886221c78AB11eb8Cf5c52812")
    >>> leg.kind
    'feed'
    >>> LegConfig.from_string("getRate:0x7f39C581F595B53c5cb19bD0b3f8dA6c935E2Ca0").kind
    'getRate'

:func:`build_oracle` wires a configuration against live contracts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .PegOracle import PegOracle
from .Reading import LegPolicy
from .SequencerGate import SequencerGate
from .sources import BaseSource, get_source_class

if TYPE_CHECKING:
    from .ContractUtility import ContractUtility

SEQUENCER_ABI = "AggregatorV2V3Interface"


@dataclass(frozen=True)
class LegConfig:
    """Configuration of one leg.

    :ivar kind: Registered source kind (e.g., "feed", "convertToAssets").
    :ivar address: Contract address backing the leg.
    :ivar expected_decimals: Decimal scale the source must report.
    :ivar staleness_threshold: Max reading age in seconds, None to skip.
    :ivar require_current_round: Reject answers carried over from older rounds.
    """

    kind: str
    address: str
    expected_decimals: int = 18
    staleness_threshold: int | None = None
    require_current_round: bool = False

    @classmethod
    def from_string(cls, leg_str: str, **kwargs: object) -> LegConfig:
        """Parse a leg string in format "kind:address".

        :param leg_str: Leg string like "feed:0xabc...".
        :param kwargs: Remaining LegConfig fields.
        :returns: New LegConfig instance.
        :raises ValueError: If the leg string format is invalid.
        """
        parts = leg_str.strip().split(":")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ValueError(
                f"Invalid leg format '{leg_str}'. Expected 'kind:address' (e.g., 'feed:0xabc...')"
            )
        return cls(kind=parts[0], address=parts[1], **kwargs)

    def policy(self) -> LegPolicy:
        """Build the validity policy for this leg."""
        return LegPolicy(
            staleness_threshold=self.staleness_threshold,
            require_current_round=self.require_current_round,
        )


@dataclass(frozen=True)
class OracleConfig:
    """Configuration of a peg ratio oracle.

    :ivar numerator: Derivative asset leg.
    :ivar denominator: Reference asset leg.
    :ivar output_decimals: Precision of the produced ratio.
    :ivar sequencer_feed: Sequencer uptime feed address, or None.
    :ivar grace_period: Sequencer grace period in seconds, or None.
    :ivar description: Label used in logs.
    """

    numerator: LegConfig
    denominator: LegConfig
    output_decimals: int = 18
    sequencer_feed: str | None = None
    grace_period: int | None = None
    description: str = ""


def build_source(contract_utility: ContractUtility, leg: LegConfig) -> BaseSource:
    """Build a source adapter for one leg.

    :param contract_utility: Utility creating web3 contract instances.
    :param leg: Leg configuration.
    :returns: Validated source adapter.
    :raises UnknownSourceKindError: If the leg kind is not registered.
    """
    source_cls = get_source_class(leg.kind)
    contract = contract_utility.get_contract(leg.address, source_cls.abi_name)
    return source_cls(contract, leg.expected_decimals, leg.policy())


def build_oracle(contract_utility: ContractUtility, config: OracleConfig) -> PegOracle:
    """Build a peg oracle reading live contracts.

    Evaluations are pinned to the latest block at call time.

    :param contract_utility: Utility creating web3 contract instances.
    :param config: Oracle configuration.
    :returns: Ready PegOracle.
    :raises ConfigurationError: If any part of the configuration is invalid.
    """
    # Sequencer pairing is checked before either leg is built
    sequencer_feed = None
    if config.sequencer_feed is not None:
        sequencer_feed = contract_utility.get_contract(config.sequencer_feed, SEQUENCER_ABI)
    sequencer_gate = SequencerGate.from_config(sequencer_feed, config.grace_period)

    return PegOracle(
        numerator=build_source(contract_utility, config.numerator),
        denominator=build_source(contract_utility, config.denominator),
        output_decimals=config.output_decimals,
        sequencer_gate=sequencer_gate,
        context_fn=contract_utility.block_context,
        description=config.description,
    )

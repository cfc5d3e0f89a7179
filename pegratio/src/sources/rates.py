"""Live exchange-rate sources computed from holding/vault contracts.

These sources are untimestamped: the call itself observes current state, so
staleness and round checks do not apply. Rates are unsigned, and a zero rate
is rejected by the ordinary non-positive value check.

Kinds:
    - getRate: rate provider ``getRate()``
    - getExchangeRate: ``getExchangeRate()``
    - convertToAssets: ERC-4626 ``convertToAssets(10**share_decimals)`` in asset decimals
    - tvl: ``totalValueLocked() * 10**decimals // totalSupply()``
"""

from typing import Any

from ..Reading import BlockIdentifier, LegPolicy, Reading
from .base import BaseSource, register_source

# Precision rate providers report in unless configured otherwise.
RATE_DECIMALS = 18


class RateSource(BaseSource):
    """Base class for rate sources with a declared, fixed precision.

    :ivar rate_decimals: Precision the contract reports rates in.
    """

    def __init__(
        self,
        contract: Any,
        expected_decimals: int,
        policy: LegPolicy | None = None,
        rate_decimals: int = RATE_DECIMALS,
    ) -> None:
        """Initialize the rate source.

        :param contract: Web3 contract instance.
        :param expected_decimals: Decimal scale this leg must have.
        :param policy: Validity rules (default: value check only).
        :param rate_decimals: Precision of the reported rate (default: 18).
        """
        self.rate_decimals = rate_decimals
        super().__init__(contract, expected_decimals, policy)

    def _load_decimals(self) -> int:
        return self.rate_decimals


@register_source
class GetRateSource(RateSource):
    """Rate provider exposing ``getRate()``."""

    kind = "getRate"
    abi_name = "RateProvider"

    def read(self, block_identifier: BlockIdentifier = "latest") -> Reading:
        rate = self.contract.functions.getRate().call(block_identifier=block_identifier)
        return Reading(value=rate, decimals=self.decimals)


@register_source
class ExchangeRateSource(RateSource):
    """Token exposing ``getExchangeRate()``."""

    kind = "getExchangeRate"
    abi_name = "ExchangeRateProvider"

    def read(self, block_identifier: BlockIdentifier = "latest") -> Reading:
        rate = self.contract.functions.getExchangeRate().call(block_identifier=block_identifier)
        return Reading(value=rate, decimals=self.decimals)


@register_source
class ConvertToAssetsSource(BaseSource):
    """ERC-4626 vault converting one whole share into underlying assets.

    One whole share is sized by the vault's own ``decimals()``, while the
    converted amount is denominated in the underlying ``asset()`` token. The
    leg scale is therefore the asset token's ``decimals()``.

    :ivar share_decimals: Decimal precision of vault shares.
    """

    kind = "convertToAssets"
    abi_name = "ERC4626"

    def _load_decimals(self) -> int:
        functions = self.contract.functions
        self.share_decimals = functions.decimals().call()
        asset_address = functions.asset().call()
        # The ERC-4626 ABI includes the ERC-20 decimals() the asset token exposes
        asset = self.contract.w3.eth.contract(address=asset_address, abi=self.contract.abi)
        return asset.functions.decimals().call()

    def read(self, block_identifier: BlockIdentifier = "latest") -> Reading:
        one_share = 10**self.share_decimals
        assets = self.contract.functions.convertToAssets(one_share).call(
            block_identifier=block_identifier
        )
        return Reading(value=assets, decimals=self.decimals)


@register_source
class TotalValueSource(RateSource):
    """Holding contract whose rate is total value locked over total supply."""

    kind = "tvl"
    abi_name = "TotalValueVault"

    def read(self, block_identifier: BlockIdentifier = "latest") -> Reading:
        """Compute the per-unit value from TVL and supply.

        :param block_identifier: Block to read at (default: latest).
        :returns: Untimestamped reading at rate_decimals precision.
        :raises ZeroDivisionError: If total supply is zero.
        """
        functions = self.contract.functions
        total_value = functions.totalValueLocked().call(block_identifier=block_identifier)
        total_supply = functions.totalSupply().call(block_identifier=block_identifier)
        # TODO: decide whether zero supply with nonzero TVL is reachable; until
        # then the ZeroDivisionError propagates like a failed contract call.
        rate = total_value * 10**self.decimals // total_supply
        return Reading(value=rate, decimals=self.decimals)

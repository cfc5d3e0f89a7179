"""
Leg sources for peg ratio oracles.

This module provides a unified interface for reading one leg of a peg ratio
from on-chain feeds and rate providers.

Usage:
    from pegratio.src.sources import get_source_class, get_available_sources

    # Get list of available source kinds
    available = get_available_sources()
    # ['answer', 'convertToAssets', 'feed', 'getExchangeRate', 'getRate', 'tvl']

    # Wrap a web3 contract as a timestamped leg
    source_cls = get_source_class("feed")
    source = source_cls(contract, expected_decimals=8, policy=LegPolicy(staleness_threshold=86400))
    reading = source.read()
"""

# Import base classes and utilities
from .base import (
    SOURCE_REGISTRY,
    BaseSource,
    get_available_sources,
    get_source_class,
    register_source,
)

# Import all source implementations to trigger registration
from .feeds import AnswerSource, FeedSource
from .rates import (
    RATE_DECIMALS,
    ConvertToAssetsSource,
    ExchangeRateSource,
    GetRateSource,
    RateSource,
    TotalValueSource,
)

__all__ = [
    # Base classes
    "BaseSource",
    "RateSource",
    # Registry functions
    "register_source",
    "get_source_class",
    "get_available_sources",
    "SOURCE_REGISTRY",
    "RATE_DECIMALS",
    # Source implementations
    "AnswerSource",
    "ConvertToAssetsSource",
    "ExchangeRateSource",
    "FeedSource",
    "GetRateSource",
    "TotalValueSource",
]

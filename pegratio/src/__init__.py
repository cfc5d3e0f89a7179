"""
Peg Ratio Oracle - Ratio Computation Engine

This module provides the peg ratio between a derivative asset and its
reference asset:
- Reading: Source observations, leg policies and block snapshots
- RatioEngine: Fixed-point division with validity and staleness checks
- SequencerGate: L2 sequencer uptime gate with grace period
- PegOracle: Per-asset composition of legs, gate and engine
- OracleConfig: Declarative leg/oracle configuration and wiring
- sources: Modular leg source implementations
"""

from .errors import ConfigurationError, PegOracleError
from .OracleConfig import LegConfig, OracleConfig, build_oracle
from .PegOracle import PegOracle
from .RatioEngine import SENTINEL, RatioEngine, RatioResult
from .Reading import BlockContext, LegPolicy, Reading
from .SequencerGate import SequencerGate

__all__ = [
    "BlockContext",
    "ConfigurationError",
    "LegConfig",
    "LegPolicy",
    "OracleConfig",
    "PegOracle",
    "PegOracleError",
    "RatioEngine",
    "RatioResult",
    "Reading",
    "SENTINEL",
    "SequencerGate",
    "build_oracle",
]

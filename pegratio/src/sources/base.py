"""Base source interface and the source kind registry.

Every leg of a peg oracle is backed by one source adapter. Adapters wrap a
web3 contract, validate its decimal scale once at construction and return a
:class:`~pegratio.src.Reading.Reading` on every ``read()``.

.. code-block:: python

    @register_source
    class MySource(BaseSource):
        kind = "mysource"
        abi_name = "MyRateProvider"

        def _load_decimals(self) -> int:
            return 18

        def read(self, block_identifier="latest") -> Reading:
            value = self.contract.functions.myRate().call(block_identifier=block_identifier)
            return Reading(value=value, decimals=self.decimals)
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from ..errors import UnknownSourceKindError, UntimestampedSourceError, WrongDecimalsError
from ..Reading import BlockIdentifier, LegPolicy, Reading


class BaseSource(ABC):
    """Abstract base class for leg sources.

    Subclasses must implement:
        - kind: Class variable identifying the source kind (e.g., "feed", "getRate")
        - _load_decimals(): Decimal scale of the values the source returns
        - read(): Read the current value

    :cvar kind: Unique identifier for this source kind.
    :cvar abi_name: Name of the bundled ABI the contract is built with.
    :cvar timestamped: Whether readings carry update timestamps.
    :ivar contract: Web3 contract instance backing the source.
    :ivar policy: Validity rules for readings from this source.
    :ivar decimals: Validated decimal scale of the source.
    """

    kind: ClassVar[str] = ""
    abi_name: ClassVar[str] = ""
    timestamped: ClassVar[bool] = False

    def __init__(
        self,
        contract: Any,
        expected_decimals: int,
        policy: LegPolicy | None = None,
    ) -> None:
        """Initialize the source and validate its configuration.

        :param contract: Web3 contract instance.
        :param expected_decimals: Decimal scale this leg must have.
        :param policy: Validity rules (default: value check only).
        :raises UntimestampedSourceError: If policy needs timestamps this source lacks.
        :raises WrongDecimalsError: If the source scale differs from expected_decimals.
        """
        self.contract = contract
        self.policy = policy or LegPolicy()

        if self.policy.needs_timestamp and not self.timestamped:
            raise UntimestampedSourceError(
                f"{self.kind} sources carry no timestamp; "
                "staleness and round checks cannot be configured"
            )

        self.decimals = self._load_decimals()
        if self.decimals != expected_decimals:
            raise WrongDecimalsError(expected_decimals, self.decimals, source=self.label)

    @property
    def label(self) -> str:
        """Return a short description for logs and error messages."""
        address = getattr(self.contract, "address", None)
        return f"{self.kind}:{address}" if isinstance(address, str) else self.kind

    def scale(self) -> int:
        """Return the decimal scale of values read from this source."""
        return self.decimals

    @abstractmethod
    def _load_decimals(self) -> int:
        """Determine the decimal scale of the source.

        :returns: Number of decimals.
        """
        pass

    @abstractmethod
    def read(self, block_identifier: BlockIdentifier = "latest") -> Reading:
        """Read the current value.

        Contract call failures are not caught here.

        :param block_identifier: Block to read at (default: latest).
        :returns: Reading at this source's decimal scale.
        """
        pass


# Registry of available source kinds (populated by subclass imports)
SOURCE_REGISTRY: dict[str, type[BaseSource]] = {}


def register_source(cls: type[BaseSource]) -> type[BaseSource]:
    """Decorator to register a source class in the global registry.

    :param cls: Source class to register.
    :returns: The registered class (unchanged).
    :raises ValueError: If the source has no kind defined.
    """
    if not cls.kind:
        raise ValueError(f"Source {cls.__name__} must define a 'kind' class variable")
    SOURCE_REGISTRY[cls.kind] = cls
    return cls


def get_source_class(kind: str) -> type[BaseSource]:
    """Look up a source class by kind.

    :param kind: Source kind (e.g., "feed", "getRate").
    :returns: Registered source class.
    :raises UnknownSourceKindError: If the kind is not registered.
    """
    if kind not in SOURCE_REGISTRY:
        available = ", ".join(sorted(SOURCE_REGISTRY.keys()))
        raise UnknownSourceKindError(f"Unknown source kind '{kind}'. Available: {available}")
    return SOURCE_REGISTRY[kind]


def get_available_sources() -> list[str]:
    """Get list of available source kinds.

    :returns: Sorted list of registered source kinds.
    """
    return sorted(SOURCE_REGISTRY.keys())

"""Configuration errors raised while building a peg oracle.

Every invariant checked at construction time has its own exception class so
callers (and tests) can tell exactly which one was violated. Data-quality
problems found while evaluating never raise; they produce an unavailable
:class:`~pegratio.src.RatioEngine.RatioResult` instead.
"""


class PegOracleError(Exception):
    """Base exception for peg oracle errors."""

    pass


class ConfigurationError(PegOracleError):
    """Raised when an oracle is constructed with invalid parameters."""

    pass


class WrongDecimalsError(ConfigurationError):
    """Raised when a source reports a decimal scale other than the expected one.

    :ivar expected: Decimal scale the leg was configured for.
    :ivar actual: Decimal scale reported by the source.
    """

    def __init__(self, expected: int, actual: int, source: str = ""):
        """Initialize the error.

        :param expected: Expected decimal scale.
        :param actual: Decimal scale reported by the source.
        :param source: Optional source label for the message.
        """
        self.expected = expected
        self.actual = actual
        label = f"{source}: " if source else ""
        super().__init__(f"{label}expected {expected} decimals, source reports {actual}")


class LegDecimalsMismatchError(ConfigurationError):
    """Raised when the numerator and denominator legs use different scales."""

    pass


class InvalidStalenessThresholdError(ConfigurationError):
    """Raised when a staleness threshold is not a positive number of seconds."""

    pass


class UntimestampedSourceError(ConfigurationError):
    """Raised when a timestamp-based check is configured on an untimestamped source."""

    pass


class SequencerFeedWithoutGracePeriodError(ConfigurationError):
    """Raised when a sequencer feed is given without a grace period."""

    pass


class GracePeriodWithoutSequencerFeedError(ConfigurationError):
    """Raised when a grace period is given without a sequencer feed."""

    pass


class InvalidGracePeriodError(ConfigurationError):
    """Raised when the sequencer grace period is negative."""

    pass


class InvalidOutputDecimalsError(ConfigurationError):
    """Raised when the output precision is negative."""

    pass


class UnknownSourceKindError(ConfigurationError):
    """Raised when a leg names a source kind that is not registered."""

    pass

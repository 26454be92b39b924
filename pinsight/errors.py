"""Exception hierarchy for pinsight.

Unresolved tickers and currencies are not errors: they are carried as
placeholders until the user supplies the missing data.
"""


class PinsightError(Exception):
    """Base exception for all pinsight errors."""

    pass


class ValidationError(PinsightError, ValueError):
    """Raised when user-entered allocation text breaks a percentage rule.

    Examples:
        - A single asset class above 100%
        - Explicit percentages summing past 100%
        - A split that cannot be completed to exactly 100%
    """

    pass


class SourceUnavailable(PinsightError):
    """Raised when a position source cannot produce an account snapshot.

    Examples:
        - Account name missing
        - Holdings file without symbol or value columns
    """

    pass


class ConfigError(PinsightError):
    """Raised when a config file exists but cannot be used.

    Schema problems surface as pydantic's ValidationError instead; this
    covers files that are not YAML mappings at all.
    """

    pass


class StorageError(PinsightError):
    """Raised when the on-disk schema cannot be brought up to date."""

    pass

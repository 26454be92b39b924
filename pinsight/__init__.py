"""pinsight -- multi-brokerage portfolio allocation tracker."""

__version__ = "0.3.0"

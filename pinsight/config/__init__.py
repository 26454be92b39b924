"""Configuration loading, validation, and defaults."""

from pinsight.config.loader import load_config
from pinsight.config.schema import PinsightConfig

__all__ = ["load_config", "PinsightConfig"]

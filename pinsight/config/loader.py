"""Load pinsight.yaml into a validated PinsightConfig.

String values may reference the environment as ``${VAR}`` or
``${VAR:-fallback}``; unset variables without a fallback become "".
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from pinsight.config.schema import PinsightConfig
from pinsight.errors import ConfigError

logger = logging.getLogger(__name__)

_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def search_paths() -> list[Path]:
    """Places a config file is looked for when none is given, in order."""
    return [Path("pinsight.yaml"), Path("~/.pinsight/config.yaml").expanduser()]


def expand_env(value: Any) -> Any:
    """Substitute environment references throughout a parsed YAML tree."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    return value


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse one YAML file into a mapping, expanding env references.

    Raises:
        ConfigError: The file holds something other than a mapping.
    """
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level, got {type(raw).__name__}")
    return expand_env(raw)


def _locate(explicit: str | Path | None) -> Path | None:
    if explicit is not None:
        path = Path(explicit).expanduser()
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return None
        return path
    return next((p for p in search_paths() if p.exists()), None)


def load_config(path: str | Path | None = None) -> PinsightConfig:
    """Load and validate configuration.

    An explicit ``path`` wins; otherwise ``./pinsight.yaml`` then
    ``~/.pinsight/config.yaml`` are tried. With no file at all every
    setting takes its default.

    Raises:
        ConfigError: The file is not a YAML mapping.
        pydantic.ValidationError: A value fails the schema.
    """
    config_path = _locate(path)
    if config_path is None:
        logger.debug("No config file, using defaults")
        raw: dict[str, Any] = {}
    else:
        logger.info("Loading config from %s", config_path)
        raw = read_config_file(config_path)

    return PinsightConfig.model_validate(raw)


def resolve_path(path_str: str) -> Path:
    """Expand ``~`` in a configured path and make it absolute."""
    return Path(path_str).expanduser().resolve()

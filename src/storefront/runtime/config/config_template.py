"""Loading of ``config.yaml`` with environment placeholders.

Placeholders follow shell parameter expansion:

- ``${NAME}`` must be set.
- ``${NAME:-fallback}`` uses ``fallback`` when ``NAME`` is unset.
- ``${NAME:?message}`` must be set and fails with ``message`` otherwise.

An empty expansion leaves the YAML value null, so the model default applies.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.storefront.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def _resolve_placeholder(expression: str) -> str:
    name, sep, rest = expression.partition(":-")
    if sep:
        return os.getenv(name, rest)

    name, sep, message = expression.partition(":?")
    value = os.getenv(name)
    if value is not None:
        return value
    if sep:
        raise ValueError(f"Required environment variable {name}: {message}")
    raise ValueError(f"Required environment variable {name} not set")


def substitute_env_vars(text: str) -> str:
    """Expand every ``${...}`` placeholder in ``text`` from ``os.environ``."""
    return _PLACEHOLDER.sub(lambda match: _resolve_placeholder(match.group(1)), text)


def apply_environment_prefix(env_mode: str) -> None:
    """Copy ``<ENV>_NAME`` variables onto ``NAME`` for the active environment."""
    prefix = f"{env_mode.upper()}_"
    promoted = {
        name[len(prefix):]: value
        for name, value in os.environ.items()
        if name.startswith(prefix) and len(name) > len(prefix)
    }
    for name, value in promoted.items():
        os.environ[name] = value
        logger.debug("Set environment variable {} from {}{}", name, prefix, name)


def _parse_document(text: str) -> dict[str, Any]:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not document:
        raise ValueError("Configuration file is empty")
    if not isinstance(document, dict):
        raise ValueError("Configuration file must contain a mapping")
    return document.get("config") or {}


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read ``file_path``, expand its placeholders and validate it.

    Raises:
        ValueError: If a required variable is missing, the YAML is malformed,
            or the document does not match ``ConfigData``.
        FileNotFoundError: If the file does not exist.
    """
    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)
    apply_environment_prefix(env_mode)

    section = _parse_document(substitute_env_vars(Path(file_path).read_text()))
    try:
        return ConfigData.model_validate(section)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

"""config.yaml loading with environment variable templating."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.rel.runtime.config.config_data import ConfigData

# ${NAME}, ${NAME:-default} or ${NAME:?message}
_PLACEHOLDER = re.compile(r"\$\{(?P<name>[^}:]+)(?:(?P<op>:[-?])(?P<arg>[^}]*))?\}")


def substitute_env_vars(text: str) -> str:
    """
    Replace ``${...}`` placeholders with values from the environment.

    ``${NAME:-default}`` falls back to ``default``; ``${NAME}`` and
    ``${NAME:?message}`` raise ValueError when ``NAME`` is unset.
    """

    def replace(match: re.Match) -> str:
        name, op, arg = match.group("name", "op", "arg")
        value = os.getenv(name)
        if value is not None:
            return value
        if op == ":-":
            return arg
        if op == ":?":
            raise ValueError(f"Required environment variable {name}: {arg}")
        raise ValueError(f"Required environment variable {name} not set")

    return _PLACEHOLDER.sub(replace, text)


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_NAME`` variables to ``NAME`` for the active environment."""
    prefix = f"{env_mode.upper()}_"
    promoted = {var[len(prefix):]: value for var, value in os.environ.items() if var.startswith(prefix)}
    if promoted:
        logger.debug("Applying {} overrides: {}", env_mode, sorted(promoted))
    os.environ.update(promoted)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load and validate a templated config.yaml.

    Raises:
        ValueError: If a required variable is missing or the file is invalid
        FileNotFoundError: If the file doesn't exist
    """
    content = Path(file_path).read_text()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.debug("Loading configuration for environment: {}", env_mode)
    apply_environment_overrides(env_mode)

    try:
        loaded = yaml.safe_load(substitute_env_vars(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError(f"Failed to parse YAML: {file_path} is empty")

    try:
        return ConfigData(**loaded.get("config", {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

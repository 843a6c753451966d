"""Process-wide configuration, held in a ContextVar so tests can scope overrides."""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from src.rel.runtime.config.config_data import ConfigData
from src.rel.runtime.config.config_template import load_templated_yaml

CONFIG_PATH = Path("config.yaml")


@dataclass
class AppContext:
    """State shared by every command of one process."""

    config: ConfigData


def load_default_config(path: Path = CONFIG_PATH) -> ConfigData:
    """Load config.yaml when present, otherwise fall back to model defaults."""
    if path.exists():
        return load_templated_yaml(path)
    logger.debug("No {} found, using default configuration", path)
    return ConfigData()


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=AppContext(config=load_default_config())
)


def _explicit_fields(model: BaseModel) -> dict:
    """Fields set on ``model`` by the caller.

    A nested section is carried whole once any field inside it was set.
    """
    result = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            if name in model.model_fields_set or _explicit_fields(value):
                result[name] = value.model_dump()
        elif name in model.model_fields_set:
            result[name] = value
    return result


def _deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Temporarily override the application configuration.

    Fields set on ``config_override`` replace the current values; everything
    else is inherited from the enclosing context.

    Example:
        override = ConfigData(database=DatabaseConfig(url="sqlite://"))
        with with_context(override):
            assert get_config().database.url == "sqlite://"
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    current = _app_context.get()
    merged = ConfigData.model_validate(
        _deep_merge(current.config.model_dump(), _explicit_fields(config_override))
    )
    token = _app_context.set(replace(current, config=merged))
    try:
        yield
    finally:
        _app_context.reset(token)


def get_config() -> ConfigData:
    """The configuration of the current context."""
    return _app_context.get().config

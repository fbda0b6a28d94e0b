from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace

from src.marketplace.runtime.config.config_data import ConfigData
from src.marketplace.runtime.config.config_template import load_config


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


_default_context = AppContext(config=load_config())


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=_default_context
)


def get_context() -> AppContext:
    """Get the current application context.

    Returns:
        AppContext: The current application context containing configuration.
    """
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Set the current application context.

    Args:
        context: AppContext instance to set as current.
    """
    return _app_context.set(context)


def _recursive_dict_merge(base_dict: dict, override_dict: dict) -> dict:
    """Recursively merge two dictionaries, values from ``override_dict`` win."""
    result = base_dict.copy()

    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _recursive_dict_merge(result[key], value)
        else:
            result[key] = value

    return result


@contextmanager
def with_context(config_override: ConfigData | dict | None = None):
    """Temporarily override the application configuration.

    Only the fields explicitly set on the override are applied; everything else
    is inherited from the current context.

    Example:
        with with_context({"constants": {"pagination": {"max_page_size": 5}}}):
            assert get_config().constants.pagination.max_page_size == 5
    """
    if config_override is None:
        yield
        return

    if isinstance(config_override, ConfigData):
        override_dict = config_override.model_dump(exclude_unset=True)
    elif isinstance(config_override, dict):
        override_dict = config_override
    else:
        raise ValueError(
            f"config_override must be ConfigData, dict or None, got {type(config_override)}"
        )

    current = get_context().config.model_dump()
    merged_config = ConfigData.model_validate(_recursive_dict_merge(current, override_dict))

    token = set_context(replace(get_context(), config=merged_config))
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    """Replace the entire current configuration with the provided one."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    """Convenience function to get the current configuration."""
    return get_context().config

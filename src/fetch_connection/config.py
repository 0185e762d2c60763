"""
Package defaults resolved from an explicit argument or the environment.
"""
import os
import logging
from typing import Any, List, Union

from .version import __version__

logger = logging.getLogger(__name__)

IGNORE_ENV_PROXY_ENV = "FETCH_CONNECTION_IGNORE_ENV_PROXY"
USER_AGENT_ENV = "FETCH_CONNECTION_USER_AGENT"
PARAMS_ENCODER_ENV = "FETCH_CONNECTION_PARAMS_ENCODER"

DEFAULT_PARAMS_ENCODER = "nested"
TRUTHY = ("true", "1", "yes", "on")


def resolve(arg: Any, env_keys: Union[str, List[str]], default: Any) -> Any:
    """
    Resolve a setting in priority order:
    1. Direct argument (if not None)
    2. First environment variable that is set
    3. Default value
    """
    if arg is not None:
        return arg

    keys = [env_keys] if isinstance(env_keys, str) else env_keys
    for key in keys:
        value = os.getenv(key)
        if value is not None:
            return value

    return default


def resolve_bool(arg: Any, env_keys: Union[str, List[str]], default: bool) -> bool:
    """Like ``resolve``, with string values parsed as flags."""
    value = resolve(arg, env_keys, default)
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return bool(value)


def default_user_agent() -> str:
    return resolve(None, USER_AGENT_ENV, f"fetch-connection/{__version__}")


def ignore_env_proxy(arg: Any = None) -> bool:
    """Whether environment proxy variables should be skipped entirely."""
    value = resolve_bool(arg, IGNORE_ENV_PROXY_ENV, False)
    logger.debug(f"Resolved ignore_env_proxy: {value}")
    return value


def default_params_encoder(arg: Any = None) -> Any:
    return resolve(arg, PARAMS_ENCODER_ENV, DEFAULT_PARAMS_ENCODER)

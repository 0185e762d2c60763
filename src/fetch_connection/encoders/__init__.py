"""
Params encoder registry.
"""
import logging
from typing import Any, Dict, Type

from ..errors import InvalidParamsEncoderError
from .base import ParamsEncoder
from .flat import FlatParamsEncoder
from .nested import NestedParamsEncoder

logger = logging.getLogger(__name__)

_encoders: Dict[str, Type[ParamsEncoder]] = {}


def register_params_encoder(encoder_cls: Type[ParamsEncoder]) -> None:
    """Register an encoder class under its name."""
    name = encoder_cls().name
    _encoders[name] = encoder_cls
    logger.debug(f"Registered params encoder: {name}")


def get_params_encoder(selector: Any = "nested") -> ParamsEncoder:
    """Get an encoder from a name, an instance or an encoder class."""
    if isinstance(selector, ParamsEncoder):
        return selector
    if isinstance(selector, type) and issubclass(selector, ParamsEncoder):
        return selector()
    if isinstance(selector, str):
        name = selector.strip().lstrip(":").lower()
        if name in _encoders:
            return _encoders[name]()
    raise InvalidParamsEncoderError(selector, list(_encoders.keys()))


# Register default encoders
register_params_encoder(NestedParamsEncoder)
register_params_encoder(FlatParamsEncoder)

__all__ = [
    "ParamsEncoder",
    "NestedParamsEncoder",
    "FlatParamsEncoder",
    "register_params_encoder",
    "get_params_encoder",
]

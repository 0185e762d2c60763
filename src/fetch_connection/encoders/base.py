"""
Abstract base for query-string encoding strategies.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote_plus, unquote_plus


def stringify(value: Any) -> str:
    """Render a scalar the way it appears in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def escape(value: Any) -> str:
    """Form-encode a key or value: space becomes '+', unreserved chars stay."""
    return quote_plus(stringify(value), safe="")


def unescape(value: str) -> str:
    return unquote_plus(value)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


class ParamsEncoder(ABC):
    """Interface for query parameter encoding strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name used to select the strategy (e.g., 'nested', 'flat')."""
        pass

    @abstractmethod
    def encode(self, params: Optional[Mapping[str, Any]]) -> str:
        """Encode a mapping into a query string (without leading '?')."""
        pass

    @abstractmethod
    def decode(self, query: Optional[str]) -> Dict[str, Any]:
        """Decode a query string into a mapping."""
        pass

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

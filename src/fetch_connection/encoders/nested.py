"""
Bracket-notation encoder: ``a[b]=c`` for mappings, ``a[]=1&a[]=2`` for lists.
"""
import re
from typing import Any, Dict, List, Mapping, Optional

from ..errors import InvalidParamsError
from .base import ParamsEncoder, escape, is_sequence, unescape

_SUBKEY_RE = re.compile(r"[^\[\]]+(?:\]?\[\])?")
_OPEN = "%5B"
_CLOSE = "%5D"


class NestedParamsEncoder(ParamsEncoder):
    """Default strategy; nests mappings and sequences with brackets."""

    @property
    def name(self) -> str:
        return "nested"

    def encode(self, params: Optional[Mapping[str, Any]]) -> str:
        if not params:
            return ""
        parts: List[str] = []
        for key, value in params.items():
            parts.extend(self._encode_value(escape(key), value))
        return "&".join(part for part in parts if part)

    def _encode_value(self, parent: str, value: Any) -> List[str]:
        if isinstance(value, Mapping):
            parts: List[str] = []
            for key, child in value.items():
                parts.extend(self._encode_value(f"{parent}{_OPEN}{escape(key)}{_CLOSE}", child))
            return parts

        if is_sequence(value):
            child_parent = f"{parent}{_OPEN}{_CLOSE}"
            if not value:
                return [child_parent]
            parts = []
            for item in value:
                parts.extend(self._encode_value(child_parent, item))
            return parts

        if value is None:
            return [parent]

        return [f"{parent}={escape(value)}"]

    def decode(self, query: Optional[str]) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if not query:
            return params

        for pair in query.split("&"):
            if not pair:
                continue
            raw_key, sep, raw_value = pair.partition("=")
            key = unescape(raw_key)
            value = unescape(raw_value) if sep else None
            self._assign(params, key, value)

        return _dehash(params)

    def _assign(self, params: Dict[str, Any], key: str, value: Optional[str]) -> None:
        subkeys = _SUBKEY_RE.findall(key)
        if not subkeys:
            return

        context: Any = params
        last_index = len(subkeys) - 1
        for index, subkey in enumerate(subkeys):
            is_array = subkey.endswith("[]")
            if is_array:
                subkey = subkey[:-2].rstrip("]")

            # Entering a list of mappings: reuse the last one unless the key repeats
            if isinstance(context, list):
                if not context or not isinstance(context[-1], dict) or subkey in context[-1]:
                    context.append({})
                context = context[-1]

            if index == last_index and not is_array:
                context[subkey] = value
                continue

            container_type = list if is_array else dict
            current = context.get(subkey)
            if current is None:
                current = container_type()
                context[subkey] = current
            elif not isinstance(current, container_type):
                raise InvalidParamsError(
                    key,
                    f"expected {container_type.__name__} (got {type(current).__name__}) for param '{subkey}'"
                )
            context = current

            if index == last_index:
                context.append(value)


def _dehash(value: Any) -> Any:
    """Turn mappings keyed only by integers ('0', '1', ...) into lists."""
    if isinstance(value, dict):
        converted = {key: _dehash(child) for key, child in value.items()}
        if converted and all(key.isdigit() for key in converted):
            return [converted[key] for key in sorted(converted, key=int)]
        return converted
    if isinstance(value, list):
        return [_dehash(child) for child in value]
    return value

"""
Repeated-key encoder for targets that do not understand bracket notation.
"""
from typing import Any, Dict, List, Mapping, Optional

from .base import ParamsEncoder, escape, is_sequence, unescape


class FlatParamsEncoder(ParamsEncoder):
    """Sequences become ``a=1&a=2``; nested mappings are stringified."""

    @property
    def name(self) -> str:
        return "flat"

    def encode(self, params: Optional[Mapping[str, Any]]) -> str:
        if not params:
            return ""
        parts: List[str] = []
        for key, value in params.items():
            encoded_key = escape(key)
            if is_sequence(value):
                if not value:
                    parts.append(f"{encoded_key}=")
                for item in value:
                    parts.append(self._pair(encoded_key, item))
            else:
                parts.append(self._pair(encoded_key, value))
        return "&".join(parts)

    @staticmethod
    def _pair(encoded_key: str, value: Any) -> str:
        if value is None:
            return encoded_key
        return f"{encoded_key}={escape(value)}"

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
            if key in params:
                existing = params[key]
                if isinstance(existing, list):
                    existing.append(value)
                else:
                    params[key] = [existing, value]
            else:
                params[key] = value
        return params

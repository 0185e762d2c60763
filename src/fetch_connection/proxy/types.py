"""
Data models for proxy configuration.
"""
import logging
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Tuple
from urllib.parse import ParseResult, SplitResult, unquote, urlsplit

import httpx
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator, model_validator

from ..errors import InvalidProxyConfigError
from ..url import coerce_url, default_port, format_netloc

logger = logging.getLogger(__name__)

PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")

_URI_TYPES = (str, SplitResult, ParseResult, httpx.URL)


class ProxyDescriptor(BaseModel):
    """A single proxy endpoint.

    Accepts a URI string (``localhost:8888`` is read as ``http://``), a parsed
    URI, or a mapping with ``uri`` and optional ``user``/``password``.
    Explicit credentials win; missing ones are taken from the URI userinfo.
    """
    uri: str = Field(description="Proxy URI, may carry percent-encoded userinfo")
    user: Optional[str] = Field(default=None, description="Proxy username")
    password: Optional[SecretStr] = Field(default=None, description="Proxy password")

    @model_validator(mode="before")
    @classmethod
    def coerce_input(cls, value: Any) -> Any:
        if isinstance(value, ProxyDescriptor):
            return {"uri": value.uri, "user": value.user, "password": value.password}
        if isinstance(value, _URI_TYPES):
            return {"uri": value}
        if isinstance(value, Mapping):
            return {str(key): item for key, item in value.items()}
        raise ValueError(f"expected a URI or a mapping with 'uri', got {type(value).__name__}")

    @field_validator("uri", mode="before")
    @classmethod
    def validate_uri(cls, v: Any) -> str:
        if not isinstance(v, _URI_TYPES):
            raise ValueError(f"uri must be a string or URI, got {type(v).__name__}")
        uri = coerce_url(v).strip()
        if not uri:
            raise ValueError("uri is blank")
        if "://" not in uri:
            uri = f"http://{uri}"

        parts = urlsplit(uri)
        if parts.scheme.lower() not in PROXY_SCHEMES:
            raise ValueError(f"unsupported proxy scheme '{parts.scheme}'")
        if not parts.hostname:
            raise ValueError(f"uri '{uri}' has no host")
        try:
            parts.port
        except ValueError as e:
            raise ValueError(f"uri '{uri}' has an invalid port") from e
        return uri

    @model_validator(mode="after")
    def fill_credentials(self) -> "ProxyDescriptor":
        parts = urlsplit(self.uri)
        if self.user is None and parts.username:
            self.user = unquote(parts.username)
        if self.password is None and parts.password:
            self.password = SecretStr(unquote(parts.password))
        return self

    @classmethod
    def from_value(cls, value: Any) -> "ProxyDescriptor":
        """Build a descriptor, raising InvalidProxyConfigError on bad input."""
        try:
            return cls.model_validate(value)
        except ValidationError as e:
            errors = e.errors()
            reason = errors[0]["msg"] if errors else str(e)
            raise InvalidProxyConfigError(value, reason, e) from e

    @property
    def scheme(self) -> str:
        return urlsplit(self.uri).scheme.lower()

    @property
    def host(self) -> str:
        return urlsplit(self.uri).hostname

    @property
    def port(self) -> Optional[int]:
        explicit = urlsplit(self.uri).port
        return explicit if explicit is not None else default_port(self.scheme)

    @property
    def url(self) -> str:
        """Proxy URL without credentials."""
        return f"{self.scheme}://{format_netloc(self.host, self.port, self.scheme)}"

    @property
    def auth(self) -> Optional[Tuple[str, str]]:
        if self.user is None:
            return None
        password = self.password.get_secret_value() if self.password else ""
        return (self.user, password)

    def masked(self) -> str:
        """URL for logs: credentials replaced."""
        if self.user is None:
            return self.url
        return f"{self.scheme}://****@{format_netloc(self.host, self.port, self.scheme)}"

    def to_httpx(self) -> httpx.Proxy:
        return httpx.Proxy(self.url, auth=self.auth)


ProxyMode = Literal["unset", "manual"]


@dataclass(frozen=True)
class ProxySetting:
    """Per-connection proxy state.

    ``unset`` defers to the environment on every request. ``manual`` holds a
    caller-assigned descriptor, or ``None`` when proxying was switched off.
    """
    mode: ProxyMode = "unset"
    descriptor: Optional[ProxyDescriptor] = None

    @classmethod
    def unset(cls) -> "ProxySetting":
        return cls()

    @classmethod
    def manual(cls, value: Any) -> "ProxySetting":
        if value is None or value is False:
            logger.debug("Proxy manually disabled")
            return cls(mode="manual", descriptor=None)
        descriptor = ProxyDescriptor.from_value(value)
        logger.debug(f"Manual proxy assigned: {descriptor.masked()}")
        return cls(mode="manual", descriptor=descriptor)

    @property
    def is_manual(self) -> bool:
        return self.mode == "manual"

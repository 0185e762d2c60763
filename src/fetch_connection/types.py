"""
Core type definitions for fetch-connection.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Protocol, runtime_checkable

import httpx

from .proxy import ProxyDescriptor
from .url import RequestURL

# HTTP Methods
HttpMethod = Literal["GET", "HEAD", "DELETE", "TRACE", "OPTIONS", "POST", "PUT", "PATCH"]

METHODS_WITH_QUERY = ("GET", "HEAD", "DELETE", "TRACE")
METHODS_WITH_BODY = ("POST", "PUT", "PATCH")
METHODS = METHODS_WITH_QUERY + ("OPTIONS",) + METHODS_WITH_BODY


@dataclass
class RequestDescriptor:
    """Fully-resolved request handed to the execution pipeline."""
    method: HttpMethod
    url: RequestURL
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Any = None
    # query params as sent, after merging
    params: Dict[str, Any] = field(default_factory=dict)
    proxy: Optional[ProxyDescriptor] = None

    def to_httpx(self) -> httpx.Request:
        """Build an httpx.Request for a transport that speaks httpx."""
        kwargs: Dict[str, Any] = {"headers": self.headers}
        if isinstance(self.body, Mapping):
            kwargs["data"] = dict(self.body)
        elif self.body is not None:
            kwargs["content"] = self.body
        return httpx.Request(self.method, str(self.url), **kwargs)

    def httpx_client_kwargs(self) -> Dict[str, Any]:
        """Kwargs for an httpx client honouring the resolved proxy."""
        # The proxy is already resolved here, so httpx must not re-read the environment
        kwargs: Dict[str, Any] = {"trust_env": False}
        if self.proxy is not None:
            kwargs["proxy"] = self.proxy.to_httpx()
        return kwargs


@runtime_checkable
class RequestPipeline(Protocol):
    """Middleware/adapter stack that executes a RequestDescriptor."""
    def call(self, request: RequestDescriptor) -> Any: ...

"""
Base-prefix parsing and per-request URL resolution.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import SplitResult, ParseResult, quote, urljoin, urlsplit, urlunsplit

import httpx

from .encoders import ParamsEncoder, get_params_encoder
from .errors import InvalidURLError

logger = logging.getLogger(__name__)

# RFC 3986 pchar plus "/"; existing escapes are left alone
PATH_SAFE_CHARS = "/%:@!$&'()*+,;=~"

DEFAULT_PORTS: Dict[str, int] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
}


def default_port(scheme: Optional[str]) -> Optional[int]:
    return DEFAULT_PORTS.get((scheme or "").lower())


def coerce_url(value: Any) -> str:
    """Accept str, urllib split/parse results or httpx.URL and return a string."""
    if value is None:
        return ""
    if isinstance(value, (SplitResult, ParseResult)):
        return value.geturl()
    if isinstance(value, (str, httpx.URL)):
        return str(value)
    raise InvalidURLError(value, f"unsupported URL type {type(value).__name__}")


def split_url(value: Any) -> SplitResult:
    text = coerce_url(value)
    try:
        parts = urlsplit(text)
        parts.port
    except ValueError as e:
        raise InvalidURLError(value, str(e)) from e
    return parts


def format_netloc(host: str, port: Optional[int], scheme: str) -> str:
    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != default_port(scheme):
        netloc = f"{netloc}:{port}"
    return netloc


def normalize_path_prefix(value: Optional[str]) -> str:
    """Leading slash always, trailing slash only for the root path."""
    if not value:
        return "/"
    path = str(value)
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/") or "/"


def join_path(base_path: str, relative_path: str) -> str:
    """RFC 3986 path resolution against a base treated as a directory."""
    if not relative_path:
        return base_path
    directory = base_path if base_path.startswith("/") else "/" + base_path
    if not directory.endswith("/"):
        directory += "/"
    return urlsplit(urljoin("http://placeholder" + directory, relative_path)).path


@dataclass
class UrlPrefix:
    """Connection-level base address. Mutable for the connection's lifetime."""
    scheme: str = "http"
    host: Optional[str] = None
    explicit_port: Optional[int] = None
    path: str = "/"

    @classmethod
    def parse(cls, url: Any) -> "UrlPrefix":
        parts = split_url(url)
        return cls(
            scheme=(parts.scheme or "http").lower(),
            host=parts.hostname,
            explicit_port=parts.port,
            path=parts.path or "/",
        )

    @property
    def port(self) -> Optional[int]:
        if self.explicit_port is not None:
            return self.explicit_port
        return default_port(self.scheme)

    def __str__(self) -> str:
        netloc = format_netloc(self.host, self.explicit_port, self.scheme) if self.host else ""
        return f"{self.scheme}://{netloc}{self.path}"


@dataclass(frozen=True)
class RequestURL:
    """Fully resolved absolute request URL."""
    scheme: str
    host: str
    port: Optional[int]
    path: str
    query: Optional[str] = None

    @property
    def netloc(self) -> str:
        return format_netloc(self.host, self.port, self.scheme)

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query or "", ""))

    def to_httpx(self) -> httpx.URL:
        return httpx.URL(str(self))


class UrlResolver:
    """Merges a UrlPrefix with a per-request path or URL and query params."""

    def __init__(self, params_encoder: Optional[ParamsEncoder] = None):
        self.params_encoder = params_encoder or get_params_encoder()

    def resolve(
        self,
        prefix: UrlPrefix,
        url: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        base_params: Optional[Mapping[str, Any]] = None,
    ) -> RequestURL:
        """Resolve ``url`` against ``prefix``.

        Query precedence, lowest first: ``base_params``, the query carried by
        ``url``, then ``params``. With nothing to merge the url's own query is
        kept verbatim.
        """
        resolved, _ = self._resolve(prefix, url, params, base_params)
        return resolved

    def resolve_with_params(
        self,
        prefix: UrlPrefix,
        url: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        base_params: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[RequestURL, Dict[str, Any]]:
        """Like ``resolve``, also returning the query params as a mapping."""
        resolved, merged = self._resolve(prefix, url, params, base_params)
        if merged is None:
            merged = self.params_encoder.decode(resolved.query)
        return resolved, merged

    def _resolve(
        self,
        prefix: UrlPrefix,
        url: Any,
        params: Optional[Mapping[str, Any]],
        base_params: Optional[Mapping[str, Any]],
    ) -> Tuple[RequestURL, Optional[Dict[str, Any]]]:
        target = coerce_url(url)

        if not target:
            scheme, host, port, path, query = prefix.scheme, prefix.host, prefix.port, prefix.path, ""
        else:
            parts = split_url(target)
            if parts.netloc:
                scheme = (parts.scheme or prefix.scheme).lower()
                host = parts.hostname
                port = parts.port if parts.port is not None else default_port(scheme)
                path = parts.path
            elif parts.scheme:
                raise InvalidURLError(target, "absolute URL has no host")
            else:
                scheme, host, port = prefix.scheme, prefix.host, prefix.port
                path = join_path(prefix.path, parts.path)
            query = parts.query

        if not host:
            raise InvalidURLError(target or str(prefix))

        merged: Optional[Dict[str, Any]] = None
        if base_params or params:
            merged = dict(base_params or {})
            if query:
                merged.update(self.params_encoder.decode(query))
            if params:
                merged.update({str(key): value for key, value in params.items()})
            query = self.params_encoder.encode(merged)

        resolved = RequestURL(
            scheme=scheme,
            host=host,
            port=port,
            path=quote(path or "/", safe=PATH_SAFE_CHARS),
            query=query or None,
        )
        logger.debug(f"Resolved URL {target!r} against {prefix} -> {resolved}")
        return resolved, merged

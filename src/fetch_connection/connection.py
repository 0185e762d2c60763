"""
Connection: base address, default params/headers and proxy setting.
"""
import copy
import logging
from typing import Any, Mapping, Optional, Union
from urllib.parse import unquote

import httpx

from . import config
from .auth import AUTHORIZATION, authorization_value, encode_auth
from .encoders import ParamsEncoder, get_params_encoder
from .environment import EnvironmentProvider, EnvironmentSnapshot
from .errors import MissingPipelineError
from .options import ConnectionOptions
from .proxy import ProxyDescriptor, ProxyResolver, ProxySetting
from .types import METHODS, HttpMethod, RequestDescriptor, RequestPipeline
from .url import RequestURL, UrlPrefix, UrlResolver, normalize_path_prefix, split_url

logger = logging.getLogger(__name__)


def normalize_header_name(name: Any) -> str:
    """``user_agent`` -> ``User-Agent``; other names are kept as given."""
    key = str(name)
    if "_" in key and "-" not in key:
        return "-".join(part.capitalize() for part in key.split("_"))
    return key


def build_headers(headers: Optional[Mapping[str, Any]]) -> httpx.Headers:
    result = httpx.Headers()
    for name, value in (headers or {}).items():
        result[normalize_header_name(name)] = str(value)
    return result


class Connection:
    """
    Holds the configuration shared by every request sent through it and
    turns (method, path, params, headers) into a RequestDescriptor.

    Configuration may be reassigned between calls. Nothing per-request is
    stored on the instance, so a connection can be reused serially or from
    concurrent callers as long as its configuration is not mutated mid-call.
    """

    def __init__(self, url: Any = None, options: Any = None, **kwargs: Any):
        opts = ConnectionOptions.build(url, options, **kwargs)

        self.params_encoder = config.default_params_encoder(opts.params_encoder)
        self.builder: Optional[RequestPipeline] = opts.builder
        self.environment: EnvironmentProvider = opts.environment or EnvironmentSnapshot.capture
        self._ignore_env_proxy = config.ignore_env_proxy(opts.ignore_env_proxy)

        self._headers = httpx.Headers({"User-Agent": config.default_user_agent()})
        self._params: dict = {}
        self._url_prefix = UrlPrefix()
        self._proxy_setting = ProxySetting.unset()

        self.url_prefix = opts.url or "http:/"
        self._params.update(opts.params)
        self._headers.update(build_headers(opts.headers))

        if opts.proxy is not None:
            self.proxy = opts.proxy

        logger.debug(f"Connection initialized for {self._url_prefix} with encoder '{self._params_encoder.name}'")

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def params_encoder(self) -> ParamsEncoder:
        return self._params_encoder

    @params_encoder.setter
    def params_encoder(self, value: Any) -> None:
        self._params_encoder = get_params_encoder(value)
        self._resolver = UrlResolver(self._params_encoder)

    @property
    def params(self) -> dict:
        return self._params

    @params.setter
    def params(self, value: Optional[Mapping[str, Any]]) -> None:
        self._params = {str(key): item for key, item in (value or {}).items()}

    @property
    def headers(self) -> httpx.Headers:
        return self._headers

    @headers.setter
    def headers(self, value: Optional[Mapping[str, Any]]) -> None:
        self._headers = build_headers(value)

    @property
    def url_prefix(self) -> UrlPrefix:
        return self._url_prefix

    @url_prefix.setter
    def url_prefix(self, value: Any) -> None:
        """Parse a base URL; its query joins ``params`` and its userinfo sets Basic auth."""
        parts = split_url(value)
        self._url_prefix = UrlPrefix.parse(value)

        if parts.query:
            self._params.update(self._params_encoder.decode(parts.query))

        if parts.username is not None:
            self.basic_auth(unquote(parts.username), unquote(parts.password or ""))

    @property
    def scheme(self) -> str:
        return self._url_prefix.scheme

    @scheme.setter
    def scheme(self, value: str) -> None:
        self._url_prefix.scheme = value.lower()

    @property
    def host(self) -> Optional[str]:
        return self._url_prefix.host

    @host.setter
    def host(self, value: Optional[str]) -> None:
        self._url_prefix.host = value.lower() if value else None

    @property
    def port(self) -> Optional[int]:
        return self._url_prefix.port

    @port.setter
    def port(self, value: Optional[int]) -> None:
        self._url_prefix.explicit_port = int(value) if value is not None else None

    @property
    def path_prefix(self) -> str:
        return normalize_path_prefix(self._url_prefix.path)

    @path_prefix.setter
    def path_prefix(self, value: Optional[str]) -> None:
        self._url_prefix.path = normalize_path_prefix(value)

    # =========================================================================
    # Proxy
    # =========================================================================

    @property
    def proxy(self) -> Optional[ProxyDescriptor]:
        """Proxy that applies to the base URL right now."""
        target = self._url_prefix if self._url_prefix.host else None
        return self.proxy_for_request(str(target) if target else None)

    @proxy.setter
    def proxy(self, value: Any) -> None:
        """Manual proxy: a URI, a mapping with 'uri', or None/False to disable."""
        self._proxy_setting = ProxySetting.manual(value)

    @proxy.deleter
    def proxy(self) -> None:
        """Forget the manual proxy and go back to the environment."""
        self._proxy_setting = ProxySetting.unset()

    @property
    def proxy_setting(self) -> ProxySetting:
        return self._proxy_setting

    @property
    def ignore_env_proxy(self) -> bool:
        return self._ignore_env_proxy

    @ignore_env_proxy.setter
    def ignore_env_proxy(self, value: bool) -> None:
        self._ignore_env_proxy = bool(value)

    def proxy_for_request(
        self,
        url: Any,
        env: Optional[EnvironmentSnapshot] = None,
    ) -> Optional[ProxyDescriptor]:
        snapshot = env if env is not None else self.environment()
        resolver = ProxyResolver(ignore_env=self._ignore_env_proxy)
        return resolver.resolve_for_request(self._proxy_setting, url, snapshot)

    # =========================================================================
    # Authorization
    # =========================================================================

    def basic_auth(self, username: Any, password: Any) -> None:
        self._headers.update(encode_auth("basic", username=username, password=password))

    def token_auth(self, token: Any, **options: Any) -> None:
        self._headers.update(encode_auth("token", token=token, **options))

    def authorization(self, scheme: str, credentials: Union[str, Mapping[str, Any]]) -> None:
        self._headers[AUTHORIZATION] = authorization_value(scheme, credentials)

    # =========================================================================
    # URL building
    # =========================================================================

    def build_url(self, url: Any = None, params: Optional[Mapping[str, Any]] = None) -> RequestURL:
        """Absolute URL with connection params, the url's own query and ``params`` merged."""
        return self._resolver.resolve(self._url_prefix, url, params=params, base_params=self._params)

    def build_exclusive_url(self, url: Any = None, params: Optional[Mapping[str, Any]] = None) -> RequestURL:
        """Absolute URL ignoring connection params."""
        return self._resolver.resolve(self._url_prefix, url, params=params)

    # =========================================================================
    # Requests
    # =========================================================================

    def build_request(
        self,
        method: str,
        url: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> RequestDescriptor:
        verb = self._normalize_method(method)
        env = self.environment()

        request_url, request_params = self._resolver.resolve_with_params(
            self._url_prefix, url, params=params, base_params=self._params
        )
        merged_headers = httpx.Headers(self._headers)
        merged_headers.update(build_headers(headers))
        proxy = self.proxy_for_request(request_url, env=env)

        logger.debug(
            f"Built {verb} {request_url} via {proxy.masked() if proxy else 'no proxy'}"
        )
        return RequestDescriptor(
            method=verb,
            url=request_url,
            headers=merged_headers,
            body=body,
            params=request_params,
            proxy=proxy,
        )

    def run_request(
        self,
        method: str,
        url: Any = None,
        body: Any = None,
        headers: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Build the request and hand it to the pipeline; returns its result."""
        if self.builder is None:
            raise MissingPipelineError("No request pipeline configured on this connection")
        request = self.build_request(method, url, params=params, headers=headers, body=body)
        return self.builder.call(request)

    def get(self, url: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("GET", url, None, headers, params)

    def head(self, url: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("HEAD", url, None, headers, params)

    def delete(self, url: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("DELETE", url, None, headers, params)

    def trace(self, url: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("TRACE", url, None, headers, params)

    def options(self, url: Any = None, params: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("OPTIONS", url, None, headers, params)

    def post(self, url: Any = None, body: Any = None, headers: Optional[Mapping[str, Any]] = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("POST", url, body, headers, params)

    def put(self, url: Any = None, body: Any = None, headers: Optional[Mapping[str, Any]] = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("PUT", url, body, headers, params)

    def patch(self, url: Any = None, body: Any = None, headers: Optional[Mapping[str, Any]] = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.run_request("PATCH", url, body, headers, params)

    def copy(self) -> "Connection":
        """Independent copy of the configuration; the builder is shared."""
        clone = copy.copy(self)
        clone._url_prefix = copy.copy(self._url_prefix)
        clone._params = copy.deepcopy(self._params)
        clone._headers = httpx.Headers(self._headers)
        return clone

    @staticmethod
    def _normalize_method(method: str) -> HttpMethod:
        verb = str(method).upper()
        if verb not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        return verb  # type: ignore[return-value]

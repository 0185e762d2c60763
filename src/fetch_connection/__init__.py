"""
Fetch Connection - request shaping for HTTP clients.

Resolves request URLs against a base prefix, encodes query params and picks
the proxy for each request before handing it to a pipeline.
"""
from .version import __version__
from .connection import Connection
from .options import ConnectionOptions
from .environment import EnvironmentSnapshot, static_environment
from .encoders import (
    ParamsEncoder,
    NestedParamsEncoder,
    FlatParamsEncoder,
    get_params_encoder,
    register_params_encoder,
)
from .url import RequestURL, UrlPrefix, UrlResolver
from .proxy import NoProxyList, ProxyDescriptor, ProxyResolver, ProxySetting, resolve_proxy_for_request
from .types import RequestDescriptor, RequestPipeline
from .errors import (
    FetchConnectionError,
    InvalidURLError,
    InvalidProxyConfigError,
    InvalidParamsError,
    InvalidParamsEncoderError,
    MissingPipelineError,
)

__all__ = [
    "__version__",
    "Connection",
    "ConnectionOptions",
    "EnvironmentSnapshot",
    "static_environment",
    "ParamsEncoder",
    "NestedParamsEncoder",
    "FlatParamsEncoder",
    "get_params_encoder",
    "register_params_encoder",
    "RequestURL",
    "UrlPrefix",
    "UrlResolver",
    "NoProxyList",
    "ProxyDescriptor",
    "ProxyResolver",
    "ProxySetting",
    "resolve_proxy_for_request",
    "RequestDescriptor",
    "RequestPipeline",
    "FetchConnectionError",
    "InvalidURLError",
    "InvalidProxyConfigError",
    "InvalidParamsError",
    "InvalidParamsEncoderError",
    "MissingPipelineError",
]

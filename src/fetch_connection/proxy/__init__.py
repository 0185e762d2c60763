"""
Proxy configuration and resolution package.
"""
from .types import ProxyDescriptor, ProxySetting
from .no_proxy import NoProxyEntry, NoProxyList
from .resolver import ProxyResolver, resolve_proxy_for_request

__all__ = [
    "ProxyDescriptor",
    "ProxySetting",
    "NoProxyEntry",
    "NoProxyList",
    "ProxyResolver",
    "resolve_proxy_for_request",
]

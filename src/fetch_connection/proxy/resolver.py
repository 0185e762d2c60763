"""
Per-request proxy resolution.
"""
import logging
from typing import Any, Optional, Tuple

from ..environment import EnvironmentSnapshot
from ..url import RequestURL, default_port, split_url
from .no_proxy import NoProxyList
from .types import ProxyDescriptor, ProxySetting

logger = logging.getLogger(__name__)


def _target_host_port(target_url: Any) -> Tuple[Optional[str], Optional[int]]:
    if isinstance(target_url, RequestURL):
        return target_url.host, target_url.port
    parts = split_url(target_url)
    port = parts.port if parts.port is not None else default_port(parts.scheme)
    return parts.hostname, port


class ProxyResolver:
    """Chooses the proxy for one request.

    Precedence:
    1. Manual setting (descriptor, or None when disabled), never filtered
    2. ``http_proxy`` from the environment snapshot, unless the target host
       is listed in ``no_proxy``
    3. No proxy

    Resolution is a pure function of the setting, the target and the
    snapshot; nothing is cached between calls.
    """

    def __init__(self, ignore_env: bool = False):
        self.ignore_env = ignore_env

    def resolve_for_request(
        self,
        setting: ProxySetting,
        target_url: Any,
        env: EnvironmentSnapshot,
    ) -> Optional[ProxyDescriptor]:
        if setting.is_manual:
            logger.debug("Using manually configured proxy setting")
            return setting.descriptor

        if self.ignore_env:
            logger.debug("Environment proxy lookup disabled")
            return None

        return self.resolve_from_environment(target_url, env)

    def resolve_from_environment(
        self,
        target_url: Any,
        env: EnvironmentSnapshot,
    ) -> Optional[ProxyDescriptor]:
        raw = (env.http_proxy or "").strip()
        if not raw:
            logger.debug("No http_proxy in environment")
            return None

        candidate = ProxyDescriptor.from_value(raw)

        if target_url is None:
            logger.debug(f"Using http_proxy {candidate.masked()} (no target to filter)")
            return candidate

        host, port = _target_host_port(target_url)
        if NoProxyList.parse(env.no_proxy).excludes(host, port):
            logger.debug(f"Target '{host}' listed in no_proxy, bypassing proxy")
            return None

        logger.debug(f"Using http_proxy {candidate.masked()} for '{host}'")
        return candidate


def resolve_proxy_for_request(
    setting: ProxySetting,
    target_url: Any,
    env: Optional[EnvironmentSnapshot] = None,
    ignore_env: bool = False,
) -> Optional[ProxyDescriptor]:
    """Resolve with a one-off resolver, capturing the environment if not given."""
    snapshot = env if env is not None else EnvironmentSnapshot.capture()
    return ProxyResolver(ignore_env=ignore_env).resolve_for_request(setting, target_url, snapshot)

"""
Point-in-time view of the proxy environment variables.
"""
import os
import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

HTTP_PROXY_KEY = "http_proxy"
NO_PROXY_KEY = "no_proxy"


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Proxy-related environment values captured in a single read.

    Only the lowercase variable names are consulted. ``HTTP_PROXY`` is
    ignored because CGI servers expose the ``Proxy:`` request header under
    that name.
    """
    http_proxy: Optional[str] = None
    no_proxy: Optional[str] = None

    @classmethod
    def capture(cls, environ: Optional[Mapping[str, str]] = None) -> "EnvironmentSnapshot":
        source = os.environ if environ is None else environ
        snapshot = cls(
            http_proxy=source.get(HTTP_PROXY_KEY),
            no_proxy=source.get(NO_PROXY_KEY),
        )
        logger.debug(
            f"Captured environment: http_proxy set={bool(snapshot.http_proxy)}, "
            f"no_proxy={snapshot.no_proxy!r}"
        )
        return snapshot


EnvironmentProvider = Callable[[], EnvironmentSnapshot]


def static_environment(**values: Optional[str]) -> EnvironmentProvider:
    """Provider that always returns the same snapshot (useful for tests)."""
    snapshot = EnvironmentSnapshot(**values)
    return lambda: snapshot

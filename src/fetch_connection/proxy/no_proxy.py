"""
Parsing and matching of ``no_proxy`` exclusion lists.
"""
import ipaddress
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _parse_ip(host: str) -> Optional[IPAddress]:
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        return None


@dataclass(frozen=True)
class NoProxyEntry:
    """One ``no_proxy`` item: a host suffix or an IP network, optionally port-bound."""
    host: Optional[str] = None
    network: Optional[IPNetwork] = None
    port: Optional[int] = None

    @classmethod
    def parse(cls, raw: str) -> Optional["NoProxyEntry"]:
        text = raw.strip().lower()
        if not text:
            return None

        host, port = text, None
        if text.startswith("["):
            host, _, rest = text[1:].partition("]")
            if rest.startswith(":") and rest[1:].isdigit():
                port = int(rest[1:])
        elif text.count(":") == 1:
            host, port_text = text.split(":")
            if not port_text.isdigit():
                logger.debug(f"Ignoring no_proxy entry with invalid port: {raw!r}")
                return None
            port = int(port_text)

        try:
            return cls(network=ipaddress.ip_network(host, strict=False), port=port)
        except ValueError:
            pass

        if host.startswith("*."):
            host = host[2:]
        host = host.lstrip(".").rstrip(".")
        if not host:
            return None
        return cls(host=host, port=port)

    def matches(self, host: str, port: Optional[int], address: Optional[IPAddress]) -> bool:
        if self.port is not None and self.port != port:
            return False
        # IP targets only match IP entries, hostnames only hostname entries
        if address is not None:
            return self.network is not None and address in self.network
        if self.host is None:
            return False
        return host == self.host or host.endswith(f".{self.host}")


@dataclass(frozen=True)
class NoProxyList:
    """Comma-separated host suffixes / IP literals exempted from proxying."""
    entries: Tuple[NoProxyEntry, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, value: Optional[str]) -> "NoProxyList":
        if not value:
            return cls()
        entries = tuple(
            entry for entry in (NoProxyEntry.parse(item) for item in value.split(","))
            if entry is not None
        )
        return cls(entries=entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def excludes(self, host: Optional[str], port: Optional[int] = None) -> bool:
        """True when ``host`` should bypass the proxy."""
        if not host or not self.entries:
            return False
        normalized = host.strip("[]").lower().rstrip(".")
        address = _parse_ip(normalized)
        for entry in self.entries:
            if entry.matches(normalized, port, address):
                logger.debug(f"Host '{normalized}' excluded from proxy by no_proxy entry {entry}")
                return True
        return False

"""Outbound target validation.

Every fetch the pipeline performs (page, oEmbed, scraping fallback, file
download and each redirect hop) goes through ``validate_target_url`` first.
"""

import ipaddress
import socket
from urllib.parse import urlsplit

from metadata_ingest.exceptions import invalid_input, url_blocked

ALLOWED_SCHEMES = frozenset({"http", "https"})

_BLOCKED_HOSTNAMES = frozenset({"localhost", "0.0.0.0", "::", "::1"})

_NUMERIC_HOST_CHARS = frozenset("0123456789abcdefx.")

_BLOCKED_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "0.0.0.0/8",
        "10.0.0.0/8",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "::1/128",
        "fc00::/7",
        "fe80::/10",
    )
)


def is_blocked_hostname(hostname: str) -> bool:
    """Whether a hostname points at loopback, link-local or private space."""
    normalized = hostname.strip().lower().rstrip(".")
    if normalized.startswith("[") and normalized.endswith("]"):
        normalized = normalized[1:-1]
    if not normalized:
        return True
    if normalized in _BLOCKED_HOSTNAMES or normalized.endswith(".localhost"):
        return True

    address = _parse_ip(normalized.split("%", 1)[0])
    if address is None:
        return False

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped
    return any(address in network for network in _BLOCKED_NETWORKS)


def _parse_ip(host: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    """Parse an IP literal, including the integer, short, hex and octal IPv4
    spellings that the resolver accepts (``2130706433``, ``127.1``, ``0x7f.1``).
    """
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        pass
    if not host[:1].isdigit() or set(host) - _NUMERIC_HOST_CHARS:
        return None
    try:
        return ipaddress.IPv4Address(socket.inet_aton(host))
    except OSError:
        return None


def validate_target_url(url: str) -> str:
    """Return the hostname of a safe http(s) URL.

    Raises:
        ApiError: ``invalid_input`` for malformed or non-http(s) URLs,
            ``url_blocked`` for private or loopback targets.
    """
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname or ""
    except ValueError as exc:
        raise invalid_input("URL must be a valid URL.", {"url": url}) from exc

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise invalid_input("URL must use http or https.", {"url": url})
    if not hostname:
        raise invalid_input("URL must include a hostname.", {"url": url})
    if is_blocked_hostname(hostname):
        raise url_blocked(hostname)
    return hostname

"""
Outbound URL validation — SSRF prevention for webhook targets.

Webhook URLs come from configuration, but are still checked before every
delivery so a bad value cannot point alerts at internal services.
"""

import ipaddress
from urllib.parse import urlparse

# Private/reserved IP ranges that should never be reachable via webhooks
_PRIVATE_RANGES = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),  # link-local
    ipaddress.ip_network("::1/128"),          # IPv6 loopback
    ipaddress.ip_network("fc00::/7"),         # IPv6 private
    ipaddress.ip_network("fe80::/10"),        # IPv6 link-local
]

_LOCALHOST_NAMES = {"localhost", "127.0.0.1", "::1", "0.0.0.0"}


def validate_webhook_url(url: str) -> tuple[bool, str]:
    """
    Validate a webhook URL.

    DENY:
    - Non-HTTP(S) schemes
    - URLs with embedded credentials
    - URLs without a hostname
    - Localhost/loopback and private/reserved IP literals

    Returns:
        (is_valid, reason)
    """
    if not url or not isinstance(url, str):
        return False, "URL is empty or invalid"

    try:
        parsed = urlparse(url)
    except ValueError:
        return False, "Malformed URL"

    if parsed.scheme not in ("https", "http"):
        return False, f"Invalid scheme: {parsed.scheme}. Only HTTP(S) allowed."

    if parsed.username or parsed.password:
        return False, "URLs with embedded credentials are not allowed"

    hostname = parsed.hostname
    if not hostname:
        return False, "No hostname in URL"

    if hostname.lower() in _LOCALHOST_NAMES:
        return False, f"Localhost ({hostname}) is not allowed"

    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        # Plain hostname
        return True, "OK"

    for network in _PRIVATE_RANGES:
        if ip in network:
            return False, f"Private/reserved IP address: {hostname}"

    return True, "OK"

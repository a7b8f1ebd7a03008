"""
Client Identity

Best-effort derivation of the client IP address used as the rate-limit
identity.
"""

from __future__ import annotations

import ipaddress
from typing import Mapping, Optional

from fastapi import Request


# Checked in order; the direct peer address is the last resort.
IP_HEADERS = (
    "cf-connecting-ip",   # Cloudflare
    "x-forwarded-for",    # Standard proxy header
    "x-real-ip",          # Nginx proxy
)


def _first_entry(raw: str) -> str:
    # X-Forwarded-For may carry a chain of addresses; the client is first.
    return raw.split(",", 1)[0].strip()


def is_public_ip(candidate: str) -> bool:
    """
    Return True for a syntactically valid, publicly routable address.

    Private, loopback, link-local and reserved ranges are rejected so a
    spoofed or internal hop never becomes the identity.
    """
    try:
        address = ipaddress.ip_address(candidate)
    except ValueError:
        return False
    return address.is_global


def resolve_client_ip(
    headers: Mapping[str, str],
    peer_host: Optional[str] = None,
) -> Optional[str]:
    """
    Return the first valid IP found across proxy headers and the peer address.

    Parameters
    ----------
    headers : Mapping[str, str]
        Request headers (case-insensitive mapping, or lower-cased keys).
    peer_host : Optional[str]
        Address of the direct connection.

    Returns
    -------
    Optional[str]
        The client IP, or None when no candidate is usable.
    """
    candidates = [headers.get(name) for name in IP_HEADERS]
    candidates.append(peer_host)

    for raw in candidates:
        if not raw:
            continue
        ip = _first_entry(raw)
        if is_public_ip(ip):
            return ip

    return None


def get_client_ip(request: Request) -> Optional[str]:
    """
    FastAPI dependency returning the request's client IP, or None.
    """
    peer_host = request.client.host if request.client else None
    return resolve_client_ip(request.headers, peer_host)

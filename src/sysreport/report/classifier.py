"""Requester classification: private/LAN viewers versus the public."""

import ipaddress
from enum import Enum
from typing import Optional

PRIVATE_IPV4_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)
IPV4_LOOPBACK = "127.0.0.1"
IPV6_LOOPBACK = "::1"


class ViewerClass(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"


def viewer_address(forwarded_for: Optional[str], connection_address: str) -> str:
    """Return the address a request is attributed to.

    The first entry of X-Forwarded-For wins when the header is present at
    all, even if that entry is empty.
    """
    if forwarded_for is not None:
        return forwarded_for.split(",")[0].strip()
    return (connection_address or "").strip()


def classify(forwarded_for: Optional[str], connection_address: str) -> ViewerClass:
    """Classify a requester as PRIVATE or PUBLIC.

    Unknown or unparseable addresses are PUBLIC.
    """
    candidate = viewer_address(forwarded_for, connection_address)

    try:
        address = ipaddress.IPv4Address(candidate)
    except ValueError:
        address = None

    if address is not None:
        if candidate == IPV4_LOOPBACK:
            return ViewerClass.PRIVATE
        if any(address in network for network in PRIVATE_IPV4_NETWORKS):
            return ViewerClass.PRIVATE
        return ViewerClass.PUBLIC

    if candidate == IPV6_LOOPBACK:
        return ViewerClass.PRIVATE
    return ViewerClass.PUBLIC

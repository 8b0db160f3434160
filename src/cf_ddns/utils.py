# --- Standard library imports ---
import time
import socket
from typing import Callable, TypeVar

# --- Third-party imports ---
import requests

# --- Project imports ---
from .config import Config
from .logger import get_logger


# Define the logger once for the entire module
logger = get_logger("utils")

T = TypeVar("T")

# API endpoints (redundant, ranked by reliability); all return plain text
IP_SERVICES = {
    "ipv4": (
        "https://api.ipify.org",
        "https://ifconfig.me/ip",
        "https://ipv4.icanhazip.com",
        "https://ipecho.net/plain",
    ),
    "ipv6": (
        "https://api6.ipify.org",
        "https://ifconfig.co/ip",
        "https://ipv6.icanhazip.com",
    ),
}

RECORD_TYPES = {
    "ipv4": "A",
    "ipv6": "AAAA",
}

_ADDRESS_FAMILIES = {
    "ipv4": socket.AF_INET,
    "ipv6": socket.AF_INET6,
}

def record_type_for(version: str) -> str:
    """Map an IP version ("ipv4"/"ipv6") to its DNS record type."""
    try:
        return RECORD_TYPES[version.lower()]
    except KeyError:
        raise ValueError(f"Invalid IP version {version!r}, use 'ipv4' or 'ipv6'") from None

def is_valid_ip(ip: str, version: str = "ipv4") -> bool:
    """
    Validate an IP address (IPv4 or IPv6) using socket.

    Args:
        ip: The IP address string to validate
        version: "ipv4" or "ipv6"

    Returns:
        True if the IP address is valid, False otherwise
        (including for an unknown version).
    """
    family = _ADDRESS_FAMILIES.get(version.lower())
    if family is None or not ip:
        return False

    try:
        socket.inet_pton(family, ip)
        return True
    except (OSError, ValueError):
        return False

def get_public_ip(version: str = "ipv4") -> str | None:
    """
    Resolve the current external address for a given version.

    Tries multiple plaintext IP services in priority order.
    Returns the first valid IP or None if all sources fail.

    Raises:
        ValueError: If `version` is not "ipv4" or "ipv6"
    """
    services = IP_SERVICES.get(version.lower())
    if not services:
        raise ValueError(f"Invalid IP version {version!r}, use 'ipv4' or 'ipv6'")

    for url in services:
        try:
            resp = requests.get(url, timeout=Config.API_TIMEOUT)
            resp.raise_for_status()

            ip = resp.text.strip()
            if is_valid_ip(ip, version):
                logger.debug(f"🌐 External {version} acquired ({url})")
                return ip

            logger.warning(f"Invalid {version} returned from {url}: {ip!r}")

        except requests.RequestException as e:
            logger.warning(f"{version} lookup failed via {url} ({e.__class__.__name__})")

    return None

def retry(
    operation: Callable[[], T],
    attempts: int,
    delay: float,
    label: str = "operation",
) -> T:
    """
    Run `operation` up to `attempts` times with a fixed delay in between.

    Returns the first successful result. After the final failed attempt
    the last exception is re-raised unchanged.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")
    if delay < 0:
        raise ValueError(f"delay must not be negative, got {delay}")

    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except Exception as e:
            logger.warning(f"{label} failed (attempt {attempt}/{attempts}): {e}")
            if attempt == attempts:
                raise
            time.sleep(delay)

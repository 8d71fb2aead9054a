"""
Target URL Parser

Classifies an input URL by hosting platform and extracts the account name.

Examples:
    https://github.com/someuser/somerepo
    -> platform: GitHub, username: someuser

    raw.githubusercontent.com/someuser/somerepo/main/file.zip
    -> platform: GitHub, username: someuser
"""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from repotriage.errors import InvalidTargetError, UnsupportedHostError

# Platform name -> hosts that identify it. New platforms are added here and
# given a gateway of their own.
SUPPORTED_PLATFORMS = {
    "GitHub": ("github.com", "raw.githubusercontent.com"),
}

_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedTarget:
    """Parsed target URL components."""

    url: str
    platform: str
    host: str
    username: str


def normalize_url(url: str) -> str:
    """Prepend ``https://`` when the input has no http(s) scheme."""
    url = url.strip()
    if not _SCHEME_PATTERN.match(url):
        url = "https://" + url
    return url


def classify_host(host: str) -> str:
    """
    Map a host name to a supported platform.

    Raises:
        UnsupportedHostError: If no supported platform uses this host
    """
    for platform, hosts in SUPPORTED_PLATFORMS.items():
        if host in hosts:
            return platform
    raise UnsupportedHostError(host)


def parse_target_url(url: str) -> ParsedTarget:
    """
    Parse a profile or repository URL into platform and username.

    Args:
        url: Profile or repository URL, with or without scheme

    Returns:
        ParsedTarget with the normalized URL, platform, host and username

    Raises:
        InvalidTargetError: If the URL is malformed or has no username segment
        UnsupportedHostError: If the host is not a supported platform
    """
    normalized = normalize_url(url)

    try:
        parts = urlsplit(normalized)
        host = (parts.hostname or "").lower()
    except ValueError as e:
        raise InvalidTargetError(f"invalid url: {e}") from e

    if not host:
        raise InvalidTargetError(f"invalid url: {url}")

    platform = classify_host(host)

    # First path segment is the account, for profile and repository URLs alike
    username = parts.path.split("/")[1] if parts.path.count("/") >= 1 else ""
    if not username:
        raise InvalidTargetError("a username could not be determined from the url")

    return ParsedTarget(
        url=normalized,
        platform=platform,
        host=host,
        username=username,
    )

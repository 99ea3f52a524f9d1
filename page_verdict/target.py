"""Resolve the page under test into a URL the browser may open."""

from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

ALLOWED_START_HOSTS = {"localhost", "127.0.0.1", "::1"}
DEFAULT_PAGE = "bin/page.html"


class UnsafeTargetError(ValueError):
    """Raised for a target URL that does not point at this machine."""


def is_allowed_start_url(url: str) -> bool:
    try:
        u = urlparse(url)
        host = (u.hostname or "").lower()
        return host in ALLOWED_START_HOSTS
    except ValueError:
        return False


def resolve_target(page: Union[str, Path]) -> str:
    """
    Turn a page path or URL into the URL to open.

    Args:
        page: Filesystem path, file:// URL, or loopback http(s) URL

    Returns:
        URL string

    Raises:
        UnsafeTargetError: for http(s) URLs on a non-loopback host or
            any other URL scheme
    """
    text = str(page)
    scheme = urlparse(text).scheme.lower()

    if scheme in ("http", "https"):
        if not is_allowed_start_url(text):
            raise UnsafeTargetError(f"Refusing to navigate to non-localhost url: {text}")
        return text
    if scheme == "file":
        return text
    # Single letters are Windows drive prefixes, not schemes
    if scheme and len(scheme) > 1:
        raise UnsafeTargetError(f"Unsupported target scheme {scheme!r}: {text}")

    return Path(text).expanduser().resolve().as_uri()


def local_path(url: str) -> Optional[Path]:
    """Filesystem path behind a file:// URL, None for any other URL."""
    u = urlparse(url)
    if u.scheme.lower() != "file":
        return None
    return Path(url2pathname(u.path)).resolve()

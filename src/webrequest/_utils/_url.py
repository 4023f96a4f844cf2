from urllib.parse import urlsplit, urlunsplit

import httpx

from ..models.errors import InvalidUrlError

_SUPPORTED_SCHEMES = ("http", "https")


def parse_url_from_string(value: str) -> str:
    """Validate that ``value`` is an absolute http(s) URL.

    Args:
        value: The candidate URL.

    Returns:
        The URL, stripped of surrounding whitespace.

    Raises:
        InvalidUrlError: If the value is empty, not absolute, uses an
            unsupported scheme or has no host.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidUrlError(value)

    candidate = value.strip()
    try:
        parsed = httpx.URL(candidate)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidUrlError(value, str(e)) from e

    if parsed.scheme not in _SUPPORTED_SCHEMES:
        raise InvalidUrlError(value, f"unsupported scheme '{parsed.scheme}'")
    if not parsed.host:
        raise InvalidUrlError(value, "missing host")

    return candidate


def join_url(base: str, resource: str) -> str:
    """Append ``resource`` to the path of ``base`` with a single separator."""
    if not resource:
        return base
    parts = urlsplit(base)
    path = f"{parts.path.rstrip('/')}/{resource.lstrip('/')}"
    return urlunsplit(parts._replace(path=path))

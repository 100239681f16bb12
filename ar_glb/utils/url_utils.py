from urllib.parse import urlsplit

from ar_glb.errors import ForbiddenSourceError, InvalidRequestError


def validate_source_url(url: str | None) -> str:
    """Check that ``url`` is an absolute http(s) URL to a .glb file.

    Returns the URL stripped of whitespace.
    """
    if not url or not url.strip():
        raise InvalidRequestError("Missing url parameter")
    url = url.strip()

    try:
        parts = urlsplit(url)
        host = parts.hostname
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        raise InvalidRequestError("Invalid URL")
    if parts.scheme.lower() not in ("http", "https") or not host:
        raise InvalidRequestError("Invalid URL")

    if not parts.path.lower().endswith(".glb"):
        raise InvalidRequestError("URL must point to a .glb file")
    return url


def parse_glb_url(url: str | None, allowed_domains: list[str]) -> str:
    """Validate a source GLB URL and enforce the domain allow-list."""
    url = validate_source_url(url)
    host = urlsplit(url).hostname
    if not is_allowed_host(host, allowed_domains):
        raise ForbiddenSourceError(
            f"Domain {host} is not allowed. Only archive URLs are supported."
        )
    return url


def is_allowed_host(host: str, allowed_domains: list[str]) -> bool:
    host = host.lower()
    return any(
        host == domain.lower() or host.endswith(f".{domain.lower()}")
        for domain in allowed_domains
    )


def parse_decimal(raw: str | None, name: str) -> float | None:
    """Parse an optional decimal query parameter. Empty means unset."""
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise InvalidRequestError(f"{name} must be a number")

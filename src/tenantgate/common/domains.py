"""Canonical domain extraction.

``extract_domain`` is the only way domains are compared in TenantGate:
both the stored ``website_domain`` and any requesting domain go through
it, so scheme, case, path and trailing-slash differences disappear.
"""

from urllib.parse import urlsplit


def extract_domain(value: str) -> str:
    """Return the lower-case hostname of a URL or bare domain.

    ``"HTTPS://Foo.COM/"`` and ``"foo.com"`` both become ``"foo.com"``.
    Falls back to ``value.lower()`` when the value cannot be parsed; never
    raises.
    """
    candidate = value if value.lower().startswith("http") else f"https://{value}"
    try:
        hostname = urlsplit(candidate).hostname
    except ValueError:
        return value.lower()
    if not hostname:
        return value.lower()
    return hostname.lower()


def normalize_base_url(url: str) -> str:
    """Turn a website URL into an API base URL: ensure a scheme, drop the trailing slash."""
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url.rstrip("/")

"""
License key and API key generation.

License key format: LIC-{XXXX}-{XXXX}-{XXXX}-{XXXX}-{XXXX}-{XXXX}
- 12 random bytes, upper-case hex (24 chars)
- split into 6 groups of 4, prefixed with ``LIC``

API key format: 32 random bytes as 64 lower-case hex chars. The API key is
the HMAC shared secret for federation calls and must never be logged.

Both draw from ``secrets`` (the OS CSPRNG).
"""

import re
import secrets

LICENSE_PREFIX = "LIC"
LICENSE_KEY_BYTES = 12
GROUP_LEN = 4
GROUP_COUNT = (LICENSE_KEY_BYTES * 2) // GROUP_LEN
API_KEY_BYTES = 32

LICENSE_KEY_PATTERN = re.compile(
    rf"^{LICENSE_PREFIX}(-[0-9A-F]{{{GROUP_LEN}}}){{{GROUP_COUNT}}}$"
)
API_KEY_PATTERN = re.compile(rf"^[0-9a-f]{{{API_KEY_BYTES * 2}}}$")


def generate_license_key() -> str:
    """Generate a license key such as ``LIC-1A2B-3C4D-5E6F-7A8B-9C0D-E1F2``."""
    random_part = secrets.token_hex(LICENSE_KEY_BYTES).upper()
    groups = [
        random_part[i : i + GROUP_LEN]
        for i in range(0, len(random_part), GROUP_LEN)
    ]
    return "-".join([LICENSE_PREFIX, *groups])


def generate_api_key() -> str:
    """Generate a 64-char lower-case hex API key (256 bits)."""
    return secrets.token_hex(API_KEY_BYTES)


def is_license_key_format(value: str) -> bool:
    """Structural check only; says nothing about whether the key exists."""
    return bool(value) and LICENSE_KEY_PATTERN.match(value) is not None


def mask_secret(value: str | None, visible: int = 8) -> str | None:
    """Keep the first ``visible`` chars of a secret for display."""
    if not value:
        return value
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}..."

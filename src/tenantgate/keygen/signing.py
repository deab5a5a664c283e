"""HMAC-SHA256 request signing for federation calls.

The signed message is ``"{timestamp}:{path}:{query}:{body}"`` where
``query`` is the URL's search string exactly as sent (``"?limit=1"`` or
``""``). Tenants recompute the same digest with their copy of the API key.
Freshness of ``timestamp`` is checked by the receiving side, not here.
"""

import hashlib
import hmac
import time


def current_timestamp() -> str:
    """Milliseconds since the epoch, as sent in ``x-timestamp``."""
    return str(int(time.time() * 1000))


def create_hmac_signature(
    secret: str,
    timestamp: str,
    path: str,
    query: str,
    body: str = "",
) -> str:
    """Return the hex HMAC-SHA256 signature for one request."""
    message = f"{timestamp}:{path}:{query}:{body}"
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_hmac_signature(
    signature: str,
    secret: str,
    timestamp: str,
    path: str,
    query: str,
    body: str = "",
) -> bool:
    """Constant-time check of a received signature."""
    expected = create_hmac_signature(secret, timestamp, path, query, body)
    return hmac.compare_digest(expected, signature)

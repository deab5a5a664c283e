"""TenantGate: SaaS license verification and tenant API federation."""

from tenantgate.keygen.generator import generate_api_key, generate_license_key
from tenantgate.keygen.signing import create_hmac_signature, verify_hmac_signature

__all__ = [
    "generate_api_key",
    "generate_license_key",
    "create_hmac_signature",
    "verify_hmac_signature",
]
__version__ = "0.1.0"

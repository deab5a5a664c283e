"""TenantGate exception hierarchy.

Every error carries the HTTP status it maps to at the API boundary.
"""


class TenantGateError(Exception):
    """Base exception for all TenantGate errors."""

    status_code = 500

    def __init__(self, message: str = "", code: str = "TENANTGATE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(TenantGateError):
    """Raised for missing or malformed caller input."""

    status_code = 400

    def __init__(self, message: str = "Invalid request", code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)


class FederationNotConfiguredError(ValidationError):
    """Raised when a tenant is not eligible for outbound API calls."""

    def __init__(self, message: str = "Tenant API is not configured"):
        super().__init__(message, code="FEDERATION_NOT_CONFIGURED")


class NotFoundError(TenantGateError):
    status_code = 404

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class TenantNotFoundError(NotFoundError):
    def __init__(self, message: str = "Client not found"):
        super().__init__(message, code="CLIENT_NOT_FOUND")


class InvalidLicenseKeyError(NotFoundError):
    """Unknown license key. Reported as 401 on the verification wire."""

    status_code = 401

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_KEY")


class AuthorizationError(TenantGateError):
    """Account suspended/cancelled or domain not bound to the license."""

    status_code = 403

    def __init__(self, message: str = "Not authorized", code: str = "FORBIDDEN"):
        super().__init__(message, code=code)


class BillingError(TenantGateError):
    """Subscription inactive or expired."""

    status_code = 402

    def __init__(self, message: str = "Subscription is not active", code: str = "BILLING"):
        super().__init__(message, code=code)


class ConflictError(TenantGateError):
    status_code = 409

    def __init__(self, message: str = "Conflict", code: str = "CONFLICT"):
        super().__init__(message, code=code)


class UpstreamError(TenantGateError):
    """Tenant API unreachable or answered with a non-2xx status."""

    status_code = 502

    def __init__(
        self,
        message: str = "Tenant API request failed",
        upstream_status: int | None = None,
        status_text: str = "",
    ):
        self.upstream_status = upstream_status
        self.status_text = status_text
        super().__init__(message, code="UPSTREAM_ERROR")


class KeyGenerationExhausted(TenantGateError):
    """Raised when no unique license key could be allocated."""

    def __init__(self, message: str = "Failed to generate unique license key"):
        super().__init__(message, code="KEY_GENERATION_EXHAUSTED")


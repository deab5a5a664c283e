"""Readiness checks and operator-facing setup instructions for API federation."""

from dataclasses import dataclass, field

import httpx

from tenantgate.common.models import as_utc
from tenantgate.keygen.generator import mask_secret
from tenantgate.tenants.enums import AccountStatus, ApiStatus, AuthType
from tenantgate.tenants.models import TenantModel

MIN_API_KEY_LENGTH = 32
SECRET_ENV_VAR = "ADMIN_API_SECRET"


@dataclass
class FederationReadiness:
    issues: list[str] = field(default_factory=list)
    setup_instructions: list[str] = field(default_factory=list)
    ready_for_api: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.issues


def _value(member) -> str | None:
    return getattr(member, "value", member)


def validate_federation_setup(tenant: TenantModel) -> FederationReadiness:
    """Report every reason the tenant cannot be called yet, with a fix for each."""
    report = FederationReadiness()
    status = _value(tenant.status)
    auth_type = _value(tenant.auth_type)
    api_status = _value(tenant.api_status)

    if status != AccountStatus.ACTIVE.value:
        report.issues.append(f'Client status is "{status}" (must be "active")')
        report.setup_instructions.append("Enable client status in admin panel")

    if not tenant.api_base_url:
        report.issues.append("API Base URL is not configured")
        report.setup_instructions.append("Set API Base URL in client settings")
    else:
        try:
            url = httpx.URL(tenant.api_base_url)
        except httpx.InvalidURL:
            url = None
        if url is None or not url.is_absolute_url:
            report.issues.append("API Base URL is not a valid URL format")
            report.setup_instructions.append(
                "Fix API Base URL format (e.g., https://client-domain.com)"
            )
        elif url.scheme not in ("http", "https"):
            report.issues.append(
                "API Base URL should include protocol (https:// or http://)"
            )
            report.setup_instructions.append(
                "Update API Base URL to include https:// protocol"
            )

    if not auth_type:
        report.issues.append("Authentication type is not set")
        report.setup_instructions.append("Set authentication type (default: HMAC)")
    elif auth_type != AuthType.HMAC.value:
        report.issues.append(f'Authentication type "{auth_type}" is not yet supported')
        report.setup_instructions.append("Only HMAC authentication is currently supported")

    if not tenant.api_key:
        report.issues.append("API key is not generated")
        report.setup_instructions.append("Generate API key using regenerate-api-key")
    elif len(tenant.api_key) < MIN_API_KEY_LENGTH:
        report.issues.append("API key appears to be too short (security concern)")
        report.setup_instructions.append("Regenerate API key for better security")

    if api_status != ApiStatus.ACTIVE.value:
        report.issues.append(f'API status is "{api_status}" (must be "active")')
        report.setup_instructions.append("Enable API access in client settings")

    report.ready_for_api = (
        status == AccountStatus.ACTIVE.value
        and bool(tenant.api_base_url)
        and auth_type == AuthType.HMAC.value
        and bool(tenant.api_key)
        and api_status == ApiStatus.ACTIVE.value
    )
    if report.ready_for_api:
        report.setup_instructions.extend([
            f"Add {SECRET_ENV_VAR} to client .env.local file",
            "Restart client application",
            "Test connection with test-connection",
        ])
    return report


def format_readiness_report(readiness: FederationReadiness) -> str:
    """Plain-text rendering of a readiness report for logs and the CLI."""
    lines = []
    if readiness.is_valid:
        lines.append("API federation: all checks passed")
    else:
        lines.append("API federation: issues found")
        lines.extend(f"  - {issue}" for issue in readiness.issues)

    lines.append("")
    lines.append("Ready for API access" if readiness.ready_for_api else "Not ready for API access")

    if readiness.setup_instructions:
        lines.extend(["", "Next steps:"])
        lines.extend(f"  - {step}" for step in readiness.setup_instructions)
    return "\n".join(lines)


def client_setup_instructions(tenant: TenantModel) -> list[str]:
    """Steps the tenant's developers follow to expose ``/api/admin/users``.

    Only a preview of the API key is shown; the full key is handed out once,
    at creation or rotation.
    """
    base_url = tenant.api_base_url or "YOUR_DOMAIN"
    last_seen = as_utc(tenant.last_seen_at)
    return [
        "CLIENT SETUP INSTRUCTIONS",
        "",
        "1. Add this environment variable to your .env.local file:",
        f"   {SECRET_ENV_VAR}={mask_secret(tenant.api_key) or 'YOUR_API_KEY_HERE'}",
        "",
        "2. Restart your application to load the environment variable",
        "",
        "3. Verify the admin API endpoint is accessible:",
        f"   {base_url}/api/admin/users",
        "",
        "API configuration summary:",
        f"   API Base URL: {tenant.api_base_url or 'Not configured'}",
        f"   Auth Type: {_value(tenant.auth_type) or AuthType.HMAC.value}",
        f"   API Status: {_value(tenant.api_status) or ApiStatus.ACTIVE.value}",
        f"   Last Check: {last_seen.isoformat() if last_seen else 'Never'}",
    ]


def creation_instructions(tenant: TenantModel) -> list[str]:
    """One-time instructions returned when a client is created."""
    return [
        "SaaS client created. API federation has been configured:",
        f"   License Key: {tenant.license_key}",
        f"   API Key: {tenant.api_key}",
        f"   API Base URL: {tenant.api_base_url}",
        f"   Auth Type: {_value(tenant.auth_type)}",
        f"   API Status: {_value(tenant.api_status)}",
        "",
        "Client setup required:",
        "",
        "1. Add this to the client's .env.local file:",
        f"   {SECRET_ENV_VAR}={tenant.api_key}",
        "",
        "2. Expose GET /api/admin/users verifying x-timestamp and x-signature",
        "",
        "3. Restart the client application",
        "",
        "Copy the API key now. It will not be shown again.",
    ]


def rotation_instructions(api_key: str) -> list[str]:
    """One-time instructions returned when a client's API key is rotated."""
    return [
        "API key regenerated. Update the client project:",
        "",
        "1. Update the client's .env.local file:",
        f"   {SECRET_ENV_VAR}={api_key}",
        "",
        "2. Restart the client application to load the new key",
        "",
        "3. The old API key is now invalid",
        "",
        "4. Test the connection with test-connection",
        "",
        "Copy this key now. It will not be shown again.",
    ]

"""Pydantic schemas for the public verification wire protocol.

Field names are camelCase on the wire (``licenseKey``), snake_case in Python.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from tenantgate.tenants.enums import SubscriptionStatus, SubscriptionType, VerificationStatus


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VerifyLicenseRequest(WireModel):
    license_key: Optional[str] = None
    domain: Optional[str] = None


class DomainRequest(WireModel):
    domain: Optional[str] = None


class ClientProjection(WireModel):
    id: str
    company_name: str
    subscription_type: SubscriptionType
    subscription_end_date: Optional[datetime] = None


class VerifyLicenseResponse(WireModel):
    valid: bool
    error: Optional[str] = None
    client: Optional[ClientProjection] = None


class LicenseCheckResponse(WireModel):
    valid: bool
    expires_at: Optional[datetime] = None
    error: Optional[str] = None


class DomainClient(WireModel):
    id: str
    company_name: str
    subscription_status: SubscriptionStatus
    subscription_end_date: Optional[datetime] = None


class DomainLicenseResponse(WireModel):
    valid: bool
    error: Optional[str] = None
    globally_verified: Optional[bool] = None
    license_key: Optional[str] = None
    client: Optional[DomainClient] = None


class PingResponse(WireModel):
    success: bool = True
    message: str = "Admin panel is reachable"
    timestamp: datetime
    server: str
    version: str


class VerificationLogResponse(BaseModel):
    """Admin view of one verification attempt (snake_case like other admin APIs)."""

    id: str
    tenant_id: str
    license_key: str
    request_domain: str
    request_ip: str
    user_agent: str
    verification_status: VerificationStatus
    error_message: Optional[str] = None
    response_time_ms: int
    created_at: datetime

    model_config = {"from_attributes": True}

"""Pydantic schemas for the tenant admin endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from tenantgate.tenants.enums import (
    AccountStatus,
    ApiStatus,
    AuthType,
    LifecycleAction,
    SubscriptionStatus,
    SubscriptionType,
)


class TenantCreate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_name: str = Field(..., min_length=1, max_length=255)
    contact_email: EmailStr
    contact_phone: Optional[str] = Field(None, max_length=50)
    website_url: str = Field(..., min_length=1, max_length=500)
    website_domain: str = Field(..., min_length=1, max_length=255)
    subscription_type: SubscriptionType = SubscriptionType.MONTHLY
    subscription_end_date: Optional[datetime] = None
    notes: Optional[str] = None


class TenantUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    website_url: Optional[str] = Field(None, min_length=1, max_length=500)
    website_domain: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[AccountStatus] = None
    subscription_type: Optional[SubscriptionType] = None
    subscription_status: Optional[SubscriptionStatus] = None
    subscription_end_date: Optional[datetime] = None
    license_verified: Optional[bool] = None
    api_base_url: Optional[str] = Field(None, max_length=500)
    auth_type: Optional[AuthType] = None
    api_status: Optional[ApiStatus] = None
    notes: Optional[str] = None


class TenantResponse(BaseModel):
    id: str
    company_name: str
    contact_name: str
    contact_email: str
    contact_phone: Optional[str] = None
    website_url: str
    website_domain: str
    license_key: str
    license_verified: bool
    status: AccountStatus
    subscription_type: SubscriptionType
    subscription_status: SubscriptionStatus
    subscription_start_date: datetime
    subscription_end_date: Optional[datetime] = None
    api_base_url: Optional[str] = None
    auth_type: Optional[AuthType] = None
    api_key_preview: Optional[str] = None
    api_status: Optional[ApiStatus] = None
    last_seen_at: Optional[datetime] = None
    last_access_date: Optional[datetime] = None
    last_verification_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SetupInstructions(BaseModel):
    """One-time plaintext secrets plus the steps the tenant has to follow."""

    license_key: Optional[str] = None
    api_key: str
    api_base_url: Optional[str] = None
    auth_type: Optional[AuthType] = None
    instructions: list[str]


class TenantCreateResponse(TenantResponse):
    """Includes the raw API key — only returned once at creation time."""
    setup_instructions: SetupInstructions


class LicenseRegenerateResponse(TenantResponse):
    old_license_key: str


class ApiKeyRegenerateResponse(TenantResponse):
    setup_instructions: SetupInstructions


class ToggleStatusRequest(BaseModel):
    action: LifecycleAction
    reason: Optional[str] = Field(None, max_length=1000)

"""Pydantic schemas for tenant-side user records and admin responses."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TenantUser(BaseModel):
    """A user record as served by a tenant's ``/api/admin/users``.

    No field is required or type-checked and unknown fields are kept, so
    every record is passed through unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: Any = None
    email: Any = None
    name: Any = None
    first_name: Any = None
    last_name: Any = None
    phone: Any = None
    country: Any = None
    city: Any = None
    address: Any = None
    state: Any = None
    created_at: Any = None
    updated_at: Any = None


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    limit: Optional[int] = None
    has_more: bool = False


class TenantUsersPage(BaseModel):
    """One page of tenant users; pass ``next_cursor`` back to get the next."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: list[TenantUser] = []
    next_cursor: Optional[str] = None
    pagination: Optional[Pagination] = None


class ConnectionTestResponse(BaseModel):
    tenant_id: str
    success: bool
    last_seen_at: Optional[datetime] = None


class FederationStatusResponse(BaseModel):
    tenant_id: str
    is_valid: bool
    ready_for_api: bool
    issues: list[str]
    setup_instructions: list[str]
    client_setup: list[str]
    report: str

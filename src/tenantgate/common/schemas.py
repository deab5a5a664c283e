"""Shared Pydantic schemas for TenantGate."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "tenantgate"


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: str = ""

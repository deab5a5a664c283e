"""SQLAlchemy model for tenants (SaaS clients)."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tenantgate.common.models import Base, TimestampMixin, generate_uuid
from tenantgate.tenants.enums import (
    AccountStatus,
    ApiStatus,
    AuthType,
    SubscriptionStatus,
    SubscriptionType,
)


def _enum(enum_cls, name: str) -> Enum:
    # Persist the enum *values* ("active"), not member names ("ACTIVE").
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda cls: [member.value for member in cls],
    )


class TenantModel(Base, TimestampMixin):
    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    website_url: Mapped[str] = mapped_column(String(500), nullable=False)
    website_domain: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    license_key: Mapped[str] = mapped_column(
        String(40), unique=True, nullable=False, index=True
    )
    license_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[AccountStatus] = mapped_column(
        _enum(AccountStatus, "account_status"), default=AccountStatus.ACTIVE, index=True
    )

    subscription_type: Mapped[SubscriptionType] = mapped_column(
        _enum(SubscriptionType, "subscription_type"), default=SubscriptionType.MONTHLY
    )
    subscription_status: Mapped[SubscriptionStatus] = mapped_column(
        _enum(SubscriptionStatus, "subscription_status"),
        default=SubscriptionStatus.ACTIVE,
        index=True,
    )
    subscription_start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    subscription_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # API federation
    api_base_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    auth_type: Mapped[AuthType | None] = mapped_column(
        _enum(AuthType, "auth_type"), default=AuthType.HMAC, nullable=True
    )
    api_key: Mapped[str | None] = mapped_column(String(64), nullable=True)
    api_status: Mapped[ApiStatus | None] = mapped_column(
        _enum(ApiStatus, "api_status"), default=ApiStatus.ACTIVE, nullable=True
    )
    last_seen_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    last_access_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_verification_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

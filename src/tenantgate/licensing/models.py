"""SQLAlchemy model for the license verification log."""

from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tenantgate.common.models import Base, generate_uuid, utcnow
from tenantgate.tenants.enums import VerificationStatus

UNKNOWN_TENANT = "unknown"


class VerificationLogModel(Base):
    """Append-only; one row per full verification attempt."""

    __tablename__ = "license_verification_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    # Not a foreign key: unmatched keys are logged against "unknown".
    tenant_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    # Caller-supplied values are stored as sent, whatever their length.
    license_key: Mapped[str] = mapped_column(Text, nullable=False)
    request_domain: Mapped[str] = mapped_column(Text, nullable=False)
    request_ip: Mapped[str] = mapped_column(Text, nullable=False, default="unknown")
    user_agent: Mapped[str] = mapped_column(Text, nullable=False, default="unknown")
    verification_status: Mapped[VerificationStatus] = mapped_column(
        Enum(
            VerificationStatus,
            name="verification_status",
            native_enum=False,
            values_callable=lambda cls: [member.value for member in cls],
        ),
        nullable=False,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

"""Initial schema: tenants and license verification logs.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("contact_phone", sa.String(50), nullable=True),
        sa.Column("website_url", sa.String(500), nullable=False),
        sa.Column("website_domain", sa.String(255), nullable=False),
        sa.Column("license_key", sa.String(40), nullable=False),
        sa.Column("license_verified", sa.Boolean(), nullable=True),
        sa.Column("status", sa.String(9), nullable=False),
        sa.Column("subscription_type", sa.String(8), nullable=False),
        sa.Column("subscription_status", sa.String(9), nullable=False),
        sa.Column("subscription_start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("subscription_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("api_base_url", sa.String(500), nullable=True),
        sa.Column("auth_type", sa.String(4), nullable=True),
        sa.Column("api_key", sa.String(64), nullable=True),
        sa.Column("api_status", sa.String(6), nullable=True),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_access_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_verification_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_tenants_contact_email", "tenants", ["contact_email"], unique=True)
    op.create_index("ix_tenants_license_key", "tenants", ["license_key"], unique=True)
    op.create_index("ix_tenants_website_domain", "tenants", ["website_domain"])
    op.create_index("ix_tenants_status", "tenants", ["status"])
    op.create_index("ix_tenants_subscription_status", "tenants", ["subscription_status"])

    op.create_table(
        "license_verification_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), nullable=False),
        sa.Column("license_key", sa.Text(), nullable=False),
        sa.Column("request_domain", sa.Text(), nullable=False),
        sa.Column("request_ip", sa.Text(), nullable=False),
        sa.Column("user_agent", sa.Text(), nullable=False),
        sa.Column("verification_status", sa.String(9), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("response_time_ms", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_license_verification_logs_tenant_id",
        "license_verification_logs", ["tenant_id"],
    )
    op.create_index(
        "ix_license_verification_logs_verification_status",
        "license_verification_logs", ["verification_status"],
    )
    op.create_index(
        "ix_license_verification_logs_created_at",
        "license_verification_logs", ["created_at"],
    )


def downgrade() -> None:
    op.drop_table("license_verification_logs")
    op.drop_table("tenants")

"""initial marketplace schema

Revision ID: 0001_init_schema
Revises:
Create Date: 2025-09-15

Users, profiles, jobs, messages and the payment tables. Gating columns
(profiles.is_complete, users.approved_at, users.background_status) arrive
in 0002.
"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_init_schema"
down_revision = None
branch_labels = None
depends_on = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False)


PAYMENT_STATUS = (
    "REQUIRES_CONFIRMATION",
    "AUTHORIZED",
    "SUCCEEDED",
    "PARTIALLY_REFUNDED",
    "REFUNDED",
    "CANCELED",
    "FAILED",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column(
            "role",
            _enum("role", "ADMIN", "PARENT", "NANNY"),
            nullable=False,
            server_default="PARENT",
        ),
        sa.Column(
            "account_status",
            _enum("account_status", "PENDING_PAYMENT", "ACTIVE", "SUSPENDED"),
            nullable=False,
            server_default="PENDING_PAYMENT",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("experience", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("user_id", name="uq_profiles_user_id"),
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "status",
            _enum("job_status", "PENDING", "ACCEPTED", "COMPLETED", "CANCELLED"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column(
            "type",
            _enum("job_type", "SHORT_TERM", "LONG_TERM"),
            nullable=False,
            server_default="SHORT_TERM",
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("hours_per_week", sa.Integer(), nullable=True),
        sa.Column("parent_id", sa.String(36), nullable=False),
        sa.Column("nanny_id", sa.String(36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["nanny_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_jobs_parent_id", "jobs", ["parent_id"])
    op.create_index("ix_jobs_nanny_id", "jobs", ["nanny_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("sender_id", sa.String(36), nullable=False),
        sa.Column("receiver_id", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"], ondelete="RESTRICT"),
    )
    op.create_index(
        "ix_messages_sender_created", "messages", ["sender_id", "created_at"]
    )
    op.create_index(
        "ix_messages_receiver_created", "messages", ["receiver_id", "created_at"]
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("job_id", sa.String(36), nullable=False),
        sa.Column("parent_id", sa.String(36), nullable=False),
        sa.Column("nanny_id", sa.String(36), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="KSH"),
        sa.Column(
            "platform_fee", sa.Numeric(12, 2), nullable=False, server_default="0"
        ),
        sa.Column(
            "net_to_nanny", sa.Numeric(12, 2), nullable=False, server_default="0"
        ),
        sa.Column(
            "status",
            _enum("payment_status", *PAYMENT_STATUS),
            nullable=False,
            server_default="REQUIRES_CONFIRMATION",
        ),
        sa.Column(
            "provider",
            _enum("payment_provider", "STRIPE"),
            nullable=False,
            server_default="STRIPE",
        ),
        sa.Column("provider_intent_id", sa.String(255), nullable=True),
        sa.Column("provider_charge_id", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["parent_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["nanny_id"], ["users.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("job_id", name="uq_payments_job_id"),
    )
    op.create_index("ix_payments_parent_id", "payments", ["parent_id"])
    op.create_index("ix_payments_nanny_id", "payments", ["nanny_id"])
    op.create_index(
        "ix_payments_status_created", "payments", ["status", "created_at"]
    )

    op.create_table(
        "refunds",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("payment_id", sa.String(36), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("provider_refund_id", sa.String(255), nullable=True),
        sa.Column(
            "status",
            _enum("refund_status", "PENDING", "SUCCEEDED", "FAILED"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["payment_id"], ["payments.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_refunds_payment_id", "refunds", ["payment_id"])

    op.create_table(
        "payouts",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("nanny_id", sa.String(36), nullable=False),
        sa.Column("payment_id", sa.String(36), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column(
            "status",
            _enum(
                "payout_status", "PENDING", "IN_TRANSIT", "PAID", "FAILED", "CANCELED"
            ),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column(
            "provider",
            _enum("payout_provider", "STRIPE_CONNECT"),
            nullable=False,
            server_default="STRIPE_CONNECT",
        ),
        sa.Column("provider_payout_id", sa.String(255), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["nanny_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["payment_id"], ["payments.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_payouts_nanny_status", "payouts", ["nanny_id", "status"])

    op.create_table(
        "payment_methods",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column(
            "provider",
            _enum("payment_provider", "STRIPE"),
            nullable=False,
            server_default="STRIPE",
        ),
        sa.Column("provider_method_id", sa.String(255), nullable=False),
        sa.Column("brand", sa.String(50), nullable=True),
        sa.Column("last4", sa.String(4), nullable=True),
        sa.Column("exp_month", sa.Integer(), nullable=True),
        sa.Column("exp_year", sa.Integer(), nullable=True),
        sa.Column(
            "is_default", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint(
            "user_id", "provider_method_id", name="uq_payment_methods_user_method"
        ),
    )
    op.create_index(
        "ix_payment_methods_user_default",
        "payment_methods",
        ["user_id", "is_default"],
    )

    op.create_table(
        "signup_payments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column(
            "status",
            _enum("payment_status", *PAYMENT_STATUS),
            nullable=False,
            server_default="REQUIRES_CONFIRMATION",
        ),
        sa.Column(
            "provider",
            _enum("payment_provider", "STRIPE"),
            nullable=False,
            server_default="STRIPE",
        ),
        sa.Column("provider_intent_id", sa.String(255), nullable=True),
        sa.Column("provider_charge_id", sa.String(255), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
    )
    op.create_index(
        "ix_signup_payments_user_status", "signup_payments", ["user_id", "status"]
    )


def downgrade() -> None:
    op.drop_index("ix_signup_payments_user_status", table_name="signup_payments")
    op.drop_table("signup_payments")
    op.drop_index("ix_payment_methods_user_default", table_name="payment_methods")
    op.drop_table("payment_methods")
    op.drop_index("ix_payouts_nanny_status", table_name="payouts")
    op.drop_table("payouts")
    op.drop_index("ix_refunds_payment_id", table_name="refunds")
    op.drop_table("refunds")
    op.drop_index("ix_payments_status_created", table_name="payments")
    op.drop_index("ix_payments_nanny_id", table_name="payments")
    op.drop_index("ix_payments_parent_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_messages_receiver_created", table_name="messages")
    op.drop_index("ix_messages_sender_created", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_jobs_nanny_id", table_name="jobs")
    op.drop_index("ix_jobs_parent_id", table_name="jobs")
    op.drop_table("jobs")
    op.drop_table("profiles")
    op.drop_table("users")

"""SQLAlchemy models for the nanny marketplace.

User and Profile carry the account-gating state. Job, Message, the payment
tables and payouts are schema placeholders; no service logic reads them yet.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from core.database import Base


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())


def _enum_column(enum_cls: type[PyEnum], name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda x: [e.value for e in x],
    )


class Role(str, PyEnum):
    ADMIN = "ADMIN"
    PARENT = "PARENT"
    NANNY = "NANNY"


class AccountStatus(str, PyEnum):
    """Signup lifecycle: unpaid -> active, with admin suspension."""

    PENDING_PAYMENT = "PENDING_PAYMENT"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class BackgroundStatus(str, PyEnum):
    """Result of the external background/reference check."""

    PENDING = "PENDING"
    PASSED = "PASSED"
    FAILED = "FAILED"


class JobStatus(str, PyEnum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class JobType(str, PyEnum):
    SHORT_TERM = "SHORT_TERM"
    LONG_TERM = "LONG_TERM"


class PaymentStatus(str, PyEnum):
    REQUIRES_CONFIRMATION = "REQUIRES_CONFIRMATION"
    AUTHORIZED = "AUTHORIZED"
    SUCCEEDED = "SUCCEEDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    REFUNDED = "REFUNDED"
    CANCELED = "CANCELED"
    FAILED = "FAILED"


class RefundStatus(str, PyEnum):
    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class PayoutStatus(str, PyEnum):
    PENDING = "PENDING"
    IN_TRANSIT = "IN_TRANSIT"
    PAID = "PAID"
    FAILED = "FAILED"
    CANCELED = "CANCELED"


class PaymentProvider(str, PyEnum):
    STRIPE = "STRIPE"


class PayoutProvider(str, PyEnum):
    STRIPE_CONNECT = "STRIPE_CONNECT"


class TimestampMixin:
    """Adds created_at and updated_at columns."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class User(TimestampMixin, Base):
    """Marketplace account (parent, nanny or admin).

    ``password`` holds a hash; hashing happens before the service layer.
    """

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        _enum_column(Role, "role"), nullable=False, default=Role.PARENT
    )
    account_status: Mapped[AccountStatus] = mapped_column(
        _enum_column(AccountStatus, "account_status"),
        nullable=False,
        default=AccountStatus.PENDING_PAYMENT,
    )
    background_status: Mapped[BackgroundStatus] = mapped_column(
        _enum_column(BackgroundStatus, "background_status"),
        nullable=False,
        default=BackgroundStatus.PENDING,
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    profile: Mapped["Profile | None"] = relationship(
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )


class Profile(Base):
    """Free-text profile, at most one per user."""

    __tablename__ = "profiles"
    __table_args__ = (UniqueConstraint("user_id", name="uq_profiles_user_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Only admin approval sets this
    is_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    user: Mapped[User] = relationship(back_populates="profile")


class Job(TimestampMixin, Base):
    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_parent_id", "parent_id"),
        Index("ix_jobs_nanny_id", "nanny_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[JobStatus] = mapped_column(
        _enum_column(JobStatus, "job_status"), nullable=False, default=JobStatus.PENDING
    )
    type: Mapped[JobType] = mapped_column(
        _enum_column(JobType, "job_type"), nullable=False, default=JobType.SHORT_TERM
    )
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    hours_per_week: Mapped[int | None] = mapped_column(Integer)
    parent_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    nanny_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL")
    )


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_sender_created", "sender_id", "created_at"),
        Index("ix_messages_receiver_created", "receiver_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sender_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    receiver_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Payment(TimestampMixin, Base):
    """Job payment held by the provider; one per job."""

    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("job_id", name="uq_payments_job_id"),
        Index("ix_payments_parent_id", "parent_id"),
        Index("ix_payments_nanny_id", "nanny_id"),
        Index("ix_payments_status_created", "status", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    job_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("jobs.id", ondelete="RESTRICT"), nullable=False
    )
    parent_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    nanny_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL")
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="KSH")
    platform_fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    net_to_nanny: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    status: Mapped[PaymentStatus] = mapped_column(
        _enum_column(PaymentStatus, "payment_status"),
        nullable=False,
        default=PaymentStatus.REQUIRES_CONFIRMATION,
    )
    provider: Mapped[PaymentProvider] = mapped_column(
        _enum_column(PaymentProvider, "payment_provider"),
        nullable=False,
        default=PaymentProvider.STRIPE,
    )
    provider_intent_id: Mapped[str | None] = mapped_column(String(255))
    provider_charge_id: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON)


class Refund(Base):
    __tablename__ = "refunds"
    __table_args__ = (Index("ix_refunds_payment_id", "payment_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    payment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("payments.id", ondelete="RESTRICT"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text)
    provider_refund_id: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[RefundStatus] = mapped_column(
        _enum_column(RefundStatus, "refund_status"),
        nullable=False,
        default=RefundStatus.PENDING,
    )
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Payout(TimestampMixin, Base):
    __tablename__ = "payouts"
    __table_args__ = (Index("ix_payouts_nanny_status", "nanny_id", "status"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    nanny_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    payment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("payments.id", ondelete="SET NULL")
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    status: Mapped[PayoutStatus] = mapped_column(
        _enum_column(PayoutStatus, "payout_status"),
        nullable=False,
        default=PayoutStatus.PENDING,
    )
    provider: Mapped[PayoutProvider] = mapped_column(
        _enum_column(PayoutProvider, "payout_provider"),
        nullable=False,
        default=PayoutProvider.STRIPE_CONNECT,
    )
    provider_payout_id: Mapped[str | None] = mapped_column(String(255))
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON)


class PaymentMethod(TimestampMixin, Base):
    __tablename__ = "payment_methods"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "provider_method_id", name="uq_payment_methods_user_method"
        ),
        Index("ix_payment_methods_user_default", "user_id", "is_default"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    provider: Mapped[PaymentProvider] = mapped_column(
        _enum_column(PaymentProvider, "payment_provider"),
        nullable=False,
        default=PaymentProvider.STRIPE,
    )
    provider_method_id: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[str | None] = mapped_column(String(50))
    last4: Mapped[str | None] = mapped_column(String(4))
    exp_month: Mapped[int | None] = mapped_column(Integer)
    exp_year: Mapped[int | None] = mapped_column(Integer)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class SignupPayment(TimestampMixin, Base):
    """Signup fee; its confirmation triggers account activation."""

    __tablename__ = "signup_payments"
    __table_args__ = (Index("ix_signup_payments_user_status", "user_id", "status"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    status: Mapped[PaymentStatus] = mapped_column(
        _enum_column(PaymentStatus, "payment_status"),
        nullable=False,
        default=PaymentStatus.REQUIRES_CONFIRMATION,
    )
    provider: Mapped[PaymentProvider] = mapped_column(
        _enum_column(PaymentProvider, "payment_provider"),
        nullable=False,
        default=PaymentProvider.STRIPE,
    )
    provider_intent_id: Mapped[str | None] = mapped_column(String(255))
    provider_charge_id: Mapped[str | None] = mapped_column(String(255))
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON)

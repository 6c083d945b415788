"""background checks and profile completion

Revision ID: 0002_background_checks
Revises: 0001_init_schema
Create Date: 2025-09-15

Adds the account-gate columns. Existing rows start unapproved, incomplete
and with a PENDING background check.
"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0002_background_checks"
down_revision = "0001_init_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("profiles") as batch_op:
        batch_op.add_column(
            sa.Column(
                "is_complete", sa.Boolean(), nullable=False, server_default=sa.false()
            )
        )

    with op.batch_alter_table("users") as batch_op:
        batch_op.add_column(
            sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True)
        )
        batch_op.add_column(
            sa.Column(
                "background_status",
                sa.Enum(
                    "PENDING",
                    "PASSED",
                    "FAILED",
                    name="background_status",
                    native_enum=False,
                ),
                nullable=False,
                server_default="PENDING",
            )
        )


def downgrade() -> None:
    with op.batch_alter_table("users") as batch_op:
        batch_op.drop_column("background_status")
        batch_op.drop_column("approved_at")

    with op.batch_alter_table("profiles") as batch_op:
        batch_op.drop_column("is_complete")

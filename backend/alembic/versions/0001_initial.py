"""reservations and user roles

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("slot", sa.Text(), nullable=False),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("owner_email", sa.Text()),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.Text(), nullable=False),
        sa.Column("payment_status", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint("date", "slot", name="uq_reservations_date_slot"),
    )
    op.create_index("ix_reservations_date", "reservations", ["date"])
    op.create_index("ix_reservations_owner_id", "reservations", ["owner_id"])

    op.create_table(
        "user_roles",
        sa.Column("identity_id", sa.Text(), primary_key=True),
        sa.Column("email", sa.Text()),
        sa.Column("role", sa.Text(), nullable=False, server_default=sa.text("'customer'")),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )


def downgrade():
    op.drop_table("user_roles")
    op.drop_index("ix_reservations_owner_id", table_name="reservations")
    op.drop_index("ix_reservations_date", table_name="reservations")
    op.drop_table("reservations")

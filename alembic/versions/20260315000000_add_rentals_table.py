"""Add rentals table.

Revision ID: 20260315000000
Revises: 20260301000000
Create Date: 2026-03-15

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260315000000"
down_revision: Union[str, None] = "20260301000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "rentals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.Uuid(), nullable=False),
        sa.Column("booking_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("car_id", sa.Integer(), nullable=False),
        sa.Column("issuer_id", sa.Integer(), nullable=True),
        sa.Column("receiver_id", sa.Integer(), nullable=True),
        sa.Column(
            "status", sa.String(length=32), nullable=False, server_default="PENDING_CONFIRMATION"
        ),
        sa.Column("issued_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expected_return_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("returned_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fine", sa.Float(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["car_id"], ["cars.id"]),
        sa.ForeignKeyConstraint(["issuer_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_id"),
    )
    op.create_index(op.f("ix_rentals_uuid"), "rentals", ["uuid"], unique=True)
    op.create_index(op.f("ix_rentals_user_id"), "rentals", ["user_id"], unique=False)
    op.create_index(op.f("ix_rentals_car_id"), "rentals", ["car_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_rentals_car_id"), table_name="rentals")
    op.drop_index(op.f("ix_rentals_user_id"), table_name="rentals")
    op.drop_index(op.f("ix_rentals_uuid"), table_name="rentals")
    op.drop_table("rentals")

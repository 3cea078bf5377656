"""initial lottery schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "deployments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("engine_address", sa.String(length=64), nullable=False),
        sa.Column("admin_address", sa.String(length=64), nullable=False),
        sa.Column("default_ticket_price", sa.BigInteger(), nullable=False),
        sa.Column("network", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_deployments")),
        sa.UniqueConstraint("engine_address", name=op.f("uq_deployments_engine_address")),
    )
    op.create_table(
        "rounds",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("draw_time", sa.BigInteger(), nullable=False),
        sa.Column("ticket_price", sa.BigInteger(), nullable=False),
        sa.Column("state", sa.String(length=20), nullable=False),
        sa.Column("winning_number", sa.Integer(), nullable=True),
        sa.Column("ticket_count", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.BigInteger(), nullable=False),
        sa.Column("winner_count", sa.Integer(), nullable=False),
        sa.Column("commitment", sa.String(length=128), nullable=True),
        sa.Column("commitment_scheme", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("settled_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "state IN ('open','settled')", name=op.f("ck_rounds_state_enum")
        ),
        sa.CheckConstraint(
            "(state = 'open' AND winning_number IS NULL) OR "
            "(state = 'settled' AND winning_number IS NOT NULL)",
            name=op.f("ck_rounds_winning_number_on_settle"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_rounds")),
    )
    op.create_index("ix_rounds_draw_time", "rounds", ["draw_time"], unique=False)
    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("round_id", sa.Integer(), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("buyer", sa.String(length=64), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("purchased_at", sa.BigInteger(), nullable=False),
        sa.CheckConstraint(
            "number BETWEEN 1000 AND 9999", name=op.f("ck_tickets_number_range")
        ),
        sa.CheckConstraint(
            "amount >= 0", name=op.f("ck_tickets_amount_non_negative")
        ),
        sa.ForeignKeyConstraint(
            ["round_id"],
            ["rounds.id"],
            name=op.f("fk_tickets_round_id_rounds"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tickets")),
        sa.UniqueConstraint("round_id", "seq", name="uq_ticket_round_seq"),
    )
    op.create_index(op.f("ix_tickets_round_id"), "tickets", ["round_id"], unique=False)
    op.create_index(op.f("ix_tickets_buyer"), "tickets", ["buyer"], unique=False)
    op.create_index(
        "ix_tickets_round_number", "tickets", ["round_id", "number"], unique=False
    )
    op.create_table(
        "settlement_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("round_id", sa.Integer(), nullable=False),
        sa.Column("winning_number", sa.Integer(), nullable=False),
        sa.Column("winner_count", sa.Integer(), nullable=False),
        sa.Column("settled_by", sa.String(length=64), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["round_id"],
            ["rounds.id"],
            name=op.f("fk_settlement_events_round_id_rounds"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_settlement_events")),
        sa.UniqueConstraint("round_id", name=op.f("uq_settlement_events_round_id")),
    )


def downgrade() -> None:
    op.drop_table("settlement_events")
    op.drop_index("ix_tickets_round_number", table_name="tickets")
    op.drop_index(op.f("ix_tickets_buyer"), table_name="tickets")
    op.drop_index(op.f("ix_tickets_round_id"), table_name="tickets")
    op.drop_table("tickets")
    op.drop_index("ix_rounds_draw_time", table_name="rounds")
    op.drop_table("rounds")
    op.drop_table("deployments")

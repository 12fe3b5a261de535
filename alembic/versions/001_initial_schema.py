"""Initial schema — ranches, layouts, master data, calves, loads, movement history.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Referential rules are declared here, not in application code:
layout rows and load links CASCADE with their parent, while calves, loads
and history rows only lose their ranch reference (SET NULL).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _ranch_fk(table: str, column: str) -> sa.Column:
    return sa.Column(
        column, sa.Integer,
        sa.ForeignKey("ranches.id", ondelete="SET NULL", name=f"fk_{table}_{column}_ranches"),
        nullable=True,
    )


def upgrade() -> None:
    op.create_table(
        "ranches",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("address", sa.String(200), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("state", sa.String(40), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
        sa.Column("manager", sa.String(120), nullable=True),
        sa.Column("color", sa.String(20), nullable=True),
        sa.Column("created_by", sa.String(200), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_ranches_name"),
    )

    op.create_table(
        "ranch_weight_brackets",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "ranch_id", sa.Integer,
            sa.ForeignKey("ranches.id", ondelete="CASCADE", name="fk_ranch_weight_brackets_ranch_id_ranches"),
            nullable=False,
        ),
        sa.Column("bracket_key", sa.String(60), nullable=True),
        sa.Column("label", sa.String(120), nullable=False),
        sa.Column("min_weight", sa.Numeric(10, 2), nullable=True),
        sa.Column("max_weight", sa.Numeric(10, 2), nullable=True),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("breeds", sa.JSON, nullable=False),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_ranch_weight_brackets_ranch_id", "ranch_weight_brackets", ["ranch_id"])

    op.create_table(
        "ranch_price_periods",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "ranch_id", sa.Integer,
            sa.ForeignKey("ranches.id", ondelete="CASCADE", name="fk_ranch_price_periods_ranch_id_ranches"),
            nullable=False,
        ),
        sa.Column("period_key", sa.String(60), nullable=True),
        sa.Column("label", sa.String(120), nullable=False),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("purchase_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("sell_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("layout_mode", sa.String(10), nullable=False, server_default="single"),
        sa.Column("sheet_data", sa.JSON, nullable=False),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_ranch_price_periods_ranch_id", "ranch_price_periods", ["ranch_id"])

    op.create_table(
        "breeds",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("identity_key", sa.String(255), nullable=False),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("identity_key", name="uq_breeds_identity_key"),
    )

    op.create_table(
        "sellers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(140), nullable=False),
        sa.Column("address", sa.String(200), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("state", sa.String(40), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
        sa.Column("identity_key", sa.String(600), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("identity_key", name="uq_sellers_identity_key"),
    )

    op.create_table(
        "calves",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("primary_id", sa.String(60), nullable=False),
        sa.Column("eid", sa.String(60), nullable=True),
        sa.Column("original_id", sa.String(60), nullable=True),
        sa.Column("placed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("breed", sa.String(120), nullable=False),
        sa.Column("sex", sa.String(20), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("sell_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("weight", sa.Numeric(10, 2), nullable=True),
        sa.Column("seller", sa.String(140), nullable=False),
        sa.Column("dairy", sa.String(120), nullable=True),
        _ranch_fk("calves", "current_ranch_id"),
        _ranch_fk("calves", "origin_ranch_id"),
        sa.Column("status", sa.String(20), nullable=False, server_default="feeding"),
        sa.Column("sell_status", sa.String(10), nullable=False, server_default="open"),
        sa.Column("condition", sa.String(255), nullable=True),
        sa.Column("calf_type", sa.String(2), nullable=True),
        sa.Column("pre_days_on_feed", sa.Integer, nullable=True),
        sa.Column("death_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("shipped_out_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("shipped_to", sa.String(200), nullable=True),
        sa.Column("created_by", sa.String(200), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_calves_current_ranch_id", "calves", ["current_ranch_id"])
    op.create_index("ix_calves_origin_ranch_id", "calves", ["origin_ranch_id"])
    op.create_index("ix_calves_status_eid", "calves", ["status", "eid"])
    op.create_index("ix_calves_status_primary_id", "calves", ["status", "primary_id"])

    op.create_table(
        "loads",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _ranch_fk("loads", "origin_ranch_id"),
        _ranch_fk("loads", "destination_ranch_id"),
        sa.Column("destination_name", sa.String(200), nullable=True),
        sa.Column("departure_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("arrival_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("after_arrival_notes", sa.Text, nullable=True),
        sa.Column("trucking", sa.String(200), nullable=True),
        sa.Column("created_by", sa.String(200), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "destination_ranch_id IS NOT NULL OR destination_name IS NOT NULL",
            name="ck_loads_has_destination",
        ),
    )
    op.create_index("ix_loads_origin_ranch_id", "loads", ["origin_ranch_id"])
    op.create_index("ix_loads_destination_ranch_id", "loads", ["destination_ranch_id"])

    op.create_table(
        "calf_loads",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "load_id", sa.Integer,
            sa.ForeignKey("loads.id", ondelete="CASCADE", name="fk_calf_loads_load_id_loads"),
            nullable=False,
        ),
        sa.Column(
            "calf_id", sa.Integer,
            sa.ForeignKey("calves.id", ondelete="CASCADE", name="fk_calf_loads_calf_id_calves"),
            nullable=False,
        ),
        sa.Column("days_on_feed_at_shipment", sa.Integer, nullable=True),
        sa.Column("arrival_status", sa.String(20), nullable=True),
        sa.UniqueConstraint("load_id", "calf_id", name="uq_calf_loads_load_calf"),
    )
    op.create_index("ix_calf_loads_load_id", "calf_loads", ["load_id"])
    op.create_index("ix_calf_loads_calf_id", "calf_loads", ["calf_id"])

    op.create_table(
        "calf_movement_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "calf_id", sa.Integer,
            sa.ForeignKey("calves.id", ondelete="CASCADE", name="fk_calf_movement_history_calf_id_calves"),
            nullable=False,
        ),
        sa.Column(
            "load_id", sa.Integer,
            sa.ForeignKey("loads.id", ondelete="SET NULL", name="fk_calf_movement_history_load_id_loads"),
            nullable=True,
        ),
        sa.Column("movement_type", sa.String(20), nullable=False),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        _ranch_fk("calf_movement_history", "from_ranch_id"),
        _ranch_fk("calf_movement_history", "to_ranch_id"),
        sa.Column("from_status", sa.String(20), nullable=True),
        sa.Column("to_status", sa.String(20), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
    )
    op.create_index("ix_calf_movement_history_load_id", "calf_movement_history", ["load_id"])
    op.create_index(
        "ix_calf_movement_history_calf_event", "calf_movement_history",
        ["calf_id", "event_date"],
    )


def downgrade() -> None:
    op.drop_table("calf_movement_history")
    op.drop_table("calf_loads")
    op.drop_table("loads")
    op.drop_table("calves")
    op.drop_table("sellers")
    op.drop_table("breeds")
    op.drop_table("ranch_price_periods")
    op.drop_table("ranch_weight_brackets")
    op.drop_table("ranches")

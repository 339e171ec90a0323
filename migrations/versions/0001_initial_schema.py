"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, audit trail, and every kitchen operations table."""
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = set(inspector.get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("username", sa.String(64), nullable=False, unique=True),
            sa.Column("pin_hash", sa.String(255), nullable=False),
            sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "audit_events" not in existing_tables:
        op.create_table(
            "audit_events",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("request_id", sa.String(64), nullable=True),
            sa.Column("actor_user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
            sa.Column("actor_username", sa.String(64), nullable=True),
            sa.Column("action", sa.String(128), nullable=False),
            sa.Column("entity_type", sa.String(128), nullable=True),
            sa.Column("entity_id", sa.String(128), nullable=True),
            sa.Column("reason", sa.String(512), nullable=True),
            sa.Column("metadata_json", sa.Text(), nullable=True),
            sa.Column("client_ip", sa.String(64), nullable=True),
        )
        op.create_index("idx_audit_events_entity", "audit_events", ["entity_type", "entity_id"])

    # Sales
    if "projected_sales" not in existing_tables:
        op.create_table(
            "projected_sales",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("day", sa.String(16), nullable=False, unique=True),
            sa.Column("sales", sa.Float(), nullable=False, server_default="0"),
            sa.Column("updated_on", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "future_projections" not in existing_tables:
        op.create_table(
            "future_projections",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("date", sa.Date(), nullable=False, unique=True),
            sa.Column("amount", sa.Float(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "sales_projection_config" not in existing_tables:
        op.create_table(
            "sales_projection_config",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("target_day", sa.String(16), nullable=False),
            sa.Column("source_day", sa.String(16), nullable=False),
            sa.Column("percentage", sa.Float(), nullable=False, server_default="0"),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.UniqueConstraint("target_day", "source_day", name="uq_projection_config_target_source"),
        )

    # UPT and sales mix
    if "upt_values" not in existing_tables:
        op.create_table(
            "upt_values",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("product_name", sa.String(64), nullable=False, unique=True),
            sa.Column("utp", sa.Float(), nullable=False, server_default="0"),
            sa.Column("old_utp", sa.Float(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "sales_mix" not in existing_tables:
        op.create_table(
            "sales_mix",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("data", sa.JSON(), nullable=False),
            sa.Column("upload_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("period_start", sa.Date(), nullable=False),
            sa.Column("period_end", sa.Date(), nullable=False),
        )

    # Buffers
    if "product_buffers" not in existing_tables:
        op.create_table(
            "product_buffers",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("product_name", sa.String(64), nullable=False, unique=True),
            sa.Column("buffer_prcnt", sa.Float(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_on", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "daily_buffers" not in existing_tables:
        op.create_table(
            "daily_buffers",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("day", sa.String(16), nullable=False),
            sa.Column("product_name", sa.String(64), nullable=False),
            sa.Column("buffer_prcnt", sa.Float(), nullable=False, server_default="0"),
            sa.Column("last_modified", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.UniqueConstraint("day", "product_name", name="uq_daily_buffers_day_product"),
        )

    # Adjustments, closures, instructions
    if "adjustments" not in existing_tables:
        op.create_table(
            "adjustments",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("day", sa.String(16), nullable=False),
            sa.Column("product", sa.String(64), nullable=False),
            sa.Column("message", sa.Text(), nullable=False),
            sa.Column("expires_at", sa.DateTime(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )
        op.create_index("idx_adjustments_expires_at", "adjustments", ["expires_at"])

    if "closure_plans" not in existing_tables:
        op.create_table(
            "closure_plans",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("reason", sa.Text(), nullable=False),
            sa.Column("duration_value", sa.Integer(), nullable=False),
            sa.Column("duration_unit", sa.String(8), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )
        op.create_index("ix_closure_plans_date", "closure_plans", ["date"])

    if "instructions" not in existing_tables:
        op.create_table(
            "instructions",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("day", sa.String(16), nullable=False),
            sa.Column("message", sa.Text(), nullable=False),
            sa.Column("products", sa.Text(), nullable=False, server_default=""),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )
        op.create_index("ix_instructions_day", "instructions", ["day"])

    # Truck items
    if "truck_items" not in existing_tables:
        op.create_table(
            "truck_items",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("description", sa.String(255), nullable=False),
            sa.Column("uom", sa.String(64), nullable=False),
            sa.Column("total_units", sa.Float(), nullable=False),
            sa.Column("unit_type", sa.String(16), nullable=False),
            sa.Column("cost", sa.Float(), nullable=False, server_default="0"),
            sa.Column("min_par_level", sa.Float(), nullable=True),
            sa.Column("max_par_level", sa.Float(), nullable=True),
            sa.Column("on_hand_qty", sa.Float(), nullable=False, server_default="0"),
            sa.Column("lead_time", sa.Integer(), nullable=True),
            sa.Column("storage_type", sa.String(16), nullable=False, server_default="dry"),
            sa.Column("storage_location", sa.String(128), nullable=True),
            sa.Column("shelf_life", sa.Integer(), nullable=True),
            sa.Column("priority_level", sa.String(16), nullable=False, server_default="medium"),
            sa.Column("avg_daily_usage", sa.Float(), nullable=False, server_default="0"),
            sa.Column("waste_percentage", sa.Float(), nullable=False, server_default="0"),
            sa.Column("last_order_date", sa.Date(), nullable=True),
            sa.Column("last_order_quantity", sa.Float(), nullable=True),
            sa.Column("last_order_price", sa.Float(), nullable=True),
            sa.Column("next_scheduled_delivery", sa.Date(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "truck_item_associations" not in existing_tables:
        op.create_table(
            "truck_item_associations",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("truck_item_id", sa.Integer(), sa.ForeignKey("truck_items.id", ondelete="CASCADE"), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("usage", sa.Float(), nullable=False),
            sa.Column("unit", sa.String(16), nullable=False),
        )
        op.create_index("ix_truck_item_associations_truck_item_id", "truck_item_associations", ["truck_item_id"])


def downgrade() -> None:
    for table in (
        "truck_item_associations",
        "truck_items",
        "instructions",
        "closure_plans",
        "adjustments",
        "daily_buffers",
        "product_buffers",
        "sales_mix",
        "upt_values",
        "sales_projection_config",
        "future_projections",
        "projected_sales",
        "audit_events",
        "users",
    ):
        op.drop_table(table)

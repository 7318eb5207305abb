"""Initial schema — insurers, quotations, insurer quotes, audit log.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _money(name: str, **kwargs: object) -> sa.Column:
    return sa.Column(name, sa.Numeric(12, 2), nullable=False, server_default="0", **kwargs)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _idv_columns() -> list[sa.Column]:
    return [
        _money("idv_vehicle"),
        _money("idv_trailer"),
        _money("idv_cng_lpg_kit"),
        _money("idv_electrical_accessories"),
        _money("idv_non_electrical_accessories"),
        _money("total_idv"),
    ]


def upgrade() -> None:
    # ── Standalone tables (no FKs) ─────────────────────────────────────

    op.create_table(
        "audit_log",
        sa.Column("event_type", sa.String(100), nullable=False, index=True),
        sa.Column("quotation_id", sa.Integer(), index=True),
        sa.Column("actor_id", sa.String(100), comment="Staff user ID or 'system'"),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text())),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "insurance_companies",
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("mobile_number", sa.String(20)),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true(), index=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "quotations",
        sa.Column("customer_id", sa.Integer(), nullable=False, index=True),
        sa.Column("policy_type", sa.String(30)),
        sa.Column("policy_tenure_years", sa.Integer()),
        sa.Column("vehicle_number", sa.String(20)),
        sa.Column("make_model_variant", sa.String(255), nullable=False),
        sa.Column("rto_location", sa.String(255), nullable=False),
        sa.Column("manufacturing_year", sa.Integer(), nullable=False),
        sa.Column("date_of_registration", sa.Date()),
        sa.Column("cubic_capacity_kw", sa.Integer(), nullable=False),
        sa.Column("seating_capacity", sa.Integer(), nullable=False),
        sa.Column("fuel_type", sa.String(20), nullable=False),
        *_idv_columns(),
        sa.Column("addon_covers", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("ncb_percentage", sa.Numeric(5, 2)),
        sa.Column("previous_ncb_percentage", sa.Numeric(5, 2)),
        sa.Column("od_discount", sa.Numeric(5, 2)),
        sa.Column("whatsapp_number", sa.String(15)),
        sa.Column("notes", sa.Text()),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("sent_at", sa.DateTime(timezone=True)),
        sa.Column("created_by", sa.String(100)),
        sa.Column("updated_by", sa.String(100)),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # ── Dependent tables ───────────────────────────────────────────────

    op.create_table(
        "quotation_companies",
        sa.Column("quotation_id", sa.Integer(), nullable=False, index=True),
        sa.Column("insurance_company_id", sa.Integer(), nullable=False, index=True),
        sa.Column("quote_number", sa.String(255), nullable=False),
        sa.Column("policy_type", sa.String(30)),
        sa.Column("policy_tenure_years", sa.Integer()),
        sa.Column("plan_name", sa.String(255)),
        *_idv_columns(),
        sa.Column("basic_od_premium", sa.Numeric(12, 2), nullable=False),
        _money("tp_premium"),
        _money("cng_lpg_premium"),
        _money("total_od_premium"),
        sa.Column("addon_covers_breakdown", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("addon_notes", postgresql.JSONB(astext_type=sa.Text())),
        _money("total_addon_premium"),
        _money("net_premium"),
        _money("sgst_amount"),
        _money("cgst_amount"),
        _money("total_premium"),
        _money("roadside_assistance"),
        _money("final_premium", index=True),
        sa.Column("is_recommended", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("recommendation_note", sa.String(500)),
        sa.Column("ranking", sa.Integer()),
        sa.Column("benefits", sa.Text()),
        sa.Column("exclusions", sa.Text()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["quotation_id"], ["quotations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["insurance_company_id"], ["insurance_companies.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("quote_number"),
    )


def downgrade() -> None:
    # Drop in reverse dependency order
    op.drop_table("quotation_companies")
    op.drop_table("quotations")
    op.drop_table("insurance_companies")
    op.drop_table("audit_log")

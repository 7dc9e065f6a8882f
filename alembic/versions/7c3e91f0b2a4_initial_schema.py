"""initial_schema

Revision ID: 7c3e91f0b2a4
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c3e91f0b2a4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(512), nullable=True),
        sa.Column("auth_provider", sa.String(50), nullable=False),
        sa.Column("auth_provider_id", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "pgs",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("owner_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("full_address", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("locality", sa.String(255), nullable=False),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("thumbnail_image", sa.String(1024), nullable=True),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("rules_and_regulations", sa.Text(), nullable=True),
        sa.Column("check_in_time", sa.String(5), nullable=True),
        sa.Column("check_out_time", sa.String(5), nullable=True),
        sa.Column("min_stay_days", sa.Integer(), nullable=False),
        sa.Column("cancellation_policy", sa.Text(), nullable=True),
        sa.Column("manager_name", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(15), nullable=True),
        sa.Column("whatsapp_number", sa.String(15), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_pgs_owner_id", "pgs", ["owner_id"])
    op.create_index("city_idx", "pgs", ["city"])
    op.create_index("gender_idx", "pgs", ["gender"])
    op.create_index("published_idx", "pgs", ["is_published"])

    op.create_table(
        "rooms",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("pg_id", sa.UUID(), sa.ForeignKey("pgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("room_number", sa.String(50), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("deposit", sa.Numeric(10, 2), nullable=True),
        sa.Column("notice_period", sa.String(50), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("room_images", sa.JSON(), nullable=False),
        sa.Column("amenities", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("pg_id", "room_number", name="uq_rooms_pg_room_number"),
    )
    op.create_index("ix_rooms_pg_id", "rooms", ["pg_id"])
    op.create_index("rooms_available_idx", "rooms", ["is_available"])

    op.create_table(
        "beds",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("room_id", sa.UUID(), sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("bed_number", sa.String(50), nullable=False),
        sa.Column("is_occupied", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("room_id", "bed_number", name="uq_beds_room_bed_number"),
    )
    op.create_index("ix_beds_room_id", "beds", ["room_id"])
    op.create_index("beds_occupied_idx", "beds", ["is_occupied"])

    op.create_table(
        "enquiries",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("pg_id", sa.UUID(), sa.ForeignKey("pgs.id", ondelete="SET NULL"), nullable=True),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(15), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("occupation", sa.String(255), nullable=True),
        sa.Column("room_type", sa.String(50), nullable=True),
        sa.Column("move_in_date", sa.Date(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_enquiries_user_id", "enquiries", ["user_id"])
    op.create_index("ix_enquiries_status", "enquiries", ["status"])
    # Duplicate-submission lookups filter on (pg_id, phone) within a time window.
    op.create_index("spam_check_idx", "enquiries", ["pg_id", "phone", "created_at"])

    op.create_table(
        "guests",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("pg_id", sa.UUID(), sa.ForeignKey("pgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("room_id", sa.UUID(), sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(15), nullable=True),
        sa.Column("check_in_date", sa.Date(), nullable=False),
        sa.Column("check_out_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("number_of_occupants", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_guests_pg_id", "guests", ["pg_id"])
    op.create_index("ix_guests_room_id", "guests", ["room_id"])
    op.create_index("ix_guests_check_in_date", "guests", ["check_in_date"])
    op.create_index("ix_guests_status", "guests", ["status"])

    op.create_table(
        "safety_audits",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("pg_id", sa.UUID(), sa.ForeignKey("pgs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("item", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("inspected_by", sa.String(255), nullable=True),
        sa.Column("last_checked", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_safety_audits_pg_id", "safety_audits", ["pg_id"])
    op.create_index("ix_safety_audits_status", "safety_audits", ["status"])


def downgrade() -> None:
    op.drop_table("safety_audits")
    op.drop_table("guests")
    op.drop_table("enquiries")
    op.drop_table("beds")
    op.drop_table("rooms")
    op.drop_table("pgs")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

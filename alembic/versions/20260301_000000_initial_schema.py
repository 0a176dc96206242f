"""Initial schema for Bornfidis Provisions

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates every marketplace table:
- Chefs (chefs, chef_applications, chef_availability, chef_needs)
- Farmers (farmers, farmer_crops, farmer_applications)
- Bookings and staffing (booking_inquiries, booking_chefs, booking_farmers)
- Ingredients (ingredients, booking_ingredients)
- Payout ledger (chef_payouts)
- Invites, impact (impact_events, cooperative_members, cooperative_member_training)
- Community content (stories, partner_inquiries)

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _payout_account_columns() -> list:
    return [
        sa.Column("payout_account_id", sa.String(128), nullable=True),
        sa.Column("payout_account_status", sa.String(16), nullable=False, server_default="not_connected"),
        sa.Column("payouts_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def upgrade() -> None:
    """Create all tables."""

    # Create chefs table
    op.create_table(
        "chefs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("parish", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("specialties", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("certifications", sa.Text(), nullable=False, server_default="[]"),
        *_payout_account_columns(),
        sa.Column("certified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("prep_perfect", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("tier_override", sa.String(16), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_chefs_name", "name"),
        sa.Index("ix_chefs_email", "email"),
        sa.Index("ix_chefs_status", "status"),
    )

    # Create chef_applications table
    op.create_table(
        "chef_applications",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("experience_years", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("specialties", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("certifications", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("website_url", sa.String(512), nullable=True),
        sa.Column("instagram_handle", sa.String(128), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_chef_applications_email", "email", unique=True),
        sa.Index("ix_chef_applications_status", "status"),
        sa.Index("ix_chef_applications_created_at", "created_at"),
    )

    # Create chef_availability table
    op.create_table(
        "chef_availability",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("chef_id", sa.String(64), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("note", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["chef_id"], ["chefs.id"]),
        sa.UniqueConstraint("chef_id", "day", name="uq_chef_availability_day"),
        sa.Index("ix_chef_availability_chef_id", "chef_id"),
        sa.Index("ix_chef_availability_day", "day"),
    )

    # Create chef_needs table
    op.create_table(
        "chef_needs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("chef_id", sa.String(64), nullable=False),
        sa.Column("crop", sa.String(128), nullable=False),
        sa.Column("quantity", sa.String(64), nullable=True),
        sa.Column("frequency", sa.String(64), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["chef_id"], ["chefs.id"]),
        sa.Index("ix_chef_needs_chef_id", "chef_id"),
    )

    # Create farmers table
    op.create_table(
        "farmers",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("parish", sa.String(64), nullable=True),
        sa.Column("acres", sa.Float(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("certifications", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("regenerative_practices", sa.Text(), nullable=False, server_default="[]"),
        *_payout_account_columns(),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_farmers_name", "name"),
        sa.Index("ix_farmers_parish", "parish"),
        sa.Index("ix_farmers_status", "status"),
    )

    # Create farmer_crops table
    op.create_table(
        "farmer_crops",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("farmer_id", sa.String(64), nullable=False),
        sa.Column("crop", sa.String(128), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["farmer_id"], ["farmers.id"]),
        sa.Index("ix_farmer_crops_farmer_id", "farmer_id"),
        sa.Index("ix_farmer_crops_crop", "crop"),
    )

    # Create farmer_applications table
    op.create_table(
        "farmer_applications",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("parish", sa.String(64), nullable=True),
        sa.Column("acres", sa.Float(), nullable=True),
        sa.Column("crops", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("voice_ready", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("language", sa.String(8), nullable=False, server_default="en"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="new"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_farmer_applications_phone", "phone"),
        sa.Index("ix_farmer_applications_status", "status"),
        sa.Index("ix_farmer_applications_created_at", "created_at"),
    )

    # Create booking_inquiries table
    op.create_table(
        "booking_inquiries",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=True),
        sa.Column("event_time", sa.String(5), nullable=True),
        sa.Column("location", sa.String(512), nullable=True),
        sa.Column("guests", sa.Integer(), nullable=True),
        sa.Column("budget_range", sa.String(64), nullable=True),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="New"),
        sa.Column("quote_total_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deposit_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("balance_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("balance_paid_at", sa.DateTime(), nullable=True),
        sa.Column("fully_paid_at", sa.DateTime(), nullable=True),
        sa.Column("job_completed_at", sa.DateTime(), nullable=True),
        sa.Column("job_completed_by", sa.String(64), nullable=True),
        sa.Column("assigned_chef_id", sa.String(64), nullable=True),
        sa.Column("chef_payout_amount_cents", sa.Integer(), nullable=True),
        sa.Column("chef_payout_status", sa.String(16), nullable=True),
        sa.Column("chef_payout_blockers", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("chef_paid_at", sa.DateTime(), nullable=True),
        sa.Column("stripe_transfer_id", sa.String(128), nullable=True),
        sa.Column("payout_hold", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("payout_hold_reason", sa.Text(), nullable=True),
        sa.Column("payout_released_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["assigned_chef_id"], ["chefs.id"]),
        sa.Index("ix_booking_inquiries_email", "email"),
        sa.Index("ix_booking_inquiries_event_date", "event_date"),
        sa.Index("ix_booking_inquiries_status", "status"),
        sa.Index("ix_booking_inquiries_assigned_chef_id", "assigned_chef_id"),
        sa.Index("ix_booking_inquiries_chef_payout_status", "chef_payout_status"),
        sa.Index("ix_booking_inquiries_created_at", "created_at"),
    )

    # Create booking_chefs table (one chef per booking)
    op.create_table(
        "booking_chefs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("booking_id", sa.String(64), nullable=False),
        sa.Column("chef_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="assigned"),
        sa.Column("payout_percent", sa.Float(), nullable=False, server_default="70"),
        sa.Column("payout_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("platform_fee_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("payout_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("transfer_id", sa.String(128), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["booking_id"], ["booking_inquiries.id"]),
        sa.ForeignKeyConstraint(["chef_id"], ["chefs.id"]),
        sa.Index("ix_booking_chefs_booking_id", "booking_id", unique=True),
        sa.Index("ix_booking_chefs_chef_id", "chef_id"),
        sa.Index("ix_booking_chefs_status", "status"),
        sa.Index("ix_booking_chefs_payout_status", "payout_status"),
    )

    # Create booking_farmers table
    op.create_table(
        "booking_farmers",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("booking_id", sa.String(64), nullable=False),
        sa.Column("farmer_id", sa.String(64), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("payout_percent", sa.Float(), nullable=False, server_default="60"),
        sa.Column("payout_amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("payout_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("payout_error", sa.Text(), nullable=True),
        sa.Column("payout_failures", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("transfer_id", sa.String(128), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["booking_id"], ["booking_inquiries.id"]),
        sa.ForeignKeyConstraint(["farmer_id"], ["farmers.id"]),
        sa.UniqueConstraint("booking_id", "farmer_id", "role", name="uq_booking_farmer_role"),
        sa.Index("ix_booking_farmers_booking_id", "booking_id"),
        sa.Index("ix_booking_farmers_farmer_id", "farmer_id"),
        sa.Index("ix_booking_farmers_payout_status", "payout_status"),
    )

    # Create ingredients table
    op.create_table(
        "ingredients",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("unit", sa.String(16), nullable=False, server_default="lb"),
        sa.Column("regenerative_score", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_ingredients_name", "name"),
    )

    # Create booking_ingredients table
    op.create_table(
        "booking_ingredients",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("booking_id", sa.String(64), nullable=False),
        sa.Column("ingredient_id", sa.String(64), nullable=False),
        sa.Column("farmer_id", sa.String(64), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fulfillment_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("payout_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("payout_failures", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("transfer_id", sa.String(128), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["booking_id"], ["booking_inquiries.id"]),
        sa.ForeignKeyConstraint(["ingredient_id"], ["ingredients.id"]),
        sa.ForeignKeyConstraint(["farmer_id"], ["farmers.id"]),
        sa.Index("ix_booking_ingredients_booking_id", "booking_id"),
        sa.Index("ix_booking_ingredients_ingredient_id", "ingredient_id"),
        sa.Index("ix_booking_ingredients_farmer_id", "farmer_id"),
        sa.Index("ix_booking_ingredients_fulfillment_status", "fulfillment_status"),
        sa.Index("ix_booking_ingredients_payout_status", "payout_status"),
    )

    # Create chef_payouts ledger (one row per booking)
    op.create_table(
        "chef_payouts",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("booking_id", sa.String(64), nullable=False),
        sa.Column("chef_id", sa.String(64), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("transfer_id", sa.String(128), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("failed_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["booking_id"], ["booking_inquiries.id"]),
        sa.ForeignKeyConstraint(["chef_id"], ["chefs.id"]),
        sa.Index("ix_chef_payouts_booking_id", "booking_id", unique=True),
        sa.Index("ix_chef_payouts_chef_id", "chef_id"),
        sa.Index("ix_chef_payouts_status", "status"),
    )

    # Create invites table
    op.create_table(
        "invites",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("invited_by", sa.String(64), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.Column("accepted_by", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_invites_email", "email", unique=True),
        sa.Index("ix_invites_token", "token", unique=True),
        sa.Index("ix_invites_created_at", "created_at"),
    )

    # Create impact_events table
    op.create_table(
        "impact_events",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("booking_id", sa.String(64), nullable=True),
        sa.Column("reference_id", sa.String(64), nullable=True),
        sa.Column("reference_type", sa.String(32), nullable=True),
        sa.Column("metric", sa.String(64), nullable=False),
        sa.Column("value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(32), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["booking_id"], ["booking_inquiries.id"]),
        sa.Index("ix_impact_events_type", "type"),
        sa.Index("ix_impact_events_booking_id", "booking_id"),
        sa.Index("ix_impact_events_reference_id", "reference_id"),
        sa.Index("ix_impact_events_metric", "metric"),
        sa.Index("ix_impact_events_created_at", "created_at"),
    )

    # Create cooperative_members table
    op.create_table(
        "cooperative_members",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("farmer_id", sa.String(64), nullable=True),
        sa.Column("chef_id", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("impact_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["farmer_id"], ["farmers.id"]),
        sa.ForeignKeyConstraint(["chef_id"], ["chefs.id"]),
        sa.Index("ix_cooperative_members_role", "role"),
        sa.Index("ix_cooperative_members_status", "status"),
    )

    # Create cooperative_member_training table
    op.create_table(
        "cooperative_member_training",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("member_id", sa.String(64), nullable=False),
        sa.Column("training_name", sa.String(255), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["member_id"], ["cooperative_members.id"]),
        sa.Index("ix_cooperative_member_training_member_id", "member_id"),
    )

    # Create stories table
    op.create_table(
        "stories",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author_name", sa.String(255), nullable=False),
        sa.Column("author_email", sa.String(255), nullable=True),
        sa.Column("author_role", sa.String(64), nullable=True),
        sa.Column("author_region", sa.String(64), nullable=True),
        sa.Column("story_text", sa.Text(), nullable=False),
        sa.Column("video_url", sa.String(512), nullable=True),
        sa.Column("image_url", sa.String(512), nullable=True),
        sa.Column("category", sa.String(16), nullable=False, server_default="testimony"),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_stories_category", "category"),
        sa.Index("ix_stories_created_at", "created_at"),
    )

    # Create partner_inquiries table
    op.create_table(
        "partner_inquiries",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("organization_name", sa.String(255), nullable=False),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("contact_phone", sa.String(32), nullable=True),
        sa.Column("organization_type", sa.String(32), nullable=False),
        sa.Column("partnership_interest", sa.String(32), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("website_url", sa.String(512), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="submitted"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_partner_inquiries_status", "status"),
        sa.Index("ix_partner_inquiries_created_at", "created_at"),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("partner_inquiries")
    op.drop_table("stories")
    op.drop_table("cooperative_member_training")
    op.drop_table("cooperative_members")
    op.drop_table("impact_events")
    op.drop_table("invites")
    op.drop_table("chef_payouts")
    op.drop_table("booking_ingredients")
    op.drop_table("ingredients")
    op.drop_table("booking_farmers")
    op.drop_table("booking_chefs")
    op.drop_table("booking_inquiries")
    op.drop_table("farmer_applications")
    op.drop_table("farmer_crops")
    op.drop_table("farmers")
    op.drop_table("chef_needs")
    op.drop_table("chef_availability")
    op.drop_table("chef_applications")
    op.drop_table("chefs")

"""initial multi-tenant schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

guest_type = sa.Enum("principal", "companion", name="guesttypeenum")
guest_status = sa.Enum("pending", "responded", name="gueststatusenum")


def upgrade() -> None:
    """Create events, themes, invites, guests, tables, rsvps, quiz and public messages."""
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("slug", sa.String(80), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("owner_email", sa.String(254), nullable=True),
        sa.Column("groom_name", sa.String(120), nullable=True),
        sa.Column("bride_name", sa.String(120), nullable=True),
        sa.Column("groom_parents", sa.String(250), nullable=True),
        sa.Column("bride_parents", sa.String(250), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=True),
        sa.Column("venue_name", sa.String(200), nullable=True),
        sa.Column("venue_address", sa.String(300), nullable=True),
        sa.Column("google_maps_url", sa.String(500), nullable=True),
        sa.Column("contact_phones", sa.JSON(), nullable=True),
        sa.Column("pix_key", sa.String(120), nullable=True),
        sa.Column("bank_name", sa.String(120), nullable=True),
        sa.Column("bank_nib", sa.String(60), nullable=True),
        sa.Column("mobile_money_number", sa.String(40), nullable=True),
        sa.Column("logo_url", sa.String(500), nullable=True),
        sa.Column("music_url", sa.String(500), nullable=True),
        sa.Column("story_json", sa.JSON(), nullable=True),
        sa.Column("gallery_json", sa.JSON(), nullable=True),
        sa.Column("gifts_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_events_slug", "events", ["slug"], unique=True)

    op.create_table(
        "theme_configs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("template", sa.String(60), nullable=False),
        sa.Column("colors", sa.JSON(), nullable=True),
        sa.Column("fonts", sa.JSON(), nullable=True),
        sa.Column("wedding_date", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_theme_configs_event_id", "theme_configs", ["event_id"])

    op.create_table(
        "invites",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.String(16), nullable=False),
        sa.Column("label", sa.String(200), nullable=True),
        sa.Column("max_guests", sa.Integer(), nullable=False),
        sa.Column("allow_plus_one", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("max_guests >= 1", name="ck_invites_max_guests_positive"),
    )
    op.create_index("ix_invites_event_id", "invites", ["event_id"])
    op.create_index("ix_invites_token", "invites", ["token"], unique=True)

    op.create_table(
        "guests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("invite_id", sa.String(36), sa.ForeignKey("invites.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", guest_type, nullable=False),
        sa.Column("status", guest_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_guests_event_id", "guests", ["event_id"])
    op.create_index("ix_guests_invite_id", "guests", ["invite_id"])

    op.create_table(
        "tables",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_tables_event_id", "tables", ["event_id"])

    op.create_table(
        "rsvps",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("invite_id", sa.String(36), sa.ForeignKey("invites.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("guest_name", sa.String(200), nullable=False),
        sa.Column("attending", sa.Boolean(), nullable=False),
        sa.Column("guests_count", sa.Integer(), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("table_id", sa.String(36), sa.ForeignKey("tables.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("invite_id", name="uq_rsvps_invite_id"),
        sa.CheckConstraint("guests_count >= 0", name="ck_rsvps_guests_count_non_negative"),
    )
    op.create_index("ix_rsvps_event_id", "rsvps", ["event_id"])
    op.create_index("ix_rsvps_table_id", "rsvps", ["table_id"])

    op.create_table(
        "quiz_questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("question", sa.String(500), nullable=False),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("correct_answer", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_quiz_questions_event_id", "quiz_questions", ["event_id"])

    op.create_table(
        "public_messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_public_messages_event_id", "public_messages", ["event_id"])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in ("public_messages", "quiz_questions", "rsvps", "tables", "guests", "invites", "theme_configs", "events"):
        op.drop_table(table)
    guest_status.drop(op.get_bind(), checkfirst=True)
    guest_type.drop(op.get_bind(), checkfirst=True)

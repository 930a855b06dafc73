"""create templates, invitations and guests

Revision ID: 3f2a9c1d7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import uuid

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f2a9c1d7b10"
down_revision = None
branch_labels = None
depends_on = None

guest_kind_enum = sa.Enum("individual", "group", name="guest_kind_enum")
guest_status_enum = sa.Enum("pending", "confirmed", "declined", name="guest_status_enum")
invitation_status_enum = sa.Enum("draft", "published", name="invitation_status_enum")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    templates = op.create_table(
        "templates",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("preview_image_url", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_templates_key", "templates", ["key"], unique=True)

    op.create_table(
        "invitations",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("template_id", sa.UUID(), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("event_name", sa.String(255), nullable=False),
        sa.Column("host_name", sa.String(255), nullable=False),
        sa.Column("host_color", sa.String(20), nullable=True),
        sa.Column("venue_name", sa.String(255), nullable=False),
        sa.Column("venue_address", sa.String(255), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("event_time", sa.Time(), nullable=False),
        sa.Column("complementary_text_1", sa.String(255), nullable=True),
        sa.Column("complementary_text_2", sa.String(255), nullable=True),
        sa.Column("complementary_text_3", sa.String(255), nullable=True),
        sa.Column("gift_type", sa.String(255), nullable=True),
        sa.Column("dress_code", sa.String(255), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rsvp_deadline_at", sa.Date(), nullable=True),
        sa.Column("status", invitation_status_enum, nullable=False, server_default="draft"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("settings", sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(["template_id"], ["templates.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_invitations_slug", "invitations", ["slug"], unique=True)
    op.create_index("ix_invitations_template_id", "invitations", ["template_id"])

    op.create_table(
        "guests",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("invitation_id", sa.UUID(), nullable=False),
        sa.Column("kind", guest_kind_enum, nullable=False),
        sa.Column("allow_plus_one", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("contact_name", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(50), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("seats_reserved", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("seats_confirmed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", guest_status_enum, nullable=False, server_default="pending"),
        sa.Column("member_names", sa.JSON(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("public_token", sa.String(64), nullable=False),
        sa.ForeignKeyConstraint(["invitation_id"], ["invitations.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("public_token", name="uq_guests_public_token"),
        sa.CheckConstraint("seats_reserved >= 1", name="ck_guests_seats_reserved_positive"),
        sa.CheckConstraint(
            "seats_confirmed >= 0 AND seats_confirmed <= seats_reserved",
            name="ck_guests_seats_confirmed_range",
        ),
    )
    op.create_index("ix_guests_invitation_id", "guests", ["invitation_id"])
    op.create_index("ix_guests_invitation_id_status", "guests", ["invitation_id", "status"])

    op.bulk_insert(
        templates,
        [
            {
                "uuid": uuid.uuid4(),
                "key": "grad_modern_01",
                "name": "Graduation - Modern Glass",
                "description": "Glassmorphism with a modern layout.",
                "preview_image_url": "/images/templates/grad_modern_01.png",
                "is_active": True,
            },
            {
                "uuid": uuid.uuid4(),
                "key": "grad_minimal_02",
                "name": "Graduation - Minimal Clean",
                "description": "Minimalist, elegant typography.",
                "preview_image_url": "/images/templates/grad_minimal_02.png",
                "is_active": True,
            },
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_guests_invitation_id_status", table_name="guests")
    op.drop_index("ix_guests_invitation_id", table_name="guests")
    op.drop_table("guests")
    op.drop_index("ix_invitations_template_id", table_name="invitations")
    op.drop_index("ix_invitations_slug", table_name="invitations")
    op.drop_table("invitations")
    op.drop_index("ix_templates_key", table_name="templates")
    op.drop_table("templates")

    guest_status_enum.drop(op.get_bind(), checkfirst=True)
    guest_kind_enum.drop(op.get_bind(), checkfirst=True)
    invitation_status_enum.drop(op.get_bind(), checkfirst=True)

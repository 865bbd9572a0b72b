"""
Initial schema: users, videos, subscriptions.

- users: unique lowercased username/email, refresh-token slot, JSON watch history.
- videos: media items owned by a user.
- subscriptions: subscriber → channel edges, unique per pair.
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers, used by Alembic.
revision = "20261018_01_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=128), nullable=False),
        sa.Column("avatar", sa.String(length=2048), nullable=False),
        sa.Column("cover_image", sa.String(length=2048), nullable=False, server_default=""),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("watch_history", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("length(trim(username)) > 0", name="ck_users_username_not_blank"),
        sa.CheckConstraint("length(trim(email)) > 0", name="ck_users_email_not_blank"),
    )
    op.create_index("ix_users_full_name", "users", ["full_name"], unique=False)

    # --- videos ---
    op.create_table(
        "videos",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("owner", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("video_file", sa.String(length=2048), nullable=False),
        sa.Column("thumbnail", sa.String(length=2048), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_videos"),
        sa.ForeignKeyConstraint(["owner"], ["users.id"], name="fk_videos_owner_users", ondelete="CASCADE"),
    )
    op.create_index("ix_videos_owner", "videos", ["owner"], unique=False)
    op.create_index("ix_videos_owner_published", "videos", ["owner", "is_published"], unique=False)

    # --- subscriptions ---
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("subscriber", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("channel", sa.Uuid(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_subscriptions"),
        sa.ForeignKeyConstraint(["subscriber"], ["users.id"], name="fk_subscriptions_subscriber_users", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["channel"], ["users.id"], name="fk_subscriptions_channel_users", ondelete="CASCADE"),
        sa.UniqueConstraint("subscriber", "channel", name="uq_subscriptions_subscriber_channel"),
    )
    op.create_index("ix_subscriptions_subscriber", "subscriptions", ["subscriber"], unique=False)
    op.create_index("ix_subscriptions_channel", "subscriptions", ["channel"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_subscriptions_channel", table_name="subscriptions")
    op.drop_index("ix_subscriptions_subscriber", table_name="subscriptions")
    op.drop_table("subscriptions")

    op.drop_index("ix_videos_owner_published", table_name="videos")
    op.drop_index("ix_videos_owner", table_name="videos")
    op.drop_table("videos")

    op.drop_index("ix_users_full_name", table_name="users")
    op.drop_table("users")

"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Users table (Deezer sign-in)
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("deezer_user_id", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("picture_url", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("deezer_access_token", sa.Text(), nullable=True),
        sa.Column("deezer_token_expires_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_deezer_user_id"), "users", ["deezer_user_id"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=False)

    # Playlist history
    op.create_table(
        "saved_playlists",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("prompt", sa.String(500), nullable=False),
        sa.Column("deezer_playlist_id", sa.String(50), nullable=False),
        sa.Column("deezer_link", sa.String(500), nullable=True),
        sa.Column("track_count", sa.Integer(), nullable=False),
        sa.Column("tracks_json", sa.Text(), nullable=False),
        sa.Column("tags_json", sa.Text(), nullable=False),
        sa.Column("vibe_params_json", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_saved_playlists_user_id"), "saved_playlists", ["user_id"])
    op.create_index(op.f("ix_saved_playlists_created_at"), "saved_playlists", ["created_at"])


def downgrade() -> None:
    op.drop_index(op.f("ix_saved_playlists_created_at"), table_name="saved_playlists")
    op.drop_index(op.f("ix_saved_playlists_user_id"), table_name="saved_playlists")
    op.drop_table("saved_playlists")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_deezer_user_id"), table_name="users")
    op.drop_table("users")

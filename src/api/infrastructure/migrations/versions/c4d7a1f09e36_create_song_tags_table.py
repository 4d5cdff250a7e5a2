"""create song_tags table

Create song_tags table associating a user's tags with tracks. Deleting a
tag removes its associations.

Revision ID: c4d7a1f09e36
Revises: 8b6e0d4c2a95
Create Date: 2026-09-14 10:31:05.887120

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "c4d7a1f09e36"
down_revision: Union[str, Sequence[str], None] = "8b6e0d4c2a95"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "song_tags",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("track_id", sa.String(length=255), nullable=False),
        sa.Column("tag_id", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_song_tags")),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_song_tags_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"],
            ["tags.id"],
            name=op.f("fk_song_tags_tag_id_tags"),
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "user_id",
            "track_id",
            "tag_id",
            name=op.f("uq_song_tags_user_id_track_id_tag_id"),
        ),
    )
    op.create_index(
        op.f("ix_song_tags_tag_id"), "song_tags", ["tag_id"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_song_tags_tag_id"), table_name="song_tags")
    op.drop_table("song_tags")

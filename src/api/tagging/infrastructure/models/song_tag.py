"""SQLAlchemy ORM model for the song_tags table."""

from sqlalchemy import BigInteger, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, CreatedAtMixin


class SongTagModel(Base, CreatedAtMixin):
    """ORM model for song_tags table.

    Associations are immutable, so there is no updated_at. Deleting a tag
    removes its associations through the tag_id foreign key.
    """

    __tablename__ = "song_tags"
    __table_args__ = (UniqueConstraint("user_id", "track_id", "tag_id"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    track_id: Mapped[str] = mapped_column(String(255), nullable=False)
    tag_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<SongTagModel(id={self.id}, user_id={self.user_id}, "
            f"track_id={self.track_id}, tag_id={self.tag_id})>"
        )

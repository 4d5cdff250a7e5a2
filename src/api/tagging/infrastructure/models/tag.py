"""SQLAlchemy ORM model for the tags table."""

from sqlalchemy import BigInteger, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class TagModel(Base, TimestampMixin):
    """ORM model for tags table.

    Tag names are unique per user. Deleting the owning user removes the
    user's tags.
    """

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("user_id", "name"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TagModel(id={self.id}, user_id={self.user_id}, name={self.name})>"

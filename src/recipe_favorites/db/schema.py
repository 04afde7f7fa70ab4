"""Database schema for the favorites service.

A single table of saved recipes. The unique constraint on
(user_id, recipe_id) is the only guard against duplicate favorites.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Favorite(Base):
    """A recipe saved by a user.

    Invariant: UNIQUE(user_id, recipe_id)
    A user can favorite a given recipe at most once.
    """

    __tablename__ = "favorites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    recipe_id: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    # Clients send either "30 minutes" or 30; JSON keeps whichever was sent
    cook_time: Mapped[str | int | float | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    servings: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_favorite_user_recipe"),
    )

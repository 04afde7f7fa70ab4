"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries and returns domain models (not
SQLAlchemy entities) to external callers. Storage faults are interpreted
here: a uniqueness violation becomes DuplicateEntry, anything else
InternalError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_favorites.db.schema import Favorite
from recipe_favorites.errors import DuplicateEntry, InternalError
from recipe_favorites.models.domain import FavoriteEntity

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

logger = logging.getLogger(__name__)

# SQLSTATE for unique_violation
PG_UNIQUE_VIOLATION = "23505"


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _favorite_to_entity(fav: Favorite) -> FavoriteEntity:
    """Convert SQLAlchemy Favorite to domain entity."""
    return FavoriteEntity(
        id=fav.id,
        user_id=fav.user_id,
        recipe_id=fav.recipe_id,
        title=fav.title,
        image=fav.image,
        cook_time=fav.cook_time,
        servings=fav.servings,
        created_at=fav.created_at,
    )


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True if an IntegrityError came from a unique constraint.

    PostgreSQL drivers expose the SQLSTATE (`sqlstate` on psycopg 3,
    `pgcode` on psycopg2); SQLite only reports it in the message.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == PG_UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


# ============================================================================
# Favorite Repository
# ============================================================================


def list_favorites(session: DbSession, user_id: str) -> list[FavoriteEntity]:
    """Get all favorites for a user, in insertion order."""
    try:
        rows = session.scalars(
            select(Favorite).where(Favorite.user_id == user_id).order_by(Favorite.id)
        ).all()
    except SQLAlchemyError as e:
        logger.exception(f"Error getting favorites for user {user_id!r}")
        raise InternalError() from e
    return [_favorite_to_entity(r) for r in rows]


def create_favorite(session: DbSession, entity: FavoriteEntity) -> FavoriteEntity:
    """Insert a favorite and return it with server-assigned fields.

    Raises:
        DuplicateEntry: If the user already saved this recipe.
        InternalError: On any other storage fault.
    """
    fav = Favorite(
        user_id=entity.user_id,
        recipe_id=entity.recipe_id,
        title=entity.title,
        image=entity.image,
        cook_time=entity.cook_time,
        servings=entity.servings,
    )
    session.add(fav)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if is_unique_violation(e):
            logger.warning(
                f"Duplicate favorite: user={entity.user_id!r} recipe={entity.recipe_id}"
            )
            raise DuplicateEntry() from e
        logger.exception("Error adding favorite")
        raise InternalError() from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error adding favorite")
        raise InternalError() from e

    session.refresh(fav)
    return _favorite_to_entity(fav)


def delete_favorite(session: DbSession, user_id: str, recipe_id: int) -> int:
    """Delete the favorite for (user_id, recipe_id).

    Returns:
        Number of rows removed (0 or 1).
    """
    try:
        result = session.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.recipe_id == recipe_id,
            )
        )
        removed = result.rowcount
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Error removing favorite: user={user_id!r} recipe={recipe_id}")
        raise InternalError() from e
    return removed

"""Favorites API endpoints.

GET /favorites/{user_id} - List a user's favorites
POST /favorites - Save a recipe as favorite
DELETE /favorites/{user_id}/{recipe_id} - Remove a favorite
"""

from __future__ import annotations

import logging
import re
from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from recipe_favorites.api.app import get_db_session
from recipe_favorites.db import repo
from recipe_favorites.db.repo import DbSession
from recipe_favorites.errors import InvalidFieldTypes, InvalidInput, MissingFields, NotFound
from recipe_favorites.models.domain import FavoriteEntity
from recipe_favorites.models.types import (
    INT32_MAX,
    INT32_MIN,
    ErrorResponse,
    FavoriteCreate,
    FavoriteRecord,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["favorites"])

# Wire names; absent, null and blank strings all count as missing
REQUIRED_FIELDS = ("userId", "recipeId", "title")

_INT_RE = re.compile(r"[+-]?\d+")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_favorite(payload: Any) -> FavoriteCreate:
    """Validate a create body.

    Checks presence first, then types, and stops at the first failure.

    Raises:
        InvalidInput: Body is not a JSON object.
        MissingFields: A required field is absent or empty.
        InvalidFieldTypes: A field has the wrong type.
    """
    if not isinstance(payload, dict):
        raise InvalidInput("Invalid request body")

    if any(_is_missing(payload.get(name)) for name in REQUIRED_FIELDS):
        raise MissingFields()

    try:
        return FavoriteCreate.model_validate(payload)
    except ValidationError as e:
        raise InvalidFieldTypes() from e


def parse_recipe_id(raw: str) -> int:
    """Parse a recipe id path segment."""
    raw = raw.strip()
    if not _INT_RE.fullmatch(raw):
        raise InvalidInput("Invalid recipe ID")
    recipe_id = int(raw)
    if not INT32_MIN <= recipe_id <= INT32_MAX:
        raise InvalidInput("Invalid recipe ID")
    return recipe_id


@router.get(
    "/favorites/{user_id}",
    response_model=list[FavoriteRecord],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def list_favorites(
    user_id: str,
    session: DbSession = Depends(get_db_session),
) -> list[FavoriteRecord]:
    """List every favorite saved by a user.

    Returns an empty list, not 404, when the user has none.
    """
    if not user_id.strip():
        raise InvalidInput("Invalid user ID")

    favorites = repo.list_favorites(session, user_id)
    return [FavoriteRecord.model_validate(f) for f in favorites]


@router.post(
    "/favorites",
    response_model=FavoriteRecord,
    status_code=201,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def create_favorite(
    payload: Any = Body(default=None),
    session: DbSession = Depends(get_db_session),
) -> FavoriteRecord:
    """Save a recipe to a user's favorites.

    Args:
        payload: Raw JSON body, validated by parse_favorite.
        session: Database session (injected).

    Returns:
        The stored favorite, including id and createdAt.

    Raises:
        MissingFields, InvalidFieldTypes: 400 on bad input.
        DuplicateEntry: 409 if already saved.
    """
    data = parse_favorite(payload)

    created = repo.create_favorite(
        session,
        FavoriteEntity(
            user_id=data.user_id,
            recipe_id=data.recipe_id,
            title=data.title,
            image=data.image,
            cook_time=data.cook_time,
            servings=data.servings,
        ),
    )
    logger.info(f"Added favorite {created.id}: user={created.user_id!r} recipe={created.recipe_id}")
    return FavoriteRecord.model_validate(created)


@router.delete(
    "/favorites/{user_id}/{recipe_id}",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def delete_favorite(
    user_id: str,
    recipe_id: str,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    """Remove one favorite.

    Raises:
        InvalidInput: 400 if recipe_id is not an integer.
        NotFound: 404 if nothing matched.
    """
    if not user_id.strip():
        raise InvalidInput("Missing parameters")
    recipe_id_num = parse_recipe_id(recipe_id)

    removed = repo.delete_favorite(session, user_id, recipe_id_num)
    if removed == 0:
        raise NotFound()

    logger.info(f"Removed favorite: user={user_id!r} recipe={recipe_id_num}")
    return MessageResponse(message="Favorite removed successfully")

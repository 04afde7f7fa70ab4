"""Pydantic models for the favorites API.

The wire format is camelCase (`userId`, `recipeId`, `cookTime`) to match
the mobile client; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Range of the INTEGER columns (32-bit on PostgreSQL)
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class FavoriteCreate(BaseModel):
    """Body of POST /favorites.

    Strict: "42" is not a recipe id and True is not a serving count.
    Integers must fit the storage column; NaN and Infinity are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, strict=True, allow_inf_nan=False
    )

    user_id: str
    recipe_id: Int32
    title: str
    image: str | None = None
    cook_time: str | int | float | None = None
    servings: Int32 | None = None


class FavoriteRecord(BaseModel):
    """A stored favorite as returned to clients."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    user_id: str
    recipe_id: int
    title: str
    image: str | None
    cook_time: str | int | float | None
    servings: int | None
    created_at: datetime


class HealthResponse(BaseModel):
    """Response for GET /health."""

    success: bool = True


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Error payload. Never carries internal detail."""

    error: str

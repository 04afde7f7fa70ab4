"""Domain models for the favorites service.

Pure Python dataclasses, independent of SQLAlchemy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

CookTime = str | int | float


@dataclass
class FavoriteEntity:
    """Domain model for a saved recipe.

    `id` and `created_at` are assigned by storage and are None until
    the row has been written.
    """

    user_id: str
    recipe_id: int
    title: str
    image: str | None = None
    cook_time: CookTime | None = None
    servings: int | None = None
    id: int | None = None
    created_at: datetime | None = None

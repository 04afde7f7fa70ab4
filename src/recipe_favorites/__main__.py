"""Entry point: `python -m recipe_favorites` or the `recipe-favorites` script."""

import logging

import uvicorn

from recipe_favorites.config import Settings


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from recipe_favorites.api.app import create_app

    logging.getLogger(__name__).info(
        f"Starting server on port {settings.port} (APP_ENV={settings.app_env})"
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

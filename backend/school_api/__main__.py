"""Run the API with uvicorn: ``python -m school_api``.

Host and port come from the ``HOST`` and ``PORT`` environment variables
(or a ``.env`` file). Defaults are ``0.0.0.0`` and ``5000``.
"""

import logging

import uvicorn

from .config import get_settings
from .main import create_app


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    logging.getLogger("school_api").info("Server running on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging

from .config import settings
from .entrypoints.fastapi_app import create_app
from .logging_config import configure_logging

configure_logging()
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    logging.getLogger(__name__).info("Backend running at http://localhost:%d", settings.PORT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)

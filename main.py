from __future__ import annotations

import logging
import os

import uvicorn

from smon.api import create_app
from smon.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
if os.getenv("CONFIG_PATH"):
    logging.getLogger("smon").info("Using config path from environment: %s", settings.config_path)

app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())

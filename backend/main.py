import logging

import uvicorn

from app import app
from config import settings

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("API Proxy server running on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)

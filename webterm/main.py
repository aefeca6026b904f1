"""
FastAPI application serving terminal sessions.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from webterm.api.routers import router as api_router
from webterm.container import container

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    registry = container.get_session_registry()
    logger.info(f"Closing {len(registry)} open session(s)")
    await registry.close_all()


# Create FastAPI app
app = FastAPI(title="Web Terminal API", lifespan=lifespan)
app.include_router(api_router)

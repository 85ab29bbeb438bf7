"""
FastAPI application entry point
"""
import contextlib
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.router import api_router
from app.integrations.store_client import create_store_client
from app.pipelines.feedback import FeedbackSubmissionHandler

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

settings.log_config_summary()


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.API_TITLE}")

    # Store client is shared by every request for the life of the process
    store = create_store_client(settings)
    app.state.store_backend = store.backend
    app.state.feedback_handler = FeedbackSubmissionHandler(store, settings.TABLE_NAME)

    yield

    logger.info(f"Shutting down {settings.API_TITLE}")


# Initialize FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(api_router)


@app.get("/", tags=["root"])
def root():
    """Root endpoint"""
    return {
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "status": "running"
    }


@app.get("/health", tags=["health"])
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "store_backend": app.state.store_backend,
        "table": settings.TABLE_NAME
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.LOG_LEVEL.lower()
    )

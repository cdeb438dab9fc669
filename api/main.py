"""Main FastAPI application."""
import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database.connection import DatabaseConnection, get_redis
from api.routes import jobs_router, articles_router, settings_router
from api.services.dispatcher import dispatcher
from api.websocket import websocket_endpoint, redis_subscriber
from shared.config import settings
from shared.exceptions import AppError

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Background task for Redis subscriber
subscriber_task = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global subscriber_task

    # Startup
    await DatabaseConnection.init_mongo()
    await DatabaseConnection.init_redis()

    # Start Redis subscriber for WebSocket updates
    redis_client = await get_redis()
    subscriber_task = asyncio.create_task(redis_subscriber(redis_client))
    logger.info("Article job service started")

    yield

    # Shutdown
    await dispatcher.shutdown()

    if subscriber_task:
        subscriber_task.cancel()
        try:
            await subscriber_task
        except asyncio.CancelledError:
            pass

    await DatabaseConnection.close_connections()


# Create FastAPI app
app = FastAPI(
    title="Article Generation Job Service",
    description="Turns keywords into articles through background AI generation jobs",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Map domain errors to their HTTP status."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400."""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "detail": str(exc.errors())}
    )


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


# Include routers
app.include_router(jobs_router)
app.include_router(articles_router)
app.include_router(settings_router)


# WebSocket endpoints
@app.websocket("/ws")
async def websocket_all(websocket: WebSocket):
    """WebSocket endpoint for all job updates."""
    await websocket_endpoint(websocket)


@app.websocket("/ws/jobs/{job_id}")
async def websocket_job(websocket: WebSocket, job_id: str):
    """WebSocket endpoint for specific job updates."""
    await websocket_endpoint(websocket, job_id)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "active_jobs": dispatcher.active_count}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Article Generation Job Service",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug
    )

"""
Fitness Tracker API - Main Application
FastAPI backend for the mobile client: auth, workout logs, weight, nutrition and plans.
"""
from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from .config import settings
from .database import engine, Base, get_db
from .errors import FitnessAPIError
from .logging_config import log_requests, setup_logging
from .routers import auth, workouts, weights, nutrition
from . import schemas
# Import models to ensure they're registered with SQLAlchemy before create_all
from . import models  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info(f"{settings.app_name} v{settings.app_version} starting")
    if not settings.openai_api_key:
        logger.info("OPENAI_API_KEY not set, workout plans will use the static plan")

    Base.metadata.create_all(bind=engine)

    yield
    # Shutdown
    logger.info(f"{settings.app_name} stopped")


# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Log workouts, weight and meals, and generate weekly training plans",
    lifespan=lifespan,
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware
app.middleware("http")(log_requests)


# Exception handlers
@app.exception_handler(FitnessAPIError)
async def fitness_api_error_handler(request: Request, exc: FitnessAPIError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Validation error: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request.", "details": jsonable_encoder(exc.errors())},
    )


# Include routers
app.include_router(auth.router)
app.include_router(workouts.router)
app.include_router(weights.router)
app.include_router(nutrition.router)


@app.get("/")
def root():
    """Root endpoint - API status."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs"
    }


@app.get("/health", response_model=schemas.HealthStatus)
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint for monitoring; reports database reachability."""
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        database = "disconnected"
    return schemas.HealthStatus(status="ok", database=database)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fitness_api.main:app", host="0.0.0.0", port=8000, reload=True)

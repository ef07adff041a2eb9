"""
Events Waitlist Service - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.services.repositories import create_waitlist_repo
from app.services.waitlist_service import WaitlistService
from app.api import routes_admin, routes_public, routes_waitlist
from app.utils.responses import invalid_request

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    repo = create_waitlist_repo()
    app.state.waitlist_service = WaitlistService(repo)
    logger.info(f"Waitlist store ready (backend: {repo.name})")
    yield
    await repo.close()
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Events Waitlist Service",
    description="Per-event waitlists over a pluggable backing store",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ValidationError)
async def waitlist_validation_handler(request: Request, exc: ValidationError):
    return invalid_request(exc.message)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return invalid_request("Invalid request body")

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_waitlist.router, prefix="/api/waitlist", tags=["waitlist"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )

# fleet_induction/main.py
from datetime import datetime, timezone
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from fleet_induction import __version__
from fleet_induction.api import optimization
from fleet_induction.config import settings

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="KMRL Trainset Induction Engine",
    description="Rule-based induction planning: assignments, readiness scores, fleet metrics and conflicts",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# GZip for responses
app.add_middleware(GZipMiddleware, minimum_size=1024)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(optimization.router, prefix="/api/optimization", tags=["Optimization"])


@app.get("/")
async def root():
    """Root endpoint with system information"""
    return {
        "message": "KMRL Trainset Induction Engine API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting KMRL Trainset Induction Engine...")
    uvicorn.run("fleet_induction.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)

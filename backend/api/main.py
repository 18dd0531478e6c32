"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.errors import register_error_handlers
from api.routes import authors, books, jackets, shelves
from db import init_db
from settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create app
app = FastAPI(
    title="Library Catalog API",
    description="Authors, books, shelves and book jacket images",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(authors.router, prefix="/authors", tags=["authors"])
app.include_router(shelves.router, prefix="/shelves", tags=["shelves"])
app.include_router(books.router, prefix="/books", tags=["books"])
app.include_router(jackets.router, prefix="/books", tags=["jackets"])


@app.on_event("startup")
def startup_event():
    """Initialize database tables and the jacket directory layout on startup."""
    init_db()
    jackets.storage.ensure_layout()
    logger.info("Jacket storage ready at %s", jackets.storage.root)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "ok"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}

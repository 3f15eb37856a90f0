"""
ImageFeed API entry point.
Run: uvicorn main:app --reload --port 8000
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend/, the repo root or cwd so AUTH_SECRET_KEY, UNSPLASH_* etc. are set
_backend_dir = Path(__file__).resolve().parent
load_dotenv(_backend_dir / ".env")
load_dotenv(_backend_dir.parent / ".env")
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.auth import router as auth_router
from app.api.photos import feed_router
from app.api.photos import router as photos_router
from app.api.profile import router as profile_router
from app.middleware.auth import auth_middleware

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="ImageFeed API",
    description="Photo feed backend: OAuth session, paged photo feed, likes, profile.",
    version="0.1.0",
)

_origins = [
    origin.strip()
    for origin in os.environ.get("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(auth_middleware)
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(photos_router, prefix="/api/photos", tags=["photos"])
app.include_router(feed_router, prefix="/api/feed", tags=["photos"])
app.include_router(profile_router, prefix="/api/profile", tags=["profile"])


@app.get("/health")
def health():
    """Liveness check (CI/CD, Docker)."""
    return {"status": "ok"}

"""
Formdesk Backend API
FastAPI application that validates and processes the website's form submissions.
"""

import logging
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import ajax

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Formdesk API",
    description="Contact and registration form processing",
    version="0.1.0",
)


def get_cors_origins() -> List[str]:
    """
    Build the list of allowed CORS origins.

    Always includes http://localhost:3000 (static site dev server). Additional
    origins are read from the CORS_ORIGINS environment variable as a
    comma-separated list, e.g.:
        CORS_ORIGINS=https://example.org,https://www.example.org

    Duplicates are removed while preserving order.
    """
    always_included = ["http://localhost:3000"]

    seen: set = set()
    origins: List[str] = []
    for origin in always_included + list(get_settings().cors_origins):
        if origin not in seen:
            seen.add(origin)
            origins.append(origin)

    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=False,
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)

app.include_router(ajax.router, prefix="/api/ajax", tags=["ajax"])


@app.on_event("startup")
async def log_startup_settings() -> None:
    settings = get_settings()
    if settings.debug:
        logger.warning(
            "AJAX_DEBUG is on: responses echo sanitised user input. "
            "Never enable it for production traffic."
        )
    logger.info("Formdesk API ready (debug=%s)", settings.debug)


@app.on_event("shutdown")
async def close_outbound_clients() -> None:
    ajax.close_clients()


@app.get("/")
async def root():
    return {"message": "Formdesk API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}

"""FastAPI application exposing the document engine to the form layer."""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .db import init_db
from .routers import document_types, documents

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

fastapi_kwargs: dict[str, str | None] = {}
if not settings.expose_docs:
    fastapi_kwargs.update({"docs_url": None, "redoc_url": None, "openapi_url": None})

app = FastAPI(
    title="Business Papers",
    description="Totals, government charges and fiscal validation for invoices, quotes and delivery notes.",
    version="0.1.0",
    **fastapi_kwargs,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Accept", "Content-Type", "Origin"],
    allow_credentials=False,
    max_age=86400,
)


@app.on_event("startup")
def startup() -> None:
    init_db()
    logger.info("Document store ready at %s", settings.database_url)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(documents.router)
app.include_router(document_types.router)

"""
RemedyPilot API

Evaluates criminal-record-relief and eviction-defense situations against
jurisdiction rule tables.

Run with:
    uvicorn remedypilot.api.main:app
    remedypilot serve
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import remedypilot
from remedypilot import config
from remedypilot.engine import get_default_provider
from remedypilot.logs import configure_logging

from .routes import evaluate, jurisdictions

logger = logging.getLogger("remedypilot.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load every jurisdiction pack before serving traffic."""
    configure_logging()
    provider = get_default_provider()
    policies = provider.preload()
    logger.info("Loaded %d jurisdiction packs", len(policies))

    # Share provider with routes
    evaluate.set_provider(provider)
    jurisdictions.set_provider(provider)

    yield

    logger.info("Shutting down")


# Create app
app = FastAPI(
    title="RemedyPilot API",
    description="""
**Jurisdiction-parameterized legal situation evaluation.**

RemedyPilot evaluates a described situation against a jurisdiction's rule
table and returns a structured verdict for document renderers. It is
guidance, not a legal determination.

## Domains

- **criminal-relief**: expungement / record sealing eligibility (TN, PA, NJ)
- **eviction-defense**: ranked defenses, notice compliance and appeal deadlines (TN, PA, NJ, MS)

## Quick Start

1. `GET /jurisdictions` - See registered jurisdiction packs
2. `POST /evaluate` - Evaluate a situation
    """,
    version=remedypilot.__version__,
    lifespan=lifespan,
    docs_url="/docs" if config.RP_DOCS_ENABLED else None,
    redoc_url="/redoc" if config.RP_DOCS_ENABLED else None,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.RP_CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(jurisdictions.router)
app.include_router(evaluate.router)


@app.get("/health", tags=["Health"])
async def health():
    """Health check endpoint."""
    provider = jurisdictions.provider or get_default_provider()
    keys = provider.registered_keys()
    return {
        "healthy": True,
        "version": remedypilot.__version__,
        "packs_registered": len(keys),
        "packs_loaded": sum(1 for domain, code in keys if provider.is_loaded(code, domain)),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.RP_HOST, port=config.RP_PORT)

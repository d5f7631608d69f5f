"""
Main FastAPI Application - Watchlist Screener

Serves the entry-readiness screener over HTTP. Parsing and evaluation
live in `modules`; routers in `routes` are thin wrappers.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

import config
from modules.ruleset import DEFAULT_RULESET_ID, RULESETS
from routes import screener_router

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Create FastAPI app
app = FastAPI(
    title=config.API_TITLE,
    description="Entry-readiness screening for Stockbit watchlist tables",
    version=config.API_VERSION
)

# CORS middleware for the browser extension / local frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# GZip compression for large result lists
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(screener_router)


@app.get("/")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": config.API_VERSION,
        "default_ruleset": DEFAULT_RULESET_ID,
        "rulesets": list(RULESETS),
        "features": ["screener", "rulesets"]
    }

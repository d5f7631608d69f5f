"""
Backend Routes Module

Exports the FastAPI routers of the watchlist screener:

- screener_router: rule-set listing, HTML screening and single-record evaluation

Usage:
    from routes import screener_router

    app.include_router(screener_router)
"""
from .screener import router as screener_router

__all__ = [
    "screener_router",
]

"""Screener routes: rule-set listing and watchlist screening."""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional, Dict, Any
import logging

from modules.ruleset import DEFAULT_RULESET_ID, StockRecord, evaluate, list_rulesets
from modules.screener import WatchlistScreener

router = APIRouter(prefix="/api", tags=["screener"])

logger = logging.getLogger(__name__)


class ScreenRequest(BaseModel):
    """Raw watchlist page (or table) HTML to screen."""
    html: str
    ruleset: Optional[str] = DEFAULT_RULESET_ID


class EvaluateRequest(BaseModel):
    """A single already-extracted record."""
    record: Dict[str, Any]
    ruleset: Optional[str] = DEFAULT_RULESET_ID


@router.get("/rulesets")
async def get_rulesets():
    """List available rule sets."""
    return {
        "status": "success",
        "default": DEFAULT_RULESET_ID,
        "rulesets": [
            {
                "id": rs.id,
                "name": rs.name,
                "version": rs.version,
                "description": rs.description,
                "max_score": rs.max_score,
                "default": rs.id == DEFAULT_RULESET_ID,
            }
            for rs in list_rulesets()
        ],
    }


@router.post("/screener/screen")
async def screen_watchlist(request: ScreenRequest):
    """
    Screen every ready row of the watchlist table found in the HTML.

    Unknown rule-set ids fall back to the default rule set.
    """
    report = WatchlistScreener().screen_html(request.html, request.ruleset)
    if not report.table_found:
        raise HTTPException(status_code=404, detail="No watchlist table found in HTML")

    return {
        "status": "success",
        **report.summary(),
        "results": [r.to_dict() for r in report.results],
    }


@router.post("/screener/evaluate")
async def evaluate_record(request: EvaluateRequest):
    """Evaluate a single record against a rule set."""
    try:
        record = StockRecord.from_dict(request.record)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not record.symbol:
        raise HTTPException(status_code=422, detail="Record symbol is required")

    result = evaluate(record, request.ruleset)
    return {"status": "success", "result": result.to_dict()}

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from physgraph.api.routes_check import router as check_router
from physgraph.api.routes_units import router as units_router
from physgraph.config import ENGINE_VERSION, max_nesting_depth
from physgraph.markup.parser import UNSUPPORTED_MACROS
from physgraph.observability import (
    bind_run_id,
    current_run_id,
    log_event,
    new_run_id,
    reset_run_id,
)
from physgraph.units.algebra import UNIT_DEFS

# -----------------------------------------------------------------------------
# App setup
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)

app = FastAPI(title="physgraph API", version="v1")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(units_router)
app.include_router(check_router)


@app.middleware("http")
async def attach_run_id(request: Request, call_next):
    run_id = current_run_id() or new_run_id()
    token = bind_run_id(run_id)
    log_event("request.start", path=str(request.url.path))
    try:
        response = await call_next(request)
        response.headers["X-Run-ID"] = run_id
        return response
    finally:
        log_event("request.end", path=str(request.url.path))
        reset_run_id(token)


def _normalize_validation_errors(raw_errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    fields: List[Dict[str, str]] = []
    for err in raw_errors:
        loc = err.get("loc", [])
        loc_parts = [str(part) for part in loc if part != "body"]
        path = ".".join(["request", *loc_parts]) if loc_parts else "request"
        message = err.get("msg", "Invalid request")
        if message.lower().startswith("value error, "):
            message = message.split(", ", 1)[1]
        fields.append({"path": path, "message": message})
    return {"error": "VALIDATION_ERROR", "fields": fields}


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    content = _normalize_validation_errors(exc.errors())
    return JSONResponse(status_code=422, content=content)


# -----------------------------------------------------------------------------
# Health + Info Endpoints
# -----------------------------------------------------------------------------
@app.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "status": "ok"}


@app.get("/v1/info")
def info() -> Dict[str, Any]:
    return {
        "version": ENGINE_VERSION,
        "git_sha": os.getenv("GIT_COMMIT"),
        "units": sorted(UNIT_DEFS),
        "markup_features": [
            "\\frac{}{}",
            "^number, ^{number}",
            "_subscript (ignored)",
            "( ) and { } grouping",
            "+ - * / and implicit multiplication",
            "\\cdot, \\times as *",
            "\\left, \\right ignored",
        ],
        "unsupported": list(UNSUPPORTED_MACROS),
        "max_depth": max_nesting_depth(),
    }

"""
LendTrust — Trust Scoring Service
Creditworthiness scoring for pseudonymous developers in a P2P lending marketplace.

Start with:
    uvicorn lendtrust.main_trust:app --host 0.0.0.0 --port 8000
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lendtrust.api.trust import trust_router
from lendtrust.config import settings

VERSION = "1.0.0"

_log_level = logging.getLevelName(settings.LOG_LEVEL)
if not isinstance(_log_level, int):
    _log_level = logging.INFO

structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(_log_level),
)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "service_starting",
        version=VERSION,
        environment=settings.ENVIRONMENT,
        default_strategy=settings.DEFAULT_SCORING_STRATEGY,
    )
    yield
    logger.info("service_stopped")


app = FastAPI(
    title="LendTrust — Developer Trust Scoring",
    description=(
        "Trust scores, risk categories, improvement recommendations and "
        "interest-rate guidance for loan applicants."
    ),
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id"],
)


@app.middleware("http")
async def request_middleware(request: Request, call_next):
    request_id = str(uuid.uuid4())[:8]
    start = time.time()
    request.state.request_id = request_id
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 2)
    response.headers["X-Request-Id"] = request_id
    response.headers["X-Response-Time"] = f"{duration_ms}ms"
    if request.url.path not in ("/health", "/v1/trust/health"):
        logger.info("request",
                    method=request.method,
                    path=request.url.path,
                    status=response.status_code,
                    duration_ms=duration_ms,
                    request_id=request_id)
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception",
                 path=request.url.path,
                 error=str(exc),
                 type=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "Something went wrong while scoring.",
            "request_id": getattr(request.state, "request_id", "unknown"),
        },
    )


app.include_router(trust_router)
logger.info("router_loaded", router="trust_api")


# === Core endpoints ===

@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "service": "lendtrust",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/")
async def root():
    return {
        "name": "LendTrust",
        "tagline": "Trust scoring for pseudonymous borrowers",
        "version": VERSION,
        "endpoints": {
            "score": "POST /v1/trust/score?strategy={comprehensive|legacy}",
            "applicant": "GET /v1/trust/applicants/{handle}",
            "risk": "GET /v1/trust/risk?score={score}&scale={scale}",
            "rate": "GET /v1/trust/rate?score={score}&base_rate={pct}&scale={scale}",
            "dynamic_rate": "GET /v1/trust/rate/dynamic?score={score}&loan_amount={amt}&tenor_days={days}",
            "compare": "POST /v1/trust/compare",
            "health": "GET /health",
            "docs": "GET /docs",
        },
    }


if __name__ == "__main__":
    uvicorn.run(app, host=settings.LENDTRUST_HOST, port=settings.LENDTRUST_PORT)

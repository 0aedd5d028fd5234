"""
LendTrust — Trust API
In-process scoring exposed over HTTP for the marketplace front end.

Endpoints:
    GET  /v1/trust/health                - Health check
    POST /v1/trust/score                 - Score a raw evidence payload
    GET  /v1/trust/applicants/{handle}   - Score an applicant via the evidence provider
    GET  /v1/trust/risk                  - Risk category for a score on a given scale
    GET  /v1/trust/rate                  - Recommended interest rate for a score
    GET  /v1/trust/rate/dynamic          - Market-driven rate for a specific loan
    POST /v1/trust/compare               - Compare two applicants side-by-side
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel

from lendtrust.compute.pipeline import is_eligible, score_applicant
from lendtrust.compute.providers import EvidenceProvider, demo_provider
from lendtrust.config import settings
from lendtrust.errors import EvidenceNotFound, EvidenceValidationError, UnknownStrategyError
from lendtrust.trust.evidence import bundle_from_payload
from lendtrust.trust.rates import (
    MarketConditions,
    dynamic_interest_rate,
    recommended_interest_rate,
    risk_multiplier,
    to_basis_points,
)
from lendtrust.trust.strategy import ScoreResult, classify_risk_for_scale, get_strategy, parse_scale

logger = structlog.get_logger()

trust_router = APIRouter(prefix="/v1/trust", tags=["Trust Score"])

_provider: Optional[EvidenceProvider] = None


def get_provider() -> EvidenceProvider:
    global _provider
    if _provider is None:
        _provider = demo_provider()
    return _provider


# =============================================
# REQUEST/RESPONSE MODELS
# =============================================

class ScoreCompactResponse(BaseModel):
    strategy: str
    scale: str
    score: float
    risk_category: str
    eligible: bool


class RiskResponse(BaseModel):
    score: float
    scale: str
    risk_category: str


class RateResponse(BaseModel):
    score: float
    scale: str
    base_rate: float
    multiplier: float
    recommended_rate: float
    recommended_rate_bps: int


class DynamicRateResponse(BaseModel):
    score: float
    scale: str
    loan_amount: float
    tenor_days: float
    market_base_rate: float
    rate: float
    rate_bps: int


class CompareRequest(BaseModel):
    applicant_a: Dict[str, Any]
    applicant_b: Dict[str, Any]


class CompareResponse(BaseModel):
    applicant_a: ScoreCompactResponse
    applicant_b: ScoreCompactResponse
    safer_applicant: str
    recommendations_a: List[str]
    recommendations_b: List[str]


# =============================================
# HELPERS
# =============================================

def _strategy_or_400(name: Optional[str]):
    try:
        return get_strategy(name)
    except UnknownStrategyError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _scale_or_400(scale: str):
    try:
        return parse_scale(scale)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _score_payload(payload: Dict[str, Any], strategy: Optional[str]) -> ScoreResult:
    scorer = _strategy_or_400(strategy)
    try:
        bundle = bundle_from_payload(payload)
    except EvidenceValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return scorer.score(bundle)


def _compact(result: ScoreResult) -> ScoreCompactResponse:
    return ScoreCompactResponse(
        strategy=result.strategy,
        scale=result.scale.value,
        score=result.score,
        risk_category=result.risk_category,
        eligible=is_eligible(result),
    )


# =============================================
# ENDPOINTS
# =============================================

@trust_router.get("/health")
async def trust_health():
    return {
        "status": "healthy",
        "service": "lendtrust-trust-api",
        "default_strategy": settings.DEFAULT_SCORING_STRATEGY,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@trust_router.post("/score")
async def score_evidence(
    payload: Dict[str, Any] = Body(...),
    strategy: Optional[str] = Query(None, description="comprehensive or legacy"),
):
    result = _score_payload(payload, strategy)
    response = result.to_full()
    response["eligible"] = is_eligible(result)
    return response


@trust_router.get("/applicants/{handle}")
async def score_known_applicant(
    handle: str,
    strategy: Optional[str] = Query(None, description="comprehensive or legacy"),
    provider: EvidenceProvider = Depends(get_provider),
):
    _strategy_or_400(strategy)
    try:
        result = await score_applicant(handle, provider, strategy)
    except EvidenceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    response = result.to_full()
    response["handle"] = handle
    response["eligible"] = is_eligible(result)
    return response


@trust_router.get("/risk", response_model=RiskResponse)
async def risk_for_score(
    score: float = Query(..., ge=0),
    scale: str = Query("comprehensive"),
):
    parsed = _scale_or_400(scale)
    category = classify_risk_for_scale(score, parsed)
    return RiskResponse(score=score, scale=parsed.value, risk_category=category.value)


@trust_router.get("/rate", response_model=RateResponse)
async def rate_for_score(
    score: float = Query(..., ge=0),
    base_rate: Optional[float] = Query(None, gt=0),
    scale: str = Query("legacy"),
):
    parsed = _scale_or_400(scale)
    base = base_rate if base_rate is not None else settings.BASE_INTEREST_RATE
    rate = recommended_interest_rate(score, base, parsed)
    return RateResponse(
        score=score,
        scale=parsed.value,
        base_rate=base,
        multiplier=risk_multiplier(score, parsed),
        recommended_rate=round(rate, 4),
        recommended_rate_bps=to_basis_points(rate),
    )


@trust_router.get("/rate/dynamic", response_model=DynamicRateResponse)
async def dynamic_rate_for_loan(
    score: float = Query(..., ge=0),
    loan_amount: float = Query(..., ge=0),
    tenor_days: float = Query(..., ge=0),
    scale: str = Query("comprehensive"),
    market_base_rate: Optional[float] = Query(None, ge=0),
    risk_premium: float = Query(0.0),
    liquidity_multiplier: float = Query(1.0, gt=0),
    market_volatility: float = Query(0.0, ge=0, le=1),
    demand_supply_ratio: float = Query(1.0, ge=0),
):
    parsed = _scale_or_400(scale)
    conditions = MarketConditions(
        base_rate=market_base_rate if market_base_rate is not None else settings.BASE_INTEREST_RATE,
        risk_premium=risk_premium,
        liquidity_multiplier=liquidity_multiplier,
        market_volatility=market_volatility,
        demand_supply_ratio=demand_supply_ratio,
    )
    rate = dynamic_interest_rate(score, conditions, loan_amount, tenor_days, parsed)
    return DynamicRateResponse(
        score=score,
        scale=parsed.value,
        loan_amount=loan_amount,
        tenor_days=tenor_days,
        market_base_rate=conditions.base_rate,
        rate=round(rate, 4),
        rate_bps=to_basis_points(rate),
    )


@trust_router.post("/compare", response_model=CompareResponse)
async def compare_applicants(
    req: CompareRequest,
    strategy: Optional[str] = Query(None, description="comprehensive or legacy"),
):
    a = _score_payload(req.applicant_a, strategy)
    b = _score_payload(req.applicant_b, strategy)

    if a.score > b.score:
        safer = "applicant_a"
    elif b.score > a.score:
        safer = "applicant_b"
    else:
        safer = "equal"

    logger.info("applicants_compared", strategy=a.strategy, score_a=a.score, score_b=b.score, safer=safer)
    return CompareResponse(
        applicant_a=_compact(a),
        applicant_b=_compact(b),
        safer_applicant=safer,
        recommendations_a=a.recommendations,
        recommendations_b=b.recommendations,
    )

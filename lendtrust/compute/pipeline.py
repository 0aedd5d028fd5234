"""
LendTrust — Scoring Pipeline
Bridges evidence providers into the scoring strategies.

Flow:
    1. Fetch the evidence bundle from the injected provider
    2. Score it with the requested strategy
    3. Log and return the strategy result

The pipeline keeps no state between calls. Freshness is the caller's job:
re-score after a verification event or on its own refresh interval.
"""
import time
from typing import Optional

import structlog

from lendtrust.compute.providers import EvidenceProvider
from lendtrust.config import settings
from lendtrust.trust.strategy import ScoreResult, get_strategy

logger = structlog.get_logger()


async def score_applicant(
    handle: str,
    provider: EvidenceProvider,
    strategy: Optional[str] = None,
) -> ScoreResult:
    """Score one applicant. Provider errors propagate to the caller."""
    scorer = get_strategy(strategy)
    start = time.time()

    evidence = await provider.get_evidence(handle)
    result = scorer.score(evidence)

    logger.info(
        "applicant_scored",
        handle=handle,
        strategy=result.strategy,
        scale=result.scale.value,
        score=result.score,
        risk_category=result.risk_category,
        duration_ms=round((time.time() - start) * 1000, 2),
    )
    return result


def is_eligible(result: ScoreResult, minimum: Optional[float] = None) -> bool:
    """Market eligibility gate. The minimum is read in the result's own scale."""
    if minimum is None:
        minimum = settings.min_eligible_score(result.scale.value)
    return result.score >= minimum

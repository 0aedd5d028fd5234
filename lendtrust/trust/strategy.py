"""
LendTrust — Scoring Strategies

Two scoring algorithms coexist, on different numeric scales:

    comprehensive   0-100    eight weighted factors, four risk categories
    legacy          0-1000   older composite, three risk categories

Which one is authoritative for eligibility gating is a product decision, so
neither is silently converted into the other. Every result carries its scale,
and anything that interprets a score (risk, rates, eligibility) asks for it.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from lendtrust.config import settings
from lendtrust.errors import UnknownStrategyError
from lendtrust.trust.engine import (
    ComprehensiveTrustScore,
    RiskCategory,
    calculate_comprehensive_trust_score,
    classify_risk,
)
from lendtrust.trust.evidence import EvidenceBundle
from lendtrust.trust.legacy import (
    LegacyRiskCategory,
    LegacyTrustScore,
    calculate_legacy_trust_score,
    legacy_risk_category,
)
from lendtrust.trust.security_rules import DEFAULT_RULES, SecurityRule


class ScoreScale(str, Enum):
    COMPREHENSIVE = "comprehensive"
    LEGACY        = "legacy"

    @property
    def bounds(self) -> tuple:
        if self is ScoreScale.COMPREHENSIVE:
            return (0, 100)
        return (50, 1000)


def parse_scale(scale: Union[str, ScoreScale]) -> ScoreScale:
    try:
        return ScoreScale(scale)
    except ValueError:
        raise ValueError(f"Unknown score scale '{scale}'. Use one of: {', '.join(s.value for s in ScoreScale)}") from None


def classify_risk_for_scale(score: float, scale: Union[str, ScoreScale]) -> Union[RiskCategory, LegacyRiskCategory]:
    if parse_scale(scale) is ScoreScale.LEGACY:
        return legacy_risk_category(score)
    return classify_risk(score)


@dataclass(frozen=True)
class ScoreResult:
    strategy: str
    scale: ScoreScale
    score: float
    risk_category: str
    recommendations: List[str]
    detail: Union[ComprehensiveTrustScore, LegacyTrustScore]
    calculated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "scale": self.scale.value,
            "score": self.score,
            "risk_category": self.risk_category,
            "recommendations": list(self.recommendations),
            "calculated_at": self.calculated_at.isoformat(),
        }

    def to_full(self) -> Dict[str, Any]:
        d = self.to_dict()
        if isinstance(self.detail, ComprehensiveTrustScore):
            d["detail"] = self.detail.to_full()
        else:
            d["detail"] = self.detail.to_dict()
        return d


class ScoringStrategy(Protocol):
    name: str
    scale: ScoreScale

    def score(self, evidence: EvidenceBundle) -> ScoreResult:
        ...


@dataclass
class ComprehensiveStrategy:
    security_rules: Sequence[SecurityRule] = field(default=DEFAULT_RULES)
    name: str = "comprehensive"
    scale: ScoreScale = ScoreScale.COMPREHENSIVE

    def score(self, evidence: EvidenceBundle) -> ScoreResult:
        result = calculate_comprehensive_trust_score(evidence, self.security_rules)
        return ScoreResult(
            strategy=self.name,
            scale=self.scale,
            score=result.total_score,
            risk_category=result.risk_category.value,
            recommendations=list(result.recommendations),
            detail=result,
            calculated_at=result.last_updated,
        )


@dataclass
class LegacyStrategy:
    name: str = "legacy"
    scale: ScoreScale = ScoreScale.LEGACY

    def score(self, evidence: EvidenceBundle) -> ScoreResult:
        result = calculate_legacy_trust_score(evidence)
        return ScoreResult(
            strategy=self.name,
            scale=self.scale,
            score=round(result.total_score, 2),
            risk_category=result.risk_category.value,
            recommendations=[],
            detail=result,
            calculated_at=result.calculated_at,
        )


_STRATEGIES = {
    "comprehensive": ComprehensiveStrategy,
    "legacy": LegacyStrategy,
}


def available_strategies() -> tuple:
    return tuple(_STRATEGIES)


def get_strategy(name: Optional[str] = None) -> ScoringStrategy:
    """Look up a strategy by name; None means the configured default."""
    if name is None:
        name = settings.DEFAULT_SCORING_STRATEGY
    try:
        factory = _STRATEGIES[name]
    except KeyError:
        raise UnknownStrategyError(name, available_strategies()) from None
    return factory()

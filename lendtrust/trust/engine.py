"""
LendTrust — Comprehensive Trust Scoring Engine

Trust Score = round(Σ factor_score × factor_weight)      (0-100)

Risk Categories (inclusive lower bounds):
    80-100  low       — Established, verified, reliable repayment
    65-79   medium    — Solid profile with gaps
    40-64   high      — Thin or inconsistent evidence
    0-39    critical  — Little to no usable evidence

Recommendations come from the factors contributing the least weighted score,
not the lowest raw score: a weak 5% factor matters less than a weak 20% one.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Sequence

from lendtrust.trust.evidence import EvidenceBundle
from lendtrust.trust.factors import SCORERS, TrustFactor, score_security_practices
from lendtrust.trust.security_rules import DEFAULT_RULES, SecurityRule


class RiskCategory(str, Enum):
    LOW      = "low"
    MEDIUM   = "medium"
    HIGH     = "high"
    CRITICAL = "critical"


RISK_THRESHOLDS = (
    (80, RiskCategory.LOW),
    (65, RiskCategory.MEDIUM),
    (40, RiskCategory.HIGH),
)

MAX_RECOMMENDATIONS = 5
WEAKEST_FACTOR_COUNT = 3
LOW_SCORE_THRESHOLD = 60
VERIFICATION_FIRST = "Focus on completing GitHub verification"
SMALLER_LOANS_CAUTION = "Consider starting with smaller loan amounts"


@dataclass(frozen=True)
class ComprehensiveTrustScore:
    total_score: int                       # 0-100
    factors: Dict[str, TrustFactor]
    risk_category: RiskCategory
    recommendations: List[str]
    last_updated: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "risk_category": self.risk_category.value,
            "factor_scores": {k: round(f.score, 2) for k, f in self.factors.items()},
            "recommendations": list(self.recommendations),
            "last_updated": self.last_updated.isoformat(),
        }

    def to_compact(self) -> Dict[str, Any]:
        """Minimal response for eligibility checks and badges."""
        return {
            "total_score": self.total_score,
            "risk_category": self.risk_category.value,
        }

    def to_full(self) -> Dict[str, Any]:
        """Everything, including per-factor evidence and improvements."""
        d = self.to_dict()
        d["factors"] = {k: f.to_dict() for k, f in self.factors.items()}
        return d


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def weighted_score(factors: Dict[str, TrustFactor]) -> int:
    return round_half_up(sum(f.score * f.weight for f in factors.values()))


def classify_risk(total_score: float) -> RiskCategory:
    for threshold, category in RISK_THRESHOLDS:
        if total_score >= threshold:
            return category
    return RiskCategory.CRITICAL


def generate_recommendations(factors: Dict[str, TrustFactor], total_score: int) -> List[str]:
    # sorted() is stable: equal contributions keep declaration order
    weakest = sorted(factors.values(), key=lambda f: f.contribution)[:WEAKEST_FACTOR_COUNT]

    recommendations: List[str] = []
    for factor in weakest:
        recommendations.extend(factor.improvements)

    if total_score < LOW_SCORE_THRESHOLD:
        recommendations.insert(0, VERIFICATION_FIRST)
        recommendations.append(SMALLER_LOANS_CAUTION)

    # dict preserves first-seen order
    return list(dict.fromkeys(recommendations))[:MAX_RECOMMENDATIONS]


def score_factors(
    bundle: EvidenceBundle,
    security_rules: Sequence[SecurityRule] = DEFAULT_RULES,
) -> Dict[str, TrustFactor]:
    factors = {}
    for key, scorer in SCORERS.items():
        if scorer is score_security_practices:
            factors[key] = scorer(bundle, security_rules)
        else:
            factors[key] = scorer(bundle)
    return factors


def calculate_comprehensive_trust_score(
    bundle: EvidenceBundle,
    security_rules: Sequence[SecurityRule] = DEFAULT_RULES,
) -> ComprehensiveTrustScore:
    """
    Score an applicant across all eight factors.

    Pure: the same bundle always produces the same result, and
    `last_updated` is the bundle's own reference instant.
    """
    factors = score_factors(bundle, security_rules)
    total = weighted_score(factors)
    return ComprehensiveTrustScore(
        total_score=total,
        factors=factors,
        risk_category=classify_risk(total),
        recommendations=generate_recommendations(factors, total),
        last_updated=bundle.as_of,
    )

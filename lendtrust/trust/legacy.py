"""
LendTrust — Legacy Trust Score (0-1000 scale)

Kept for records computed before the eight-factor engine. Do not mix its
numbers with comprehensive scores; thresholds differ.

    total = clamp(100 + 0.30×github + 0.40×loan_history
                      + 0.20×project_history + 0.10×time_factor
                      + verification_bonus, 50, 1000)

Sub-score ranges:
    github           0-200
    loan_history     0-300
    project_history  0-200
    time_factor      0-100
    verification     0 or 100 (flat)

Risk: ≥750 low, ≥500 medium, else high.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from lendtrust.trust.evidence import EvidenceBundle

BASE_SCORE = 100
VERIFICATION_BONUS = 100
MIN_SCORE = 50
MAX_SCORE = 1000

LEGACY_WEIGHTS = {
    "github": 0.30,
    "loan_history": 0.40,
    "project_history": 0.20,
    "time_factor": 0.10,
}


class LegacyRiskCategory(str, Enum):
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


@dataclass(frozen=True)
class LegacyTrustScore:
    github_score: float
    loan_history_score: float
    project_history_score: float
    time_factor_score: float
    verification_bonus: int
    total_score: float
    risk_category: LegacyRiskCategory
    calculated_at: datetime

    @property
    def community_score(self) -> float:
        """Derived from the GitHub sub-score, as older records report it."""
        return self.github_score * 0.3

    @property
    def on_chain_score(self) -> float:
        return self.loan_history_score * 0.5

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": round(self.total_score, 2),
            "risk_category": self.risk_category.value,
            "github_score": round(self.github_score, 2),
            "loan_history_score": round(self.loan_history_score, 2),
            "project_history_score": round(self.project_history_score, 2),
            "time_factor_score": round(self.time_factor_score, 2),
            "community_score": round(self.community_score, 2),
            "on_chain_score": round(self.on_chain_score, 2),
            "verification_bonus": self.verification_bonus,
            "calculated_at": self.calculated_at.isoformat(),
        }


def legacy_github_score(repositories: int, stars: int, followers: int, contributions: int) -> float:
    score = 0.0
    score += min(50, repositories * 2)
    score += min(100, stars * 0.1)
    score += min(50, followers * 0.2)
    score += min(100, contributions * 0.1)
    return min(200, score)


def legacy_loan_history_score(successful: int, defaulted: int) -> float:
    if successful + defaulted == 0:
        return 0.0
    success_rate = successful / (successful + defaulted)
    score = success_rate * 200
    score += min(100, successful * 10)
    score -= defaulted * 20
    return max(0.0, min(300.0, score))


def legacy_project_history_score(completed_projects: int, successful_loans: int) -> float:
    score = min(150, completed_projects * 15)
    if successful_loans > 0:
        # projects delivered per loan repaid
        score += min(50, (completed_projects / successful_loans) * 25)
    return min(200, score)


def legacy_time_factor_score(account_age_years: float) -> float:
    return min(100, account_age_years * 20)


def legacy_risk_category(score: float) -> LegacyRiskCategory:
    if score >= 750:
        return LegacyRiskCategory.LOW
    if score >= 500:
        return LegacyRiskCategory.MEDIUM
    return LegacyRiskCategory.HIGH


def calculate_legacy_trust_score(bundle: EvidenceBundle) -> LegacyTrustScore:
    profile = bundle.profile
    loans = bundle.loan_history

    github = legacy_github_score(
        repositories=profile.public_repos,
        stars=bundle.total_stars,
        followers=profile.followers,
        contributions=profile.contributions,
    )
    loan_history = legacy_loan_history_score(loans.successful_loans, loans.defaulted_loans)
    project_history = legacy_project_history_score(loans.completed_projects, loans.successful_loans)
    time_factor = legacy_time_factor_score(bundle.account_age_years())
    bonus = VERIFICATION_BONUS if bundle.identity.is_verified else 0

    weighted = (
        github          * LEGACY_WEIGHTS["github"] +
        loan_history    * LEGACY_WEIGHTS["loan_history"] +
        project_history * LEGACY_WEIGHTS["project_history"] +
        time_factor     * LEGACY_WEIGHTS["time_factor"]
    )
    total = min(MAX_SCORE, max(MIN_SCORE, BASE_SCORE + weighted + bonus))

    return LegacyTrustScore(
        github_score=github,
        loan_history_score=loan_history,
        project_history_score=project_history,
        time_factor_score=time_factor,
        verification_bonus=bonus,
        total_score=total,
        risk_category=legacy_risk_category(total),
        calculated_at=bundle.as_of,
    )

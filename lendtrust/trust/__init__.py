"""
LendTrust — Trust Scoring Package
Re-exports for convenience.
"""
from lendtrust.trust.evidence import (
    ActivityEvent,
    CodeHostingProfile,
    EvidenceBundle,
    LoanHistory,
    Repository,
    VerificationStatus,
    bundle_from_payload,
)
from lendtrust.trust.factors import WEIGHTS, TrustFactor
from lendtrust.trust.engine import (
    ComprehensiveTrustScore,
    RiskCategory,
    calculate_comprehensive_trust_score,
    classify_risk,
    generate_recommendations,
)
from lendtrust.trust.legacy import LegacyRiskCategory, LegacyTrustScore, calculate_legacy_trust_score
from lendtrust.trust.strategy import (
    ComprehensiveStrategy,
    LegacyStrategy,
    ScoreResult,
    ScoreScale,
    ScoringStrategy,
    classify_risk_for_scale,
    get_strategy,
)
from lendtrust.trust.rates import (
    MarketConditions,
    dynamic_interest_rate,
    recommended_interest_rate,
    risk_multiplier,
    to_basis_points,
)

"""
LendTrust — Interest-Rate Advisor

Recommends (never enforces) a rate for a new loan market:

    recommended_rate = base_rate × risk_multiplier(trust_score)

Multiplier table, on the 0-1000 scale:
    800+      1.00  — best rates
    700-799   1.10
    600-699   1.25
    500-599   1.50
    400-499   1.75
    <400      2.00  — highest risk premium

Comprehensive (0-100) scores are projected onto this table by ×10.

`dynamic_interest_rate` prices a specific loan instead: market conditions,
loan amount and tenor on top of the trust score.
"""
import math
from dataclasses import dataclass
from typing import Union

from lendtrust.trust.strategy import ScoreScale, parse_scale

MULTIPLIER_TABLE = (
    (800, 1.00),
    (700, 1.10),
    (600, 1.25),
    (500, 1.50),
    (400, 1.75),
)
MAX_MULTIPLIER = 2.00
COMPREHENSIVE_PROJECTION = 10


def project_to_rate_scale(score: float, scale: Union[str, ScoreScale] = ScoreScale.LEGACY) -> float:
    if parse_scale(scale) is ScoreScale.COMPREHENSIVE:
        return score * COMPREHENSIVE_PROJECTION
    return score


def risk_multiplier(score: float, scale: Union[str, ScoreScale] = ScoreScale.LEGACY) -> float:
    projected = project_to_rate_scale(score, scale)
    for threshold, multiplier in MULTIPLIER_TABLE:
        if projected >= threshold:
            return multiplier
    return MAX_MULTIPLIER


def recommended_interest_rate(
    score: float,
    base_rate: float,
    scale: Union[str, ScoreScale] = ScoreScale.LEGACY,
) -> float:
    return base_rate * risk_multiplier(score, scale)


def to_basis_points(rate_pct: float) -> int:
    """8.8 (%) → 880 bps. Truncates, as market contracts store whole bps."""
    # round first so 8.8 * 100 = 880.0000000000001 doesn't drift
    return int(math.floor(round(rate_pct * 100, 6)))


# ── Dynamic market rate ───────────────────────────
#
#   rate = ((market_base + (100 - trust) × 0.1 + risk_premium) × liquidity
#           + volatility × 5 + (demand/supply - 1) × 2
#           + max(0, (50k - amount) / 50k × 2) + tenor/365 × 1.5)
#   clamped to [3, 25] %

DYNAMIC_RATE_FLOOR = 3.0
DYNAMIC_RATE_CEILING = 25.0
TRUST_ADJUSTMENT_PER_POINT = 0.1
VOLATILITY_IMPACT = 5.0
DEMAND_IMPACT = 2.0
REFERENCE_LOAN_AMOUNT = 50_000
SMALL_LOAN_PREMIUM = 2.0
TENOR_PREMIUM_PER_YEAR = 1.5


@dataclass(frozen=True)
class MarketConditions:
    """Current state of a loan market, rates in percent."""
    base_rate: float
    risk_premium: float = 0.0
    liquidity_multiplier: float = 1.0
    market_volatility: float = 0.0          # 0-1
    demand_supply_ratio: float = 1.0


def _comprehensive_score(score: float, scale: Union[str, ScoreScale]) -> float:
    if parse_scale(scale) is ScoreScale.LEGACY:
        return score / COMPREHENSIVE_PROJECTION
    return score


def dynamic_interest_rate(
    score: float,
    conditions: MarketConditions,
    loan_amount: float,
    tenor_days: float,
    scale: Union[str, ScoreScale] = ScoreScale.COMPREHENSIVE,
) -> float:
    """
    Market-driven rate for a specific loan. Larger loans pay less, longer
    tenors pay more. Legacy scores are read on the 0-100 scale (÷10).
    """
    trust = _comprehensive_score(score, scale)

    rate = conditions.base_rate
    rate += (100 - trust) * TRUST_ADJUSTMENT_PER_POINT
    rate += conditions.risk_premium
    rate *= conditions.liquidity_multiplier
    rate += conditions.market_volatility * VOLATILITY_IMPACT
    rate += (conditions.demand_supply_ratio - 1) * DEMAND_IMPACT
    rate += max(0.0, (REFERENCE_LOAN_AMOUNT - loan_amount) / REFERENCE_LOAN_AMOUNT * SMALL_LOAN_PREMIUM)
    rate += (tenor_days / 365) * TENOR_PREMIUM_PER_YEAR

    return max(DYNAMIC_RATE_FLOOR, min(DYNAMIC_RATE_CEILING, rate))

"""
LendTrust — Factor Scorers

Eight independent evidence dimensions, each scored 0-100:

    GitHub Activity       (weight 20%): Is the account established and active?
    Code Quality          (weight 18%): Are projects documented, starred and maintained?
    Community Engagement  (weight 15%): Does the developer community know this person?
    Project Complexity    (weight 12%): How substantial and diverse is the work?
    Consistency           (weight 10%): Are loans repaid and projects kept alive?
    Security Practices    (weight 10%): Is there any sign of security/testing awareness?
    On-Chain History      (weight 10%): What does the ledger say about past loans?
    Verification          (weight  5%): Is the code-hosting account tied to the wallet?

Every scorer is a pure function of the evidence bundle. Nothing here fetches,
caches or logs.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Sequence

from lendtrust.trust.evidence import EvidenceBundle
from lendtrust.trust.security_rules import (
    DEFAULT_RULES,
    SECURITY_BASE_SCORE,
    SecurityRule,
    evaluate_rules,
)

MAX_FACTOR_SCORE = 100.0
IMPROVEMENT_THRESHOLD = 80

WEIGHTS: Dict[str, float] = {
    "github_activity":      0.20,
    "code_quality":         0.18,
    "community_engagement": 0.15,
    "project_complexity":   0.12,
    "consistency":          0.10,
    "security_practices":   0.10,
    "on_chain_history":     0.10,
    "verification":         0.05,
}

WEB_LANGUAGES = ("TypeScript", "JavaScript", "React")
LEDGER_LANGUAGES = ("Solidity", "Rust", "Go")
BACKEND_LANGUAGES = ("Python", "Java", "C++")


@dataclass(frozen=True)
class TrustFactor:
    score: float
    weight: float
    description: str
    evidence: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    max_score: float = MAX_FACTOR_SCORE

    @property
    def contribution(self) -> float:
        return self.score * self.weight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 2),
            "max_score": self.max_score,
            "weight": self.weight,
            "description": self.description,
            "evidence": list(self.evidence),
            "improvements": list(self.improvements),
        }


def _clamp(score: float) -> float:
    return min(max(score, 0.0), MAX_FACTOR_SCORE)


def _factor(key: str, raw: float, description: str, evidence: List[str], improvements: Sequence[str]) -> TrustFactor:
    return TrustFactor(
        score=_clamp(raw),
        weight=WEIGHTS[key],
        description=description,
        evidence=evidence,
        improvements=list(improvements) if raw < IMPROVEMENT_THRESHOLD else [],
    )


def _share_within(timestamps, as_of, days: int, total: int) -> float:
    cutoff = as_of - timedelta(days=days)
    recent = sum(1 for ts in timestamps if ts is not None and ts > cutoff)
    return recent / max(1, total)


# ── 1. GitHub Activity ────────────────────────────

def score_github_activity(bundle: EvidenceBundle) -> TrustFactor:
    """Four buckets worth up to 25 points each: age, repos, recent events, stars."""
    profile = bundle.profile
    repos = bundle.repositories
    evidence = []
    score = 0.0

    age = bundle.account_age_years()
    if age >= 3:
        score += 25
        evidence.append(f"GitHub account {age:.1f} years old")
    elif age >= 1:
        score += 15
        evidence.append(f"GitHub account {age:.1f} years old")
    else:
        score += 5
        evidence.append(f"New GitHub account ({age:.1f} years)")

    if profile.public_repos >= 20:
        score += 25
    elif profile.public_repos >= 10:
        score += 15
    else:
        score += max(5, profile.public_repos)
    evidence.append(f"{profile.public_repos} public repositories")

    cutoff = bundle.as_of - timedelta(days=30)
    recent = sum(1 for e in bundle.activity_events if e.created_at is not None and e.created_at > cutoff)
    if recent >= 20:
        score += 25
    elif recent >= 10:
        score += 15
    else:
        score += max(5, recent)
    evidence.append(f"{recent} recent activities this month")

    avg_stars = bundle.total_stars / len(repos) if repos else 0.0
    if avg_stars >= 50:
        score += 25
        evidence.append(f"High community recognition (avg {avg_stars:.1f} stars/repo)")
    elif avg_stars >= 10:
        score += 15
        evidence.append(f"Good community recognition (avg {avg_stars:.1f} stars/repo)")
    else:
        score += max(5, avg_stars)
        evidence.append(f"Avg {avg_stars:.1f} stars per repository")

    return _factor(
        "github_activity", score,
        "GitHub account activity and community engagement",
        evidence,
        [
            "Increase repository activity",
            "Contribute to open source projects",
            "Maintain consistent commit schedule",
        ],
    )


# ── 2. Code Quality ───────────────────────────────

def score_code_quality(bundle: EvidenceBundle) -> TrustFactor:
    repos = bundle.repositories

    languages = {r.language for r in repos if r.language}
    language_score = min(30, len(languages) * 5)

    quality = [r for r in repos if r.stars > 5 and len(r.description) > 20]
    quality_score = min(40, len(quality) * 8)

    maintained = _share_within((r.updated_at for r in repos), bundle.as_of, 90, len(repos))
    maintenance_score = min(30, maintained * 30)

    evidence = [
        f"Proficient in {len(languages)} programming languages",
        f"{len(quality)} high-quality repositories with documentation",
        f"{round(maintained * 100)}% of repositories recently updated",
    ]
    return _factor(
        "code_quality", language_score + quality_score + maintenance_score,
        "Code quality, documentation, and project maintenance",
        evidence,
        [
            "Add comprehensive documentation to repositories",
            "Maintain consistent code quality standards",
            "Keep projects actively updated",
        ],
    )


# ── 3. Community Engagement ───────────────────────

def score_community_engagement(bundle: EvidenceBundle) -> TrustFactor:
    profile = bundle.profile
    evidence = []
    score = 0.0

    # Followers (max 40)
    if profile.followers >= 500:
        score += 40
    elif profile.followers >= 100:
        score += 30
    elif profile.followers >= 50:
        score += 20
    else:
        score += min(15, profile.followers / 2)
    evidence.append(f"{profile.followers} GitHub followers")

    # Follower/following ratio (max 30)
    ratio = profile.followers / max(1, profile.following)
    if ratio >= 2:
        score += 30
        evidence.append("Strong follower-to-following ratio")
    elif ratio >= 1:
        score += 20
        evidence.append("Balanced follower-to-following ratio")
    else:
        score += 10
        evidence.append("Building community presence")

    # Profile completeness (max 30)
    completeness = 0
    if profile.has_bio:
        completeness += 10
    if profile.has_website:
        completeness += 10
    if profile.has_location:
        completeness += 5
    if profile.has_company:
        completeness += 5
    score += completeness
    evidence.append(f"Complete profile with {completeness}/30 profile elements")

    return _factor(
        "community_engagement", score,
        "Community engagement and professional presence",
        evidence,
        [
            "Build stronger community presence",
            "Complete GitHub profile information",
            "Engage more with the developer community",
        ],
    )


# ── 4. Project Complexity ─────────────────────────

def score_project_complexity(bundle: EvidenceBundle) -> TrustFactor:
    repos = bundle.repositories

    avg_size = sum(r.size for r in repos) / len(repos) if repos else 0.0
    size_score = min(50, avg_size / 1000)

    stack_score = 0
    if any(r.language in WEB_LANGUAGES for r in repos):
        stack_score += 8
    if any(r.language in LEDGER_LANGUAGES for r in repos):
        stack_score += 12
    if any(r.language in BACKEND_LANGUAGES for r in repos):
        stack_score += 5
    stack_score = min(25, stack_score)

    total_forks = sum(r.forks for r in repos)
    fork_score = min(25, total_forks / 10)

    evidence = [
        f"Average repository size: {avg_size / 1000:.1f}MB",
        f"Technical stack diversity across {len(repos)} repositories",
        f"{total_forks} total forks across all repositories",
    ]
    return _factor(
        "project_complexity", size_score + stack_score + fork_score,
        "Technical complexity and project sophistication",
        evidence,
        [
            "Work on more complex projects",
            "Diversify technical skill set",
            "Create projects that inspire community contributions",
        ],
    )


# ── 5. Consistency ────────────────────────────────

def score_consistency(bundle: EvidenceBundle) -> TrustFactor:
    loans = bundle.loan_history
    repos = bundle.repositories
    evidence = []
    score = 0.0

    if loans.has_history:
        score += loans.success_rate * 60
        evidence.append(f"{loans.success_rate * 100:.1f}% loan repayment success rate")
    else:
        evidence.append("No loan history available")

    pushed = _share_within((r.pushed_at for r in repos), bundle.as_of, 30, len(repos))
    score += min(40, pushed * 40)
    evidence.append(f"{round(pushed * 100)}% repositories active in last 30 days")

    return _factor(
        "consistency", score,
        "Consistency in commitments and activity patterns",
        evidence,
        [
            "Maintain consistent development activity",
            "Build reliable loan repayment history",
            "Keep projects actively maintained",
        ],
    )


# ── 6. Security Practices ─────────────────────────

def score_security_practices(
    bundle: EvidenceBundle,
    rules: Sequence[SecurityRule] = DEFAULT_RULES,
) -> TrustFactor:
    points, evidence, _ = evaluate_rules(bundle.repositories, bundle.as_of, rules)
    evidence.append("Security practices inferred from repository patterns")
    return _factor(
        "security_practices", SECURITY_BASE_SCORE + points,
        "Security awareness and best practices implementation",
        evidence,
        [
            "Implement security best practices",
            "Add security testing to projects",
            "Regular security audits and updates",
        ],
    )


# ── 7. On-Chain History ───────────────────────────

def score_on_chain_history(bundle: EvidenceBundle) -> TrustFactor:
    loans = bundle.loan_history
    evidence = []
    score = 0.0

    if bundle.identity.is_verified:
        score += 40
        evidence.append("Verified on-chain profile")

    if loans.successful_loans > 0:
        score += min(40, loans.successful_loans * 10)
        evidence.append(f"{loans.successful_loans} successful on-chain loan transactions")

    if loans.total_repaid > 0:
        ratio = loans.total_repaid / max(1, loans.total_borrowed)
        score += min(20, ratio * 20)
        evidence.append(f"{ratio * 100:.1f}% repayment ratio")

    if score == 0:
        evidence.append("Limited on-chain history available")

    return _factor(
        "on_chain_history", score,
        "On-chain transaction history and reputation",
        evidence,
        [
            "Build on-chain transaction history",
            "Complete profile verification",
            "Participate in DeFi protocols",
        ],
    )


# ── 8. Verification ───────────────────────────────

def score_verification(bundle: EvidenceBundle) -> TrustFactor:
    """Binary. No partial credit for a check that did not pass."""
    identity = bundle.identity
    if identity.is_verified:
        evidence = [f"Verified via {identity.method or 'unknown method'}"]
        if identity.evidence:
            evidence.append(f"Evidence: {identity.evidence}")
        return TrustFactor(
            score=MAX_FACTOR_SCORE,
            weight=WEIGHTS["verification"],
            description="Account verification status",
            evidence=evidence,
        )

    return TrustFactor(
        score=0.0,
        weight=WEIGHTS["verification"],
        description="Account verification status",
        evidence=["Profile not yet verified"],
        improvements=[
            "Complete GitHub verification process",
            "Link wallet address in GitHub profile",
            "Submit verification evidence",
        ],
    )


# Declaration order is the tie-break order for recommendations.
SCORERS = {
    "github_activity":      score_github_activity,
    "code_quality":         score_code_quality,
    "community_engagement": score_community_engagement,
    "project_complexity":   score_project_complexity,
    "consistency":          score_consistency,
    "security_practices":   score_security_practices,
    "on_chain_history":     score_on_chain_history,
    "verification":         score_verification,
}

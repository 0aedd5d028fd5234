"""
LendTrust — Security Practice Rules

Security awareness is inferred, not observed: each rule is a predicate over
repository metadata that adds a fixed number of points when it fires.
Rules are evaluated in order; new heuristics are appended here (or passed in
by the caller) without touching the aggregator.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence, Tuple

from lendtrust.trust.evidence import Repository

SECURITY_BASE_SCORE = 50
SECURITY_KEYWORDS = ("security", "audit", "test", "ci", "cd")

RuleCheck = Callable[[Sequence[Repository], datetime], Optional[str]]


@dataclass(frozen=True)
class SecurityRule:
    """A named heuristic. `check` returns an evidence line when it fires."""
    name: str
    points: float
    check: RuleCheck


def _mentions_keyword(repo: Repository, keywords: Sequence[str]) -> bool:
    name = repo.name.lower()
    description = repo.description.lower()
    return any(k in name or k in description for k in keywords)


def keyword_rule(keywords: Sequence[str] = SECURITY_KEYWORDS, points: float = 30) -> SecurityRule:
    """Fires when any repository name or description mentions a keyword (substring match)."""
    def check(repos: Sequence[Repository], as_of: datetime) -> Optional[str]:
        matching = [r for r in repos if _mentions_keyword(r, keywords)]
        if not matching:
            return None
        return f"{len(matching)} repositories with security/testing focus"

    return SecurityRule(name="security_keywords", points=points, check=check)


def maintenance_rule(window_days: int = 60, min_share: float = 0.5, points: float = 20) -> SecurityRule:
    """Fires when more than `min_share` of repositories were updated inside the window."""
    def check(repos: Sequence[Repository], as_of: datetime) -> Optional[str]:
        cutoff = as_of - timedelta(days=window_days)
        maintained = [r for r in repos if r.updated_at is not None and r.updated_at > cutoff]
        if len(maintained) / max(1, len(repos)) > min_share:
            return "Consistent project maintenance indicating security awareness"
        return None

    return SecurityRule(name="recent_maintenance", points=points, check=check)


DEFAULT_RULES: Tuple[SecurityRule, ...] = (
    keyword_rule(),
    maintenance_rule(),
)


def evaluate_rules(
    repos: Sequence[Repository],
    as_of: datetime,
    rules: Sequence[SecurityRule] = DEFAULT_RULES,
) -> Tuple[float, List[str], List[str]]:
    """Run rules in order. Returns (points, evidence, fired rule names)."""
    points = 0.0
    evidence: List[str] = []
    fired: List[str] = []
    for rule in rules:
        line = rule.check(repos, as_of)
        if line is None:
            continue
        points += rule.points
        evidence.append(line)
        fired.append(rule.name)
    return points, evidence, fired

"""
LendTrust — Evidence Providers
The "credit bureaus" of the marketplace, as seen by the engine.

Providers hand the engine a complete EvidenceBundle. Fetching, retries,
timeouts and caching belong to whoever implements the provider; the engine
never reaches out for data itself.

Bundled providers:
    StaticEvidenceProvider → fixed payloads (fixtures, demos, replays)
    demo_provider()        → the three sample developers shown in the marketplace demo
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Protocol

import structlog

from lendtrust.errors import EvidenceNotFound
from lendtrust.trust.evidence import EvidenceBundle, as_utc, bundle_from_payload

logger = structlog.get_logger()


class EvidenceProvider(Protocol):
    async def get_evidence(self, handle: str) -> EvidenceBundle:
        ...


class StaticEvidenceProvider:
    """
    Serves pre-assembled payloads through the boundary validator.

    `as_of` pins the reference instant so repeated requests score
    identically; leave it unset to score against the current time.
    """

    def __init__(self, payloads: Mapping[str, Dict[str, Any]], as_of: Optional[datetime] = None):
        self._payloads = {k.lower().lstrip("@"): v for k, v in payloads.items()}
        self._as_of = as_utc(as_of)

    @property
    def handles(self) -> tuple:
        return tuple(self._payloads)

    async def get_evidence(self, handle: str) -> EvidenceBundle:
        key = handle.strip().lower().lstrip("@")
        payload = self._payloads.get(key)
        if payload is None:
            logger.info("evidence_not_found", handle=handle)
            raise EvidenceNotFound(handle)
        return bundle_from_payload(payload, as_of=self._as_of)


# ── Demo data ─────────────────────────────────────

_DEMO_DEVELOPERS = {
    "alexcoder": {
        "name": "Alex Rodriguez",
        "address": "0x1234567890123456789012345678901234567890",
        "github": {"repos": 42, "stars": 1230, "followers": 450, "commits": 2500, "age": 5.2},
        "loans": {"completed_projects": 15, "successful_loans": 3, "defaulted_loans": 0,
                  "total_borrowed": 125000, "total_repaid": 125000},
        "verification": {"is_verified": True, "method": "gist",
                         "evidence": "https://gist.github.com/alexcoder/verification"},
    },
    "sarahdev": {
        "name": "Sarah Chen",
        "address": "0x2345678901234567890123456789012345678901",
        "github": {"repos": 35, "stars": 890, "followers": 380, "commits": 3200, "age": 4.8},
        "loans": {"completed_projects": 22, "successful_loans": 5, "defaulted_loans": 1,
                  "total_borrowed": 200000, "total_repaid": 180000},
        "verification": {"is_verified": True, "method": "repo",
                         "evidence": "https://github.com/sarahdev/sarahdev/blob/main/README.md"},
    },
    "mikej": {
        "name": "Mike Johnson",
        "address": "0x3456789012345678901234567890123456789012",
        "github": {"repos": 28, "stars": 560, "followers": 220, "commits": 1800, "age": 3.5},
        "loans": {"completed_projects": 8, "successful_loans": 1, "defaulted_loans": 0,
                  "total_borrowed": 25000, "total_repaid": 25000},
        "verification": {"is_verified": False, "method": "gist"},
    },
}

_DEMO_LANGUAGES = ("TypeScript", "Solidity", "Python", "JavaScript", "Rust")
_DEMO_EVENT_TYPES = ("PushEvent", "CreateEvent", "IssuesEvent", "PullRequestEvent")


def _iso(dt: datetime) -> str:
    return dt.isoformat()


def demo_payload(handle: str, as_of: datetime) -> Dict[str, Any]:
    """Deterministic code-hosting payload for one of the demo developers."""
    dev = _DEMO_DEVELOPERS[handle]
    gh = dev["github"]
    per_repo_stars = gh["stars"] / gh["repos"]

    # the top repositories carry all of the profile's stars
    shares = [1 + (i % 5) / 4 for i in range(min(10, gh["repos"]))]
    stars = [int(gh["stars"] * s / sum(shares)) for s in shares]
    if stars:
        stars[0] += gh["stars"] - sum(stars)

    repos = []
    for i in range(len(shares)):
        repos.append({
            "name": f"project-{i + 1}",
            "description": f"Awesome project {i + 1} description",
            "stargazers_count": stars[i],
            "forks_count": int(per_repo_stars * 0.2),
            "language": _DEMO_LANGUAGES[i % len(_DEMO_LANGUAGES)],
            "size": 1000 * (i + 1),
            "created_at": _iso(as_of - timedelta(days=30 * (i + 2))),
            "updated_at": _iso(as_of - timedelta(days=2 * i + 1)),
            "pushed_at": _iso(as_of - timedelta(days=i % 7)),
        })

    events = [
        {
            "type": _DEMO_EVENT_TYPES[i % len(_DEMO_EVENT_TYPES)],
            "created_at": _iso(as_of - timedelta(days=i)),
            "repo": {"name": f"{handle}/project-{i % 5 + 1}"},
        }
        for i in range(20)
    ]

    return {
        "address": dev["address"],
        "user": {
            "login": handle,
            "name": dev["name"],
            "company": "@CoreDevZero",
            "blog": f"https://{handle}.dev",
            "location": "San Francisco, CA",
            "bio": "Full-stack developer passionate about DeFi and Web3",
            "public_repos": gh["repos"],
            "followers": gh["followers"],
            "following": int(gh["followers"] * 0.3),
            "contributions": int(gh["commits"] * 1.2),
            "created_at": _iso(as_of - timedelta(days=gh["age"] * 365.25)),
        },
        "repos": repos,
        "events": events,
        "loan_history": dict(dev["loans"]),
        "verification": dict(dev["verification"]),
    }


def demo_provider(as_of: Optional[datetime] = None) -> StaticEvidenceProvider:
    as_of = as_utc(as_of) or datetime.now(timezone.utc)
    payloads = {handle: demo_payload(handle, as_of) for handle in _DEMO_DEVELOPERS}
    return StaticEvidenceProvider(payloads, as_of=as_of)

"""
LendTrust — Evidence Model
Everything the engine knows about a loan applicant for one scoring pass.

Two layers:
    Typed bundle    → frozen dataclasses consumed by the scorers (no scoring logic here)
    Boundary models → pydantic models that validate loose code-hosting payloads

The boundary never lets undefined values reach the arithmetic: missing,
negative or malformed numbers become 0, unparsable timestamps become None,
missing strings become "".
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lendtrust.errors import EvidenceValidationError

logger = structlog.get_logger()


# ── Typed Evidence ────────────────────────────────

def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are read as UTC so every comparison is offset-aware."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _normalize_timestamps(obj: Any, *names: str) -> None:
    # frozen dataclasses: bypass __setattr__ during construction only
    for name in names:
        object.__setattr__(obj, name, as_utc(getattr(obj, name)))


@dataclass(frozen=True)
class VerificationStatus:
    """Result of the external address-ownership check."""
    address: str = ""
    handle: str = ""
    is_verified: bool = False
    method: str = ""                        # "gist", "repo", "profile"
    evidence: Optional[str] = None


@dataclass(frozen=True)
class CodeHostingProfile:
    created_at: Optional[datetime] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    has_bio: bool = False
    has_website: bool = False
    has_location: bool = False
    has_company: bool = False
    contributions: int = 0                  # used by the legacy scorer only

    def __post_init__(self):
        _normalize_timestamps(self, "created_at")


@dataclass(frozen=True)
class Repository:
    name: str = ""
    description: str = ""
    stars: int = 0
    forks: int = 0
    language: str = ""
    size: int = 0                           # KB
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None

    def __post_init__(self):
        _normalize_timestamps(self, "created_at", "updated_at", "pushed_at")


@dataclass(frozen=True)
class ActivityEvent:
    type: str = ""
    created_at: Optional[datetime] = None
    repository: str = ""

    def __post_init__(self):
        _normalize_timestamps(self, "created_at")


@dataclass(frozen=True)
class LoanHistory:
    successful_loans: int = 0
    defaulted_loans: int = 0
    total_borrowed: float = 0.0
    total_repaid: float = 0.0
    completed_projects: int = 0

    @property
    def has_history(self) -> bool:
        return self.successful_loans + self.defaulted_loans > 0

    @property
    def success_rate(self) -> float:
        """Share of settled loans repaid in full, 0.0 without history."""
        if not self.has_history:
            return 0.0
        return self.successful_loans / (self.successful_loans + self.defaulted_loans)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EvidenceBundle:
    """
    The complete input for one scoring pass.

    `as_of` is the reference instant for every recency window and for
    account age. Two bundles with the same fields score identically.
    """
    identity: VerificationStatus = field(default_factory=VerificationStatus)
    profile: CodeHostingProfile = field(default_factory=CodeHostingProfile)
    repositories: Tuple[Repository, ...] = ()
    activity_events: Tuple[ActivityEvent, ...] = ()
    loan_history: LoanHistory = field(default_factory=LoanHistory)
    as_of: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        _normalize_timestamps(self, "as_of")

    def account_age_years(self) -> float:
        if self.profile.created_at is None:
            return 0.0
        elapsed = self.as_of - self.profile.created_at
        return max(elapsed.total_seconds(), 0.0) / (365.25 * 24 * 60 * 60)

    @property
    def total_stars(self) -> int:
        return sum(r.stars for r in self.repositories)


# ── Boundary Validation ───────────────────────────

def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def _to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return max(number, 0.0)


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    elif isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        # epoch milliseconds, as the ledger and UI report them
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        return None
    return as_utc(parsed)


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class UserPayload(_Lenient):
    login: str = ""
    bio: str = ""
    blog: str = ""
    location: str = ""
    company: str = ""
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    contributions: int = 0
    created_at: Optional[datetime] = None

    @field_validator("login", "bio", "blog", "location", "company", mode="before")
    @classmethod
    def _strings(cls, v):
        return _to_str(v)

    @field_validator("public_repos", "followers", "following", "contributions", mode="before")
    @classmethod
    def _counts(cls, v):
        return _to_int(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def _timestamp(cls, v):
        return _to_datetime(v)


class RepoPayload(_Lenient):
    name: str = ""
    description: str = ""
    language: str = ""
    stargazers_count: int = 0
    forks_count: int = 0
    size: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None

    @field_validator("name", "description", "language", mode="before")
    @classmethod
    def _strings(cls, v):
        return _to_str(v)

    @field_validator("stargazers_count", "forks_count", "size", mode="before")
    @classmethod
    def _counts(cls, v):
        return _to_int(v)

    @field_validator("created_at", "updated_at", "pushed_at", mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _to_datetime(v)


class EventRepoPayload(_Lenient):
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _strings(cls, v):
        return _to_str(v)


class EventPayload(_Lenient):
    type: str = ""
    created_at: Optional[datetime] = None
    repo: EventRepoPayload = Field(default_factory=EventRepoPayload)

    @field_validator("type", mode="before")
    @classmethod
    def _strings(cls, v):
        return _to_str(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def _timestamp(cls, v):
        return _to_datetime(v)

    @field_validator("repo", mode="before")
    @classmethod
    def _repo(cls, v):
        return v if isinstance(v, dict) else {}


class LoanHistoryPayload(_Lenient):
    successful_loans: int = 0
    defaulted_loans: int = 0
    total_borrowed: float = 0.0
    total_repaid: float = 0.0
    completed_projects: int = 0

    @field_validator("successful_loans", "defaulted_loans", "completed_projects", mode="before")
    @classmethod
    def _counts(cls, v):
        return _to_int(v)

    @field_validator("total_borrowed", "total_repaid", mode="before")
    @classmethod
    def _amounts(cls, v):
        return _to_float(v)


class VerificationPayload(_Lenient):
    is_verified: bool = False
    method: str = ""
    evidence: Optional[str] = None

    @field_validator("is_verified", mode="before")
    @classmethod
    def _flag(cls, v):
        return v is True

    @field_validator("method", mode="before")
    @classmethod
    def _strings(cls, v):
        return _to_str(v)

    @field_validator("evidence", mode="before")
    @classmethod
    def _evidence(cls, v):
        return v if isinstance(v, str) and v else None


class EvidencePayload(_Lenient):
    """The loose, JSON-like shape handed over by the evidence layer."""
    address: str = ""
    user: UserPayload = Field(default_factory=UserPayload)
    repos: List[RepoPayload] = Field(default_factory=list)
    events: List[EventPayload] = Field(default_factory=list)
    loan_history: LoanHistoryPayload = Field(default_factory=LoanHistoryPayload)
    verification: VerificationPayload = Field(default_factory=VerificationPayload)

    @field_validator("address", mode="before")
    @classmethod
    def _strings(cls, v):
        return _to_str(v)

    @field_validator("user", "loan_history", "verification", mode="before")
    @classmethod
    def _mapping(cls, v):
        return v if isinstance(v, dict) else {}

    @field_validator("repos", "events", mode="before")
    @classmethod
    def _records(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        return [item for item in v if isinstance(item, dict)]

    def to_bundle(self, as_of: Optional[datetime] = None) -> EvidenceBundle:
        user = self.user
        return EvidenceBundle(
            identity=VerificationStatus(
                address=self.address,
                handle=user.login,
                is_verified=self.verification.is_verified,
                method=self.verification.method,
                evidence=self.verification.evidence,
            ),
            profile=CodeHostingProfile(
                created_at=user.created_at,
                public_repos=user.public_repos,
                followers=user.followers,
                following=user.following,
                has_bio=bool(user.bio),
                has_website=bool(user.blog),
                has_location=bool(user.location),
                has_company=bool(user.company),
                contributions=user.contributions,
            ),
            repositories=tuple(
                Repository(
                    name=r.name,
                    description=r.description,
                    stars=r.stargazers_count,
                    forks=r.forks_count,
                    language=r.language,
                    size=r.size,
                    created_at=r.created_at,
                    updated_at=r.updated_at,
                    pushed_at=r.pushed_at,
                )
                for r in self.repos
            ),
            activity_events=tuple(
                ActivityEvent(type=e.type, created_at=e.created_at, repository=e.repo.name)
                for e in self.events
            ),
            loan_history=LoanHistory(
                successful_loans=self.loan_history.successful_loans,
                defaulted_loans=self.loan_history.defaulted_loans,
                total_borrowed=self.loan_history.total_borrowed,
                total_repaid=self.loan_history.total_repaid,
                completed_projects=self.loan_history.completed_projects,
            ),
            as_of=as_of or _utcnow(),
        )


def bundle_from_payload(payload: Dict[str, Any], as_of: Optional[datetime] = None) -> EvidenceBundle:
    """
    Validate a loose evidence payload into an EvidenceBundle.

    Content problems never raise; they fall back to the documented floors.
    Only a payload that is not a mapping at all is rejected.
    """
    if not isinstance(payload, dict):
        raise EvidenceValidationError(f"evidence payload must be a mapping, got {type(payload).__name__}")
    try:
        parsed = EvidencePayload.model_validate(payload)
    except ValidationError as e:
        # Every field has a coercing validator; reaching here means the shape is unusable.
        raise EvidenceValidationError(str(e)) from e

    logger.debug(
        "evidence_payload_validated",
        handle=parsed.user.login,
        repos=len(parsed.repos),
        events=len(parsed.events),
    )
    return parsed.to_bundle(as_of=as_of)

"""
Tests for boundary validation of loose evidence payloads.
"""
from datetime import datetime, timezone

import pytest

from lendtrust.errors import EvidenceValidationError
from lendtrust.trust.engine import calculate_comprehensive_trust_score
from lendtrust.trust.evidence import (
    ActivityEvent,
    CodeHostingProfile,
    EvidenceBundle,
    LoanHistory,
    Repository,
    bundle_from_payload,
)

from factories import AS_OF, strong_payload


class TestBundleFromPayload:
    def test_empty_payload_gives_floors(self):
        bundle = bundle_from_payload({}, as_of=AS_OF)
        assert bundle.repositories == ()
        assert bundle.activity_events == ()
        assert bundle.profile.followers == 0
        assert bundle.profile.created_at is None
        assert bundle.identity.is_verified is False
        assert bundle.loan_history == LoanHistory()
        assert bundle.as_of == AS_OF

    @pytest.mark.parametrize("payload", [None, [], "alexcoder", 42])
    def test_non_mapping_rejected(self, payload):
        with pytest.raises(EvidenceValidationError):
            bundle_from_payload(payload)

    def test_malformed_numbers_coerced(self):
        bundle = bundle_from_payload({
            "user": {"followers": "lots", "following": -5, "public_repos": "12", "contributions": None},
            "repos": [{"stargazers_count": "NaN", "forks_count": 3.7, "size": [1, 2]}],
            "loan_history": {"successful_loans": "2", "total_borrowed": "1e3", "total_repaid": float("inf")},
        }, as_of=AS_OF)
        assert bundle.profile.followers == 0
        assert bundle.profile.following == 0
        assert bundle.profile.public_repos == 12
        assert bundle.profile.contributions == 0
        repo = bundle.repositories[0]
        assert (repo.stars, repo.forks, repo.size) == (0, 3, 0)
        assert bundle.loan_history.successful_loans == 2
        assert bundle.loan_history.total_borrowed == 1000.0
        assert bundle.loan_history.total_repaid == 0.0

    def test_wrong_container_types_dropped(self):
        bundle = bundle_from_payload({
            "user": "alexcoder",
            "repos": {"name": "not-a-list"},
            "events": [{"type": "PushEvent"}, "garbage", None],
            "verification": ["yes"],
        }, as_of=AS_OF)
        assert bundle.profile.public_repos == 0
        assert bundle.repositories == ()
        assert len(bundle.activity_events) == 1
        assert bundle.identity.is_verified is False

    def test_null_strings_become_empty(self):
        bundle = bundle_from_payload({
            "user": {"bio": None, "blog": "", "location": "Lisbon"},
            "repos": [{"name": "lib", "description": None, "language": None}],
        }, as_of=AS_OF)
        assert bundle.profile.has_bio is False
        assert bundle.profile.has_website is False
        assert bundle.profile.has_location is True
        assert bundle.repositories[0].description == ""
        assert bundle.repositories[0].language == ""

    def test_timestamps(self):
        bundle = bundle_from_payload({
            "user": {"created_at": "2020-01-15T08:30:00Z"},
            "repos": [
                {"updated_at": 1717200000000},
                {"updated_at": "not a date"},
                {"updated_at": "2024-03-01T00:00:00"},
            ],
        }, as_of=AS_OF)
        assert bundle.profile.created_at == datetime(2020, 1, 15, 8, 30, tzinfo=timezone.utc)
        assert bundle.repositories[0].updated_at == datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert bundle.repositories[1].updated_at is None
        # naive timestamps are read as UTC
        assert bundle.repositories[2].updated_at == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_verification_requires_literal_true(self):
        truthy = bundle_from_payload({"verification": {"is_verified": "yes", "method": "gist"}}, as_of=AS_OF)
        assert truthy.identity.is_verified is False
        verified = bundle_from_payload({"verification": {"is_verified": True, "evidence": ""}}, as_of=AS_OF)
        assert verified.identity.is_verified is True
        assert verified.identity.evidence is None

    def test_event_repository_name(self):
        bundle = bundle_from_payload({"events": [{"type": "PushEvent", "repo": {"name": "a/b"}}]}, as_of=AS_OF)
        assert bundle.activity_events[0].repository == "a/b"

    def test_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        bundle = bundle_from_payload({})
        assert bundle.as_of >= before


class TestEvidenceBundle:
    def test_account_age_without_creation_date(self):
        assert EvidenceBundle(as_of=AS_OF).account_age_years() == 0.0

    def test_account_age_never_negative(self):
        bundle = bundle_from_payload({"user": {"created_at": "2030-01-01T00:00:00Z"}}, as_of=AS_OF)
        assert bundle.account_age_years() == 0.0

    def test_naive_reference_time_read_as_utc(self):
        bundle = bundle_from_payload(
            {"user": {"created_at": "2020-01-01T00:00:00Z"}, "repos": [{"updated_at": "2025-05-20T00:00:00Z"}]},
            as_of=datetime(2025, 6, 1),
        )
        assert bundle.as_of == datetime(2025, 6, 1, tzinfo=timezone.utc)
        result = calculate_comprehensive_trust_score(bundle)
        assert result.factors["github_activity"].evidence[0] == "GitHub account 5.4 years old"
        assert result.factors["code_quality"].evidence[-1] == "100% of repositories recently updated"

    def test_naive_timestamps_in_hand_built_bundle(self):
        bundle = EvidenceBundle(
            profile=CodeHostingProfile(created_at=datetime(2020, 1, 1)),
            repositories=(Repository(pushed_at=datetime(2025, 5, 30)),),
            activity_events=(ActivityEvent(created_at=datetime(2025, 5, 31)),),
            as_of=AS_OF,
        )
        assert bundle.profile.created_at.tzinfo is timezone.utc
        assert bundle.account_age_years() > 5
        result = calculate_comprehensive_trust_score(bundle)
        assert "1 recent activities this month" in result.factors["github_activity"].evidence

    def test_default_reference_time_with_naive_evidence(self):
        bundle = EvidenceBundle(profile=CodeHostingProfile(created_at=datetime(2020, 1, 1)))
        assert bundle.account_age_years() > 5

    def test_loan_success_rate(self):
        assert LoanHistory().success_rate == 0.0
        assert LoanHistory(successful_loans=3, defaulted_loans=1).success_rate == 0.75


def test_payload_and_bundle_score_alike():
    """A raw payload scores like the equivalent hand-built bundle."""
    now = datetime.now(timezone.utc)
    bundle = bundle_from_payload(strong_payload(now), as_of=now)
    result = calculate_comprehensive_trust_score(bundle)
    assert result.total_score == 93
    assert result.factors["github_activity"].score == 100

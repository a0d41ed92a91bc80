"""Unit tests for the requirement-based risk scorer."""

import pytest

from bgcheck.core.scorer import REQUIREMENTS, ScoringPolicy, score_risk
from bgcheck.models.risk import RiskLevel


AT_MINIMUM = {"account_age_days": 60, "badges": 300, "friends": 20, "groups": 10}


def _score(**overrides):
    values = {**AT_MINIMUM, **overrides}
    return score_risk(
        values["account_age_days"],
        values["badges"],
        values["friends"],
        values["groups"],
    )


class TestRequirements:
    """Test the fixed thresholds."""

    def test_requirement_values(self):
        assert REQUIREMENTS.min_age_days == 60
        assert REQUIREMENTS.min_badges == 300
        assert REQUIREMENTS.min_friends == 20
        assert REQUIREMENTS.min_groups == 10

    def test_policy_reports_requirements(self):
        assert ScoringPolicy.default().requirements == REQUIREMENTS


class TestLowRisk:
    """Accounts meeting every requirement."""

    def test_exactly_at_minimums_is_low(self):
        risk = _score()
        assert risk.level == RiskLevel.LOW
        assert risk.score == 0
        assert risk.factors == []
        assert risk.warnings == []

    def test_well_above_minimums_is_low(self):
        risk = score_risk(2000, 5000, 200, 50)
        assert risk.level == RiskLevel.LOW
        assert risk.score == 0


class TestHighRisk:
    """Accounts far below the requirements."""

    def test_severe_miss_on_every_metric(self):
        risk = score_risk(30, 100, 5, 0)
        assert risk.level == RiskLevel.HIGH
        assert len(risk.factors) == 4
        assert risk.score == 100

    def test_two_failed_metrics_is_high(self):
        risk = _score(account_age_days=55, friends=18)
        assert risk.level == RiskLevel.HIGH

    def test_single_severe_miss_is_high(self):
        risk = _score(groups=1)
        assert risk.level == RiskLevel.HIGH


class TestMediumRisk:
    """Single, moderate shortfalls."""

    def test_near_miss_on_one_metric_is_medium(self):
        risk = _score(account_age_days=55)
        assert risk.level == RiskLevel.MEDIUM
        assert risk.score == 10
        assert risk.factors == ["Account age is below 60 days (55d)."]
        assert risk.warnings == ["Account age is close to requirement"]

    def test_moderate_badge_shortfall_is_medium_without_warning(self):
        risk = _score(badges=210)
        assert risk.level == RiskLevel.MEDIUM
        assert risk.score == 18
        assert risk.warnings == []


class TestUnverifiedInputs:
    """Unknown values must never produce Low."""

    def test_unknown_age_is_not_low(self):
        risk = _score(account_age_days=None)
        assert risk.level.rank >= RiskLevel.MEDIUM.rank
        assert any("could not verify account age" in f.lower() for f in risk.factors)

    @pytest.mark.parametrize("metric", ["badges", "friends", "groups"])
    def test_unknown_counts_are_not_low(self, metric):
        risk = _score(**{metric: None})
        assert risk.level != RiskLevel.LOW
        assert any(f.startswith("Could not verify") for f in risk.factors)

    def test_unknown_value_adds_no_near_miss_warning(self):
        risk = _score(friends=None)
        assert "Friends are close to requirement" not in risk.warnings

    def test_unverified_penalty_adds_to_score(self):
        known_zero = _score(groups=0)
        unknown = _score(groups=None)
        assert unknown.score > known_zero.score

    def test_unverified_with_zero_minimum_is_still_not_low(self):
        policy = ScoringPolicy.default().with_rule("groups", minimum=0)
        risk = score_risk(60, 300, 20, None, policy)
        assert risk.level == RiskLevel.MEDIUM


class TestMonotonicity:
    """Lower metric values never lower the score."""

    @pytest.mark.parametrize(
        "metric,start",
        [
            ("account_age_days", 70),
            ("badges", 320),
            ("friends", 25),
            ("groups", 12),
        ],
    )
    def test_score_never_decreases_as_metric_decreases(self, metric, start):
        previous_score = -1
        previous_rank = -1
        for value in range(start, -1, -1):
            risk = _score(**{metric: value})
            assert risk.score >= previous_score
            assert risk.level.rank >= previous_rank
            previous_score = risk.score
            previous_rank = risk.level.rank


class TestScoringPolicy:
    """Test the policy builder."""

    def test_with_rule_replaces_one_rule(self):
        policy = ScoringPolicy.default().with_rule("friends", minimum=50)
        assert policy.friends.minimum == 50
        assert policy.groups.minimum == 10
        assert ScoringPolicy.default().friends.minimum == 20

    def test_custom_minimum_changes_result(self):
        policy = ScoringPolicy.default().with_rule("friends", minimum=50)
        risk = score_risk(60, 300, 20, 10, policy)
        assert risk.level != RiskLevel.LOW

    def test_with_cutoffs(self):
        policy = ScoringPolicy.default().with_cutoffs(high_score=5, high_failed_count=4)
        risk = score_risk(55, 300, 20, 10, policy)
        assert risk.level == RiskLevel.HIGH

    def test_score_is_clamped(self):
        risk = score_risk(None, None, None, None)
        assert risk.score == 100
        assert risk.level == RiskLevel.HIGH

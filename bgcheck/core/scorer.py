"""Requirement-based risk scoring."""

from dataclasses import dataclass, replace

from bgcheck.models.risk import Requirements, RiskLevel, RiskResult

REQUIREMENTS = Requirements(
    min_age_days=60,
    min_badges=300,
    min_friends=20,
    min_groups=10,
)


@dataclass(frozen=True)
class MetricRule:
    """
    Threshold and penalty tiers for one scored metric.

    ``tiers`` are ``(floor, points)`` pairs with descending floors: a value
    below ``minimum`` costs the points of the first floor it reaches, or
    ``floor_penalty`` when it is below every floor.
    """

    minimum: int
    tiers: tuple[tuple[int, int], ...]
    floor_penalty: int
    severe_below: int
    near_miss_margin: int
    unverified_penalty: int
    below_factor: str
    unverified_factor: str
    near_miss_warning: str

    def penalty(self, value: int) -> int:
        if value >= self.minimum:
            return 0
        for floor, points in self.tiers:
            if value >= floor:
                return points
        return self.floor_penalty

    def is_severe(self, value: int) -> bool:
        return value < self.severe_below

    def is_near_miss(self, value: int) -> bool:
        return 0 < self.minimum - value <= self.near_miss_margin


AGE_RULE = MetricRule(
    minimum=REQUIREMENTS.min_age_days,
    tiers=((50, 10), (40, 20), (30, 35)),
    floor_penalty=45,
    severe_below=45,
    near_miss_margin=10,
    unverified_penalty=25,
    below_factor="Account age is below {minimum} days ({value}d).",
    unverified_factor="Could not verify account age.",
    near_miss_warning="Account age is close to requirement",
)

BADGES_RULE = MetricRule(
    minimum=REQUIREMENTS.min_badges,
    tiers=((250, 10), (200, 18), (150, 28), (100, 38)),
    floor_penalty=45,
    severe_below=150,
    near_miss_margin=30,
    unverified_penalty=15,
    below_factor="Badge count is below {minimum} ({value}).",
    unverified_factor="Could not verify badge count.",
    near_miss_warning="Badges are close to requirement",
)

FRIENDS_RULE = MetricRule(
    minimum=REQUIREMENTS.min_friends,
    tiers=((15, 10), (10, 18), (5, 28)),
    floor_penalty=40,
    severe_below=10,
    near_miss_margin=5,
    unverified_penalty=15,
    below_factor="Friends count is below {minimum} ({value}).",
    unverified_factor="Could not verify friends list/count.",
    near_miss_warning="Friends are close to requirement",
)

GROUPS_RULE = MetricRule(
    minimum=REQUIREMENTS.min_groups,
    tiers=((8, 10), (6, 18), (3, 28)),
    floor_penalty=40,
    severe_below=5,
    near_miss_margin=2,
    unverified_penalty=20,
    below_factor="Groups/community count is below {minimum} ({value}).",
    unverified_factor="Could not verify groups.",
    near_miss_warning="Groups are close to requirement",
)


@dataclass(frozen=True)
class ScoringPolicy:
    """Metric rules plus the cutoffs that map a score to a level."""

    age: MetricRule = AGE_RULE
    badges: MetricRule = BADGES_RULE
    friends: MetricRule = FRIENDS_RULE
    groups: MetricRule = GROUPS_RULE
    high_score: int = 60
    high_failed_count: int = 2
    max_score: int = 100

    @classmethod
    def default(cls) -> "ScoringPolicy":
        return cls()

    def with_rule(self, name: str, **changes) -> "ScoringPolicy":
        """Copy of the policy with fields of one rule replaced."""
        return replace(self, **{name: replace(getattr(self, name), **changes)})

    def with_cutoffs(self, **changes) -> "ScoringPolicy":
        return replace(self, **changes)

    @property
    def requirements(self) -> Requirements:
        return Requirements(
            min_age_days=self.age.minimum,
            min_badges=self.badges.minimum,
            min_friends=self.friends.minimum,
            min_groups=self.groups.minimum,
        )

    def clamp(self, score: int) -> int:
        return max(0, min(self.max_score, score))

    def level_for(self, score: int, failed: int, severe: bool) -> RiskLevel:
        """Level for an account that misses at least one requirement."""
        if failed >= self.high_failed_count or severe or score >= self.high_score:
            return RiskLevel.HIGH
        return RiskLevel.MEDIUM


def score_risk(
    account_age_days: int | None,
    badges: int | None,
    friends: int | None,
    groups: int | None,
    policy: ScoringPolicy | None = None,
) -> RiskResult:
    """
    Score an account against the minimum-activity requirements.

    A None input means the metric could not be verified: it costs the
    rule's unverified penalty and is then checked as if it were 0, so an
    unknown value can never produce Low.

    Args:
        account_age_days: Days since account creation
        badges: Total badges
        friends: Friends count
        groups: Group memberships
        policy: ScoringPolicy, defaults to ScoringPolicy.default()

    Returns:
        RiskResult with level, clamped score, factors and warnings
    """
    policy = policy or ScoringPolicy.default()

    factors: list[str] = []
    warnings: list[str] = []
    score = 0
    failed = 0
    severe = False
    unverified = False

    checks = (
        (policy.age, account_age_days),
        (policy.badges, badges),
        (policy.friends, friends),
        (policy.groups, groups),
    )

    for rule, raw_value in checks:
        if raw_value is None:
            factors.append(rule.unverified_factor)
            score += rule.unverified_penalty
            unverified = True
        value = max(0, raw_value or 0)

        if value >= rule.minimum:
            continue

        failed += 1
        score += rule.penalty(value)
        severe = severe or rule.is_severe(value)
        factors.append(rule.below_factor.format(minimum=rule.minimum, value=value))
        if raw_value is not None and rule.is_near_miss(value):
            warnings.append(rule.near_miss_warning)

    if failed == 0 and not unverified:
        level = RiskLevel.LOW
    else:
        level = policy.level_for(score, failed, severe)

    return RiskResult(
        level=level,
        score=policy.clamp(score),
        factors=factors,
        warnings=warnings,
    )

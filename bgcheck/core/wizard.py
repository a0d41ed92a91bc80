"""Four-stage background check wizard state and derived views."""

from dataclasses import dataclass
from enum import IntEnum

from bgcheck.core.blacklist import DEFAULT_DIVISION, division_name, normalize_division
from bgcheck.core.transformer import parse_account_id
from bgcheck.exceptions import InvalidAccountIdError
from bgcheck.models.result import EvaluationResult, LookupResult


class Stage(IntEnum):
    """Wizard stages in the order they are shown."""
    DIVISION = 0
    ACCOUNT_ID = 1
    GENERAL_INFO = 2
    EVALUATION = 3


STAGE_TITLES = {
    Stage.DIVISION: "Select Division",
    Stage.ACCOUNT_ID: "Enter User ID",
    Stage.GENERAL_INFO: "General Info",
    Stage.EVALUATION: "Evaluation",
}

NO_FACTORS = "No specific risk factors detected."


@dataclass
class GeneralInfoView:
    """What the general-info stage shows for the last lookup."""

    user_id: int
    username: str
    display_name: str
    avatar_url: str | None
    created: str
    description: str
    is_banned: bool
    friends_count: int
    followers_count: int
    following_count: int
    groups_count: int
    badge_count: int
    friends: list[tuple[str, str, int]]
    groups: list[tuple[str, str]]
    badges: list[str]
    username_history: list[str]
    unverified: list[str]


@dataclass
class EvaluationView:
    """What the evaluation stage shows for the last evaluation."""

    division_name: str
    level: str
    score: int
    factors: list[str]
    warnings: list[str]
    blacklisted_groups: list[str]
    blacklisted_friends: list[str]
    cross_division: list[str]


def general_info_view(lookup: LookupResult) -> GeneralInfoView:
    profile = lookup.profile
    verification = lookup.verification
    unverified = [
        name
        for name, ok in (
            ("account age", verification.age_verified),
            ("friends", verification.friends_verified),
            ("groups", verification.groups_verified),
            ("badges", verification.badges_verified),
            ("username history", verification.username_history_verified),
        )
        if not ok
    ]
    return GeneralInfoView(
        user_id=profile.user_id,
        username=profile.username,
        display_name=profile.display_name,
        avatar_url=profile.avatar_url,
        created=profile.created.date().isoformat() if profile.created else "Unknown",
        description=profile.description or "No description.",
        is_banned=profile.is_banned,
        friends_count=profile.friends_count,
        followers_count=profile.followers_count,
        following_count=profile.following_count,
        groups_count=profile.groups_count,
        badge_count=profile.total_badges,
        friends=[(f.display_name, f.username, f.id) for f in lookup.friends],
        groups=[(g.name, g.role) for g in lookup.groups],
        badges=[b.name for b in lookup.badges],
        username_history=[n.name for n in lookup.username_history],
        unverified=unverified,
    )


def evaluation_view(evaluation: EvaluationResult) -> EvaluationView:
    risk = evaluation.risk
    blacklist = evaluation.blacklist
    return EvaluationView(
        division_name=division_name(evaluation.division),
        level=risk.level.value,
        score=risk.score,
        factors=list(risk.factors) or [NO_FACTORS],
        warnings=list(risk.warnings),
        blacklisted_groups=[f"{g.name} ({g.reason})" if g.reason else g.name for g in blacklist.blacklisted_groups],
        blacklisted_friends=[f"@{f.username} ({f.reason})" if f.reason else f"@{f.username}" for f in blacklist.blacklisted_friends],
        cross_division=[e.division_name for e in blacklist.cross_division],
    )


@dataclass
class Wizard:
    """
    Linear division -> ID -> general info -> evaluation flow.

    Holds nothing beyond the current stage and the last fetched data;
    every view is derived from that data on demand.
    """

    stage: Stage = Stage.DIVISION
    division: str = DEFAULT_DIVISION
    account_input: str = ""
    lookup: LookupResult | None = None
    evaluation: EvaluationResult | None = None
    error: str | None = None

    @property
    def title(self) -> str:
        return STAGE_TITLES[self.stage]

    @property
    def division_name(self) -> str:
        return division_name(self.division)

    def select_division(self, division: str | None) -> None:
        self.division = normalize_division(division)
        self.stage = Stage.ACCOUNT_ID

    def enter_account_id(self, raw: str) -> int:
        """
        Validate the entered ID; on failure the error is kept for display.

        Raises:
            InvalidAccountIdError: If the input is not a positive integer
        """
        self.account_input = raw.strip()
        try:
            account_id = parse_account_id(raw)
        except InvalidAccountIdError as e:
            self.error = str(e)
            raise
        self.error = None
        return account_id

    def show_results(self, lookup: LookupResult, evaluation: EvaluationResult) -> None:
        self.lookup = lookup
        self.evaluation = evaluation
        self.error = None
        self.stage = Stage.GENERAL_INFO

    def fail(self, message: str) -> None:
        """Record a single error and return to ID entry."""
        self.error = message
        self.lookup = None
        self.evaluation = None
        self.stage = Stage.ACCOUNT_ID

    def can_advance(self) -> bool:
        if self.stage == Stage.DIVISION:
            return True
        if self.stage == Stage.ACCOUNT_ID:
            return self.lookup is not None
        if self.stage == Stage.GENERAL_INFO:
            return self.evaluation is not None
        return False

    def next(self) -> Stage:
        if self.can_advance():
            self.stage = Stage(self.stage + 1)
        return self.stage

    def back(self) -> Stage:
        if self.stage > Stage.DIVISION:
            self.stage = Stage(self.stage - 1)
        return self.stage

    def reset(self) -> None:
        self.stage = Stage.DIVISION
        self.division = DEFAULT_DIVISION
        self.account_input = ""
        self.lookup = None
        self.evaluation = None
        self.error = None

    def general_info_view(self) -> GeneralInfoView | None:
        return general_info_view(self.lookup) if self.lookup else None

    def evaluation_view(self) -> EvaluationView | None:
        return evaluation_view(self.evaluation) if self.evaluation else None

"""Type definitions for Budget Game data structures.

ARCHITECTURE DECISION: RECORDS AS DATACLASSES, RESULTS AS TYPEDDICTS
====================================================================

1. **Frozen dataclasses for domain records** (fixed shape, passed between
   engines): ActivityDefinition, ActivityEvent, StreakState, WeeklyGoal,
   FinancialGoal, BonusRule, StreakSettings.
   - Engines never mutate a record in place; they return a new one via
     ``dataclasses.replace``. Ledger events are append-only.

2. **TypedDict for result payloads** (returned to managers and callers,
   forwarded as signal payloads): GoalProgress, BonusAward,
   WeekComparison, HouseholdGoalOverview, etc.

Weekly goal parameters are a tagged union: one frozen dataclass per goal type,
each carrying its ``goal_type`` tag. Progress handlers dispatch on that tag.

IMPORTANT: This file must NOT import from engines, managers or the coordinator
to avoid circular dependencies. Only import from const.py and typing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, TypedDict

from . import const

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ActorKey = str  # User or household identifier
HouseholdId = str
GoalId = str  # "goal_<hex>" for financial goals, UUID string for weekly goals
ActivityName = str
Catalog = dict[ActivityName, "ActivityDefinition"]


# =============================================================================
# Activity Records
# =============================================================================


@dataclass(frozen=True)
class ActivityDefinition:
    """Catalog entry for one activity.

    Names are unique within a catalog. ``base_points`` may be negative
    (penalty activities).
    """

    name: str
    base_points: int
    category: str
    required: bool = False


@dataclass(frozen=True)
class ActivityEvent:
    """One ledger entry: a single activity performed by an actor.

    ``awarded_points`` equals ``base_points`` until the Reward Calculator
    prices the event; the pricing breakdown is kept alongside.
    """

    timestamp: datetime
    actor_key: ActorKey
    activity_name: str
    base_points: int
    awarded_points: int
    category: str
    streak_length: int = 0
    bonus_points: int = 0
    multiplier: int = 1
    unknown: bool = False


@dataclass(frozen=True)
class StreakState:
    """Derived streak state for one (actor, activity) pair."""

    activity_name: str
    length: int = 0
    streak_class: str = const.STREAK_CLASS_NONE
    end_day: date | None = None


@dataclass(frozen=True)
class StreakSettings:
    """Thresholds (T1 < T2 < TM) and flat bonuses (B1, B2) for streak pricing."""

    bonus_1_threshold: int = const.DEFAULT_BONUS_1_THRESHOLD
    bonus_2_threshold: int = const.DEFAULT_BONUS_2_THRESHOLD
    multiplier_threshold: int = const.DEFAULT_MULTIPLIER_THRESHOLD
    bonus_1_points: int = const.DEFAULT_BONUS_1_POINTS
    bonus_2_points: int = const.DEFAULT_BONUS_2_POINTS


@dataclass(frozen=True)
class RewardResult:
    """Priced points for one event."""

    final_points: int
    bonus_points: int = 0
    multiplier: int = 1


@dataclass(frozen=True)
class UnknownActivityWarning:
    """Raised through the warning callback when a name is not in the catalog."""

    actor_key: ActorKey
    activity_name: str
    timestamp: datetime


class SubmissionResult(TypedDict):
    """Outcome of one activity submission."""

    success: bool
    points: int  # Sum of awarded points for this submission
    weekly_total: int  # Actor's running total for the week, this submission included
    events: list[ActivityEvent]
    message: str


@dataclass
class Summary:
    """Aggregate view over a window of events."""

    total: int = 0
    positive_count: int = 0
    negative_count: int = 0
    negative_points: int = 0
    top_activity: str = "None"
    top_activity_count: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)
    activity_counts: dict[str, int] = field(default_factory=dict)


# =============================================================================
# Weekly Goals (tagged union parameters)
# =============================================================================


@dataclass(frozen=True)
class CategoryCountParams:
    """Perform at least ``target`` activities in ``category``."""

    goal_type: ClassVar[str] = const.WEEKLY_GOAL_TYPE_CATEGORY_COUNT
    category: str
    target: int


@dataclass(frozen=True)
class NegativeLimitParams:
    """Keep total negative points at or under ``target``."""

    goal_type: ClassVar[str] = const.WEEKLY_GOAL_TYPE_NEGATIVE_LIMIT
    baseline: int
    target: int


@dataclass(frozen=True)
class StreakMaintainParams:
    """Extend an existing streak on ``activity_name`` to ``target`` days."""

    goal_type: ClassVar[str] = const.WEEKLY_GOAL_TYPE_STREAK_MAINTAIN
    activity_name: str
    starting_streak: int
    target: int


@dataclass(frozen=True)
class StreakStartParams:
    """Reach a streak of ``target`` days on any activity."""

    goal_type: ClassVar[str] = const.WEEKLY_GOAL_TYPE_STREAK_START
    target: int = const.STREAK_START_TARGET


@dataclass(frozen=True)
class ActivityCountParams:
    """Perform ``activity_name`` at least ``target`` times."""

    goal_type: ClassVar[str] = const.WEEKLY_GOAL_TYPE_ACTIVITY_COUNT
    activity_name: str
    target: int


WeeklyGoalParams = (
    CategoryCountParams
    | NegativeLimitParams
    | StreakMaintainParams
    | StreakStartParams
    | ActivityCountParams
)


@dataclass(frozen=True)
class WeeklyGoal:
    """A goal scoped to one actor and one Sunday-start week."""

    goal_id: str
    actor_key: ActorKey
    name: str
    description: str
    params: WeeklyGoalParams
    bonus_points: int
    week_start: date
    week_end: date
    completed: bool = False

    @property
    def goal_type(self) -> str:
        """Tag of the parameter variant."""
        return self.params.goal_type


class GoalEvaluationContext(TypedDict):
    """Pre-computed data a weekly goal is evaluated against.

    Built by WeeklyGoalManager; the engine never reads stores.
    """

    summary: Summary  # Summary of the goal's week so far
    streaks: dict[str, StreakState]  # Streaks per activity as of evaluation


class GoalProgress(TypedDict):
    """Progress of one weekly goal at a point in time."""

    goal_id: str
    goal_type: str
    current: int
    target: int
    percent: float
    met: bool
    reason: str


class WeekFinalization(TypedDict):
    """Outcome of finalizing one actor's week."""

    actor_key: ActorKey
    week_start: date
    activity_points: int
    goal_bonus_points: int
    threshold_bonus_points: int
    week_total: int
    completed_goal_ids: list[str]
    newly_completed_goal_ids: list[str]
    threshold_awards: list[BonusAward]
    goals: list[WeeklyGoal]


# =============================================================================
# Threshold Bonuses
# =============================================================================


@dataclass(frozen=True)
class BonusRule:
    """A weekly count rule that awards ``bonus_points`` when satisfied."""

    rule_id: str
    name: str
    match_type: str
    match_value: str
    comparison: str
    threshold: int
    bonus_points: int


class BonusAward(TypedDict):
    """A fired threshold rule."""

    rule_id: str
    name: str
    count: int
    threshold: int
    bonus_points: int


# =============================================================================
# Aggregator Results
# =============================================================================


class ComparisonGoal(TypedDict):
    """Week-over-week goal outcome (higher than / double the previous week)."""

    goal: str
    achieved: bool
    percent: float
    current: int
    target: int


class WeekComparison(TypedDict):
    """Current week total against the previous full week."""

    current_week_total: int
    previous_week_total: int
    has_previous_week: bool
    goals: list[ComparisonGoal]


class GoalAchievementHistory(TypedDict):
    """Counts of weeks that beat or doubled the week before."""

    weeks: list[dict[str, Any]]
    higher_achieved_count: int
    double_achieved_count: int


class WeekAverages(TypedDict):
    """Running averages used by the weekly overview."""

    weekly_total: int
    days_passed: int
    daily_average: float
    weekly_average: float


# =============================================================================
# Financial Goals
# =============================================================================


@dataclass(frozen=True)
class FinancialGoal:
    """A long-horizon household goal.

    For debt goals ``target_amount`` is the starting balance and
    ``current_amount`` is what is still owed.
    """

    goal_id: GoalId
    household_id: HouseholdId
    goal_name: str
    goal_type: str
    target_amount: float
    current_amount: float = 0.0
    start_date: date | None = None
    target_date: date | None = None
    status: str = const.GOAL_STATUS_ACTIVE
    linked_goal_id: GoalId | None = None


class GoalAmountUpdate(TypedDict):
    """One requested amount change."""

    goal_id: GoalId
    new_amount: Any


@dataclass(frozen=True)
class GoalUpdateFailure:
    """Structured failure for one update in a batch."""

    goal_id: GoalId
    error: str
    message: str


class VacationActivation(TypedDict):
    """A vacation fund that became active because its savings goal completed."""

    savings_goal_id: GoalId
    vacation_goal_id: GoalId
    vacation_goal_name: str
    progress: float


@dataclass
class GoalUpdateResult:
    """Result of a batch of amount updates (partial success allowed)."""

    success: bool = True
    updated_goals: list[FinancialGoal] = field(default_factory=list)
    completed_goals: list[FinancialGoal] = field(default_factory=list)
    activated_vacation_funds: list[VacationActivation] = field(default_factory=list)
    errors: list[GoalUpdateFailure] = field(default_factory=list)


class GoalView(TypedDict):
    """One goal as shown in the household overview."""

    goal_id: GoalId
    goal_name: str
    goal_type: str
    status: str
    display_status: str
    progress: float
    current_amount: float
    amount_remaining: float
    months_remaining: int | None
    critical: bool


class HouseholdGoalOverview(TypedDict):
    """Household-wide financial goal overview."""

    active_goals: list[GoalView]
    completed_goals: list[GoalView]
    critical_goals: list[GoalView]
    total_progress: float

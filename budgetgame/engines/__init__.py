"""Engine modules for Budget Game.

Contains pure computation engines:
- ledger_engine: Raw submissions and legacy rows into ledger events
- streak_engine: Per-activity consecutive-day streaks
- reward_engine: Streak-aware point pricing
- statistics_engine: Summaries, weekly totals, comparisons, averages
- weekly_goal_engine: Weekly goal generation, progress and finalization
- bonus_engine: Weekly threshold bonus rules
- financial_goal_engine: Savings/debt/vacation goals and the cascade
"""

from .bonus_engine import BonusEngine
from .financial_goal_engine import FinancialGoalEngine, GoalValidationError
from .ledger_engine import LedgerEngine
from .reward_engine import RewardEngine
from .statistics_engine import StatisticsEngine
from .streak_engine import StreakEngine
from .weekly_goal_engine import WeeklyGoalEngine

__all__ = [
    "BonusEngine",
    "FinancialGoalEngine",
    "GoalValidationError",
    "LedgerEngine",
    "RewardEngine",
    "StatisticsEngine",
    "StreakEngine",
    "WeeklyGoalEngine",
]

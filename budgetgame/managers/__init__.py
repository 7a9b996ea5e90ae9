"""Manager modules for Budget Game.

Managers orchestrate workflows over the injected stores and delegate all
calculations to the engines.
"""

from .activity_manager import ActivityManager
from .base_manager import BaseManager
from .financial_goal_manager import FinancialGoalManager
from .statistics_manager import StatisticsManager
from .weekly_goal_manager import WeeklyGoalManager

__all__ = [
    "ActivityManager",
    "BaseManager",
    "FinancialGoalManager",
    "StatisticsManager",
    "WeeklyGoalManager",
]

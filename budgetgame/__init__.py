"""Budget Game: activity ledger, streak rewards, weekly goals and financial goals."""

from .coordinator import BudgetGameCoordinator

__all__ = ["BudgetGameCoordinator"]

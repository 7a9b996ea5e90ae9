"""Reward Engine - Pure logic for streak-aware point pricing.

Given the base points of an activity and the current streak on it, returns
the awarded points. Tiers are checked from the highest down:

    length >= TM  ->  base * 2
    length >= T2  ->  base + B2
    length >= T1  ->  base + B1
    otherwise     ->  base

Only positive activities are boosted; zero and negative base points are
returned unchanged.

ARCHITECTURE: Pure logic engine, static methods only, no hidden state.
The same inputs always produce the same output.
"""

from __future__ import annotations

from dataclasses import replace

from .. import const
from ..type_defs import ActivityEvent, RewardResult, StreakSettings, StreakState


class RewardEngine:
    """Pure logic engine for reward pricing."""

    @staticmethod
    def reward(
        base_points: int,
        streak: StreakState | int,
        settings: StreakSettings,
    ) -> RewardResult:
        """Price one activity.

        Args:
            base_points: Catalog base points for the activity
            streak: Streak state (or raw length) on the activity
            settings: Thresholds and flat bonuses

        Returns:
            RewardResult with final points and its breakdown

        Examples:
            With T1=3, T2=7, TM=14, B1=1, B2=2 and base 3:
            length 2 → 3, length 3 → 4, length 7 → 5, length 14 → 6
        """
        length = streak if isinstance(streak, int) else streak.length
        if base_points <= 0:
            return RewardResult(final_points=base_points)

        if length >= settings.multiplier_threshold:
            result = RewardResult(
                final_points=base_points * const.STREAK_MULTIPLIER,
                multiplier=const.STREAK_MULTIPLIER,
            )
        elif length >= settings.bonus_2_threshold:
            result = RewardResult(
                final_points=base_points + settings.bonus_2_points,
                bonus_points=settings.bonus_2_points,
            )
        elif length >= settings.bonus_1_threshold:
            result = RewardResult(
                final_points=base_points + settings.bonus_1_points,
                bonus_points=settings.bonus_1_points,
            )
        else:
            return RewardResult(final_points=base_points)

        const.LOGGER.debug(
            "Streak reward: base=%d length=%d → %d (bonus=%d, x%d)",
            base_points,
            length,
            result.final_points,
            result.bonus_points,
            result.multiplier,
        )
        return result

    @staticmethod
    def price_event(
        event: ActivityEvent,
        streak: StreakState | int,
        settings: StreakSettings,
    ) -> ActivityEvent:
        """Return a copy of ``event`` with awarded points and breakdown filled in."""
        length = streak if isinstance(streak, int) else streak.length
        result = RewardEngine.reward(event.base_points, length, settings)
        return replace(
            event,
            awarded_points=result.final_points,
            bonus_points=result.bonus_points,
            multiplier=result.multiplier,
            streak_length=length,
        )

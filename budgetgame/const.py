# File: const.py
"""Constants for the Budget Game rewards engine.

This file centralizes category names, goal types, default streak settings,
signal suffixes and error keys for consistency across engines and managers.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
BUDGETGAME_TITLE = "Budget Game"

# Logger
LOGGER = logging.getLogger(__package__)

# Float precision for money and percentages
DATA_FLOAT_PRECISION = 2

# ------------------------------------------------------------------------------------------------
# Activity Categories
# ------------------------------------------------------------------------------------------------
CATEGORY_FINANCIAL_PLANNING = "Financial Planning"
CATEGORY_MEAL_PLANNING = "Meal Planning"
CATEGORY_SELF_DISCIPLINE = "Self-Discipline"
CATEGORY_HEALTH = "Health"
CATEGORY_HOUSEHOLD = "Household"
CATEGORY_NEGATIVE = "Negative"
CATEGORY_ACHIEVEMENT = "Achievement"
CATEGORY_UNCATEGORIZED = "Uncategorized"

# Order matters: summaries report categories in this order and goal generation
# breaks ties on it.
CATEGORIES = [
    CATEGORY_FINANCIAL_PLANNING,
    CATEGORY_MEAL_PLANNING,
    CATEGORY_SELF_DISCIPLINE,
    CATEGORY_HEALTH,
    CATEGORY_HOUSEHOLD,
    CATEGORY_NEGATIVE,
    CATEGORY_ACHIEVEMENT,
]

# Categories eligible for the weekly "do more of this" goal
POSITIVE_GOAL_CATEGORIES = [
    CATEGORY_FINANCIAL_PLANNING,
    CATEGORY_MEAL_PLANNING,
    CATEGORY_SELF_DISCIPLINE,
    CATEGORY_HEALTH,
    CATEGORY_HOUSEHOLD,
]

# ------------------------------------------------------------------------------------------------
# Submission / Event Keys
# ------------------------------------------------------------------------------------------------
SUBMISSION_TIMESTAMP = "timestamp"
SUBMISSION_ACTOR_KEY = "actor_key"
SUBMISSION_ACTIVITIES = "activities"
SUBMISSION_SKIPPED = "skipped"

# Separator used by form intake when several activities arrive as one string
SUBMISSION_ACTIVITY_SEPARATOR = ","

# Catalog row keys
CATALOG_NAME = "name"
CATALOG_POINTS = "points"
CATALOG_CATEGORY = "category"
CATALOG_REQUIRED = "required"

# Legacy history row markers (one-way import only)
LEGACY_MARKER_POSITIVE = "➕"
LEGACY_MARKER_NEGATIVE = "➖"
LEGACY_STREAK_MARKER = "🔥"

# ------------------------------------------------------------------------------------------------
# Streaks
# ------------------------------------------------------------------------------------------------
STREAK_CLASS_NONE = "none"
STREAK_CLASS_BUILDING = "building"
STREAK_CLASS_ACTIVE = "active"

STREAK_LOOKBACK_DAYS = 30
STREAK_ACTIVE_MIN_LENGTH = 3
STREAK_BUILDING_LENGTH = 2

# Settings keys
SETTINGS_STREAK = "streak"
SETTINGS_BONUS_RULES = "bonus_rules"
CONF_BONUS_1_THRESHOLD = "bonus_1_threshold"
CONF_BONUS_2_THRESHOLD = "bonus_2_threshold"
CONF_MULTIPLIER_THRESHOLD = "multiplier_threshold"
CONF_BONUS_1_POINTS = "bonus_1_points"
CONF_BONUS_2_POINTS = "bonus_2_points"

DEFAULT_BONUS_1_THRESHOLD = 3
DEFAULT_BONUS_2_THRESHOLD = 7
DEFAULT_MULTIPLIER_THRESHOLD = 14
DEFAULT_BONUS_1_POINTS = 1
DEFAULT_BONUS_2_POINTS = 2
STREAK_MULTIPLIER = 2

# ------------------------------------------------------------------------------------------------
# Weekly Goals
# ------------------------------------------------------------------------------------------------
WEEKLY_GOAL_TYPE_CATEGORY_COUNT = "category_count"
WEEKLY_GOAL_TYPE_NEGATIVE_LIMIT = "negative_limit"
WEEKLY_GOAL_TYPE_STREAK_MAINTAIN = "streak_maintain"
WEEKLY_GOAL_TYPE_STREAK_START = "streak_start"
WEEKLY_GOAL_TYPE_ACTIVITY_COUNT = "activity_count"

WEEKLY_GOAL_STATE_PENDING = "pending"
WEEKLY_GOAL_STATE_ACTIVE = "active"
WEEKLY_GOAL_STATE_COMPLETED = "completed"
WEEKLY_GOAL_STATE_EXPIRED = "expired"

MAX_WEEKLY_GOALS = 3

# Generation heuristics
CATEGORY_GOAL_MIN_TARGET = 3
CATEGORY_GOAL_INCREMENT = 2
NEGATIVE_NOISE_THRESHOLD = 5
DEFAULT_NEGATIVE_REDUCTION = 0.20
NEGATIVE_REDUCTION_MIN = 0.15
NEGATIVE_REDUCTION_MAX = 0.25
ACTIVITY_GOAL_MIN_TARGET = 2
ACTIVITY_GOAL_INCREMENT = 1
STREAK_MAINTAIN_EXTENSION = 7
STREAK_START_TARGET = 3

# Lower-cased name fragments that identify a "no-spend" style activity
NO_SPEND_ACTIVITY_KEYWORDS = ["no-spend", "no spend", "spend zero", "zero money"]

WEEKLY_GOAL_BONUS_POINTS = {
    WEEKLY_GOAL_TYPE_CATEGORY_COUNT: 5,
    WEEKLY_GOAL_TYPE_NEGATIVE_LIMIT: 5,
    WEEKLY_GOAL_TYPE_STREAK_MAINTAIN: 5,
    WEEKLY_GOAL_TYPE_STREAK_START: 3,
    WEEKLY_GOAL_TYPE_ACTIVITY_COUNT: 3,
}

# ------------------------------------------------------------------------------------------------
# Week-over-week comparison goals
# ------------------------------------------------------------------------------------------------
COMPARISON_GOAL_HIGHER = "higher_than_previous"
COMPARISON_GOAL_DOUBLE = "double_previous"
MOVING_AVERAGE_DEFAULT_WINDOW = 7

# ------------------------------------------------------------------------------------------------
# Threshold Bonus Rules
# ------------------------------------------------------------------------------------------------
BONUS_RULE_ID = "rule_id"
BONUS_RULE_NAME = "name"
BONUS_RULE_MATCH_TYPE = "match_type"
BONUS_RULE_MATCH_VALUE = "match_value"
BONUS_RULE_COMPARISON = "comparison"
BONUS_RULE_THRESHOLD = "threshold"
BONUS_RULE_POINTS = "bonus_points"

BONUS_MATCH_CATEGORY = "category"
BONUS_MATCH_ACTIVITY = "activity"
BONUS_COMPARISON_MIN_COUNT = "min_count"
BONUS_COMPARISON_MAX_COUNT = "max_count"

DEFAULT_BONUS_RULES = [
    {
        BONUS_RULE_ID: "grad_school_study_blocks",
        BONUS_RULE_NAME: "Grad School Alarm",
        BONUS_RULE_MATCH_TYPE: BONUS_MATCH_ACTIVITY,
        BONUS_RULE_MATCH_VALUE: "Dedicated study/work block (e.g., Grad School)",
        BONUS_RULE_COMPARISON: BONUS_COMPARISON_MIN_COUNT,
        BONUS_RULE_THRESHOLD: 5,
        BONUS_RULE_POINTS: 2,
    }
]

# ------------------------------------------------------------------------------------------------
# Financial Goals
# ------------------------------------------------------------------------------------------------
GOAL_TYPE_SAVINGS = "savings"
GOAL_TYPE_DEBT = "debt"
GOAL_TYPE_VACATION_FUND = "vacation_fund"
GOAL_TYPES = [GOAL_TYPE_DEBT, GOAL_TYPE_SAVINGS, GOAL_TYPE_VACATION_FUND]

GOAL_STATUS_ACTIVE = "active"
GOAL_STATUS_COMPLETED = "completed"
GOAL_STATUS_PAUSED = "paused"
GOAL_STATUS_CANCELLED = "cancelled"
GOAL_STATUSES = [
    GOAL_STATUS_ACTIVE,
    GOAL_STATUS_COMPLETED,
    GOAL_STATUS_PAUSED,
    GOAL_STATUS_CANCELLED,
]

# Display status for a vacation fund whose linked savings goal is not done yet
VACATION_FUND_WAITING = "vacation_fund_waiting"
VACATION_FUND_ACTIVE = "vacation_fund_active"

# Lower-cased fragments used by the legacy name-based vacation link
VACATION_NAME_KEYWORDS = ["vacation", "travel"]

MAX_GOALS_PER_HOUSEHOLD = 10
DEFAULT_GOAL_DURATION_MONTHS = 12
GOAL_SUMMARY_TOP_COUNT = 3
GOAL_SUMMARY_RECENT_COMPLETED_COUNT = 2

# Goal update failure reasons
GOAL_ERROR_NOT_FOUND = "goal_not_found"
GOAL_ERROR_INVALID_UPDATE = "invalid_goal_update"

# ------------------------------------------------------------------------------------------------
# Catalog Cache
# ------------------------------------------------------------------------------------------------
CATALOG_CACHE_TTL_SECONDS = 600

# ------------------------------------------------------------------------------------------------
# Signals (manager events)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_ACTIVITY_LOGGED = "activity_logged"
SIGNAL_SUFFIX_UNKNOWN_ACTIVITY = "unknown_activity"
SIGNAL_SUFFIX_WEEKLY_GOALS_GENERATED = "weekly_goals_generated"
SIGNAL_SUFFIX_WEEKLY_GOAL_COMPLETED = "weekly_goal_completed"
SIGNAL_SUFFIX_WEEK_FINALIZED = "week_finalized"
SIGNAL_SUFFIX_FINANCIAL_GOAL_COMPLETED = "financial_goal_completed"
SIGNAL_SUFFIX_VACATION_FUND_ACTIVATED = "vacation_fund_activated"

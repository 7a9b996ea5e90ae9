# File: helpers/settings_helpers.py
"""Settings validation and loading for Budget Game.

Runtime settings arrive as a raw mapping from the SettingsStore:

    {
        "streak": {"bonus_1_threshold": 3, "bonus_2_threshold": 7, ...},
        "bonus_rules": [{"rule_id": ..., "match_type": "activity", ...}],
    }

Missing settings fall back to the built-in defaults silently; invalid
settings fall back with a warning. Nothing here raises to the caller except
the explicit ``validate_*`` functions used by admin saves.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import voluptuous as vol

from .. import const
from ..type_defs import BonusRule, StreakSettings

_POSITIVE_INT = vol.All(vol.Coerce(int), vol.Range(min=1))
_NON_EMPTY_STRING = vol.All(str, vol.Strip, vol.Length(min=1))


def _increasing_thresholds(settings: dict[str, Any]) -> dict[str, Any]:
    """Require T1 < T2 < TM."""
    if not (
        settings[const.CONF_BONUS_1_THRESHOLD]
        < settings[const.CONF_BONUS_2_THRESHOLD]
        < settings[const.CONF_MULTIPLIER_THRESHOLD]
    ):
        raise vol.Invalid(
            "Streak thresholds must increase: "
            "bonus_1_threshold < bonus_2_threshold < multiplier_threshold"
        )
    return settings


STREAK_SETTINGS_SCHEMA = vol.Schema(
    vol.All(
        {
            vol.Required(const.CONF_BONUS_1_THRESHOLD): _POSITIVE_INT,
            vol.Required(const.CONF_BONUS_2_THRESHOLD): _POSITIVE_INT,
            vol.Required(const.CONF_MULTIPLIER_THRESHOLD): _POSITIVE_INT,
            vol.Required(const.CONF_BONUS_1_POINTS): _POSITIVE_INT,
            vol.Required(const.CONF_BONUS_2_POINTS): _POSITIVE_INT,
        },
        _increasing_thresholds,
    )
)

BONUS_RULE_SCHEMA = vol.Schema(
    {
        vol.Required(const.BONUS_RULE_ID): _NON_EMPTY_STRING,
        vol.Optional(const.BONUS_RULE_NAME): _NON_EMPTY_STRING,
        vol.Required(const.BONUS_RULE_MATCH_TYPE): vol.In(
            [const.BONUS_MATCH_CATEGORY, const.BONUS_MATCH_ACTIVITY]
        ),
        vol.Required(const.BONUS_RULE_MATCH_VALUE): _NON_EMPTY_STRING,
        vol.Optional(
            const.BONUS_RULE_COMPARISON, default=const.BONUS_COMPARISON_MIN_COUNT
        ): vol.In([const.BONUS_COMPARISON_MIN_COUNT, const.BONUS_COMPARISON_MAX_COUNT]),
        vol.Required(const.BONUS_RULE_THRESHOLD): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Required(const.BONUS_RULE_POINTS): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)


# ==============================================================================
# Validation (raises vol.Invalid)
# ==============================================================================


def validate_streak_settings(raw: Mapping[str, Any]) -> StreakSettings:
    """Validate an admin streak settings save.

    Raises:
        vol.Invalid: If any value is missing, not a positive integer, or the
            thresholds do not increase
    """
    data = STREAK_SETTINGS_SCHEMA(raw)
    return StreakSettings(
        bonus_1_threshold=data[const.CONF_BONUS_1_THRESHOLD],
        bonus_2_threshold=data[const.CONF_BONUS_2_THRESHOLD],
        multiplier_threshold=data[const.CONF_MULTIPLIER_THRESHOLD],
        bonus_1_points=data[const.CONF_BONUS_1_POINTS],
        bonus_2_points=data[const.CONF_BONUS_2_POINTS],
    )


def validate_bonus_rule(raw: Mapping[str, Any]) -> BonusRule:
    """Validate one threshold rule.

    Raises:
        vol.Invalid: If the rule is malformed
    """
    data = BONUS_RULE_SCHEMA(raw)
    return BonusRule(
        rule_id=data[const.BONUS_RULE_ID],
        name=data.get(const.BONUS_RULE_NAME, data[const.BONUS_RULE_ID]),
        match_type=data[const.BONUS_RULE_MATCH_TYPE],
        match_value=data[const.BONUS_RULE_MATCH_VALUE],
        comparison=data[const.BONUS_RULE_COMPARISON],
        threshold=data[const.BONUS_RULE_THRESHOLD],
        bonus_points=data[const.BONUS_RULE_POINTS],
    )


# ==============================================================================
# Loading (never raises)
# ==============================================================================


def load_streak_settings(settings: Mapping[str, Any] | None) -> StreakSettings:
    """Return validated streak settings, or the defaults.

    Args:
        settings: Raw settings mapping from the SettingsStore (may be None)
    """
    raw = (settings or {}).get(const.SETTINGS_STREAK)
    if not raw:
        const.LOGGER.debug("No streak settings configured, using defaults")
        return StreakSettings()
    try:
        return validate_streak_settings(raw)
    except vol.Invalid as err:
        const.LOGGER.warning("Invalid streak settings (%s), using defaults", err)
        return StreakSettings()


def load_bonus_rules(settings: Mapping[str, Any] | None) -> list[BonusRule]:
    """Return validated threshold rules.

    Without configured rules the built-in defaults apply. Individual invalid
    rules are skipped with a warning; the rest still load.
    """
    raw_rules = (settings or {}).get(const.SETTINGS_BONUS_RULES)
    if raw_rules is None:
        raw_rules = const.DEFAULT_BONUS_RULES

    rules: list[BonusRule] = []
    for raw in raw_rules:
        try:
            rules.append(validate_bonus_rule(raw))
        except vol.Invalid as err:
            const.LOGGER.warning("Skipping invalid bonus rule %r: %s", raw, err)
    return rules

# File: const.py
"""Constants for the HabitQuest progress engine.

This file centralizes state keys, defaults, rule and condition identifiers,
level thresholds and the package logger for consistency across engines and
managers.
"""

import logging
from typing import Final

# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_LOCALE = "de"
DEFAULT_TIME_ZONE_NAME = "UTC"
DEFAULT_EVENTS_ENABLED = True
DEFAULT_MAX_LEDGER_ENTRIES = 50
DEFAULT_LEDGER_RETENTION_DAYS = 0
DEFAULT_ZERO = 0

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_TIME_ZONE = "time_zone"
CONF_LOCALE = "locale"
CONF_EVENTS_ENABLED = "events_enabled"
CONF_MAX_LEDGER_ENTRIES = "max_ledger_entries"
CONF_LEDGER_RETENTION_DAYS = "ledger_retention_days"

# ------------------------------------------------------------------------------------------------
# State Snapshot Keys
# ------------------------------------------------------------------------------------------------
DATA_DAYS = "days"
DATA_EVENT_HISTORY = "event_history"
DATA_XP = "xp"
DATA_XP_LEDGER = "xp_ledger"
DATA_COUNTERS = "counters"
DATA_EVENTS_ENABLED = "events_enabled"

# Event History Entry
DATA_HISTORY_EVENT_ID = "event_id"
DATA_HISTORY_XP_AWARDED = "xp_awarded"
DATA_HISTORY_COMPLETED_AT = "completed_at"
DATA_HISTORY_COMPLETED = "completed"

# Event Reference (argument of complete_event)
DATA_EVENT_REF_ID = "id"
DATA_EVENT_REF_XP = "xp"

# XP Ledger Entry
DATA_LEDGER_TIMESTAMP = "timestamp"
DATA_LEDGER_AMOUNT = "amount"
DATA_LEDGER_BALANCE_AFTER = "balance_after"
DATA_LEDGER_SOURCE = "source"
DATA_LEDGER_REFERENCE_ID = "reference_id"

# XP Sources (ledger entries)
XP_SOURCE_WEEKLY_EVENT = "weekly_event"
XP_SOURCE_ACTIVITY = "activity"
XP_SOURCE_MANUAL = "manual"

# ------------------------------------------------------------------------------------------------
# Calendar
# ------------------------------------------------------------------------------------------------
DAYS_PER_WEEK: Final = 7

# Week keys are ISO year + ISO week ("2024-W10"), day keys are ISO dates
WEEK_KEY_FORMAT = "{year:04d}-W{week:02d}"
WEEK_KEY_PATTERN = r"^(\d{4})-W(\d{2})$"
DAY_KEY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

# ------------------------------------------------------------------------------------------------
# Weekly Event Rule Types
# ------------------------------------------------------------------------------------------------
EVENT_RULE_DAYS_ACTIVE = "days_active"
EVENT_RULE_METRIC_TOTAL = "metric_total"
EVENT_RULE_STREAK = "streak"

# Percent shown for partial progress never reaches 100 before completion
EVENT_PERCENT_COMPLETE: Final = 100
EVENT_PERCENT_MAX_PARTIAL: Final = 99

# ------------------------------------------------------------------------------------------------
# Chain Step Condition Types
# ------------------------------------------------------------------------------------------------
CHAIN_CONDITION_DAYS_ACTIVE_TOTAL = "days_active_total"
CHAIN_CONDITION_METRIC_TOTAL = "metric_total"
CHAIN_CONDITION_METRIC_DAYS = "metric_days"
CHAIN_CONDITION_STREAK_DAYS = "streak_days"
CHAIN_CONDITION_EVENTS_COMPLETED = "events_completed"
CHAIN_CONDITION_XP_TOTAL = "xp_total"
CHAIN_CONDITION_LEVEL = "level"
CHAIN_CONDITION_COUNTER = "counter"

# An unmet step never shows a full bar, even after rounding
CHAIN_PERCENT_MAX_PARTIAL: Final = 99.99

# ------------------------------------------------------------------------------------------------
# Activity Metrics (per-day record keys used by the default catalog)
# ------------------------------------------------------------------------------------------------
METRIC_WATER = "water"
METRIC_PILLS = "pills"
METRIC_SPORT = "sport"
METRIC_WEIGHT_LOGGED = "weight_logged"

# ------------------------------------------------------------------------------------------------
# Levels
# ------------------------------------------------------------------------------------------------
MAX_LEVEL: Final = 100
LEVEL_XP_BASE: Final = 100
LEVEL_XP_GROWTH: Final = 10

# XP required to reach level n (index n - 1); the step to the next level
# grows by LEVEL_XP_GROWTH each level
LEVEL_THRESHOLDS: Final[tuple[int, ...]] = tuple(
    LEVEL_XP_BASE * (n - 1) + (LEVEL_XP_GROWTH // 2) * (n - 1) * (n - 2)
    for n in range(1, MAX_LEVEL + 1)
)

# Level-gated rewards, ascending by level
DATA_REWARD_LEVEL = "level"
DATA_REWARD_TITLE = "title"

REWARD_MILESTONES: Final = (
    {DATA_REWARD_LEVEL: 10, DATA_REWARD_TITLE: "Erweiterte Statistiken"},
    {DATA_REWARD_LEVEL: 25, DATA_REWARD_TITLE: "Golden Pink Theme"},
    {DATA_REWARD_LEVEL: 50, DATA_REWARD_TITLE: "VIP-Chat"},
    {DATA_REWARD_LEVEL: 75, DATA_REWARD_TITLE: "Premium Insights"},
    {DATA_REWARD_LEVEL: 100, DATA_REWARD_TITLE: "Legendärer Status"},
)

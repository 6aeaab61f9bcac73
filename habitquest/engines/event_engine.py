"""Event Engine - Pure logic for weekly event selection and progress.

This engine provides stateless, pure Python functions for:
- Deterministic selection of the weekly event for a week key
- Event progress evaluation (percent + completed) against a completion rule
- Bonus arithmetic for XP earned while an event is active

ARCHITECTURE: All functions are static methods that operate on passed-in data.
Recording completions (side effects) belongs in EventHistoryManager.

Rule Types:
- days_active: N days in the week with qualifying activity
- metric_total: Sum of one metric over the week reaches a target
- streak: N consecutive qualifying days inside the week

Every handler is monotonic: adding activity for the week's days never lowers
progress, so an event cannot become un-completed later in the same week.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .. import const
from ..config import validate_activity_records
from ..utils.math_utils import metric_as_number
from .calendar_engine import CalendarEngine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..catalog import EventCatalog, EventRule, WeeklyEventDefinition
    from ..type_defs import ActivityRecords, DayKey, DayRecord, EventProgress, WeekKey


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Handler function signature: (week_records, rule) -> current value toward threshold
RuleHandler = Callable[[list["DayRecord | None"], "EventRule"], float]


def day_qualifies(record: DayRecord | None, metric: str | None, min_value: float) -> bool:
    """Return True if a day's record qualifies for a metric threshold.

    Without a metric, any single metric reaching `min_value` qualifies the day.
    """
    if not record:
        return False
    if metric is None:
        return any(metric_as_number(value) >= min_value for value in record.values())
    return metric_as_number(record.get(metric)) >= min_value


# =============================================================================
# EVENT ENGINE
# =============================================================================


class EventEngine:
    """Pure logic engine for weekly event evaluation.

    All methods are static - no instance state.

    Evaluation Flow:
        1. CalendarEngine maps "now" to week_key + day_keys
        2. select_event() picks the catalog definition for the week
        3. compute_event_progress() evaluates the rule over that week's records
        4. EventHistoryManager records a completion once per week
    """

    # =========================================================================
    # RULE HANDLER REGISTRY
    # =========================================================================

    _RULE_HANDLERS: dict[str, RuleHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all rule handlers (once)."""
        if cls._RULE_HANDLERS:
            return

        cls._RULE_HANDLERS = {
            const.EVENT_RULE_DAYS_ACTIVE: cls._count_active_days,
            const.EVENT_RULE_METRIC_TOTAL: cls._sum_metric,
            const.EVENT_RULE_STREAK: cls._longest_streak,
        }

    # =========================================================================
    # SELECTION
    # =========================================================================

    @staticmethod
    def select_event(week_key: WeekKey, catalog: EventCatalog) -> WeeklyEventDefinition:
        """Select the weekly event active in `week_key`.

        The active catalog version's events rotate one per week starting at
        the version's first week, so the same week always yields the same
        event and no event repeats within len(events) weeks.

        Raises:
            InvalidInputError: If the week key is empty or malformed
        """
        catalog_version = catalog.version_for(week_key)
        offset = CalendarEngine.weeks_between(catalog_version.effective_from, week_key)
        event = catalog_version.events[offset % len(catalog_version.events)]

        const.LOGGER.debug(
            "DEBUG: Event Selection - Week '%s' -> event '%s' (catalog v%s, offset %s)",
            week_key,
            event.event_id,
            catalog_version.version,
            offset,
        )
        return event

    # =========================================================================
    # PROGRESS
    # =========================================================================

    @classmethod
    def compute_event_progress(
        cls,
        day_keys: Sequence[DayKey],
        days: ActivityRecords,
        event: WeeklyEventDefinition,
    ) -> EventProgress:
        """Evaluate an event's completion rule for one week.

        Pure function - no side effects. Records for days outside `day_keys`
        are ignored even if present.

        Args:
            day_keys: The week's day keys in order (Monday first)
            days: Activity records keyed by day key
            event: The week's event definition

        Returns:
            EventProgress with percent (0-100) and completed; percent is 100
            exactly when completed is True

        Raises:
            InvalidInputError: If the activity records are malformed
        """
        cls._register_handlers()

        records = validate_activity_records(days)
        week_records = [records.get(day_key) for day_key in day_keys]
        rule = event.rule

        handler = cls._RULE_HANDLERS.get(rule.rule_type)
        if handler is None:
            const.LOGGER.warning(
                "Unknown event rule type: %s for event %s",
                rule.rule_type,
                event.event_id,
            )
            return {"percent": 0, "completed": False}

        current = handler(week_records, rule)
        progress = cls.progress_from_value(current, rule.threshold)

        const.LOGGER.debug(
            "DEBUG: Event Progress - Event '%s' rule '%s': %s/%s -> %s%%",
            event.event_id,
            rule.rule_type,
            current,
            rule.threshold,
            progress["percent"],
        )
        return progress

    @staticmethod
    def progress_from_value(current: float, threshold: float) -> EventProgress:
        """Convert a rule's current value into EventProgress.

        Partial progress is rounded but capped at 99 so that 100 is reserved
        for a satisfied rule.

        Examples:
            progress_from_value(2, 3) → {"percent": 67, "completed": False}
            progress_from_value(3, 3) → {"percent": 100, "completed": True}
        """
        if current >= threshold:
            return {"percent": const.EVENT_PERCENT_COMPLETE, "completed": True}

        percent = round(max(current, 0) * 100 / threshold)
        return {
            "percent": min(const.EVENT_PERCENT_MAX_PARTIAL, percent),
            "completed": False,
        }

    # =========================================================================
    # RULE HANDLERS
    # =========================================================================

    @staticmethod
    def _count_active_days(week_records: list[Any], rule: EventRule) -> float:
        """Count days in the week whose activity qualifies."""
        return sum(
            1
            for record in week_records
            if day_qualifies(record, rule.metric, rule.min_value)
        )

    @staticmethod
    def _sum_metric(week_records: list[Any], rule: EventRule) -> float:
        """Sum the rule's metric (or all metrics) across the week."""
        total = 0.0
        for record in week_records:
            if not record:
                continue
            if rule.metric is None:
                total += sum(metric_as_number(value) for value in record.values())
            else:
                total += metric_as_number(record.get(rule.metric))
        return total

    @staticmethod
    def _longest_streak(week_records: list[Any], rule: EventRule) -> float:
        """Return the longest run of consecutive qualifying days in the week."""
        longest = 0
        run = 0
        for record in week_records:
            if day_qualifies(record, rule.metric, rule.min_value):
                run += 1
                longest = max(longest, run)
            else:
                run = 0
        return longest

    # =========================================================================
    # BONUS
    # =========================================================================

    @staticmethod
    def apply_bonus(base_xp: int, event: WeeklyEventDefinition) -> int:
        """Apply the event's bonus percentage to XP earned during its week.

        Examples:
            apply_bonus(100, event with bonus_percent=0.1) → 110
        """
        return round(base_xp * (1 + event.bonus_percent))

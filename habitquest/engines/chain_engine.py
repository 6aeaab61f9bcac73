"""Chain Engine - Pure logic for multi-step achievement chain progress.

This engine evaluates every achievement chain against a state snapshot:
- Steps are strictly ordered: a step only counts once all earlier steps do
- `completed` is the length of the satisfied prefix
- `next_percent` is progress toward the first unsatisfied step

PURITY CONTRACT:
- The snapshot is passed in explicitly and only read
- No side effects, no mutation, chains share nothing but the snapshot

Condition Types:
- days_active_total: Days with any activity
- metric_total: Lifetime sum of one metric
- metric_days: Days where one metric reached min_value
- streak_days: Longest run of consecutive active calendar days
- events_completed: Weekly events recorded in event history
- xp_total: Experience total
- level: Level resolved from experience
- counter: Named counter in state["counters"]
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..config import validate_activity_records
from ..utils.math_utils import calculate_percentage, metric_as_number
from .event_engine import day_qualifies
from .level_engine import LevelEngine

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..catalog import ChainDefinition, StepCondition
    from ..type_defs import ActivityRecords, AppState, ChainProgress, ConditionResult


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Handler function signature: (snapshot, condition) -> current value toward target
ConditionHandler = Callable[["AppState", "StepCondition"], float]


class ChainEngine:
    """Pure logic engine for achievement chains.

    All methods are static/class methods - no instance state.
    """

    # =========================================================================
    # CONDITION HANDLER REGISTRY
    # =========================================================================

    _CONDITION_HANDLERS: dict[str, ConditionHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all condition handlers (once)."""
        if cls._CONDITION_HANDLERS:
            return

        cls._CONDITION_HANDLERS = {
            const.CHAIN_CONDITION_DAYS_ACTIVE_TOTAL: cls._days_active_total,
            const.CHAIN_CONDITION_METRIC_TOTAL: cls._metric_total,
            const.CHAIN_CONDITION_METRIC_DAYS: cls._metric_days,
            const.CHAIN_CONDITION_STREAK_DAYS: cls._streak_days,
            const.CHAIN_CONDITION_EVENTS_COMPLETED: cls._events_completed,
            const.CHAIN_CONDITION_XP_TOTAL: cls._xp_total,
            const.CHAIN_CONDITION_LEVEL: cls._level,
            const.CHAIN_CONDITION_COUNTER: cls._counter,
        }

    # =========================================================================
    # MAIN EVALUATION METHODS
    # =========================================================================

    @classmethod
    def compute_chains(
        cls,
        state: AppState,
        chains: Sequence[ChainDefinition],
        locale: str | None = None,
    ) -> list[ChainProgress]:
        """Evaluate every chain against the snapshot, in catalog order.

        Args:
            state: Read-only state snapshot
            chains: Chain definitions
            locale: Locale code for titles

        Returns:
            One ChainProgress per chain

        Raises:
            InvalidInputError: If the activity records are malformed
            InvalidStateError: If experience is negative or not an integer
        """
        cls._register_handlers()

        # Validate once up front; handlers read the validated copy
        snapshot: AppState = {
            **state,
            const.DATA_DAYS: validate_activity_records(state.get(const.DATA_DAYS, {})),
        }  # type: ignore[typeddict-item]

        return [cls.compute_chain(snapshot, chain, locale) for chain in chains]

    @classmethod
    def compute_chain(
        cls,
        state: AppState,
        chain: ChainDefinition,
        locale: str | None = None,
    ) -> ChainProgress:
        """Evaluate one chain with the strict prefix rule.

        Scanning stops at the first unsatisfied step; later satisfied steps
        do not count until their predecessors are satisfied.
        """
        cls._register_handlers()

        total = len(chain.steps)
        completed = 0
        next_percent = 100.0
        next_title: str | None = None

        for step in chain.steps:
            result = cls.evaluate_condition(state, step.condition)
            if not result["met"]:
                next_percent = result["percent"]
                next_title = step.title(locale)
                break
            completed += 1

        const.LOGGER.debug(
            "DEBUG: Chain Progress - Chain '%s': %s/%s steps, next %.2f%%",
            chain.chain_id,
            completed,
            total,
            next_percent,
        )

        return {
            "chain_id": chain.chain_id,
            "title": chain.title(locale),
            "completed": completed,
            "total": total,
            "next_percent": next_percent,
            "next_title": next_title,
        }

    @classmethod
    def evaluate_condition(cls, state: AppState, condition: StepCondition) -> ConditionResult:
        """Evaluate one step condition against the snapshot.

        A target of 0 (or less) is always met. Unknown condition types are
        logged and treated as unmet with 0 progress. An unmet condition
        reports at most CHAIN_PERCENT_MAX_PARTIAL.
        """
        cls._register_handlers()

        handler = cls._CONDITION_HANDLERS.get(condition.condition_type)
        if handler is None:
            const.LOGGER.warning(
                "Unknown chain condition type: %s", condition.condition_type
            )
            return {
                "met": False,
                "current_value": 0.0,
                "target": condition.target,
                "percent": 0.0,
            }

        current = float(handler(state, condition))
        met = current >= condition.target
        percent = calculate_percentage(current, condition.target)
        if not met:
            percent = min(percent, const.CHAIN_PERCENT_MAX_PARTIAL)

        return {
            "met": met,
            "current_value": current,
            "target": condition.target,
            "percent": percent,
        }

    @staticmethod
    def top_chain(progress: Iterable[ChainProgress]) -> ChainProgress | None:
        """Return the incomplete chain closest to its next step.

        Ties keep catalog order. Returns None when every chain is complete.
        """
        top: ChainProgress | None = None
        for chain in progress:
            if chain["completed"] >= chain["total"]:
                continue
            if top is None or chain["next_percent"] > top["next_percent"]:
                top = chain
        return top

    # =========================================================================
    # CONDITION HANDLERS
    # =========================================================================

    @staticmethod
    def _days(state: AppState) -> ActivityRecords:
        return state.get(const.DATA_DAYS) or {}

    @staticmethod
    def _days_active_total(state: AppState, condition: StepCondition) -> float:
        """Days with any activity."""
        return sum(
            1
            for record in ChainEngine._days(state).values()
            if day_qualifies(record, None, condition.min_value)
        )

    @staticmethod
    def _metric_total(state: AppState, condition: StepCondition) -> float:
        """Lifetime sum of one metric."""
        if condition.metric is None:
            return 0.0
        return sum(
            metric_as_number(record.get(condition.metric))
            for record in ChainEngine._days(state).values()
        )

    @staticmethod
    def _metric_days(state: AppState, condition: StepCondition) -> float:
        """Days where one metric reached min_value."""
        return sum(
            1
            for record in ChainEngine._days(state).values()
            if day_qualifies(record, condition.metric, condition.min_value)
        )

    @staticmethod
    def _streak_days(state: AppState, condition: StepCondition) -> float:
        """Longest run of consecutive calendar days with qualifying activity."""
        ordinals = sorted(
            date.fromisoformat(day_key).toordinal()
            for day_key, record in ChainEngine._days(state).items()
            if day_qualifies(record, condition.metric, condition.min_value)
        )

        longest = 0
        run = 0
        previous: int | None = None
        for ordinal in ordinals:
            run = run + 1 if previous is not None and ordinal == previous + 1 else 1
            longest = max(longest, run)
            previous = ordinal
        return longest

    @staticmethod
    def _events_completed(state: AppState, condition: StepCondition) -> float:
        """Weekly events recorded in event history."""
        history = state.get(const.DATA_EVENT_HISTORY) or {}
        return sum(
            1
            for entry in history.values()
            if entry.get(const.DATA_HISTORY_COMPLETED, True)
        )

    @staticmethod
    def _xp_total(state: AppState, condition: StepCondition) -> float:
        """Experience total."""
        return ChainEngine._state_xp(state)

    @staticmethod
    def _level(state: AppState, condition: StepCondition) -> float:
        """Level resolved from experience."""
        return LevelEngine.resolve_level(ChainEngine._state_xp(state))

    @staticmethod
    def _counter(state: AppState, condition: StepCondition) -> float:
        """Named counter in state["counters"]."""
        if condition.metric is None:
            return 0.0
        counters: dict[str, Any] = state.get(const.DATA_COUNTERS) or {}
        return metric_as_number(counters.get(condition.metric))

    @staticmethod
    def _state_xp(state: AppState) -> int:
        return LevelEngine.validate_xp(state.get(const.DATA_XP, const.DEFAULT_ZERO))

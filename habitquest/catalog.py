# File: catalog.py
"""Weekly event and achievement chain catalogs.

Definitions are immutable: frozen dataclasses whose localized titles and
descriptions are read-only `locale -> text` mappings.

The event catalog is versioned. Each CatalogVersion becomes active at the
Monday of its `effective_from` week and stays active until the next version
starts, so publishing a new version never changes which event past weeks had.
Always append a new version instead of editing or reordering an existing one.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from . import const
from .engines.calendar_engine import CalendarEngine
from .exceptions import InvalidInputError

if TYPE_CHECKING:
    from datetime import date

    from .type_defs import EventId, WeekKey


def _freeze(texts: Mapping[str, str]) -> Mapping[str, str]:
    """Return a read-only copy of a locale -> text mapping."""
    return MappingProxyType(dict(texts))


def localize(texts: Mapping[str, str], locale: str | None = None) -> str:
    """Pick the text for `locale` from a locale -> text mapping.

    Fallback order: exact code, base language ("de-AT" → "de"),
    DEFAULT_LOCALE, then any available text. Returns "" for an empty mapping.
    """
    if locale:
        if locale in texts:
            return texts[locale]
        base = locale.replace("_", "-").split("-", 1)[0]
        if base in texts:
            return texts[base]
    if const.DEFAULT_LOCALE in texts:
        return texts[const.DEFAULT_LOCALE]
    return next(iter(texts.values()), "")


# ==============================================================================
# Weekly Events
# ==============================================================================


@dataclass(frozen=True)
class EventRule:
    """Completion rule of a weekly event.

    Attributes:
        rule_type: One of the EVENT_RULE_* constants
        threshold: Days (days_active, streak) or total amount (metric_total) required
        metric: Per-day metric the rule reads; None means "any activity"
        min_value: Minimum metric value for a day to qualify
    """

    rule_type: str
    threshold: float
    metric: str | None = None
    min_value: float = 1


@dataclass(frozen=True)
class WeeklyEventDefinition:
    """Immutable weekly challenge definition.

    Attributes:
        event_id: Stable identifier, stored in event history
        titles: locale -> title
        descriptions: locale -> description
        xp: Experience awarded on completion (>= 0)
        bonus_percent: Bonus fraction applied to other XP during the week (>= 0)
        rule: Completion rule
    """

    event_id: EventId
    titles: Mapping[str, str]
    descriptions: Mapping[str, str]
    xp: int
    bonus_percent: float
    rule: EventRule

    def __post_init__(self) -> None:
        """Freeze the localized text mappings."""
        object.__setattr__(self, "titles", _freeze(self.titles))
        object.__setattr__(self, "descriptions", _freeze(self.descriptions))

    def title(self, locale: str | None = None) -> str:
        """Return the localized title."""
        return localize(self.titles, locale)

    def description(self, locale: str | None = None) -> str:
        """Return the localized description."""
        return localize(self.descriptions, locale)


@dataclass(frozen=True)
class CatalogVersion:
    """Ordered event list active from a given week on."""

    version: int
    effective_from: WeekKey
    events: tuple[WeeklyEventDefinition, ...]


class EventCatalog:
    """Validated, versioned catalog of weekly event definitions."""

    def __init__(self, versions: tuple[CatalogVersion, ...] | list[CatalogVersion]):
        """Validate and store catalog versions.

        Raises:
            InvalidInputError: If the catalog is empty or any definition is invalid
        """
        self._versions: tuple[CatalogVersion, ...] = tuple(versions)
        if not self._versions:
            raise InvalidInputError("Event catalog needs at least one version")

        self._starts: list[date] = []
        for catalog_version in self._versions:
            start = CalendarEngine.parse_week_key(catalog_version.effective_from)
            if self._starts and start <= self._starts[-1]:
                raise InvalidInputError(
                    f"Catalog version {catalog_version.version} must start after "
                    "the previous version"
                )
            self._validate_events(catalog_version)
            self._starts.append(start)

        self._by_id: dict[EventId, WeeklyEventDefinition] = {
            event.event_id: event
            for catalog_version in self._versions
            for event in catalog_version.events
        }

    @staticmethod
    def _validate_events(catalog_version: CatalogVersion) -> None:
        """Check one version's events for emptiness, duplicates and bad rewards."""
        if not catalog_version.events:
            raise InvalidInputError(
                f"Catalog version {catalog_version.version} has no events"
            )
        seen: set[str] = set()
        for event in catalog_version.events:
            if not event.event_id:
                raise InvalidInputError("Event id must not be empty")
            if event.event_id in seen:
                raise InvalidInputError(
                    f"Duplicate event id '{event.event_id}' in catalog version "
                    f"{catalog_version.version}"
                )
            seen.add(event.event_id)
            if isinstance(event.xp, bool) or not isinstance(event.xp, int) or event.xp < 0:
                raise InvalidInputError(
                    f"Event '{event.event_id}' xp must be an integer >= 0"
                )
            if event.bonus_percent < 0:
                raise InvalidInputError(
                    f"Event '{event.event_id}' bonus_percent must be >= 0"
                )
            if event.rule.threshold < 0:
                raise InvalidInputError(
                    f"Event '{event.event_id}' rule threshold must be >= 0"
                )

    @property
    def versions(self) -> tuple[CatalogVersion, ...]:
        """Return all catalog versions, oldest first."""
        return self._versions

    def version_for(self, week_key: WeekKey) -> CatalogVersion:
        """Return the catalog version active in `week_key`.

        Weeks before the first version use the first version.
        """
        monday = CalendarEngine.parse_week_key(week_key)
        active = self._versions[0]
        for start, catalog_version in zip(self._starts, self._versions, strict=True):
            if start <= monday:
                active = catalog_version
            else:
                break
        return active

    def get(self, event_id: EventId) -> WeeklyEventDefinition | None:
        """Look up an event definition by id across all versions (latest wins)."""
        return self._by_id.get(event_id)

    def __len__(self) -> int:
        """Return the number of distinct event ids."""
        return len(self._by_id)


# ==============================================================================
# Achievement Chains
# ==============================================================================


@dataclass(frozen=True)
class StepCondition:
    """Condition of a chain step.

    Attributes:
        condition_type: One of the CHAIN_CONDITION_* constants
        target: Value that must be reached
        metric: Metric (or counter) name for metric/counter conditions
        min_value: Minimum per-day metric value for metric_days
    """

    condition_type: str
    target: float
    metric: str | None = None
    min_value: float = 1


@dataclass(frozen=True)
class ChainStep:
    """One achievement in a chain."""

    step_id: str
    titles: Mapping[str, str]
    condition: StepCondition

    def __post_init__(self) -> None:
        """Freeze the localized titles."""
        object.__setattr__(self, "titles", _freeze(self.titles))

    def title(self, locale: str | None = None) -> str:
        """Return the localized step title."""
        return localize(self.titles, locale)


@dataclass(frozen=True)
class ChainDefinition:
    """Strictly ordered sequence of achievement steps."""

    chain_id: str
    titles: Mapping[str, str]
    steps: tuple[ChainStep, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Freeze the localized titles."""
        object.__setattr__(self, "titles", _freeze(self.titles))

    def title(self, locale: str | None = None) -> str:
        """Return the localized chain title."""
        return localize(self.titles, locale)


# ==============================================================================
# Default Catalog
# ==============================================================================

DEFAULT_CATALOG = EventCatalog(
    (
        CatalogVersion(
            version=1,
            effective_from="2024-W01",
            events=(
                WeeklyEventDefinition(
                    event_id="active_three",
                    titles={"de": "Aktiv-Woche", "en": "Active Week"},
                    descriptions={
                        "de": "Trage an 3 Tagen dieser Woche etwas ein.",
                        "en": "Log something on 3 days this week.",
                    },
                    xp=50,
                    bonus_percent=0.05,
                    rule=EventRule(const.EVENT_RULE_DAYS_ACTIVE, threshold=3),
                ),
                WeeklyEventDefinition(
                    event_id="hydration_hero",
                    titles={"de": "Wasser-Held", "en": "Hydration Hero"},
                    descriptions={
                        "de": "Trinke an 5 Tagen mindestens 6 Gläser Wasser.",
                        "en": "Drink at least 6 glasses of water on 5 days.",
                    },
                    xp=80,
                    bonus_percent=0.1,
                    rule=EventRule(
                        const.EVENT_RULE_DAYS_ACTIVE,
                        threshold=5,
                        metric=const.METRIC_WATER,
                        min_value=6,
                    ),
                ),
                WeeklyEventDefinition(
                    event_id="pill_perfect",
                    titles={"de": "Tabletten-Profi", "en": "Pill Perfect"},
                    descriptions={
                        "de": "Nimm an 7 Tagen morgens und abends deine Tabletten.",
                        "en": "Take your morning and evening pills on all 7 days.",
                    },
                    xp=120,
                    bonus_percent=0.15,
                    rule=EventRule(
                        const.EVENT_RULE_DAYS_ACTIVE,
                        threshold=7,
                        metric=const.METRIC_PILLS,
                        min_value=2,
                    ),
                ),
                WeeklyEventDefinition(
                    event_id="sport_streak",
                    titles={"de": "Sport-Serie", "en": "Sport Streak"},
                    descriptions={
                        "de": "Mache an 3 Tagen in Folge Sport.",
                        "en": "Work out on 3 days in a row.",
                    },
                    xp=100,
                    bonus_percent=0.1,
                    rule=EventRule(
                        const.EVENT_RULE_STREAK, threshold=3, metric=const.METRIC_SPORT
                    ),
                ),
                WeeklyEventDefinition(
                    event_id="water_forty",
                    titles={"de": "40 Gläser", "en": "Forty Glasses"},
                    descriptions={
                        "de": "Trinke diese Woche insgesamt 40 Gläser Wasser.",
                        "en": "Drink 40 glasses of water in total this week.",
                    },
                    xp=90,
                    bonus_percent=0.05,
                    rule=EventRule(
                        const.EVENT_RULE_METRIC_TOTAL,
                        threshold=40,
                        metric=const.METRIC_WATER,
                    ),
                ),
                WeeklyEventDefinition(
                    event_id="weigh_in",
                    titles={"de": "Waage-Woche", "en": "Weigh-in Week"},
                    descriptions={
                        "de": "Trage an 4 Tagen dein Gewicht ein.",
                        "en": "Log your weight on 4 days.",
                    },
                    xp=60,
                    bonus_percent=0.05,
                    rule=EventRule(
                        const.EVENT_RULE_DAYS_ACTIVE,
                        threshold=4,
                        metric=const.METRIC_WEIGHT_LOGGED,
                    ),
                ),
            ),
        ),
    )
)

DEFAULT_CHAINS: tuple[ChainDefinition, ...] = (
    ChainDefinition(
        chain_id="consistency",
        titles={"de": "Dranbleiben", "en": "Consistency"},
        steps=(
            ChainStep(
                "first_days",
                {"de": "3 aktive Tage", "en": "3 active days"},
                StepCondition(const.CHAIN_CONDITION_DAYS_ACTIVE_TOTAL, target=3),
            ),
            ChainStep(
                "week_streak",
                {"de": "7 Tage in Folge", "en": "7 days in a row"},
                StepCondition(const.CHAIN_CONDITION_STREAK_DAYS, target=7),
            ),
            ChainStep(
                "month_streak",
                {"de": "30 Tage in Folge", "en": "30 days in a row"},
                StepCondition(const.CHAIN_CONDITION_STREAK_DAYS, target=30),
            ),
        ),
    ),
    ChainDefinition(
        chain_id="hydration",
        titles={"de": "Wasser", "en": "Hydration"},
        steps=(
            ChainStep(
                "water_50",
                {"de": "50 Gläser Wasser", "en": "50 glasses of water"},
                StepCondition(
                    const.CHAIN_CONDITION_METRIC_TOTAL,
                    target=50,
                    metric=const.METRIC_WATER,
                ),
            ),
            ChainStep(
                "water_days_14",
                {"de": "14 Tage mit 6+ Gläsern", "en": "14 days with 6+ glasses"},
                StepCondition(
                    const.CHAIN_CONDITION_METRIC_DAYS,
                    target=14,
                    metric=const.METRIC_WATER,
                    min_value=6,
                ),
            ),
            ChainStep(
                "water_500",
                {"de": "500 Gläser Wasser", "en": "500 glasses of water"},
                StepCondition(
                    const.CHAIN_CONDITION_METRIC_TOTAL,
                    target=500,
                    metric=const.METRIC_WATER,
                ),
            ),
        ),
    ),
    ChainDefinition(
        chain_id="event_hunter",
        titles={"de": "Event-Jäger", "en": "Event Hunter"},
        steps=(
            ChainStep(
                "events_1",
                {"de": "Erstes Wochen-Event", "en": "First weekly event"},
                StepCondition(const.CHAIN_CONDITION_EVENTS_COMPLETED, target=1),
            ),
            ChainStep(
                "events_5",
                {"de": "5 Wochen-Events", "en": "5 weekly events"},
                StepCondition(const.CHAIN_CONDITION_EVENTS_COMPLETED, target=5),
            ),
            ChainStep(
                "events_12",
                {"de": "12 Wochen-Events", "en": "12 weekly events"},
                StepCondition(const.CHAIN_CONDITION_EVENTS_COMPLETED, target=12),
            ),
        ),
    ),
    ChainDefinition(
        chain_id="level_climber",
        titles={"de": "Aufstieg", "en": "Level Climber"},
        steps=(
            ChainStep(
                "level_5",
                {"de": "Level 5", "en": "Level 5"},
                StepCondition(const.CHAIN_CONDITION_LEVEL, target=5),
            ),
            ChainStep(
                "level_10",
                {"de": "Level 10", "en": "Level 10"},
                StepCondition(const.CHAIN_CONDITION_LEVEL, target=10),
            ),
            ChainStep(
                "level_25",
                {"de": "Level 25", "en": "Level 25"},
                StepCondition(const.CHAIN_CONDITION_LEVEL, target=25),
            ),
        ),
    ),
)

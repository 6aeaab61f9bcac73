"""HabitQuest - gamification progress engine for habit tracking.

Maps time to a rotating weekly challenge, computes its progress from the
user's daily activity, records one-time completion (awarding experience),
and tracks multi-step achievement chains and levels.

All computation operates on a caller-owned state snapshot; loading and
saving that snapshot is the caller's job.
"""

from .catalog import (
    DEFAULT_CATALOG,
    DEFAULT_CHAINS,
    CatalogVersion,
    ChainDefinition,
    ChainStep,
    EventCatalog,
    EventRule,
    StepCondition,
    WeeklyEventDefinition,
)
from .config import EngineConfig, validate_config
from .coordinator import ProgressCoordinator
from .engines import (
    CalendarEngine,
    ChainEngine,
    EconomyEngine,
    EventEngine,
    LevelEngine,
)
from .exceptions import (
    CatalogMismatch,
    HabitQuestError,
    InvalidInputError,
    InvalidStateError,
)
from .managers import EventHistoryManager, ExperienceManager

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_CHAINS",
    "CalendarEngine",
    "CatalogMismatch",
    "CatalogVersion",
    "ChainDefinition",
    "ChainEngine",
    "ChainStep",
    "EconomyEngine",
    "EngineConfig",
    "EventCatalog",
    "EventEngine",
    "EventHistoryManager",
    "EventRule",
    "ExperienceManager",
    "HabitQuestError",
    "InvalidInputError",
    "InvalidStateError",
    "LevelEngine",
    "ProgressCoordinator",
    "StepCondition",
    "WeeklyEventDefinition",
    "validate_config",
]

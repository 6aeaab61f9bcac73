"""Engine modules for HabitQuest.

Contains stateless computation engines:
- calendar_engine: Timestamp -> week key and day keys
- event_engine: Weekly event selection and progress
- chain_engine: Achievement chain progress
- level_engine: Experience -> level, reward milestones
- economy_engine: Experience ledger entries and pruning
"""

from .calendar_engine import CalendarEngine
from .chain_engine import ChainEngine
from .economy_engine import EconomyEngine
from .event_engine import EventEngine
from .level_engine import LevelEngine

__all__ = [
    "CalendarEngine",
    "ChainEngine",
    "EconomyEngine",
    "EventEngine",
    "LevelEngine",
]

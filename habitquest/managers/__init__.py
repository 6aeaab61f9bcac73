"""Managers that apply mutations to a caller-owned state snapshot.

- event_history_manager: Once-per-week event completion ledger
- experience_manager: Experience total and experience ledger
"""

from .event_history_manager import EventHistoryManager
from .experience_manager import ExperienceManager

__all__ = ["EventHistoryManager", "ExperienceManager"]

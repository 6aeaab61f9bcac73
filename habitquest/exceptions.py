"""Error types raised (or reported) by the HabitQuest engine."""

from __future__ import annotations


class HabitQuestError(Exception):
    """Base class for all HabitQuest errors."""


class InvalidInputError(HabitQuestError, ValueError):
    """Raised when a caller passes malformed input.

    Covers malformed timestamps, empty or malformed week keys, malformed
    activity records, invalid catalog definitions and invalid configuration.
    """


class InvalidStateError(HabitQuestError):
    """Raised when the state snapshot violates an engine invariant.

    Example: a negative experience total.
    """


class CatalogMismatch(HabitQuestError):
    """Informational report: a week's recorded event differs from the selected one.

    Happens when the event catalog changed after the week was completed. The
    stored history entry always wins and is never rewritten, so this is
    returned and logged, never raised by the engine.

    Attributes:
        week_key: The week whose history entry was checked
        recorded_event_id: Event id stored in the history entry
        selected_event_id: Event id the current catalog selects for the week
    """

    def __init__(
        self,
        week_key: str,
        recorded_event_id: str,
        selected_event_id: str,
    ) -> None:
        """Initialize CatalogMismatch.

        Args:
            week_key: The week whose history entry was checked
            recorded_event_id: Event id stored in the history entry
            selected_event_id: Event id the current catalog selects for the week
        """
        self.week_key = week_key
        self.recorded_event_id = recorded_event_id
        self.selected_event_id = selected_event_id
        super().__init__(
            f"Catalog mismatch for week {week_key}: "
            f"recorded={recorded_event_id}, selected={selected_event_id}"
        )

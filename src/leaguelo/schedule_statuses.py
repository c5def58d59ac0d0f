"""Shared schedule-status definitions and helpers.

This module is the single source of truth for the statuses a schedule entry
can be in, reused by the models, the API filters and the result service.
"""

from __future__ import annotations

from typing import Iterable

SCHEDULED = "scheduled"
COMPLETED = "completed"
CANCELED = "canceled"

# Individual statuses used in the system.
ALL_SCHEDULE_STATUSES: tuple[str, ...] = (
    SCHEDULED,
    COMPLETED,
    CANCELED,
)

# Canonical status groups.
SCHEDULE_STATUS_GROUPS: dict[str, tuple[str, ...]] = {
    # Fixtures still awaiting a result.
    "pending": (SCHEDULED,),
    # Schedules that will never change again.
    "terminal": (COMPLETED, CANCELED),
    "all": ALL_SCHEDULE_STATUSES,
}


def get_status_group(group_name: str) -> tuple[str, ...]:
    """Return a named status group, raising KeyError for unknown names."""
    return SCHEDULE_STATUS_GROUPS[group_name]


def is_valid_status(status: str) -> bool:
    return status in ALL_SCHEDULE_STATUSES


def normalize_status_filter(
    raw_statuses: Iterable[str] | str | None,
    *,
    default_group: str = "all",
) -> list[str]:
    """Normalize requested statuses against known values.

    - A single comma-separated string is split into its parts.
    - If no statuses are provided (or only blanks), returns the statuses
      from ``default_group``.
    - Unknown statuses are dropped; a filter made only of unknown statuses
      matches nothing and yields an empty list.
    - Order is preserved and duplicates are removed.
    """
    if raw_statuses is None:
        return list(get_status_group(default_group))
    if isinstance(raw_statuses, str):
        raw_statuses = raw_statuses.split(",")

    requested = [raw.strip().lower() for raw in raw_statuses]
    requested = [status for status in requested if status]
    if not requested:
        return list(get_status_group(default_group))

    normalized: list[str] = []
    for status in requested:
        if status in ALL_SCHEDULE_STATUSES and status not in normalized:
            normalized.append(status)
    return normalized

"""
Completion progress over the activities a user can actually see
"""

import logging
from typing import AbstractSet, Iterable, List, Mapping

from app.courses.availability import AvailabilityParseError, is_satisfied, parse_availability
from app.courses.models import Activity, CompletionRecord, ProgressResult, percentage_of

logger = logging.getLogger(__name__)


def visible_activities(activities: Iterable[Activity], user_groups: AbstractSet[int]) -> List[Activity]:
    """
    Completion-tracked activities whose group restrictions let the user in

    A restriction that cannot be parsed does not hide the activity.
    """
    visible = []
    for activity in activities:
        if not activity.is_tracked:
            continue

        if not activity.availability:
            visible.append(activity)
            continue

        try:
            tree = parse_availability(activity.availability)
        except AvailabilityParseError as e:
            logger.debug("Unparseable availability on activity %s, keeping it visible: %s", activity.id, e)
            visible.append(activity)
            continue

        if is_satisfied(tree, user_groups):
            visible.append(activity)

    return visible


def aggregate_progress(visible: List[Activity], completions: Mapping[int, CompletionRecord]) -> ProgressResult:
    """Count done activities among `visible`"""
    total = len(visible)
    if total == 0:
        return ProgressResult()

    completed = 0
    for activity in visible:
        record = completions.get(activity.id)
        if record is not None and record.is_done:
            completed += 1

    return ProgressResult(
        total=total,
        completed=completed,
        percentage=percentage_of(completed, total),
        has_completion=True
    )


def course_progress(
    activities: Iterable[Activity],
    user_groups: AbstractSet[int],
    completions: Mapping[int, CompletionRecord]
) -> ProgressResult:
    return aggregate_progress(visible_activities(activities, user_groups), completions)

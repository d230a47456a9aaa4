"""Derived views over an event's timeline and shot list.

All functions are pure: they take the wall-clock ``now`` explicitly and never
touch store state. Timeline order is taken as given and never re-sorted.

Current-item policy: an empty timeline has no current item. Otherwise, when
``now`` is before the event start, or before the first item's time of day,
the first item is returned. Every caller in the package uses this one rule.
"""

from datetime import datetime, timedelta

from crewdesk.domain.events import Event, ShotItem, TimelineItem

ACTIVE_WINDOW = timedelta(minutes=30)
SHOT_HOUR_WINDOW = 2
TIME_FILTERED_SHOT_LIMIT = 4
UNFILTERED_SHOT_LIMIT = 3


def current_timeline_item(event: Event, now: datetime) -> TimelineItem | None:
    """Return the timeline item in progress at ``now``."""
    timeline = event.timeline
    if not timeline:
        return None
    local_now = _align(now, event.date)
    if local_now < event.date:
        return timeline[0]

    current_minutes = local_now.hour * 60 + local_now.minute
    for index, item in enumerate(timeline):
        item_minutes = item.time.minutes_since_midnight
        if index + 1 < len(timeline):
            next_minutes = timeline[index + 1].time.minutes_since_midnight
            if item_minutes <= current_minutes < next_minutes:
                return item
        elif current_minutes >= item_minutes:
            return item
    return timeline[0]


def relevant_shots(event: Event, now: datetime) -> list[ShotItem]:
    """Return incomplete shots worth attention around the current timeline item.

    With a current item, shots within two hours of it (or without a time) are
    returned, at most four. Without one, the first three incomplete shots.
    """
    incomplete = [shot for shot in event.shot_list if not shot.completed]
    current = current_timeline_item(event, now)
    if current is None:
        return incomplete[:UNFILTERED_SHOT_LIMIT]

    current_hour = current.time.hour
    nearby = [
        shot
        for shot in incomplete
        if shot.time is None or abs(shot.time.hour - current_hour) <= SHOT_HOUR_WINDOW
    ]
    return nearby[:TIME_FILTERED_SHOT_LIMIT]


def timeline_item_datetime(event: Event, item: TimelineItem) -> datetime:
    """Combine the event date with the item's time of day."""
    return event.date.replace(
        hour=item.time.hour, minute=item.time.minute, second=0, microsecond=0
    )


def timeline_progress(event: Event, now: datetime) -> float:
    """Return the percentage of timeline items already reached, in [0, 100].

    Counting stops at the first item still in the future, so a later item
    that is somehow already past does not count.
    """
    if not event.timeline:
        return 0.0
    local_now = _align(now, event.date)
    if local_now < event.date:
        return 0.0

    completed = 0
    for item in event.timeline:
        if local_now >= timeline_item_datetime(event, item):
            completed += 1
        else:
            break
    return completed / len(event.timeline) * 100


def is_timeline_item_active(event: Event, item: TimelineItem, now: datetime) -> bool:
    """Return True during the 30 minutes after the item's scheduled time."""
    elapsed = _align(now, event.date) - timeline_item_datetime(event, item)
    return timedelta(0) <= elapsed <= ACTIVE_WINDOW


def _align(now: datetime, reference: datetime) -> datetime:
    """Express ``now`` in the reference's timezone when both are aware."""
    if now.tzinfo is not None and reference.tzinfo is not None:
        return now.astimezone(reference.tzinfo)
    return now

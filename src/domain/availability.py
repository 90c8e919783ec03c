"""Availability resolution

Turns a trainer's availability rules and the studio's operating hours into
the open windows a session of a given length can be booked in.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Sequence
from src.domain.availability_rule import AvailabilityRule, RulePolarity, day_of_week
from src.domain.intervals import (
    TimeWindow,
    clip_before,
    intersect_windows,
    merge_windows,
    subtract_windows,
)
from src.domain.studio_policy import StudioPolicy


def _window_on(day: date, start: time, end: time) -> TimeWindow:
    return TimeWindow(start=datetime.combine(day, start), end=datetime.combine(day, end))


class AvailabilityResolver:
    """
    Resolves open windows for a date range

    Per day:
    1. Union of OPEN rules covering the day
    2. Minus the union of BLOCKED rules covering the day
    3. Intersected with the studio's opening slots (skipped when the studio
       has no hours configured; a disabled day yields nothing)
    4. Minus anything before `now`
    5. Minus windows shorter than the service duration
    """

    def resolve(
        self,
        rules: Sequence[AvailabilityRule],
        policy: StudioPolicy,
        range_start: date,
        range_end: date,
        duration_minutes: int,
        now: datetime,
    ) -> List[TimeWindow]:
        for rule in rules:
            rule.check()

        duration = timedelta(minutes=duration_minutes)
        windows: List[TimeWindow] = []
        day = range_start
        while day <= range_end:
            for w in self.resolve_day(rules, policy, day, now):
                if w.duration >= duration:
                    windows.append(w)
            day += timedelta(days=1)
        return windows

    def resolve_day(
        self,
        rules: Iterable[AvailabilityRule],
        policy: StudioPolicy,
        day: date,
        now: datetime,
    ) -> List[TimeWindow]:
        todays = [r for r in rules if r.applies_on(day)]
        opens = [_window_on(day, r.start_time, r.end_time) for r in todays if r.polarity == RulePolarity.OPEN]
        blocks = [_window_on(day, r.start_time, r.end_time) for r in todays if r.polarity == RulePolarity.BLOCKED]

        windows = subtract_windows(opens, blocks)
        if not windows:
            return []

        if policy.hours_configured:
            hours = policy.day_hours(day_of_week(day))
            if hours is None or not hours.enabled:
                return []
            studio_open = [_window_on(day, s.start_time, s.end_time) for s in hours.slots]
            windows = intersect_windows(windows, studio_open)

        return clip_before(windows, now)


def fits_in_windows(windows: Iterable[TimeWindow], start: datetime, duration_minutes: int) -> bool:
    end = start + timedelta(minutes=duration_minutes)
    return any(w.contains(start, end) for w in windows)


def candidate_starts(
    windows: Iterable[TimeWindow], duration_minutes: int, stride_minutes: int = 30
) -> List[datetime]:
    """Start times on a stride grid (aligned to midnight) that fit a session."""
    if stride_minutes <= 0:
        raise ValueError("stride_minutes must be positive")

    duration = timedelta(minutes=duration_minutes)
    stride = timedelta(minutes=stride_minutes)
    starts = []
    for w in merge_windows(windows):
        midnight = datetime.combine(w.start.date(), time.min)
        offset = w.start - midnight
        steps = -(-offset // stride)  # ceil
        t = midnight + steps * stride
        while t + duration <= w.end:
            starts.append(t)
            t += stride
    return starts

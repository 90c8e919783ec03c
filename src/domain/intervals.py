"""Half-open time window algebra used by availability resolution"""

from datetime import datetime, timedelta
from typing import Iterable, List
from pydantic import BaseModel, ConfigDict


class TimeWindow(BaseModel):
    """Half-open interval [start, end)"""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, start: datetime, end: datetime) -> bool:
        return self.start <= start and end <= self.end


def merge_windows(windows: Iterable[TimeWindow]) -> List[TimeWindow]:
    """Union of windows, sorted; touching windows are joined."""
    ordered = sorted((w for w in windows if w.end > w.start), key=lambda w: w.start)
    if not ordered:
        return []

    merged = []
    current_start, current_end = ordered[0].start, ordered[0].end
    for w in ordered[1:]:
        if w.start <= current_end:
            current_end = max(current_end, w.end)
        else:
            merged.append(TimeWindow(start=current_start, end=current_end))
            current_start, current_end = w.start, w.end
    merged.append(TimeWindow(start=current_start, end=current_end))
    return merged


def subtract_windows(bases: Iterable[TimeWindow], cuts: Iterable[TimeWindow]) -> List[TimeWindow]:
    """Remove every cut from the bases; a cut can split a base in two."""
    cut_list = merge_windows(cuts)
    out = []
    for base in merge_windows(bases):
        segments = [(base.start, base.end)]
        for cut in cut_list:
            remaining = []
            for s, e in segments:
                if e <= cut.start or s >= cut.end:
                    remaining.append((s, e))
                    continue
                if s < cut.start:
                    remaining.append((s, cut.start))
                if e > cut.end:
                    remaining.append((cut.end, e))
            segments = remaining
            if not segments:
                break
        out.extend(TimeWindow(start=s, end=e) for s, e in segments if e > s)
    return merge_windows(out)


def intersect_windows(left: Iterable[TimeWindow], right: Iterable[TimeWindow]) -> List[TimeWindow]:
    right_list = merge_windows(right)
    out = []
    for a in merge_windows(left):
        for b in right_list:
            start = max(a.start, b.start)
            end = min(a.end, b.end)
            if end > start:
                out.append(TimeWindow(start=start, end=end))
    return merge_windows(out)


def clip_before(windows: Iterable[TimeWindow], cutoff: datetime) -> List[TimeWindow]:
    """Drop everything before cutoff."""
    out = []
    for w in windows:
        if w.end <= cutoff:
            continue
        out.append(TimeWindow(start=max(w.start, cutoff), end=w.end))
    return out

from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from .models import CutoffThreshold, DEFAULT_THRESHOLDS, Violation
from .periods import add_minutes, threshold_datetime, whole_minutes_between


class CutoffEvaluator:
    """
    Finds where a running total of interval minutes pushes the projected
    finish past each cutoff.

    Every threshold is checked independently in one forward pass and latched
    at its first crossing. The reported violation is the crossed threshold
    with the latest time of day, so 7 PM wins over 5 PM wins over 3 PM.
    """

    def __init__(self, thresholds: Sequence[CutoffThreshold] = DEFAULT_THRESHOLDS):
        self.thresholds = tuple(thresholds)

    def crossings(self, cumulative: Sequence[Optional[int]], now: datetime) -> List[Violation]:
        found: Dict[CutoffThreshold, Violation] = {}
        limits = [(t, threshold_datetime(now, t.time_of_day)) for t in self.thresholds]

        for idx, total in enumerate(cumulative, start=1):
            if total is None:
                continue  # blank slot
            projected = add_minutes(now, total)
            for threshold, limit in limits:
                if threshold in found:
                    continue
                if projected > limit:
                    found[threshold] = Violation(
                        index=idx,
                        threshold=threshold,
                        minutes_past=whole_minutes_between(limit, projected),
                    )

        return sorted(found.values(), key=lambda v: v.threshold.time_of_day)

    def evaluate(self, cumulative: Sequence[Optional[int]], now: datetime) -> Optional[Violation]:
        hits = self.crossings(cumulative, now)
        return hits[-1] if hits else None

"""
===========================================================
summary.py
Last Updated: 2026-10-19
===========================================================
Per-state population counts
======================================================
A LocationSummary fills a live counter once per agent per
step, then publish() swaps it into the exposed "last" summary
and resets the live counter. aggregate() sums summaries across
locations.

License: MIT
===========================================================
"""
from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Dict, Iterable, List, Optional

from .states import HealthState, N_STATES


class Summary:
    """Count of agents in each HealthState"""
    def __init__(self, counts: Optional[Iterable[int]] = None):
        if counts is None:
            self.counts = np.zeros(N_STATES, dtype=np.int64)
        else:
            self.counts = np.array(counts, dtype=np.int64)
            if self.counts.shape != (N_STATES,):
                raise ValueError(f"Summary needs {N_STATES} counts, got {self.counts.shape}")

    def __getitem__(self, state: HealthState) -> int:
        return int(self.counts[state])

    def __add__(self, other: "Summary") -> "Summary":
        return Summary(self.counts + other.counts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Summary):
            return NotImplemented
        return bool(np.array_equal(self.counts, other.counts))

    def total(self) -> int:
        return int(self.counts.sum())

    def copy(self) -> "Summary":
        return Summary(self.counts.copy())

    def as_dict(self) -> Dict[str, int]:
        return {state.name: int(self.counts[state]) for state in HealthState}

    def __repr__(self) -> str:
        return f"Summary({self.as_dict()})"


class LocationSummary:
    """Daily counters for one location with snapshot-and-reset semantics.
    Attributes:
    daily: Summary. Live counter filled during the current step
    last: Summary. Most recently published counts
    history: List[Summary]. Every published summary, in order
    """
    def __init__(self, keep_history: bool = True):
        self.daily = Summary()
        self.last = Summary()
        self.keep_history = keep_history
        self.history: List[Summary] = []

    def inc(self, state: HealthState):
        self.daily.counts[state] += 1

    def get(self, state: HealthState) -> int:
        """Live count for a state in the step being counted"""
        return self.daily[state]

    def publish(self):
        """Expose the live counts as `last` and start a fresh counter"""
        self.last = self.daily
        self.daily = Summary()
        if self.keep_history:
            self.history.append(self.last.copy())

    def percentile(self) -> Dict[str, float]:
        """Fraction of the population in each state for the last summary"""
        total = self.last.total()
        if total == 0:
            return {state.name: 0.0 for state in HealthState}
        return {state.name: self.last[state] / total for state in HealthState}

    def history_frame(self) -> pd.DataFrame:
        """Published summaries as a DataFrame, one row per step"""
        columns = [state.name for state in HealthState]
        if not self.history:
            return pd.DataFrame(columns=columns, dtype=np.int64)
        return pd.DataFrame(np.vstack([s.counts for s in self.history]), columns=columns)


def aggregate(summaries: Iterable[Summary]) -> Summary:
    """Sum per-state counts over several summaries"""
    total = Summary()
    for summary in summaries:
        total = total + summary
    return total

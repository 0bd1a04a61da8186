"""
===========================================================
simulation.py
Last Updated: 2026-10-19
===========================================================
Discrete-time driver for the SEIHCRD model

API:
    Simulation(start, end, step, report_interval, on_report=None)
      - start(locations) -> list of Checkpoint
      - results() -> tidy DataFrame of all checkpoints

Notes:
    - every location is initialized at `start`, then run once
      per step for timer in [start, end)
    - a checkpoint is taken whenever timer % report_interval == 0
      and once more at `end`
    - locations do not interact, so their order within a step
      does not matter
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import logging
import pandas as pd
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .location import Location
from .states import HealthState
from .summary import Summary, aggregate

logger = logging.getLogger(__name__)

TOTAL_LABEL = "ALL"


@dataclass
class Checkpoint:
    """Counts read from every location at one reporting time"""
    time: int
    by_location: Dict[str, Summary]
    total: Summary


def location_labels(locations: Sequence[Location]) -> List[str]:
    """Location kind names, numbered when a kind appears more than once"""
    names = [loc.kind.name for loc in locations]
    labels = []
    for i, name in enumerate(names):
        if names.count(name) > 1:
            labels.append(f"{name}_{names[:i].count(name)}")
        else:
            labels.append(name)
    return labels


class Simulation:
    def __init__(self, start: int = 0, end: int = 100, step: int = 1,
                 report_interval: int = 10,
                 on_report: Optional[Callable[[Checkpoint], None]] = None):
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        if report_interval <= 0:
            raise ValueError(f"report_interval must be positive, got {report_interval}")
        if end <= start:
            raise ValueError(f"end ({end}) must be after start ({start})")
        self.start_time = start
        self.end_time = end
        self.step_size = step
        self.report_interval = report_interval
        self.on_report = on_report
        self.checkpoints: List[Checkpoint] = []
        self._labels: List[str] = []

    def checkpoint(self, locations: Sequence[Location], ts: int) -> Checkpoint:
        by_location = {label: loc.report() for label, loc in zip(self._labels, locations)}
        total = aggregate(by_location.values())
        point = Checkpoint(time=ts, by_location=by_location, total=total)
        self.checkpoints.append(point)

        logger.info("Report for time %d: %s", ts, total.as_dict())
        if self.on_report is not None:
            self.on_report(point)
        return point

    def start(self, locations: Sequence[Location]) -> List[Checkpoint]:
        """Initialize all locations and run them to the end time"""
        for loc in locations:
            loc.params.check_step(self.step_size)

        self.checkpoints = []
        self._labels = location_labels(locations)
        for loc in locations:
            loc.init(self.start_time)

        for timer in range(self.start_time, self.end_time, self.step_size):
            for loc in locations:
                loc.run(timer)
            logger.debug("Completed step t=%d", timer)
            if timer % self.report_interval == 0:
                self.checkpoint(locations, timer)

        self.checkpoint(locations, self.end_time)
        return self.checkpoints

    def results(self) -> pd.DataFrame:
        """One row per checkpoint and location plus an aggregate row"""
        rows = []
        for point in self.checkpoints:
            for label, summary in point.by_location.items():
                rows.append({"time": point.time, "location": label, **summary.as_dict()})
            rows.append({"time": point.time, "location": TOTAL_LABEL, **point.total.as_dict()})
        columns = ["time", "location"] + [state.name for state in HealthState]
        return pd.DataFrame(rows, columns=columns)

"""
===========================================================
states.py
Last Updated: 2026-10-19
===========================================================
Disease states, locations and per-agent transition records
======================================================
SEIHCRD progression graph:

    S -> E -> I -> R
              I -> H -> R
              I -> D   H -> C -> R
                       H -> D   C -> D

Recovered and Deceased are terminal.

License: MIT
===========================================================
"""
from __future__ import annotations
import numpy as np
from enum import IntEnum
from typing import Dict, FrozenSet, List, Tuple

UNSET = -1


class HealthState(IntEnum):
    """Enumeration for SEIHCRD disease states"""
    SUSCEPTIBLE = 0
    EXPOSED = 1
    INFECTIOUS = 2
    HOSPITALIZED = 3
    CRITICAL = 4
    RECOVERED = 5
    DECEASED = 6


class AtLocation(IntEnum):
    """Kinds of place an agent can belong to or be at"""
    HOME = 0
    SCHOOL = 1
    WORK = 2
    GENERIC = 3
    HOSPITAL = 4
    CEMETERY = 5


N_STATES = len(HealthState)

TERMINAL_STATES: FrozenSet[HealthState] = frozenset(
    {HealthState.RECOVERED, HealthState.DECEASED}
)

LEGAL_TRANSITIONS: Dict[HealthState, FrozenSet[HealthState]] = {
    HealthState.SUSCEPTIBLE: frozenset({HealthState.EXPOSED}),
    HealthState.EXPOSED: frozenset({HealthState.INFECTIOUS}),
    HealthState.INFECTIOUS: frozenset(
        {HealthState.RECOVERED, HealthState.HOSPITALIZED, HealthState.DECEASED}
    ),
    HealthState.HOSPITALIZED: frozenset(
        {HealthState.CRITICAL, HealthState.RECOVERED, HealthState.DECEASED}
    ),
    HealthState.CRITICAL: frozenset({HealthState.RECOVERED, HealthState.DECEASED}),
    HealthState.RECOVERED: frozenset(),
    HealthState.DECEASED: frozenset(),
}

# physical location an agent moves to when entering a state
DESTINATIONS: Dict[HealthState, AtLocation] = {
    HealthState.RECOVERED: AtLocation.HOME,
    HealthState.HOSPITALIZED: AtLocation.HOSPITAL,
    HealthState.CRITICAL: AtLocation.HOSPITAL,
    HealthState.DECEASED: AtLocation.CEMETERY,
}


class IllegalTransition(ValueError):
    """Raised for a state change that is not an edge of the SEIHCRD graph"""


def is_legal(current: HealthState, new: HealthState) -> bool:
    return new in LEGAL_TRANSITIONS[current]


class TransitionRecord:
    """Timestamp at which an agent first entered each state.

    Entries for states never visited hold UNSET (-1).
    """
    def __init__(self):
        self._stamps = np.full(N_STATES, UNSET, dtype=np.int64)

    def get(self, state: HealthState) -> int:
        return int(self._stamps[state])

    def stamp(self, state: HealthState, ts: int):
        self._stamps[state] = ts

    def elapsed(self, state: HealthState, ts: int) -> int:
        """Time since the state was entered"""
        return ts - self.get(state)

    def time_to_transit(self, state: HealthState, ts: int, duration: int) -> bool:
        # exact match: a step that jumps past ts == entry + duration never fires
        return self.elapsed(state, ts) == duration

    def visited(self) -> List[Tuple[HealthState, int]]:
        """Visited states ordered by entry time"""
        pairs = [(HealthState(i), int(t)) for i, t in enumerate(self._stamps) if t != UNSET]
        return sorted(pairs, key=lambda p: (p[1], p[0]))

    def copy(self) -> TransitionRecord:
        other = TransitionRecord()
        other._stamps = self._stamps.copy()
        return other

    def as_dict(self) -> Dict[str, int]:
        return {state.name: int(self._stamps[state]) for state in HealthState}

    def __repr__(self) -> str:
        return f"TransitionRecord({self.as_dict()})"

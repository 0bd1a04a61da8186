"""
===========================================================
policy.py
Last Updated: 2026-10-19
===========================================================
Non-pharmaceutical interventions and transmission probability
======================================================
An NPI cuts contacts in each mixing location by a fraction.
The reduced location weights are renormalised to sum to 1,
then blended with the baseline according to the share of the
population that complies:

    effective = (1 - compliance) * original + compliance * reduced

License: MIT
===========================================================
"""
from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional

from .states import AtLocation

MIXING_LOCATIONS = (AtLocation.HOME, AtLocation.SCHOOL, AtLocation.WORK, AtLocation.GENERIC)

BASELINE_TRANSMISSION: Dict[AtLocation, float] = {
    AtLocation.HOME: 0.33,
    AtLocation.SCHOOL: 0.17,
    AtLocation.WORK: 0.17,
    AtLocation.GENERIC: 0.33,
}


@dataclass(frozen=True)
class NPI:
    """Non-pharmaceutical intervention policy
    Attributes:
    home, school, work, generic: float. Fractional contact reduction per location
    compliance: float. Fraction of the population following the policy
    """
    home: float = 0.0
    school: float = 0.0
    work: float = 0.0
    generic: float = 0.0
    compliance: float = 1.0

    def __post_init__(self):
        for name in ("home", "school", "work", "generic", "compliance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"NPI {name} must lie in [0, 1], got {value}")
        if self.reductions().min() >= 1.0:
            raise ValueError("NPI cannot remove all contacts in every location")

    def reductions(self) -> np.ndarray:
        """Reductions ordered as MIXING_LOCATIONS"""
        return np.array([self.home, self.school, self.work, self.generic], dtype=float)


class TransmissionProbability:
    """Per-location transmission probability, optionally under an NPI"""
    def __init__(self, baseline: Optional[Dict[AtLocation, float]] = None):
        baseline = BASELINE_TRANSMISSION if baseline is None else baseline
        missing = [loc.name for loc in MIXING_LOCATIONS if loc not in baseline]
        if missing:
            raise ValueError(f"Baseline transmission missing for: {', '.join(missing)}")
        self.transmission_map: Dict[AtLocation, float] = dict(baseline)

    def get(self, location: AtLocation) -> float:
        if location not in self.transmission_map:
            raise ValueError(f"No transmission probability for location {location.name}")
        return self.transmission_map[location]

    def apply(self, policy: NPI) -> "TransmissionProbability":
        """Blend the current probabilities with their NPI-reduced counterpart"""
        originals = np.array([self.transmission_map[loc] for loc in MIXING_LOCATIONS])
        intermediate = originals * (1.0 - policy.reductions())
        reduced = intermediate / intermediate.sum()
        effective = (1.0 - policy.compliance) * originals + policy.compliance * reduced

        for loc, value in zip(MIXING_LOCATIONS, effective):
            self.transmission_map[loc] = float(value)
        return self

    def as_dict(self) -> Dict[str, float]:
        return {loc.name: p for loc, p in self.transmission_map.items()}


def transmission_probability(location: AtLocation, policy: Optional[NPI] = None,
                             baseline: Optional[Dict[AtLocation, float]] = None) -> float:
    """Effective transmission probability for one location"""
    probs = TransmissionProbability(baseline)
    if policy is not None:
        probs.apply(policy)
    return probs.get(location)

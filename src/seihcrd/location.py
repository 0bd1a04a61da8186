"""
===========================================================
location.py
Last Updated: 2026-10-19
===========================================================
Location: a mixing population of agents
======================================================
Each step a location
1. samples random pairs of its agents as contacts
2. runs an infection trial for every contact with exactly
   one infectious party
3. advances every agent's disease state
4. counts agents per state and publishes the summary

Agents that move to hospital, home or cemetery stay in the
population of the location that created them; only contacts
between agents at the same physical location can transmit.

License: MIT
===========================================================
"""
from __future__ import annotations
import logging
import pandas as pd
from typing import Dict, List, Optional, Sequence

from .agent import Person
from .parameters import (
    DEFAULT_AGE_MIXTURES,
    DEFAULT_POPULATION,
    DEFAULT_SEEDS,
    AgeMixture,
    DiseaseParameters,
)
from .policy import NPI, TransmissionProbability
from .probability import RandomSource, default_source
from .states import AtLocation, HealthState
from .summary import LocationSummary, Summary

logger = logging.getLogger(__name__)

# contacts sampled per batch of index and Gamma draws
CONTACT_BLOCK = 100_000


def contact(a: Person, b: Person, infectiousness_a: float, infectiousness_b: float,
            transmission_prob: float, ts: int) -> bool:
    """Evaluate one contact between two agents given their infectiousness draws.

    A contact is a single directed risk event: it can only transmit when
    the agents share a physical location and exactly one of the two draws
    is nonzero. The susceptible party (a first, then b) then runs an
    infection trial against the other's infectiousness.

    Returns:
    exposed: bool. Whether a new exposure happened
    """
    if a.location != b.location:
        return False
    if (infectiousness_a == 0) == (infectiousness_b == 0):
        return False

    infectiousness = infectiousness_a if infectiousness_a > 0 else infectiousness_b
    if a.health_status == HealthState.SUSCEPTIBLE:
        return a.under_exposed(infectiousness, transmission_prob, ts)
    if b.health_status == HealthState.SUSCEPTIBLE:
        return b.under_exposed(infectiousness, transmission_prob, ts)
    return False


def n_contacts(kind: AtLocation, population: int, per_capita_contacts: int,
               school_multiplier: int = 2) -> int:
    """Number of pairwise contacts sampled per step"""
    count = per_capita_contacts * population // 2
    if kind == AtLocation.SCHOOL:
        count *= school_multiplier
    return count


def _default_count(table: Dict[AtLocation, int], kind: AtLocation, what: str) -> int:
    if kind not in table:
        raise ValueError(f"No default {what} for location {kind.name}")
    return table[kind]


class Location:
    """A population of agents sharing contact rate, ages and transmission probability.
    Attributes:
    kind: AtLocation. Home, school, work or generic mixing pool
    initial_susceptible: int. Number of agents created Susceptible
    initial_seed: int. Number of agents created Exposed
    total: int. Population size after init
    transmission_prob: float. Per-contact transmission probability (NPI applied)
    population: List[Person]. Agents owned by this location
    summary: LocationSummary. Per-step state counts
    """
    def __init__(self, kind: AtLocation, susceptible_count: Optional[int] = None,
                 seed_count: Optional[int] = None,
                 age_mixture: Optional[AgeMixture] = None,
                 npi_policy: Optional[NPI] = None,
                 params: Optional[DiseaseParameters] = None,
                 rng: Optional[RandomSource] = None,
                 baseline: Optional[Dict[AtLocation, float]] = None,
                 keep_history: bool = True):
        if susceptible_count is None:
            susceptible_count = _default_count(DEFAULT_POPULATION, kind, "population")
        if seed_count is None:
            seed_count = _default_count(DEFAULT_SEEDS, kind, "seed count")
        if susceptible_count < 0 or seed_count < 0:
            raise ValueError(
                f"Population counts cannot be negative "
                f"(susceptible={susceptible_count}, seed={seed_count})"
            )
        if age_mixture is None:
            if kind not in DEFAULT_AGE_MIXTURES:
                raise ValueError(f"No default age mixture for location {kind.name}")
            age_mixture = DEFAULT_AGE_MIXTURES[kind]

        self.kind = kind
        self.initial_susceptible = int(susceptible_count)
        self.initial_seed = int(seed_count)
        self.total = self.initial_susceptible + self.initial_seed
        self.age_mixture = list(age_mixture)
        self.npi_policy = npi_policy
        self.params = params if params is not None else DiseaseParameters()
        self.rng = rng if rng is not None else default_source()

        probs = TransmissionProbability(baseline)
        if npi_policy is not None:
            probs.apply(npi_policy)
        self.transmission_prob = probs.get(kind)

        self.population: List[Person] = []
        self.summary = LocationSummary(keep_history=keep_history)
        self.initialized = False

    @classmethod
    def from_population(cls, kind: AtLocation, people: Sequence[Person],
                        age_mixture: Optional[AgeMixture] = None,
                        npi_policy: Optional[NPI] = None,
                        params: Optional[DiseaseParameters] = None,
                        rng: Optional[RandomSource] = None,
                        baseline: Optional[Dict[AtLocation, float]] = None,
                        keep_history: bool = True) -> Location:
        """Location over copies of an existing set of agents.

        Every agent is copied, so stepping this location never advances
        the originals (which may belong to another location). `init`
        finds the population full and creates nobody. Without `params`
        the first agent's parameters are used.
        """
        if params is None and people:
            params = people[0].params
        loc = cls(kind, len(people), 0, age_mixture=age_mixture, npi_policy=npi_policy,
                  params=params, rng=rng, baseline=baseline, keep_history=keep_history)
        loc.population = [person.copy(rng=loc.rng, params=loc.params) for person in people]
        return loc

    @property
    def n_contacts(self) -> int:
        return n_contacts(self.kind, self.total, self.params.per_capita_contacts,
                          self.params.school_contact_multiplier)

    def _new_person(self, health: HealthState, ts: int) -> Person:
        return Person(self.kind, health, ts, self.age_mixture, self.params, self.rng)

    def seed(self, ts: int):
        """Create the initially exposed agents"""
        for _ in range(self.initial_seed):
            self.population.append(self._new_person(HealthState.EXPOSED, ts))

    def init(self, ts: int):
        """Generate the population at the start time; a full population is kept as is"""
        if self.initialized:
            raise RuntimeError(f"Location {self.kind.name} is already initialized")
        self.seed(ts)
        if len(self.population) != self.total:
            for _ in range(self.initial_susceptible):
                self.population.append(self._new_person(HealthState.SUSCEPTIBLE, ts))
        self.initialized = True
        logger.info("Location %s: total population size %d", self.kind.name, self.total)

    def sample_contacts(self, current_time: int) -> int:
        """Run every contact of one step; returns the number of new exposures"""
        n = self.n_contacts
        if n == 0 or self.total == 0:
            return 0

        p = self.params
        exposures = 0
        for begin in range(0, n, CONTACT_BLOCK):
            size = (min(CONTACT_BLOCK, n - begin), 2)
            pairs = self.rng.uniform_indices(self.total, size).tolist()
            # one independent draw per party per contact
            draws = self.rng.gammas(p.infectious_shape, p.infectious_scale, size).tolist()
            for (idx1, idx2), (draw1, draw2) in zip(pairs, draws):
                a = self.population[idx1]
                b = self.population[idx2]
                exposed = contact(a, b, a.infectiousness(current_time, draw1),
                                  b.infectiousness(current_time, draw2),
                                  self.transmission_prob, current_time)
                exposures += int(exposed)
        return exposures

    def run(self, current_time: int) -> int:
        """Advance the location by one step; returns new exposures this step"""
        if not self.initialized:
            raise RuntimeError(f"Location {self.kind.name} must be initialized before run()")

        exposures = self.sample_contacts(current_time)
        for person in self.population:
            self.summary.inc(person.status_update(current_time))
        self.summary.publish()
        logger.debug("Location %s t=%d: %d new exposures", self.kind.name, current_time, exposures)
        return exposures

    def counts(self) -> Summary:
        """Current per-state counts computed directly from the population"""
        summary = Summary()
        for person in self.population:
            summary.counts[person.health_status] += 1
        return summary

    def report(self) -> Summary:
        """Last published summary"""
        return self.summary.last.copy()

    def detailed_report(self) -> pd.DataFrame:
        frame = self.summary.history_frame()
        frame.insert(0, "location", self.kind.name)
        return frame

    def __repr__(self) -> str:
        return (f"Location({self.kind.name}, susceptible={self.initial_susceptible}, "
                f"seed={self.initial_seed}, transmission_prob={self.transmission_prob:.3f})")

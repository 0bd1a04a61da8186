"""
===========================================================
agent.py
Last Updated: 2026-10-19
===========================================================
Individual agent for the SEIHCRD model
======================================================
A Person carries fixed traits drawn at creation (age,
symptomatic, isolate, latent period), a current health state,
a physical location and the record of when each state was
entered. Progression is driven by elapsed time in the current
state and age-dependent outcome draws.

License: MIT
===========================================================
"""
from __future__ import annotations
import copy
from typing import Dict, Optional

from .parameters import AgeMixture, DiseaseParameters, RateCategory
from .probability import RandomSource, default_source
from .states import (
    AtLocation,
    DESTINATIONS,
    HealthState,
    IllegalTransition,
    TransitionRecord,
    is_legal,
)


class Person:
    """Individual agent.
    Attributes:
    age: int. Sampled once from the location's age mixture
    symptomatic: bool. Whether the infection (if any) is symptomatic
    isolate: bool. Whether a symptomatic agent self-isolates
    latent_period: int. Ticks an Exposed agent stays non-infectious
    health_status: HealthState. Current disease state
    location: AtLocation. Where the agent physically is
    record: TransitionRecord. Entry time of every visited state
    """
    def __init__(self, location: AtLocation, health: HealthState, ts: int,
                 age_mixture: AgeMixture, params: DiseaseParameters,
                 rng: Optional[RandomSource] = None):
        self.rng = rng if rng is not None else default_source()
        self.params = params
        self.location = location
        self.age = self.rng.gaussian_mixture(age_mixture)
        self.symptomatic = self._bernoulli(params.prob_symptomatic)
        if self.symptomatic:
            self.latent_period = params.symptomatic_latent_period
            self.isolate = self._bernoulli(params.self_isolate_ratio)
        else:
            self.latent_period = params.asymptomatic_latent_period
            self.isolate = False

        self.health_status = health
        self.record = TransitionRecord()
        self.record.stamp(health, ts)

    def copy(self, rng: Optional[RandomSource] = None,
             params: Optional[DiseaseParameters] = None) -> Person:
        """Independent agent with the same traits, state and record.

        The copy draws from `rng` and progresses under `params` when
        given; otherwise it shares the original's.
        """
        other = copy.copy(self)
        other.record = self.record.copy()
        if rng is not None:
            other.rng = rng
        if params is not None:
            other.params = params
        return other

    def _bernoulli(self, probability: float) -> bool:
        return self.rng.bernoulli(probability, self.params.bernoulli_precision)

    def _rate(self, category: RateCategory) -> float:
        return self.params.outcome_rates.rate(category, self.age)

    def is_fatal(self) -> bool:
        return self._bernoulli(self._rate(RateCategory.FATALITY))

    def is_hospitalized(self) -> bool:
        return self._bernoulli(self._rate(RateCategory.HOSPITALIZATION))

    def is_critical(self) -> bool:
        return self._bernoulli(self._rate(RateCategory.ICU))

    # ------------------------------------------------------------------
    # transitions
    # ------------------------------------------------------------------
    def transition(self, new_state: HealthState, ts: int):
        """Move along one edge of the SEIHCRD graph and stamp the record"""
        if not is_legal(self.health_status, new_state):
            raise IllegalTransition(
                f"Cannot go from {self.health_status.name} to {new_state.name}"
            )
        self.health_status = new_state
        if new_state in DESTINATIONS:
            self.location = DESTINATIONS[new_state]
        self.record.stamp(new_state, ts)

    def expose(self, ts: int):
        self.transition(HealthState.EXPOSED, ts)

    def become_infectious(self, ts: int):
        self.transition(HealthState.INFECTIOUS, ts)

    def hospitalize(self, ts: int):
        self.transition(HealthState.HOSPITALIZED, ts)

    def become_critical(self, ts: int):
        self.transition(HealthState.CRITICAL, ts)

    def recover(self, ts: int):
        self.transition(HealthState.RECOVERED, ts)

    def die(self, ts: int):
        self.transition(HealthState.DECEASED, ts)

    def _die_or_recover(self, dies: bool, ts: int):
        if dies:
            self.die(ts)
        else:
            self.recover(ts)

    # ------------------------------------------------------------------
    # per-step behaviour
    # ------------------------------------------------------------------
    def infectiousness(self, ts: int, draw: Optional[float] = None) -> float:
        """Infectiousness for one contact.

        asymptomatic and exposed -> 0
        symptomatic, exposed, within latent period -> 0
        symptomatic, exposed, past latent period -> gamma
        asymptomatic and infectious/hospitalized/critical -> gamma
        symptomatic and infectious/hospitalized/critical -> scale * gamma

        `draw` is a Gamma(infectious_shape, infectious_scale) value drawn
        by the caller for this contact; a fresh one is drawn when omitted.
        """
        state = self.health_status
        if state in (HealthState.SUSCEPTIBLE, HealthState.RECOVERED, HealthState.DECEASED):
            return 0.0

        p = self.params
        if state == HealthState.EXPOSED:
            if not (self.symptomatic and self.record.elapsed(state, ts) > self.latent_period):
                return 0.0
            if draw is None:
                draw = self.rng.gamma(p.infectious_shape, p.infectious_scale)
            return draw

        if draw is None:
            draw = self.rng.gamma(p.infectious_shape, p.infectious_scale)
        if self.symptomatic:
            return p.symptomatic_infectiousness_scale * draw
        return draw

    def under_exposed(self, infectiousness: float, transmission_prob: float, ts: int) -> bool:
        """Infection trial after contact with an infectious agent"""
        if self._bernoulli(infectiousness * transmission_prob):
            self.expose(ts)
            return True
        return False

    def status_update(self, ts: int) -> HealthState:
        """Advance the state machine by one step and return the resulting state"""
        p = self.params
        record = self.record
        state = self.health_status

        if state == HealthState.EXPOSED:
            period = p.incubation_period if self.symptomatic else self.latent_period
            if record.time_to_transit(state, ts, period):
                self.become_infectious(ts)

        elif state == HealthState.INFECTIOUS:
            if not self.symptomatic:
                if record.time_to_transit(state, ts, p.asymptomatic_recovery_duration):
                    self._die_or_recover(self.is_fatal(), ts)
            else:
                if record.time_to_transit(state, ts, p.hospitalization_delay):
                    if self.is_hospitalized():
                        self.hospitalize(ts)
                # mild cases that were not admitted recover unconditionally
                if (self.health_status == HealthState.INFECTIOUS
                        and record.time_to_transit(state, ts, p.mild_recovery_duration)):
                    self.recover(ts)

        elif state == HealthState.HOSPITALIZED:
            if record.time_to_transit(state, ts, p.decide_critical_duration):
                if self.is_critical():
                    self.become_critical(ts)
            elif record.time_to_transit(state, ts, p.hospital_stay_duration):
                self._die_or_recover(self.is_fatal(), ts)

        elif state == HealthState.CRITICAL:
            # single roll at the end of the ICU stay
            if record.time_to_transit(state, ts, p.icu_duration):
                self._die_or_recover(self._bernoulli(p.critical_death_prob), ts)

        return self.health_status

    def describe(self) -> Dict[str, object]:
        """Traits, current state and visited states for inspection"""
        return {
            "age": self.age,
            "symptomatic": self.symptomatic,
            "isolate": self.isolate,
            "latent_period": self.latent_period,
            "health_status": self.health_status.name,
            "location": self.location.name,
            "visited": [(s.name, t) for s, t in self.record.visited()],
        }

    def __repr__(self) -> str:
        return (f"Person(age={self.age}, symptomatic={self.symptomatic}, "
                f"status={self.health_status.name}, location={self.location.name})")

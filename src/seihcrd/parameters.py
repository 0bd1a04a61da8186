"""
===============================================================================
parameters.py
Last Updated: 2026-10-19
===============================================================================
Model Parameters for the SEIHCRD agent-based model

Disease-progression durations, outcome probabilities, infectiousness
parameters and per-location demographic defaults. All durations are in
simulation ticks; one day is DAY ticks.

Outcome rates are age-stratified by decile (ages above 80 share the last
group) and are hand-specified constants, not fitted.
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Dict, List, NamedTuple, Tuple

from .states import AtLocation

DAY = 10    # ticks per simulated day (0.1 day resolution)
MILLION = 1_000_000


# ==================== Outcome Rates by Age Group ==============================
# index = age group (age // 10, capped at 8)

# % of symptomatic cases requiring hospitalization
SYMPTOMATIC_HOSPITALIZATION_RATE = (
    0.001, 0.003, 0.012, 0.032, 0.049, 0.102, 0.166, 0.243, 0.273,
)
# % of hospitalized cases requiring critical care
HOSPITALIZED_CRITICAL_CARE_RATE = (
    0.05, 0.05, 0.05, 0.05, 0.063, 0.122, 0.274, 0.432, 0.709,
)
INFECTION_FATALITY_RATE = (
    0.00002, 0.00006, 0.0003, 0.0008, 0.0015, 0.0060, 0.022, 0.051, 0.093,
)

N_AGE_GROUPS = 9


class RateCategory(IntEnum):
    """Which age-stratified outcome rate to look up"""
    HOSPITALIZATION = 0
    ICU = 1
    FATALITY = 2


def age_group(age: int) -> int:
    """Decile bucket for an age; everyone above 80 falls in bucket 8"""
    if age > 80:
        return N_AGE_GROUPS - 1
    return max(int(age), 0) // 10


@dataclass(frozen=True)
class OutcomeRateTable:
    """Age group -> hospitalization, ICU and fatality probabilities"""
    hospitalization: Tuple[float, ...] = SYMPTOMATIC_HOSPITALIZATION_RATE
    icu: Tuple[float, ...] = HOSPITALIZED_CRITICAL_CARE_RATE
    fatality: Tuple[float, ...] = INFECTION_FATALITY_RATE

    def __post_init__(self):
        for f in fields(self):
            rates = getattr(self, f.name)
            if len(rates) != N_AGE_GROUPS:
                raise ValueError(f"{f.name} needs {N_AGE_GROUPS} age groups, got {len(rates)}")
            if any(r < 0 or r > 1 for r in rates):
                raise ValueError(f"{f.name} rates must lie in [0, 1]")

    def rate(self, category: RateCategory, age: int) -> float:
        group = age_group(age)
        if category == RateCategory.HOSPITALIZATION:
            return self.hospitalization[group]
        if category == RateCategory.ICU:
            return self.icu[group]
        return self.fatality[group]


# ==================== Disease Progression =====================================
@dataclass
class DiseaseParameters:
    """
    Parameter set for individual disease progression and contacts.

    Durations are measured in ticks from the moment the agent entered the
    state the transition leaves. Transitions fire on exact equality, so
    Simulation checks every duration against its step size (check_step).
    """
    # natural history
    prob_symptomatic: float = 0.67
    self_isolate_ratio: float = 2 / 3
    incubation_period: int = 51                 # 5.1 days, symptomatic E -> I
    symptomatic_latent_period: int = 46         # pre-symptomatic infectiousness starts
    asymptomatic_latent_period: int = 70        # asymptomatic E -> I

    # infectiousness ~ Gamma(shape, scale), mean = shape * scale
    infectious_shape: float = 0.25
    infectious_scale: float = 4.0
    symptomatic_infectiousness_scale: float = 1.5

    # clinical course
    hospitalization_delay: int = 5 * DAY
    decide_critical_duration: int = 6 * DAY     # must be < hospital_stay_duration
    hospital_stay_duration: int = 8 * DAY
    icu_duration: int = 10 * DAY
    asymptomatic_recovery_duration: int = 10 * DAY
    mild_recovery_duration: int = 10 * DAY
    critical_death_prob: float = 0.5

    # mixing
    per_capita_contacts: int = 40
    school_contact_multiplier: int = 2

    bernoulli_precision: float = 0.001
    outcome_rates: OutcomeRateTable = field(default_factory=OutcomeRateTable)

    def __post_init__(self):
        if self.decide_critical_duration >= self.hospital_stay_duration:
            raise ValueError(
                f"decide_critical_duration ({self.decide_critical_duration}) must be "
                f"less than hospital_stay_duration ({self.hospital_stay_duration})"
            )
        for name, value in self.durations().items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        for name in ("prob_symptomatic", "self_isolate_ratio", "critical_death_prob"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {value}")
        if self.infectious_shape <= 0 or self.infectious_scale <= 0:
            raise ValueError("Gamma shape and scale must be positive")
        if self.per_capita_contacts < 0:
            raise ValueError("per_capita_contacts cannot be negative")
        if not 0.0 < self.bernoulli_precision <= 1.0:
            raise ValueError("bernoulli_precision must lie in (0, 1]")

    @property
    def mean_infectiousness(self) -> float:
        return self.infectious_shape * self.infectious_scale

    def durations(self) -> Dict[str, int]:
        """Every elapsed-time trigger of the state machine"""
        return {
            "incubation_period": self.incubation_period,
            "symptomatic_latent_period": self.symptomatic_latent_period,
            "asymptomatic_latent_period": self.asymptomatic_latent_period,
            "hospitalization_delay": self.hospitalization_delay,
            "decide_critical_duration": self.decide_critical_duration,
            "hospital_stay_duration": self.hospital_stay_duration,
            "icu_duration": self.icu_duration,
            "asymptomatic_recovery_duration": self.asymptomatic_recovery_duration,
            "mild_recovery_duration": self.mild_recovery_duration,
        }

    def check_step(self, step: int):
        """Raise ValueError if a transition could be stepped over"""
        misaligned = [name for name, value in self.durations().items() if value % step]
        if misaligned:
            raise ValueError(
                f"Step size {step} does not divide: {', '.join(misaligned)}"
            )


# ==================== Location Demographics ===================================
class AgeComponent(NamedTuple):
    """One Gaussian in an age mixture; sd is the normal's scale"""
    weight: float
    mean: float
    sd: float


AgeMixture = List[AgeComponent]

# 21% aged under 18, 29% 18-39, 27% 40-59, 20% 60+
DEFAULT_AGE_MIXTURES: Dict[AtLocation, AgeMixture] = {
    AtLocation.SCHOOL: [AgeComponent(1.0, 15, 5)],
    AtLocation.HOME: [AgeComponent(1.0, 40, 20)],
    AtLocation.WORK: [AgeComponent(1.0, 45, 8)],
    AtLocation.GENERIC: [AgeComponent(1.0, 60, 20)],
}

DEFAULT_POPULATION: Dict[AtLocation, int] = {
    AtLocation.SCHOOL: int(16.5 * MILLION),
    AtLocation.HOME: int(16.5 * MILLION),
    AtLocation.WORK: int(16.5 * MILLION),
    AtLocation.GENERIC: int(16.5 * MILLION),
}

DEFAULT_SEEDS: Dict[AtLocation, int] = {
    AtLocation.SCHOOL: 100_000,
    AtLocation.HOME: 100_000,
    AtLocation.WORK: 100_000,
    AtLocation.GENERIC: 100_000,
}

import pytest

from seihcrd.agent import Person
from seihcrd.parameters import AgeComponent, DiseaseParameters, OutcomeRateTable
from seihcrd.probability import RandomSource
from seihcrd.states import AtLocation, HealthState


@pytest.fixture
def rng() -> RandomSource:
    """Seeded random source."""
    return RandomSource(1234)


@pytest.fixture
def params() -> DiseaseParameters:
    """Default disease parameters."""
    return DiseaseParameters()


def fixed_rates(hospitalization: float = 0.0, icu: float = 0.0,
                fatality: float = 0.0) -> OutcomeRateTable:
    """Outcome table with the same rate in every age group."""
    return OutcomeRateTable(
        hospitalization=(hospitalization,) * 9,
        icu=(icu,) * 9,
        fatality=(fatality,) * 9,
    )


def make_person(params: DiseaseParameters, rng: RandomSource,
                state: HealthState = HealthState.SUSCEPTIBLE, ts: int = 0,
                symptomatic: bool = True, age: int = 40,
                location: AtLocation = AtLocation.HOME) -> Person:
    """Person with traits pinned instead of drawn."""
    person = Person(location, state, ts, [AgeComponent(1.0, age, 1)], params, rng)
    person.age = age
    person.symptomatic = symptomatic
    person.isolate = False
    if symptomatic:
        person.latent_period = params.symptomatic_latent_period
    else:
        person.latent_period = params.asymptomatic_latent_period
    return person

"""Tests for seihcrd.agent: SEIHCRD state machine and infectiousness"""
import numpy as np
import pytest

from seihcrd.agent import Person
from seihcrd.parameters import AgeComponent, DiseaseParameters
from seihcrd.probability import RandomSource
from seihcrd.states import UNSET, AtLocation, HealthState, IllegalTransition

from conftest import fixed_rates, make_person

S, E, I, H, C, R, D = (
    HealthState.SUSCEPTIBLE, HealthState.EXPOSED, HealthState.INFECTIOUS,
    HealthState.HOSPITALIZED, HealthState.CRITICAL, HealthState.RECOVERED,
    HealthState.DECEASED,
)


def run_until(person, start, stop):
    for ts in range(start, stop + 1):
        person.status_update(ts)
    return person.health_status


# ═══════════════════════════════════════════════════════════════════════
# CREATION
# ═══════════════════════════════════════════════════════════════════════

def test_creation_stamps_initial_state(params, rng):
    person = Person(AtLocation.WORK, E, 7, [AgeComponent(1.0, 45, 8)], params, rng)
    assert person.health_status == E
    assert person.location == AtLocation.WORK
    assert person.record.get(E) == 7
    assert all(person.record.get(s) == UNSET for s in HealthState if s != E)
    assert person.age >= 0


def test_latent_period_follows_symptoms(params, rng):
    people = [Person(AtLocation.HOME, S, 0, [AgeComponent(1.0, 40, 20)], params, rng)
              for _ in range(300)]
    for p in people:
        if p.symptomatic:
            assert p.latent_period == params.symptomatic_latent_period
        else:
            assert p.latent_period == params.asymptomatic_latent_period
            assert not p.isolate
    share = np.mean([p.symptomatic for p in people])
    assert 0.5 < share < 0.8


# ═══════════════════════════════════════════════════════════════════════
# EXPOSED -> INFECTIOUS
# ═══════════════════════════════════════════════════════════════════════

def test_symptomatic_incubation(params, rng):
    person = make_person(params, rng, state=E, ts=0, symptomatic=True)
    assert run_until(person, 1, 50) == E
    assert person.status_update(51) == I
    assert person.record.get(I) == 51
    assert person.location == AtLocation.HOME


def test_asymptomatic_latent_period(params, rng):
    person = make_person(params, rng, state=E, ts=0, symptomatic=False)
    assert run_until(person, 1, 69) == E
    assert person.status_update(70) == I


def test_missed_timestamp_never_fires(params, rng):
    person = make_person(params, rng, state=E, ts=0, symptomatic=True)
    for ts in range(0, 200, 2):
        person.status_update(ts)
    assert person.health_status == E


# ═══════════════════════════════════════════════════════════════════════
# INFECTIOUS
# ═══════════════════════════════════════════════════════════════════════

def test_asymptomatic_recovers(rng):
    params = DiseaseParameters(outcome_rates=fixed_rates(fatality=0.0))
    person = make_person(params, rng, state=I, ts=0, symptomatic=False, location=AtLocation.SCHOOL)
    assert run_until(person, 1, 99) == I
    assert person.status_update(100) == R
    assert person.location == AtLocation.HOME


def test_asymptomatic_fatal(rng):
    params = DiseaseParameters(outcome_rates=fixed_rates(fatality=1.0))
    person = make_person(params, rng, state=I, ts=0, symptomatic=False)
    assert run_until(person, 1, 100) == D
    assert person.location == AtLocation.CEMETERY
    assert person.record.get(D) == 100


def test_symptomatic_hospitalized(rng):
    params = DiseaseParameters(outcome_rates=fixed_rates(hospitalization=1.0))
    person = make_person(params, rng, state=I, ts=0, symptomatic=True)
    assert run_until(person, 1, 49) == I
    assert person.status_update(50) == H
    assert person.location == AtLocation.HOSPITAL
    assert person.record.get(H) == 50


def test_symptomatic_mild_recovery(rng):
    params = DiseaseParameters(outcome_rates=fixed_rates(hospitalization=0.0))
    person = make_person(params, rng, state=I, ts=0, symptomatic=True)
    assert run_until(person, 1, 99) == I
    assert person.status_update(100) == R
    assert person.record.get(H) == UNSET


def test_admission_on_mild_recovery_tick(rng):
    # admission wins when both delays fall on the same tick
    params = DiseaseParameters(outcome_rates=fixed_rates(hospitalization=1.0),
                               hospitalization_delay=100, mild_recovery_duration=100)
    person = make_person(params, rng, state=I, ts=0, symptomatic=True)
    assert run_until(person, 1, 99) == I
    assert person.status_update(100) == H
    assert person.record.get(R) == UNSET
    assert person.location == AtLocation.HOSPITAL
    assert run_until(person, 101, 159) == H


# ═══════════════════════════════════════════════════════════════════════
# HOSPITALIZED / CRITICAL
# ═══════════════════════════════════════════════════════════════════════

def test_hospitalized_to_critical_to_deceased(rng):
    params = DiseaseParameters(outcome_rates=fixed_rates(icu=1.0), critical_death_prob=1.0)
    person = make_person(params, rng, state=H, ts=0)
    assert run_until(person, 1, 59) == H
    assert person.status_update(60) == C
    assert person.location == AtLocation.HOSPITAL
    assert run_until(person, 61, 159) == C
    assert person.status_update(160) == D
    assert person.location == AtLocation.CEMETERY


def test_critical_survives(rng):
    params = DiseaseParameters(critical_death_prob=0.0)
    person = make_person(params, rng, state=C, ts=0)
    assert run_until(person, 1, 100) == R
    assert person.location == AtLocation.HOME


def test_hospital_discharge(rng):
    params = DiseaseParameters(outcome_rates=fixed_rates(icu=0.0, fatality=0.0))
    person = make_person(params, rng, state=H, ts=0)
    assert run_until(person, 1, 79) == H
    assert person.status_update(80) == R


def test_hospital_death(rng):
    params = DiseaseParameters(outcome_rates=fixed_rates(icu=0.0, fatality=1.0))
    person = make_person(params, rng, state=H, ts=0)
    assert run_until(person, 1, 80) == D


# ═══════════════════════════════════════════════════════════════════════
# TERMINAL AND ILLEGAL
# ═══════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("state", [S, R, D])
def test_no_op_states(params, rng, state):
    person = make_person(params, rng, state=state, ts=0)
    assert run_until(person, 1, 300) == state


def test_illegal_transitions(params, rng):
    person = make_person(params, rng, state=S)
    with pytest.raises(IllegalTransition):
        person.recover(0)
    person = make_person(params, rng, state=R)
    with pytest.raises(IllegalTransition):
        person.expose(0)


# ═══════════════════════════════════════════════════════════════════════
# INFECTIOUSNESS
# ═══════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("state", [S, R, D])
def test_not_infectious(params, rng, state):
    person = make_person(params, rng, state=state)
    assert all(person.infectiousness(ts) == 0 for ts in range(200))


def test_asymptomatic_exposed_not_infectious(params, rng):
    person = make_person(params, rng, state=E, symptomatic=False)
    assert all(person.infectiousness(ts) == 0 for ts in range(200))


def test_presymptomatic_infectiousness(params, rng):
    person = make_person(params, rng, state=E, ts=0, symptomatic=True)
    assert person.infectiousness(46) == 0
    assert person.infectiousness(47) > 0


@pytest.mark.parametrize("state", [I, H, C])
@pytest.mark.parametrize("symptomatic, expected, tol", [(True, 1.5, 0.2), (False, 1.0, 0.15)])
def test_mean_infectiousness(params, rng, state, symptomatic, expected, tol):
    person = make_person(params, rng, state=state, symptomatic=symptomatic)
    mean = np.mean([person.infectiousness(1) for _ in range(5000)])
    assert mean == pytest.approx(expected, abs=tol)


def test_supplied_draw_is_used(params, rng):
    sym = make_person(params, rng, state=I, symptomatic=True)
    asym = make_person(params, rng, state=C, symptomatic=False)
    assert sym.infectiousness(1, 2.0) == pytest.approx(3.0)
    assert asym.infectiousness(1, 2.0) == pytest.approx(2.0)


def test_supplied_draw_respects_latent_period(params, rng):
    person = make_person(params, rng, state=E, ts=0, symptomatic=True)
    assert person.infectiousness(46, 2.0) == 0
    assert person.infectiousness(47, 2.0) == pytest.approx(2.0)
    susceptible = make_person(params, rng, state=S)
    assert susceptible.infectiousness(47, 2.0) == 0


def test_under_exposed(params, rng):
    person = make_person(params, rng, state=S)
    assert not person.under_exposed(1.0, 0.0, 3)
    assert person.under_exposed(1.0, 1.0, 3)
    assert person.health_status == E
    assert person.record.get(E) == 3


def test_copy_is_independent(params, rng):
    person = make_person(params, rng, state=E, ts=0, symptomatic=True)
    other_rng = RandomSource(99)
    clone = person.copy(rng=other_rng)
    assert clone is not person
    assert clone.rng is other_rng
    assert clone.params is person.params
    assert (clone.age, clone.symptomatic, clone.latent_period) == (40, True, 46)
    run_until(clone, 1, 51)
    assert clone.health_status == I
    assert person.health_status == E
    assert person.record.get(I) == UNSET


def test_describe(params, rng):
    person = make_person(params, rng, state=E, ts=0, symptomatic=True)
    run_until(person, 1, 51)
    info = person.describe()
    assert info["health_status"] == "INFECTIOUS"
    assert info["visited"] == [("EXPOSED", 0), ("INFECTIOUS", 51)]

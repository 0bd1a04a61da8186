"""Tests for seihcrd.utils.plotting"""
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import pytest

from seihcrd.experiments import run_scenario
from seihcrd.parameters import DiseaseParameters
from seihcrd.utils.plotting import plot_policy_outcomes, plot_state_timeseries


@pytest.fixture
def results():
    return run_scenario(seed=4, susceptible=10, seeds=1, end=20, report_interval=5,
                        params=DiseaseParameters(per_capita_contacts=4))


def test_plot_state_timeseries(results):
    ax = plot_state_timeseries(results)
    assert len(ax.get_lines()) == 7
    plt.close(ax.figure)


def test_plot_selected_states(results):
    ax = plot_state_timeseries(results, location="HOME", states=["SUSCEPTIBLE", "EXPOSED"])
    assert [line.get_label() for line in ax.get_lines()] == ["Susceptible", "Exposed"]
    plt.close(ax.figure)


def test_plot_unknown_location(results):
    with pytest.raises(ValueError, match="No rows"):
        plot_state_timeseries(results, location="MOON")


def test_plot_policy_outcomes():
    sweep = pd.DataFrame({"policy": ["a", "a", "b"], "attack_rate": [0.1, 0.2, 0.05]})
    ax = plot_policy_outcomes(sweep)
    assert [t.get_text() for t in ax.get_xticklabels()] == ["a", "b"]
    plt.close(ax.figure)

"""
===========================================================
plotting.py
Last Updated: 2026-10-19
===========================================================
Visualization functions for SEIHCRD simulations
======================================================
Provides functions for:
- Per-state time series from Simulation.results()
- Comparison of replicate outcomes across policies

License: MIT
===========================================================
"""
import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.axes import Axes
from typing import Optional, Sequence

from ..simulation import TOTAL_LABEL
from ..states import HealthState

STATE_COLORS = {
    "SUSCEPTIBLE": "tab:blue",
    "EXPOSED": "tab:olive",
    "INFECTIOUS": "tab:red",
    "HOSPITALIZED": "tab:orange",
    "CRITICAL": "tab:purple",
    "RECOVERED": "tab:green",
    "DECEASED": "black",
}


def plot_state_timeseries(results: pd.DataFrame,
                          location: str = TOTAL_LABEL,
                          states: Optional[Sequence[str]] = None,
                          ax: Optional[Axes] = None,
                          title: Optional[str] = None,
                          save_path: Optional[str] = None) -> Axes:
    """Plot state counts over time for one location.
    Parameters:
    results: pd.DataFrame. Output of Simulation.results()
    location: str. Location label, or "ALL" for the aggregate
    states: Sequence[str], optional. States to draw (default: all seven)
    ax: Axes, optional. Axes to draw on; a new figure is created if None
    title: str, optional. Plot title
    save_path: str, optional. Path to save figure
    """
    sub = results[results["location"] == location]
    if sub.empty:
        raise ValueError(f"No rows for location '{location}'")
    states = list(states) if states is not None else [s.name for s in HealthState]

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 6))

    for state in states:
        ax.plot(sub["time"], sub[state], linewidth=2, label=state.title(),
                color=STATE_COLORS.get(state))

    ax.set_xlabel('Time (ticks)', fontsize=12)
    ax.set_ylabel('Number of individuals', fontsize=12)
    ax.set_title(title if title else f'SEIHCRD dynamics ({location})', fontsize=14)
    ax.legend(loc='best', fontsize=10)
    ax.grid(True, alpha=0.3)

    if save_path:
        ax.figure.savefig(save_path, dpi=300, bbox_inches='tight')
    return ax


def plot_policy_outcomes(sweep: pd.DataFrame, value: str = "attack_rate",
                         ax: Optional[Axes] = None) -> Axes:
    """Box plot of one outcome per policy from experiments.policy_sweep()"""
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    names = list(dict.fromkeys(sweep["policy"]))
    data = [sweep.loc[sweep["policy"] == name, value].to_numpy() for name in names]
    ax.boxplot(data)
    ax.set_xticks(range(1, len(names) + 1))
    ax.set_xticklabels(names)
    ax.set_ylabel(value.replace("_", " ").title())
    ax.grid(alpha=0.25)
    return ax

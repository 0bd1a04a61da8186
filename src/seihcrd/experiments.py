"""
===========================================================
experiments.py
Last Updated: 2026-10-19
===========================================================

Description:
    Scenario helpers and replicate sweeps for the SEIHCRD
    agent-based model: build the four-location scenario,
    run it, repeat it over derived seeds or over a set of
    NPI policies, and tidy the outcomes as DataFrames.

Example Usage:
    from seihcrd.experiments import run_replicates, policy_sweep
    df = run_replicates(n_runs=5, seed=1, susceptible=500, seeds=5, end=300)
    df = policy_sweep({"none": NPI(), "lockdown": NPI(0, .75, .75, .75, .7)})

Notes:
    - Outcomes are read from the aggregate ("ALL") rows.
-----------------------------------------------------------
License: MIT
===========================================================
"""

import numpy as np
import pandas as pd
from typing import Dict, List, Optional

from .location import Location
from .parameters import DiseaseParameters
from .policy import NPI
from .probability import RandomSource
from .simulation import TOTAL_LABEL, Simulation
from .states import AtLocation

SCENARIO_KINDS = (AtLocation.HOME, AtLocation.WORK, AtLocation.SCHOOL, AtLocation.GENERIC)


def default_scenario(susceptible: int = 16_500, seeds: int = 100,
                     npi_policy: Optional[NPI] = None,
                     params: Optional[DiseaseParameters] = None,
                     rng: Optional[RandomSource] = None) -> List[Location]:
    """Home, work, school and generic locations of equal size sharing one random source"""
    rng = rng if rng is not None else RandomSource()
    params = params if params is not None else DiseaseParameters()
    return [
        Location(kind, susceptible, seeds, npi_policy=npi_policy, params=params, rng=rng)
        for kind in SCENARIO_KINDS
    ]


def run_scenario(end: int = 700, step: int = 1, report_interval: int = 50,
                 seed: Optional[int] = None, **scenario) -> pd.DataFrame:
    """Run default_scenario(**scenario) and return Simulation.results()"""
    locations = default_scenario(rng=RandomSource(seed), **scenario)
    sim = Simulation(0, end, step, report_interval)
    sim.start(locations)
    return sim.results()


def _summarize_one(results: pd.DataFrame) -> Dict[str, float]:
    """Outcome statistics of one run from its aggregate rows"""
    total = results[results["location"] == TOTAL_LABEL].reset_index(drop=True)
    final = total.iloc[-1]
    population = float(final.drop(["time", "location"]).sum())

    peak_idx = int(np.argmax(total["INFECTIOUS"].to_numpy()))
    return {
        "population": population,
        "peak_time": float(total.loc[peak_idx, "time"]),
        "peak_infectious": float(total.loc[peak_idx, "INFECTIOUS"]),
        "final_recovered": float(final["RECOVERED"]),
        "final_deceased": float(final["DECEASED"]),
        "attack_rate": float((population - final["SUSCEPTIBLE"]) / population) if population else 0.0,
    }


def run_replicates(n_runs: int = 10, seed: int = 0, **kwargs) -> pd.DataFrame:
    """
    Repeat a scenario with seeds derived from `seed`. Returns one row
    per run with the outcome statistics.
    """
    rs = np.random.default_rng(seed)
    rows = []
    for r in range(n_runs):
        run_seed = int(rs.integers(0, 2**31 - 1))
        out = _summarize_one(run_scenario(seed=run_seed, **kwargs))
        out.update(dict(run=r, seed=run_seed))
        rows.append(out)
    return pd.DataFrame(rows)


def policy_sweep(policies: Dict[str, NPI], n_runs: int = 5, seed: int = 0,
                 **kwargs) -> pd.DataFrame:
    """Replicates for each named NPI policy, tidy with a `policy` column"""
    frames = []
    for name, policy in policies.items():
        df = run_replicates(n_runs=n_runs, seed=seed, npi_policy=policy, **kwargs)
        df.insert(0, "policy", name)
        frames.append(df)
    return pd.concat(frames, ignore_index=True)


if __name__ == "__main__":
    import logging

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    results = run_scenario(end=700, step=1, report_interval=50)
    print(results[results["location"] == TOTAL_LABEL].to_string(index=False))

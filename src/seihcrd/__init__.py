"""SEIHCRD agent-based epidemic simulator."""
from .agent import Person
from .location import Location, contact
from .parameters import DAY, AgeComponent, DiseaseParameters, OutcomeRateTable, RateCategory
from .policy import NPI, TransmissionProbability
from .probability import InvalidMixture, RandomSource, seed_default
from .simulation import Checkpoint, Simulation
from .states import AtLocation, HealthState, IllegalTransition, TransitionRecord
from .summary import LocationSummary, Summary, aggregate

__version__ = "0.1.0"

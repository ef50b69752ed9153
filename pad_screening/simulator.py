# Cohort simulator: annual binomial draws over a shrinking at-risk pool

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np

from .errors import ConfigurationError, SimulationError
from .parameters import ParameterSet
from .variants import DEATH, DEATH_MODE_HORIZON_SCALED, STRATEGIES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearSnapshot:
    """Cohort state at the end of a simulated year. Counts are cumulative."""
    year: int
    strategy: str
    age: int
    living_count: int
    event_counts: Mapping[str, int]

    @property
    def deaths(self) -> int:
        return self.event_counts.get(DEATH, 0)

    def as_record(self) -> Dict[str, Any]:
        record = {
            'year': self.year,
            'strategy': self.strategy,
            'age': self.age,
            'living_count': self.living_count,
        }
        record.update(self.event_counts)
        return record


def resolve_random_source(seed_or_source: Union[None, int, Any] = None) -> Any:
    """
    Return an object exposing `binomial(n, p)`.

    Integers (and None) seed a fresh numpy Generator; anything that already
    draws binomials is passed through untouched.
    """
    if seed_or_source is None or isinstance(seed_or_source, (int, np.integer)):
        return np.random.default_rng(seed_or_source)
    if not callable(getattr(seed_or_source, 'binomial', None)):
        raise ConfigurationError(f"Random source must expose binomial(n, p), got {seed_or_source!r}")
    return seed_or_source


def _draw(random_source: Any, pool: int, p: float, label: str) -> int:
    count = int(random_source.binomial(pool, p)) if pool > 0 and p > 0.0 else 0
    if count < 0 or count > pool:
        raise SimulationError(f"{label}: drew {count} from a pool of {pool}")
    return count


def _death_probability(parameters: ParameterSet, strategy: str, year: int, horizon: int) -> float:
    p_death = parameters.probability(strategy, DEATH)
    if parameters.variant.death_mode != DEATH_MODE_HORIZON_SCALED:
        return p_death
    # Whole-horizon approximation, drawn once in the first year. Scaled by the
    # requested horizon even when retirement age ends the run sooner.
    if year > 1:
        return 0.0
    scaled = p_death * horizon
    if scaled > 1.0:
        raise SimulationError(
            f"Horizon-scaled death probability {p_death} x {horizon} years = {scaled:.3f} exceeds 1"
        )
    return scaled


def simulate_history(strategy: str,
                     horizon: int,
                     parameters: ParameterSet,
                     random_source: Any) -> List[YearSnapshot]:
    """Advance the cohort year by year and return one snapshot per completed year."""
    if strategy not in STRATEGIES:
        raise ConfigurationError(f"Unknown strategy {strategy!r}; expected one of {STRATEGIES}")
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)) or horizon < 1:
        raise ConfigurationError(f"horizon must be a positive integer, got {horizon!r}")
    horizon = int(horizon)
    if random_source is None:
        raise ConfigurationError("A seed or random source is required")
    random_source = resolve_random_source(random_source)

    cohort_size = parameters.cohort_size
    sequence = parameters.variant.event_sequence

    living_count = cohort_size
    cumulative: Dict[str, int] = {kind: 0 for kind in parameters.variant.event_kinds}
    current_age = parameters.base_age
    year = 0
    history: List[YearSnapshot] = []

    while current_age < parameters.retirement_age and year < horizon:
        year += 1
        at_risk = living_count

        deaths = _draw(random_source, at_risk,
                       _death_probability(parameters, strategy, year, horizon),
                       f"{strategy} year {year} {DEATH}")
        drawn = {DEATH: deaths}
        pool = at_risk - deaths
        for kind in sequence:
            count = _draw(random_source, pool, parameters.probability(strategy, kind),
                          f"{strategy} year {year} {kind}")
            drawn[kind] = count
            pool -= count
        if pool < 0:
            raise SimulationError(f"{strategy} year {year}: at-risk pool went negative ({pool})")

        living_count -= deaths
        if living_count < 0:
            raise SimulationError(f"{strategy} year {year}: living count went negative ({living_count})")
        for kind, count in drawn.items():
            cumulative[kind] += count
            if cumulative[kind] > cohort_size:
                raise SimulationError(
                    f"{strategy} year {year}: cumulative {kind} count {cumulative[kind]} "
                    f"exceeds cohort size {cohort_size}"
                )
        current_age += 1

        history.append(YearSnapshot(
            year=year,
            strategy=strategy,
            age=current_age,
            living_count=living_count,
            event_counts=MappingProxyType(dict(cumulative)),
        ))
        logger.debug("%s year %d: alive=%d drawn=%s", strategy, year, living_count, drawn)

    return history


def simulate(strategy: str,
             horizon: int,
             parameters: ParameterSet,
             random_source: Any) -> YearSnapshot:
    """
    Run one strategy up to `horizon` years and return the last snapshot.

    The snapshot's `year` is earlier than `horizon` when the cohort reaches
    retirement age first.
    """
    history = simulate_history(strategy, horizon, parameters, random_source)
    final: Optional[YearSnapshot] = history[-1] if history else None
    if final is None:
        raise SimulationError(f"{strategy}: no year could be simulated")
    if final.year < horizon:
        logger.debug("%s: horizon %d truncated to %d years at retirement age", strategy, horizon, final.year)
    return final

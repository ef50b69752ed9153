# Outcome aggregator: cumulative event counts -> costs and QALYs

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError
from .parameters import ParameterSet
from .simulator import YearSnapshot
from .variants import DEATH, PERSPECTIVES, SCREEN, SOCIETAL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioResult:
    """Costs and QALYs of one strategy at one horizon under one perspective."""
    strategy: str
    horizon: int
    years: int
    perspective: str
    cohort_size: int
    living_count: int
    event_counts: Mapping[str, int]
    treatment_cost: float
    event_cost: float
    preventive_care_cost: float
    productivity_loss: float
    welfare_loss: float
    societal_cost: float
    total_cost: float
    qaly: float
    monetized_qaly: Optional[float] = None
    productivity_gain: Optional[float] = None
    welfare_gain: Optional[float] = None
    net_benefit: Optional[float] = None

    @property
    def deaths(self) -> int:
        return self.event_counts.get(DEATH, 0)

    def as_record(self) -> Dict[str, Any]:
        record = {
            'strategy': self.strategy,
            'horizon': self.horizon,
            'years': self.years,
            'perspective': self.perspective,
            'cohort_size': self.cohort_size,
            'living_count': self.living_count,
        }
        record.update({f'count_{kind}': count for kind, count in self.event_counts.items()})
        record.update({
            'treatment_cost': self.treatment_cost,
            'event_cost': self.event_cost,
            'preventive_care_cost': self.preventive_care_cost,
            'productivity_loss': self.productivity_loss,
            'welfare_loss': self.welfare_loss,
            'societal_cost': self.societal_cost,
            'total_cost': self.total_cost,
            'qaly': self.qaly,
            'monetized_qaly': self.monetized_qaly,
            'productivity_gain': self.productivity_gain,
            'welfare_gain': self.welfare_gain,
            'net_benefit': self.net_benefit,
        })
        return record


def _treatment_cost(parameters: ParameterSet, strategy: str, perspective: str, years: int) -> float:
    if strategy != SCREEN:
        return 0.0
    cost = parameters.cost('screening', perspective) * parameters.cohort_size
    if parameters.variant.medication:
        cost += (parameters.cost('medication', perspective)
                 * parameters.pad_prevalence
                 * parameters.cohort_size
                 * years)
    return cost


def _event_cost(parameters: ParameterSet, snapshot: YearSnapshot, perspective: str) -> float:
    total = 0.0
    for kind in parameters.variant.event_sequence:
        total += snapshot.event_counts[kind] * parameters.cost(kind, perspective)
    # End-of-life cost is optional
    total += snapshot.deaths * parameters.cost(DEATH, perspective, default=0.0)
    return total


def _qaly(parameters: ParameterSet, snapshot: YearSnapshot) -> float:
    """
    Survivor person-years at baseline utility, less the utility decrement of
    each event and a flat baseline-utility subtraction per death.
    """
    u_base = parameters.baseline_utility
    qaly = snapshot.living_count * u_base * snapshot.year
    for kind in parameters.variant.event_sequence:
        qaly -= snapshot.event_counts[kind] * parameters.utility_decrement(kind)
    qaly -= snapshot.deaths * u_base
    return qaly


def aggregate(snapshot: YearSnapshot,
              strategy: str,
              horizon: int,
              perspective: str,
              parameters: ParameterSet) -> ScenarioResult:
    """Deterministically derive costs and QALYs from a simulated snapshot."""
    if perspective not in PERSPECTIVES:
        raise ConfigurationError(f"Unknown perspective {perspective!r}; expected one of {PERSPECTIVES}")
    if snapshot.strategy != strategy:
        raise ConfigurationError(
            f"Snapshot was simulated for '{snapshot.strategy}', not '{strategy}'"
        )
    variant = parameters.variant
    years = snapshot.year

    treatment_cost = _treatment_cost(parameters, strategy, perspective, years)
    event_cost = _event_cost(parameters, snapshot, perspective)

    preventive_care_cost = 0.0
    if variant.preventive_care and strategy == SCREEN:
        preventive_care_cost = (parameters.cost('preventive_care', perspective, default=0.0)
                                * snapshot.living_count
                                * years)

    productivity_loss = 0.0
    welfare_loss = 0.0
    if perspective == SOCIETAL:
        remaining_years = max(0, parameters.retirement_age - snapshot.age)
        productivity_loss = snapshot.deaths * parameters.cost('productivity_loss', perspective) * remaining_years
        welfare_loss = snapshot.deaths * parameters.cost('welfare_cost', perspective) * remaining_years
    societal_cost = productivity_loss + welfare_loss

    total_cost = treatment_cost + event_cost + preventive_care_cost + societal_cost
    qaly = _qaly(parameters, snapshot)

    monetized_qaly = productivity_gain = welfare_gain = net_benefit = None
    if variant.monetize_qaly:
        monetized_qaly = qaly * parameters.willingness_to_pay
        productivity_gain = 0.0
        welfare_gain = 0.0
        if perspective == SOCIETAL:
            productivity_gain = snapshot.living_count * parameters.cost('productivity_gain', perspective) * years
            welfare_gain = snapshot.living_count * parameters.cost('welfare_gain', perspective) * years
        net_benefit = monetized_qaly - total_cost + productivity_gain + welfare_gain

    logger.debug("%s/%s horizon %d: total_cost=%.2f qaly=%.2f",
                 strategy, perspective, horizon, total_cost, qaly)

    return ScenarioResult(
        strategy=strategy,
        horizon=horizon,
        years=years,
        perspective=perspective,
        cohort_size=parameters.cohort_size,
        living_count=snapshot.living_count,
        event_counts=snapshot.event_counts,
        treatment_cost=treatment_cost,
        event_cost=event_cost,
        preventive_care_cost=preventive_care_cost,
        productivity_loss=productivity_loss,
        welfare_loss=welfare_loss,
        societal_cost=societal_cost,
        total_cost=total_cost,
        qaly=qaly,
        monetized_qaly=monetized_qaly,
        productivity_gain=productivity_gain,
        welfare_gain=welfare_gain,
        net_benefit=net_benefit,
    )

# Comparative analyzer: screen vs no_screen across horizons and perspectives

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import ConfigurationError
from .outcomes import ScenarioResult, aggregate
from .parameters import ParameterSet
from .simulator import YearSnapshot, resolve_random_source, simulate, simulate_history
from .variants import DEATH, NO_SCREEN, PERSPECTIVES, SCREEN, STRATEGIES

logger = logging.getLogger(__name__)


def averted_label(event_kind: str) -> str:
    """Column name for the count of an event averted by screening."""
    return 'deaths_averted' if event_kind == DEATH else f'{event_kind}_averted'


@dataclass(frozen=True)
class ComparisonRow:
    """
    Screening minus no-screening outcomes for one (horizon, perspective).

    Averted counts, cost savings, QALY and net-benefit gains are divided by the
    cohort size and multiplied by `reporting_base`; `icer` is left unscaled.
    """
    horizon: int
    perspective: str
    years: int
    reporting_base: float
    events_averted: Mapping[str, float]
    cost_savings: float
    qaly_gained: float
    icer: float
    screen: ScenarioResult
    control: ScenarioResult
    net_benefit_gain: Optional[float] = None

    def as_record(self) -> Dict[str, Any]:
        record = {
            'horizon': self.horizon,
            'perspective': self.perspective,
            'years': self.years,
            'reporting_base': self.reporting_base,
        }
        record.update(self.events_averted)
        record.update({
            'cost_savings': self.cost_savings,
            'qaly_gained': self.qaly_gained,
            'net_benefit_gain': self.net_benefit_gain,
            'icer': self.icer,
            'screen_total_cost': self.screen.total_cost,
            'no_screen_total_cost': self.control.total_cost,
            'screen_qaly': self.screen.qaly,
            'no_screen_qaly': self.control.qaly,
        })
        return record


def incremental_cost_effectiveness(screen: ScenarioResult, control: ScenarioResult) -> float:
    """Incremental cost per QALY gained; NaN when the QALYs do not differ."""
    delta_cost = screen.total_cost - control.total_cost
    delta_qaly = screen.qaly - control.qaly
    return delta_cost / delta_qaly if delta_qaly != 0 else np.nan


def difference(screen: ScenarioResult,
               control: ScenarioResult,
               parameters: ParameterSet) -> ComparisonRow:
    """Difference two scenario results and normalise them per capita."""
    scale = parameters.variant.reporting_base / parameters.cohort_size

    events_averted = {
        averted_label(kind): (control.event_counts[kind] - screen.event_counts[kind]) * scale
        for kind in parameters.variant.event_kinds
    }
    net_benefit_gain = None
    if screen.net_benefit is not None and control.net_benefit is not None:
        net_benefit_gain = (screen.net_benefit - control.net_benefit) * scale

    return ComparisonRow(
        horizon=screen.horizon,
        perspective=screen.perspective,
        years=screen.years,
        reporting_base=parameters.variant.reporting_base,
        events_averted=events_averted,
        cost_savings=(control.total_cost - screen.total_cost) * scale,
        qaly_gained=(screen.qaly - control.qaly) * scale,
        icer=incremental_cost_effectiveness(screen, control),
        screen=screen,
        control=control,
        net_benefit_gain=net_benefit_gain,
    )


def compare(horizons: Optional[Iterable[int]] = None,
            perspectives: Optional[Iterable[str]] = None,
            parameters: Optional[ParameterSet] = None,
            random_source: Any = None) -> List[ComparisonRow]:
    """
    Run both strategies for every (horizon, perspective) and difference them.

    Rows come back horizon-major, in the order requested. Any error aborts
    the whole comparison.
    """
    if parameters is None:
        raise ConfigurationError("compare() needs a ParameterSet")
    if random_source is None:
        raise ConfigurationError("compare() needs a seeded random source")
    # One generator shared by every run, so an int seed is not re-applied per run
    random_source = resolve_random_source(random_source)
    horizons = list(parameters.horizons if horizons is None else horizons)
    perspectives = list(parameters.perspectives if perspectives is None else perspectives)
    if not horizons:
        raise ConfigurationError("At least one horizon is required")
    for horizon in horizons:
        if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)) or horizon < 1:
            raise ConfigurationError(f"horizon must be a positive integer, got {horizon!r}")
    unknown = [p for p in perspectives if p not in PERSPECTIVES]
    if unknown or not perspectives:
        raise ConfigurationError(f"Unknown or missing perspectives {unknown}; expected some of {PERSPECTIVES}")

    rows: List[ComparisonRow] = []
    for horizon in horizons:
        for perspective in perspectives:
            results = {}
            for strategy in (SCREEN, NO_SCREEN):
                snapshot = simulate(strategy, int(horizon), parameters, random_source)
                results[strategy] = aggregate(snapshot, strategy, int(horizon), perspective, parameters)
            row = difference(results[SCREEN], results[NO_SCREEN], parameters)
            logger.info("horizon %d (%d years simulated), %s: cost_savings=%.2f qaly_gained=%.4f",
                        horizon, row.years, perspective, row.cost_savings, row.qaly_gained)
            rows.append(row)
    return rows


def simulate_strategy_histories(horizon: int,
                                parameters: ParameterSet,
                                random_source: Any) -> Dict[str, List[YearSnapshot]]:
    """Year-by-year histories of both strategies, for survivorship charts."""
    random_source = resolve_random_source(random_source)
    return {
        strategy: simulate_history(strategy, horizon, parameters, random_source)
        for strategy in STRATEGIES
    }


def comparison_to_dataframe(rows: Sequence[ComparisonRow]) -> pd.DataFrame:
    """One row per ComparisonRow, in input order."""
    return pd.DataFrame([row.as_record() for row in rows])


def scenarios_to_dataframe(rows: Sequence[ComparisonRow]) -> pd.DataFrame:
    """Both underlying ScenarioResults of each comparison, screen first."""
    records = []
    for row in rows:
        records.append(row.screen.as_record())
        records.append(row.control.as_record())
    return pd.DataFrame(records)


def history_to_dataframe(histories: Mapping[str, Sequence[YearSnapshot]]) -> pd.DataFrame:
    """Tidy per-year frame across strategies."""
    records = [snapshot.as_record() for snapshots in histories.values() for snapshot in snapshots]
    return pd.DataFrame(records)

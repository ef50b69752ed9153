# Immutable, validated parameter set shared by every model component

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .errors import ConfigurationError
from .variants import (
    DEATH,
    PERSPECTIVES,
    STRATEGIES,
    ModelVariant,
    get_variant,
)

REQUIRED_CONFIG_KEYS = (
    'variant',
    'cohort_size',
    'base_age',
    'retirement_age',
    'transition_probabilities',
    'costs',
    'utilities',
)


def _frozen(mapping: Mapping) -> Mapping:
    """Read-only copy of a (possibly nested) mapping."""
    return MappingProxyType({
        key: _frozen(value) if isinstance(value, Mapping) else value
        for key, value in mapping.items()
    })


def _as_probability(value: Any, label: str) -> float:
    try:
        p = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{label} must be a number, got {value!r}") from None
    if not math.isfinite(p) or p < 0.0 or p > 1.0:
        raise ConfigurationError(f"{label} must lie in [0, 1], got {value!r}")
    return p


def _as_amount(value: Any, label: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{label} must be a number, got {value!r}") from None
    if not math.isfinite(amount) or amount < 0.0:
        raise ConfigurationError(f"{label} must be a non-negative amount, got {value!r}")
    return amount


def _as_int(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or int(value) != value:
        raise ConfigurationError(f"{label} must be an integer, got {value!r}")
    return int(value)


def _as_positive_int(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value or value <= 0:
        raise ConfigurationError(f"{label} must be a positive integer, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class ParameterSet:
    """
    Static configuration for one model run.

    Every mapping is read-only once constructed. Construction validates the
    whole set, so an instance that exists is safe to simulate.
    """
    variant: ModelVariant
    cohort_size: int
    base_age: int
    retirement_age: int
    transition_probabilities: Mapping[str, Mapping[str, float]]
    unit_costs: Mapping[str, float]
    utility_weights: Mapping[str, float]
    perspective_costs: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    horizons: Tuple[int, ...] = (5, 10, 15)
    perspectives: Tuple[str, ...] = ('medicaid',)
    pad_prevalence: float = 0.0
    willingness_to_pay: float = 0.0

    def __post_init__(self):
        if not isinstance(self.variant, ModelVariant):
            raise ConfigurationError(f"variant must be a ModelVariant, got {self.variant!r}")
        object.__setattr__(self, 'cohort_size', _as_positive_int(self.cohort_size, 'cohort_size'))
        base_age = _as_int(self.base_age, 'base_age')
        retirement_age = _as_int(self.retirement_age, 'retirement_age')
        if retirement_age <= base_age:
            raise ConfigurationError(
                f"retirement_age ({retirement_age}) must be greater than base_age ({base_age})"
            )
        object.__setattr__(self, 'base_age', base_age)
        object.__setattr__(self, 'retirement_age', retirement_age)

        object.__setattr__(self, 'horizons',
                           tuple(_as_positive_int(h, 'horizon') for h in self.horizons))
        perspectives = tuple(self.perspectives)
        if not perspectives:
            raise ConfigurationError("at least one perspective is required")
        unknown = [p for p in perspectives if p not in PERSPECTIVES]
        if unknown:
            raise ConfigurationError(f"Unknown perspectives {unknown}; expected one of {PERSPECTIVES}")
        object.__setattr__(self, 'perspectives', perspectives)

        object.__setattr__(self, 'transition_probabilities', _frozen(self._validated_probabilities()))
        object.__setattr__(self, 'unit_costs', _frozen(self._validated_costs()))
        object.__setattr__(self, 'perspective_costs', _frozen(self._validated_perspective_costs()))
        object.__setattr__(self, 'utility_weights', _frozen(self._validated_utilities()))
        object.__setattr__(self, 'pad_prevalence',
                           _as_probability(self.pad_prevalence, 'pad_prevalence'))
        object.__setattr__(self, 'willingness_to_pay',
                           _as_amount(self.willingness_to_pay, 'willingness_to_pay'))

    def _validated_probabilities(self) -> Dict[str, Dict[str, float]]:
        probabilities = self.transition_probabilities or {}
        missing_strategies = [s for s in STRATEGIES if s not in probabilities]
        if missing_strategies:
            raise ConfigurationError(f"Missing transition probabilities for strategies: {missing_strategies}")
        validated: Dict[str, Dict[str, float]] = {}
        for strategy in STRATEGIES:
            table = probabilities[strategy] or {}
            missing = [kind for kind in self.variant.event_kinds if kind not in table]
            if missing:
                raise ConfigurationError(
                    f"Missing {strategy} probabilities for event kinds {missing} "
                    f"(variant '{self.variant.name}')"
                )
            validated[strategy] = {
                kind: _as_probability(table[kind], f"{strategy}.{kind} probability")
                for kind in self.variant.event_kinds
            }
        return validated

    def _validated_costs(self) -> Dict[str, float]:
        costs = dict(self.unit_costs or {})
        missing = [c for c in self.variant.required_costs(self.perspectives) if c not in costs]
        if missing:
            raise ConfigurationError(
                f"Missing unit costs {missing} required by variant '{self.variant.name}'"
            )
        return {category: _as_amount(amount, f"cost '{category}'") for category, amount in costs.items()}

    def _validated_perspective_costs(self) -> Dict[str, Dict[str, float]]:
        validated: Dict[str, Dict[str, float]] = {}
        for perspective, overrides in (self.perspective_costs or {}).items():
            if perspective not in PERSPECTIVES:
                raise ConfigurationError(f"Cost overrides given for unknown perspective '{perspective}'")
            validated[perspective] = {
                category: _as_amount(amount, f"{perspective} cost '{category}'")
                for category, amount in (overrides or {}).items()
            }
        return validated

    def _validated_utilities(self) -> Dict[str, float]:
        utilities = self.utility_weights or {}
        order = self.variant.severity_order
        missing = [state for state in order if state not in utilities]
        if missing:
            raise ConfigurationError(
                f"Missing utility weights for health states {missing} (variant '{self.variant.name}')"
            )
        validated = {state: _as_probability(utilities[state], f"utility '{state}'") for state in order}
        if validated[self.variant.baseline_state] != 1.0:
            raise ConfigurationError(f"utility '{self.variant.baseline_state}' must be 1.0")
        if validated[DEATH] != 0.0:
            raise ConfigurationError("utility 'death' must be 0.0")
        for milder, worse in zip(order, order[1:]):
            if validated[worse] > validated[milder]:
                raise ConfigurationError(
                    f"Utility weights must not increase with severity: "
                    f"'{worse}' ({validated[worse]}) > '{milder}' ({validated[milder]})"
                )
        return validated

    @property
    def max_years(self) -> int:
        """Longest simulable horizon."""
        return self.retirement_age - self.base_age

    @property
    def baseline_utility(self) -> float:
        return self.utility_weights[self.variant.baseline_state]

    def probability(self, strategy: str, event_kind: str) -> float:
        return self.transition_probabilities[strategy][event_kind]

    def utility_decrement(self, event_kind: str) -> float:
        """QALY weight lost by one occurrence of the event, relative to baseline."""
        state = self.variant.state_for_event(event_kind)
        return self.baseline_utility - self.utility_weights[state]

    def cost(self, category: str, perspective: str, default: Optional[float] = None) -> float:
        """Unit cost for a category, with perspective-specific overrides applied."""
        overrides = self.perspective_costs.get(perspective, {})
        if category in overrides:
            return overrides[category]
        if category in self.unit_costs:
            return self.unit_costs[category]
        if default is not None:
            return default
        raise ConfigurationError(f"No unit cost configured for '{category}'")


def build_parameter_set(config: dict) -> ParameterSet:
    """Validate a nested configuration dictionary and freeze it into a ParameterSet."""
    missing_keys = [key for key in REQUIRED_CONFIG_KEYS if key not in config]
    if missing_keys:
        raise ConfigurationError(f"Missing required config keys: {missing_keys}")

    variant = config['variant']
    if not isinstance(variant, ModelVariant):
        resolved = get_variant(variant)
        if resolved is None:
            raise ConfigurationError(f"Unknown model variant {variant!r}")
        variant = resolved

    return ParameterSet(
        variant=variant,
        cohort_size=config['cohort_size'],
        base_age=config['base_age'],
        retirement_age=config['retirement_age'],
        transition_probabilities=config['transition_probabilities'],
        unit_costs=config['costs'],
        utility_weights=config['utilities'],
        perspective_costs=config.get('perspective_costs') or {},
        horizons=tuple(config.get('horizons', (5, 10, 15))),
        perspectives=tuple(config.get('perspectives', ('medicaid',))),
        pad_prevalence=config.get('pad_prevalence', 0.0),
        willingness_to_pay=config.get('willingness_to_pay', 0.0),
    )


def _flatten(prefix: str, value: Any, out: Dict[str, Any]) -> None:
    if isinstance(value, Mapping):
        for key, nested in value.items():
            _flatten(f"{prefix}.{key}" if prefix else str(key), nested, out)
    elif isinstance(value, (tuple, list)):
        out[prefix] = ', '.join(str(v) for v in value)
    else:
        out[prefix] = value


def flatten_parameters(parameters: ParameterSet) -> Dict[str, Any]:
    """Dotted key -> value dump of a ParameterSet, in a stable order."""
    flat: Dict[str, Any] = {}
    sections: Iterable[Tuple[str, Any]] = (
        ('variant', parameters.variant.name),
        ('cohort_size', parameters.cohort_size),
        ('base_age', parameters.base_age),
        ('retirement_age', parameters.retirement_age),
        ('horizons', parameters.horizons),
        ('perspectives', parameters.perspectives),
        ('pad_prevalence', parameters.pad_prevalence),
        ('willingness_to_pay', parameters.willingness_to_pay),
        ('transition_probabilities', parameters.transition_probabilities),
        ('costs', parameters.unit_costs),
        ('perspective_costs', parameters.perspective_costs),
        ('utilities', parameters.utility_weights),
    )
    for key, value in sections:
        _flatten(key, value, flat)
    return flat

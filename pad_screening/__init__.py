# PAD screening cost-effectiveness model

from .analysis import ComparisonRow, compare, comparison_to_dataframe, history_to_dataframe
from .errors import ConfigurationError, ModelError, SimulationError
from .outcomes import ScenarioResult, aggregate
from .parameters import ParameterSet, build_parameter_set, flatten_parameters
from .simulator import YearSnapshot, resolve_random_source, simulate, simulate_history
from .variants import BASIC_VARIANT, STAGED_VARIANT, ModelVariant

__version__ = "0.1.0"

__all__ = [
    'BASIC_VARIANT',
    'STAGED_VARIANT',
    'ComparisonRow',
    'ConfigurationError',
    'ModelError',
    'ModelVariant',
    'ParameterSet',
    'ScenarioResult',
    'SimulationError',
    'YearSnapshot',
    'aggregate',
    'build_parameter_set',
    'compare',
    'comparison_to_dataframe',
    'flatten_parameters',
    'history_to_dataframe',
    'resolve_random_source',
    'simulate',
    'simulate_history',
]

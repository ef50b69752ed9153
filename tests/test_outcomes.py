import numpy as np
import pytest

from pad_screening.errors import ConfigurationError
from pad_screening.outcomes import aggregate
from pad_screening.parameters import build_parameter_set
from pad_screening.simulator import YearSnapshot, simulate

from conftest import make_config, zero_probabilities


@pytest.fixture
def small_basic(basic_cfg):
    return build_parameter_set(make_config(basic_cfg, cohort_size=1000))


@pytest.fixture
def small_staged(staged_cfg):
    return build_parameter_set(make_config(staged_cfg, cohort_size=1000))


def basic_snapshot(strategy='screen'):
    return YearSnapshot(
        year=10,
        strategy=strategy,
        age=60,
        living_count=900,
        event_counts={'death': 100, 'mace': 50, 'amputation': 20, 'revasc': 30},
    )


def staged_snapshot(strategy='screen'):
    return YearSnapshot(
        year=5,
        strategy=strategy,
        age=55,
        living_count=950,
        event_counts={
            'death': 50,
            'no_pad_to_asx': 10,
            'asx_to_sx': 20,
            'sx_to_cli': 5,
            'cli_to_amp': 2,
            'mace': 15,
            'esrd': 3,
        },
    )


def test_basic_medicaid(small_basic):
    result = aggregate(basic_snapshot(), 'screen', 10, 'medicaid', small_basic)
    assert result.treatment_cost == 200.0 * 1000
    assert result.event_cost == 50 * 25000 + 20 * 45000 + 30 * 30000
    assert result.societal_cost == 0.0
    assert result.total_cost == 3250000.0
    assert result.qaly == pytest.approx(9000 - 50 * 0.25 - 20 * 0.40 - 30 * 0.15 - 100)
    assert result.monetized_qaly is None
    assert result.net_benefit is None


def test_basic_societal_adds_lost_productive_years(small_basic):
    result = aggregate(basic_snapshot(), 'screen', 10, 'societal', small_basic)
    assert result.event_cost == 50 * 32000 + 20 * 60000 + 30 * 34000
    assert result.productivity_loss == 100 * 45000 * 8
    assert result.welfare_loss == 100 * 12000 * 8
    assert result.total_cost == pytest.approx(200000 + 3820000 + 36000000 + 9600000)


def test_no_screen_has_no_treatment_cost(small_basic):
    result = aggregate(basic_snapshot('no_screen'), 'no_screen', 10, 'medicaid', small_basic)
    assert result.treatment_cost == 0.0
    assert result.total_cost == result.event_cost


def test_remaining_productive_years_never_negative(small_basic):
    snapshot = YearSnapshot(year=18, strategy='screen', age=68, living_count=900,
                            event_counts={'death': 100, 'mace': 0, 'amputation': 0, 'revasc': 0})
    result = aggregate(snapshot, 'screen', 20, 'societal', small_basic)
    assert result.societal_cost == 0.0


def test_preventive_care_charged_per_living_person_year(basic_cfg):
    basic_cfg['costs']['preventive_care'] = 50.0
    parameters = build_parameter_set(make_config(basic_cfg, cohort_size=1000))
    result = aggregate(basic_snapshot(), 'screen', 10, 'medicaid', parameters)
    assert result.preventive_care_cost == 50.0 * 900 * 10
    assert result.total_cost == 3250000.0 + 450000.0
    control = aggregate(basic_snapshot('no_screen'), 'no_screen', 10, 'medicaid', parameters)
    assert control.preventive_care_cost == 0.0


def test_death_cost_is_optional(basic_cfg):
    basic_cfg['costs']['death'] = 1000.0
    parameters = build_parameter_set(make_config(basic_cfg, cohort_size=1000))
    result = aggregate(basic_snapshot(), 'screen', 10, 'medicaid', parameters)
    assert result.event_cost == 3050000.0 + 100 * 1000.0


def test_staged_medicaid(small_staged):
    result = aggregate(staged_snapshot(), 'screen', 5, 'medicaid', small_staged)
    assert result.treatment_cost == pytest.approx(150 * 1000 + 600 * 0.12 * 1000 * 5)
    assert result.event_cost == 885000.0
    assert result.total_cost == pytest.approx(1395000.0)
    assert result.qaly == pytest.approx(4687.4)
    assert result.monetized_qaly == pytest.approx(4687.4 * 100000)
    assert result.productivity_gain == 0.0
    assert result.welfare_gain == 0.0
    assert result.net_benefit == pytest.approx(468740000.0 - 1395000.0)


def test_staged_societal_gains(small_staged):
    result = aggregate(staged_snapshot(), 'screen', 5, 'societal', small_staged)
    assert result.productivity_gain == 950 * 1500 * 5
    assert result.welfare_gain == 950 * 500 * 5
    assert result.net_benefit == pytest.approx(
        result.monetized_qaly - result.total_cost + 7125000 + 2375000
    )


def test_example_scenario_treatment_cost(basic_parameters):
    snapshot = simulate('screen', 15, basic_parameters, np.random.default_rng(8))
    result = aggregate(snapshot, 'screen', 15, 'medicaid', basic_parameters)
    assert result.treatment_cost == 20000000.0
    assert result.total_cost == pytest.approx(result.treatment_cost + result.event_cost)


@pytest.mark.parametrize("cfg_name", ["basic_cfg", "staged_cfg"])
@pytest.mark.parametrize("perspective", ["medicaid", "societal"])
def test_zero_probabilities(request, cfg_name, perspective):
    parameters = build_parameter_set(zero_probabilities(request.getfixturevalue(cfg_name)))
    snapshot = simulate('screen', 10, parameters, np.random.default_rng(0))
    result = aggregate(snapshot, 'screen', 10, perspective, parameters)
    assert result.living_count == parameters.cohort_size
    assert result.qaly == parameters.cohort_size * parameters.baseline_utility * 10
    assert result.total_cost == result.treatment_cost


def test_aggregate_is_deterministic(small_staged):
    first = aggregate(staged_snapshot(), 'screen', 5, 'societal', small_staged)
    second = aggregate(staged_snapshot(), 'screen', 5, 'societal', small_staged)
    assert first == second


def test_rejects_unknown_perspective_and_mismatched_strategy(small_basic):
    with pytest.raises(ConfigurationError):
        aggregate(basic_snapshot(), 'screen', 10, 'hospital', small_basic)
    with pytest.raises(ConfigurationError):
        aggregate(basic_snapshot('no_screen'), 'screen', 10, 'medicaid', small_basic)

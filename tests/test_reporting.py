import numpy as np
import pandas as pd
import pytest

from pad_screening import reporting
from pad_screening.__main__ import main
from pad_screening.analysis import compare, history_to_dataframe, simulate_strategy_histories


@pytest.fixture
def basic_rows(basic_parameters):
    return compare([5, 10], ['medicaid', 'societal'], basic_parameters, np.random.default_rng(4))


def test_export_writes_parameters_and_results(tmp_path, basic_rows, basic_parameters):
    path = tmp_path / "out" / "results.xlsx"
    reporting.export_results_to_excel(basic_rows, basic_parameters, path)
    sheets = pd.read_excel(path, sheet_name=None)
    assert {"Parameters", "Results", "Scenarios"} <= set(sheets)

    params = sheets["Parameters"]
    assert list(params.columns) == ["parameter", "value"]
    assert "costs.screening" in set(params["parameter"])

    results = sheets["Results"]
    assert len(results) == len(basic_rows)
    assert list(results["perspective"]) == ["medicaid", "societal", "medicaid", "societal"]
    assert len(sheets["Scenarios"]) == 2 * len(basic_rows)


def test_export_skips_empty_results(tmp_path, basic_parameters, capsys):
    path = tmp_path / "empty.xlsx"
    assert reporting.export_results_to_excel([], basic_parameters, path) is None
    assert not path.exists()
    assert "nothing exported" in capsys.readouterr().out


def test_plots_are_saved(tmp_path, basic_rows, basic_parameters):
    histories = simulate_strategy_histories(10, basic_parameters, np.random.default_rng(4))
    survival_path = tmp_path / "survival.png"
    reporting.plot_survival_by_strategy(history_to_dataframe(histories), save_path=survival_path)
    assert survival_path.exists()

    metric_path = tmp_path / "savings.png"
    reporting.plot_metric_by_horizon(basic_rows, 'cost_savings', save_path=metric_path)
    assert metric_path.exists()


def test_plot_skips_unknown_metric(tmp_path, basic_rows, capsys):
    reporting.plot_metric_by_horizon(basic_rows, 'not_a_metric', save_path=tmp_path / "x.png")
    assert not (tmp_path / "x.png").exists()
    assert "skipping" in capsys.readouterr().out


def test_print_comparison(basic_rows, capsys):
    reporting.print_comparison(basic_rows)
    out = capsys.readouterr().out
    assert "Horizon 5 [medicaid]" in out
    assert "deaths_averted" in out
    assert "per 1,000" in out


def test_cli_runs_staged_variant(tmp_path, capsys):
    output = tmp_path / "staged.xlsx"
    code = main(["--variant", "staged", "--seed", "3", "--output", str(output),
                 "--plots", str(tmp_path / "plots")])
    assert code == 0
    assert output.exists()
    assert (tmp_path / "plots" / "survival_by_strategy.png").exists()
    assert "Net benefit gain" in capsys.readouterr().out

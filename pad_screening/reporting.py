# Console notes, charts and workbook export for computed comparison results

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .analysis import ComparisonRow, comparison_to_dataframe, scenarios_to_dataframe
from .parameters import ParameterSet, flatten_parameters
from .variants import STRATEGIES


def _basis_label(reporting_base: float) -> str:
    return "per person" if reporting_base == 1 else f"per {reporting_base:,.0f}"


def print_comparison(rows: Sequence[ComparisonRow]) -> None:
    if not rows:
        print("No comparison results available")
        return

    for row in rows:
        basis = _basis_label(row.reporting_base)
        years_note = f"{row.years} years" if row.years == row.horizon else f"{row.years} years (capped at retirement)"
        print(f"Horizon {row.horizon} [{row.perspective}], {years_note}, {basis}:")
        for label, value in row.events_averted.items():
            print(f"  {label}: {value:.2f}")
        print(f"  Cost savings: {row.cost_savings:,.2f}")
        print(f"  QALYs gained: {row.qaly_gained:.4f}")
        if row.net_benefit_gain is not None:
            print(f"  Net benefit gain: {row.net_benefit_gain:,.2f}")
        if np.isnan(row.icer):
            print("  ICER: NaN")
        else:
            print(f"  ICER (cost per QALY gained): {row.icer:,.0f}")


def save_or_show(save_path, show=False, label="plot"):
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    plt.close()
    print(f"Saved {label} to {save_path.resolve()}")


def plot_survival_by_strategy(history_df: pd.DataFrame,
                              save_path="plots/survival_by_strategy.png",
                              show=False):
    """Living cohort members at the end of each simulated year, per strategy."""
    if history_df is None or history_df.empty:
        print("No history data available; skipping survival plot.")
        return

    plt.figure()
    for strategy, linestyle in zip(STRATEGIES, ("-", "--")):
        subset = history_df[history_df['strategy'] == strategy].sort_values('year')
        if subset.empty:
            continue
        plt.plot(subset['year'], subset['living_count'], marker="o", linestyle=linestyle, label=strategy)
    plt.xlabel('Year')
    plt.ylabel('Living cohort members')
    plt.title('Cohort survivorship by strategy')
    plt.legend()
    plt.grid(True, alpha=0.3)
    save_or_show(save_path, show, label="survival by strategy")


def plot_metric_by_horizon(rows: Sequence[ComparisonRow],
                           metric: str = 'cost_savings',
                           save_path=None,
                           show=False):
    """One line per perspective of a ComparisonRow column against horizon."""
    df = comparison_to_dataframe(rows)
    if df.empty or metric not in df.columns:
        print(f"No '{metric}' results available; skipping horizon plot.")
        return
    if save_path is None:
        save_path = f"plots/{metric}_by_horizon.png"

    basis = _basis_label(rows[0].reporting_base)
    plt.figure()
    for perspective, subset in df.groupby('perspective', sort=False):
        plt.plot(subset['horizon'], subset[metric], marker="o", linestyle="-", label=perspective)
    plt.xlabel('Horizon (years)')
    plt.ylabel(f"{metric.replace('_', ' ')} ({basis})")
    plt.title(f"{metric.replace('_', ' ').capitalize()} by horizon")
    plt.legend()
    plt.grid(True, alpha=0.3)
    save_or_show(save_path, show, label=f"{metric} by horizon")


def export_results_to_excel(rows: Sequence[ComparisonRow],
                            parameters: ParameterSet,
                            path="pad_screening_results.xlsx"):
    results_df = comparison_to_dataframe(rows)
    if results_df.empty:
        print("No comparison results available; nothing exported.")
        return

    params_df = pd.DataFrame(
        list(flatten_parameters(parameters).items()), columns=["parameter", "value"]
    )
    # Mixed types do not round-trip through one Excel column
    params_df['value'] = params_df['value'].astype(str)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        params_df.to_excel(writer, sheet_name="Parameters", index=False)
        results_df.to_excel(writer, sheet_name="Results", index=False)
        scenarios_df = scenarios_to_dataframe(rows)
        if not scenarios_df.empty:
            scenarios_df.to_excel(writer, sheet_name="Scenarios", index=False)

    print(f"Saved comparison results to {path}")
    return path

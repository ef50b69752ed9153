# Run & output

import argparse
import logging
import sys
from typing import List, Optional

from . import reporting
from .analysis import compare, history_to_dataframe, simulate_strategy_histories
from .config import basic_config, staged_config
from .errors import ModelError
from .parameters import build_parameter_set
from .simulator import resolve_random_source

CONFIGS = {
    'basic': basic_config,
    'staged': staged_config,
}

RUN_SEED = 42


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pad_screening",
        description="Cost-effectiveness of PAD screening versus no screening.",
    )
    parser.add_argument("--variant", choices=sorted(CONFIGS), default="basic")
    parser.add_argument("--seed", type=int, default=RUN_SEED)
    parser.add_argument("--output", default=None, help="workbook path for the Parameters/Results export")
    parser.add_argument("--plots", default=None, help="directory for charts")
    parser.add_argument("--show", action="store_true", help="also display charts on screen")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        parameters = build_parameter_set(CONFIGS[args.variant])
        random_source = resolve_random_source(args.seed)
        rows = compare(parameters=parameters, random_source=random_source)
        histories = None
        if args.plots:
            histories = simulate_strategy_histories(max(parameters.horizons), parameters, random_source)
    except ModelError as exc:
        print(f"Model run failed: {exc}", file=sys.stderr)
        return 2

    reporting.print_comparison(rows)

    if args.plots:
        reporting.plot_survival_by_strategy(
            history_to_dataframe(histories),
            save_path=f"{args.plots}/survival_by_strategy.png",
            show=args.show,
        )
        for metric in ('cost_savings', 'qaly_gained'):
            reporting.plot_metric_by_horizon(
                rows, metric, save_path=f"{args.plots}/{metric}_by_horizon.png", show=args.show
            )

    if args.output:
        reporting.export_results_to_excel(rows, parameters, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

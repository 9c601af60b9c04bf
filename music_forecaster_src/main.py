# music_forecaster_src/main.py

"""
Short-horizon forecasts of monthly listening metrics per entity.

Purpose
-------
- Load a monthly CSV (``name,YYYY-MM-DD,value``) for one dataset category
  (country spending, genre, artist, album or track play counts)
- Group rows per entity and sort them chronologically
- Forecast the next 3 months for every entity with at least 6 months of
  history, using a pluggable backend (SSA by default)
- Print recent actuals and predictions per entity and write all successful
  forecasts to ``<output-dir>/<category>_forecast.json``

Usage
-----
    python forecaster_music.py --category 1
    python -m music_forecaster_src.main --category genre --input data/genres.csv
    python forecaster_music.py              # prompts for the category
"""

import argparse
import logging
import warnings
from pathlib import Path
from typing import Callable, List, Optional

from .config_utils import (
    CATEGORIES, CATEGORY_DESCRIPTIONS, CategorySpec, ForecastConfig,
    build_forecast_config, resolve_category
)
from .data_utils import group_records, load_records
from .file_utils import resolve_path, write_forecasts_json
from .forecasting_utils import Forecaster, get_forecaster
from .parsing_utils import validate_backend, validate_log_level
from .pipeline_utils import EntityOutcome, run_forecasts, successful_results
from .report_utils import Marker, emit, report_loaded, report_outcome, report_summary

logger = logging.getLogger(__name__)


def prompt_category(input_func: Optional[Callable[[str], str]] = None) -> str:
    """Ask the user which dataset to forecast and return the raw answer."""
    input_func = input_func or input
    print("What would you like to forecast?")
    for key in sorted(CATEGORIES):
        print(f"{key} - {CATEGORY_DESCRIPTIONS[key]}")
    keys = "/".join(sorted(CATEGORIES))
    return input_func(f"Enter choice ({keys}): ").strip()


def run_forecast_workflow(input_path: Path,
                          category: CategorySpec,
                          output_dir: Path,
                          forecaster: Forecaster,
                          config: Optional[ForecastConfig] = None,
                          figures_dir: Optional[Path] = None,
                          show_progress: bool = False) -> Optional[Path]:
    """
    Execute the full load → group → forecast → report → write pipeline.

    Parameters
    ----------
    input_path : Path
        Category CSV; the first line is a header
    category : CategorySpec
        Selected dataset category (label, unit, output filename)
    output_dir : Path
        Directory receiving the JSON file (created if missing)
    forecaster : Forecaster
        Backend used for every entity
    config : Optional[ForecastConfig]
        Forecast parameters; defaults to ForecastConfig()
    figures_dir : Optional[Path]
        If provided, one PNG per successful entity is written here
    show_progress : bool, default=False
        Display a tqdm progress bar over entities

    Returns
    -------
    Optional[Path]
        Path of the written JSON file, or None when no entity was forecast.

    Raises
    ------
    SystemExit
        If the input file does not exist.
    """
    config = config or ForecastConfig()
    logger.info("Starting %s forecast with backend '%s' from: %s", category.label, forecaster.name, input_path)

    records = load_records(input_path)
    groups = group_records(records)
    report_loaded(len(groups), category)

    def _on_outcome(outcome: EntityOutcome) -> None:
        report_outcome(outcome, category)
        if figures_dir is not None and outcome.succeeded:
            from .plotting_utils import save_forecast_figure
            try:
                save_forecast_figure(groups[outcome.name], outcome.result, category, figures_dir)
            except Exception as e:
                logger.warning("Failed to save figure for %s: %s", outcome.name, e)

    outcomes = run_forecasts(groups, forecaster, category, config,
                             on_outcome=_on_outcome, show_progress=show_progress)
    results = successful_results(outcomes)

    if not results:
        report_summary(0, category, None)
        return None

    output_path = write_forecasts_json(results, output_dir / category.output_file)
    report_summary(len(results), category, output_path)
    return output_path


def setup_cli_parser() -> argparse.ArgumentParser:
    """Set up the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Forecast the next months of play counts, spending or listening share per entity."
    )
    parser.add_argument(
        "--category", type=str, default=None,
        help="Dataset category: " + ", ".join(f"{k}/{v.label.lower()}" for k, v in sorted(CATEGORIES.items()))
             + ". Prompts interactively when omitted."
    )
    parser.add_argument(
        "--input", type=str, default=None,
        help="Input CSV path. Defaults to the category's file in --data-dir."
    )
    parser.add_argument(
        "--data-dir", type=str, default=".",
        help="Directory holding the category CSV files."
    )
    parser.add_argument(
        "--output-dir", type=str, default="forecast",
        help="Directory to write the forecast JSON file."
    )
    parser.add_argument(
        "--figures-dir", type=str, default=None,
        help="If provided, write one forecast figure per entity to this directory."
    )
    parser.add_argument(
        "--backend", type=str, default="ssa", choices=["ssa", "sarimax", "moving_average"],
        help="Forecasting backend."
    )
    parser.add_argument(
        "--horizon", type=int, default=None,
        help="Number of months to forecast (default 3)."
    )
    parser.add_argument(
        "--min-observations", type=int, default=None,
        help="Minimum months of history required to forecast an entity (default 6)."
    )
    parser.add_argument(
        "--progress", action="store_true", default=False,
        help="Show a progress bar over entities."
    )
    parser.add_argument(
        "--log-level", type=str, default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity level."
    )
    return parser


def setup_logging(log_level: str) -> None:
    """
    Configure logging with specified level and warning filters.

    Parameters
    ----------
    log_level : str
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = validate_log_level(log_level)
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if level == "DEBUG":
        warnings.resetwarnings()
        warnings.filterwarnings("default")
    else:
        try:
            from statsmodels.tools.sm_exceptions import ConvergenceWarning
            warnings.filterwarnings("ignore", category=ConvergenceWarning)
        except ImportError:
            pass
        warnings.filterwarnings("ignore", category=FutureWarning)
        warnings.filterwarnings("ignore", category=UserWarning, module="statsmodels")


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the forecasting application.

    An invalid category or a missing input file ends the run with a message
    and no output file.
    """
    parser = setup_cli_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    choice = args.category if args.category is not None else prompt_category()
    category = resolve_category(choice)
    if category is None:
        emit(Marker.ERROR, "Invalid choice. Exiting.")
        raise SystemExit(1)

    cwd = Path.cwd()
    if args.input:
        input_path = resolve_path(args.input, cwd)
    else:
        input_path = resolve_path(args.data_dir, cwd) / category.input_file
    output_dir = resolve_path(args.output_dir, cwd)
    figures_dir = resolve_path(args.figures_dir, cwd) if args.figures_dir else None

    if not input_path.is_file():
        emit(Marker.ERROR, f"File not found: {input_path}")
        raise SystemExit(1)

    forecaster = get_forecaster(validate_backend(args.backend))
    config = build_forecast_config(args)

    run_forecast_workflow(
        input_path=input_path,
        category=category,
        output_dir=output_dir,
        forecaster=forecaster,
        config=config,
        figures_dir=figures_dir,
        show_progress=args.progress,
    )


if __name__ == "__main__":
    main()

# music_forecaster_src/__init__.py

"""
Music Forecaster - Monthly Listening Metric Forecasting Package

Forecasts the next months of play counts, spending or listening share for
every entity (artist, album, track, country, genre) in a monthly CSV.

Key Components
--------------
- config_utils: Dataset categories and forecast parameters
- parsing_utils: CSV record parsing and CLI value validation
- data_utils: Record loading and per-entity grouping
- forecasting_utils: Forecaster interface and backends (SSA, SARIMAX, moving average)
- pipeline_utils: Per-entity forecast loop with tagged outcomes
- report_utils: Console presentation
- file_utils: JSON output and path helpers
- plotting_utils: Optional per-entity forecast figures
- main: Main entry point and workflow orchestration

Usage
-----
    # Command-line usage
    python -m music_forecaster_src.main --category 1

    # Programmatic usage
    from music_forecaster_src import run_forecast_workflow, get_forecaster
"""

__version__ = "1.0.0"

from .config_utils import CATEGORIES, CategorySpec, ForecastConfig, resolve_category
from .parsing_utils import Record, parse_record_line, parse_records
from .data_utils import group_records, load_records
from .forecasting_utils import (
    ForecastError, Forecaster, SsaForecaster, SarimaxForecaster,
    MovingAverageForecaster, get_forecaster
)
from .pipeline_utils import (
    EntityStatus, EntityOutcome, ForecastResult, run_forecasts, successful_results
)
from .file_utils import write_forecasts_json, read_forecasts_json
from .main import run_forecast_workflow

__all__ = [
    "run_forecast_workflow",
    "CATEGORIES",
    "CategorySpec",
    "ForecastConfig",
    "resolve_category",
    "Record",
    "parse_record_line",
    "parse_records",
    "group_records",
    "load_records",
    "ForecastError",
    "Forecaster",
    "SsaForecaster",
    "SarimaxForecaster",
    "MovingAverageForecaster",
    "get_forecaster",
    "EntityStatus",
    "EntityOutcome",
    "ForecastResult",
    "run_forecasts",
    "successful_results",
    "write_forecasts_json",
    "read_forecasts_json",
    "__version__",
]

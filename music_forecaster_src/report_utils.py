# music_forecaster_src/report_utils.py

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from tqdm.auto import tqdm

from .config_utils import CategorySpec
from .pipeline_utils import MONTH_FORMAT, EntityOutcome, EntityStatus, ForecastResult

logger = logging.getLogger(__name__)


class Marker(Enum):
    """Prefix attached to every console line."""
    INFO = "[INFO]"
    SKIP = "[SKIP]"
    WARNING = "[WARN]"
    ERROR = "[ERROR]"
    SUCCESS = "[OK]"


def emit(marker: Marker, message: str) -> None:
    """Print a console line; routed through tqdm so an active progress bar stays intact."""
    tqdm.write(f"{marker.value} {message}")


def format_actual(value: float) -> str:
    """
    Render an observed value without trailing zeros.

    Examples
    --------
    >>> format_actual(10.0)
    '10'
    >>> format_actual(12.5)
    '12.5'
    """
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def format_forecast_block(result: ForecastResult, category: CategorySpec) -> List[str]:
    """Human-readable lines for one successful forecast (recent actuals, then predictions)."""
    lines = [f"Forecast for {category.label} {result.name}:", "Recent Actual Values:"]
    for rec in result.last_known:
        lines.append(f"  {rec.date.strftime(MONTH_FORMAT)}: {format_actual(rec.value)} {category.unit}")
    lines.append(f"Predicted Next {len(result.forecast)} Months:")
    for month, value in result.forecast:
        lines.append(f"  {month.strftime(MONTH_FORMAT)}: {value:.0f} {category.unit}")
    return lines


def report_loaded(n_entities: int, category: CategorySpec) -> None:
    emit(Marker.INFO, f"Loaded data for {n_entities} unique {category.label}(s).")


def report_outcome(outcome: EntityOutcome, category: CategorySpec) -> None:
    """Print the notice or forecast block matching an entity's outcome."""
    if outcome.status is EntityStatus.SKIPPED_INSUFFICIENT_DATA:
        emit(Marker.SKIP, f"Skipping {outcome.name} (only {outcome.n_observations} months of data)")
    elif outcome.status is EntityStatus.FORECAST_FAILED:
        emit(Marker.ERROR, f"Error forecasting {outcome.name}: {outcome.error}")
    else:
        lines = format_forecast_block(outcome.result, category)
        emit(Marker.SUCCESS, lines[0])
        for line in lines[1:]:
            tqdm.write(line)


def report_summary(n_succeeded: int, category: CategorySpec, output_path: Optional[Path]) -> None:
    """Closing lines: the empty-result warning, or the success count and output location."""
    if n_succeeded == 0:
        emit(Marker.WARNING, "No forecast was generated. All entries were skipped (probably not enough data).")
        return
    emit(Marker.SUCCESS, f"Forecasts completed for {n_succeeded} {category.label}(s).")
    if output_path is not None:
        emit(Marker.INFO, f"All forecasts saved to: {output_path}")

# music_forecaster_src/plotting_utils.py

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
from pathlib import Path
from typing import Sequence
import logging

from .config_utils import CategorySpec
from .data_utils import records_to_series
from .file_utils import ensure_dir, safe_filename
from .parsing_utils import Record
from .pipeline_utils import ForecastResult

logger = logging.getLogger(__name__)


def plot_entity_forecast(series: Sequence[Record],
                         result: ForecastResult,
                         category: CategorySpec,
                         out_path: Path) -> None:
    """
    Save a line plot of an entity's history followed by its forecast.

    Parameters
    ----------
    series : Sequence[Record]
        Full observed series, sorted by date
    result : ForecastResult
        Forecast produced for the same entity
    category : CategorySpec
        Supplies the axis unit and title label
    out_path : Path
        PNG destination (parents are created if missing)
    """
    ensure_dir(out_path.parent)
    actual = records_to_series(series)
    idx = pd.DatetimeIndex([pd.Timestamp(month) for month, _ in result.forecast])
    predicted = pd.Series([value for _, value in result.forecast], index=idx)

    # Join the forecast line to the last actual point
    bridge = pd.concat([actual.iloc[-1:], predicted])

    fig, ax = plt.subplots()
    ax.plot(actual.index, actual.values, color="black", linewidth=1.5, marker="o", label="actual")
    ax.plot(bridge.index, bridge.values, color="tab:red", linestyle="--", marker="o", label="forecast")
    ax.set_ylabel(category.unit)
    ax.set_title(f"{category.label} {result.name}")
    ax.legend()
    fig.autofmt_xdate()
    plt.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def save_forecast_figure(series: Sequence[Record],
                         result: ForecastResult,
                         category: CategorySpec,
                         figures_dir: Path) -> Path:
    """Plot one entity into ``figures_dir`` and return the file path."""
    out_path = figures_dir / f"{category.label.lower()}_{safe_filename(result.name)}.png"
    plot_entity_forecast(series, result, category, out_path)
    logger.debug("Saved forecast figure: %s", out_path)
    return out_path

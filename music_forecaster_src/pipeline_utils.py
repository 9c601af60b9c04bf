# music_forecaster_src/pipeline_utils.py

"""
Per-entity forecasting loop.

Every entity moves from pending to exactly one terminal state:
skipped (not enough history), failed (backend raised ForecastError) or
succeeded. Outcomes are returned as tagged values rather than exceptions,
so one failing entity never stops the rest of the run.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd
from tqdm.auto import tqdm

from .config_utils import CategorySpec, ForecastConfig
from .data_utils import series_values
from .forecasting_utils import ForecastError, Forecaster
from .parsing_utils import Record

logger = logging.getLogger(__name__)

MONTH_FORMAT = "%Y-%m"


class EntityStatus(Enum):
    """Terminal state of one entity's forecast attempt."""
    SKIPPED_INSUFFICIENT_DATA = "skipped"
    FORECAST_FAILED = "failed"
    FORECAST_SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class ForecastResult:
    """Recent actuals and predicted months for one entity."""
    name: str
    category: str
    last_known: Tuple[Record, ...]
    forecast: Tuple[Tuple[date, float], ...]

    def to_dict(self) -> Dict[str, object]:
        """Serializable form; months are rendered as ``YYYY-MM``."""
        return {
            "Name": self.name,
            "Category": self.category,
            "LastKnown": [
                {"Date": r.date.strftime(MONTH_FORMAT), "Value": r.value} for r in self.last_known
            ],
            "Forecast": [
                {"Month": month.strftime(MONTH_FORMAT), "PredictedValue": value}
                for month, value in self.forecast
            ],
        }


@dataclass(frozen=True)
class EntityOutcome:
    """Tagged result of processing one entity."""
    name: str
    status: EntityStatus
    n_observations: int
    result: Optional[ForecastResult] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is EntityStatus.FORECAST_SUCCEEDED


def add_months(when: date, months: int) -> date:
    """
    Shift a date by whole months, clamping the day to the target month's end.

    Examples
    --------
    >>> add_months(date(2023, 11, 1), 2)
    datetime.date(2024, 1, 1)
    >>> add_months(date(2023, 1, 31), 1)
    datetime.date(2023, 2, 28)
    """
    return (pd.Timestamp(when) + pd.DateOffset(months=months)).date()


def forecast_entity(name: str,
                    series: Sequence[Record],
                    forecaster: Forecaster,
                    category: CategorySpec,
                    config: ForecastConfig) -> EntityOutcome:
    """
    Run one entity through the skip / forecast / fail decision.

    Parameters
    ----------
    name : str
        Entity name
    series : Sequence[Record]
        Observations sorted ascending by date
    forecaster : Forecaster
        Backend producing ``config.horizon`` values
    category : CategorySpec
        Category whose label is attached to the result
    config : ForecastConfig
        Fixed forecasting parameters

    Returns
    -------
    EntityOutcome
        Exactly one terminal outcome. Only ForecastError from the backend is
        contained; anything else propagates.
    """
    n_obs = len(series)
    if n_obs < config.min_observations:
        return EntityOutcome(name, EntityStatus.SKIPPED_INSUFFICIENT_DATA, n_obs)

    try:
        predicted = list(forecaster.predict(series_values(series), config))
        if len(predicted) != config.horizon:
            raise ForecastError(f"expected {config.horizon} values, backend returned {len(predicted)}")
    except ForecastError as e:
        logger.debug("Forecast failed for %s: %s", name, e)
        return EntityOutcome(name, EntityStatus.FORECAST_FAILED, n_obs, error=str(e))

    last_date = series[-1].date
    forecast = tuple(
        (add_months(last_date, step), float(value)) for step, value in enumerate(predicted, start=1)
    )
    result = ForecastResult(
        name=name,
        category=category.label,
        last_known=tuple(series[-config.last_known:]),
        forecast=forecast,
    )
    return EntityOutcome(name, EntityStatus.FORECAST_SUCCEEDED, n_obs, result=result)


def run_forecasts(groups: Dict[str, List[Record]],
                  forecaster: Forecaster,
                  category: CategorySpec,
                  config: ForecastConfig,
                  on_outcome: Optional[Callable[[EntityOutcome], None]] = None,
                  show_progress: bool = False) -> List[EntityOutcome]:
    """
    Forecast every entity in iteration order.

    ``on_outcome`` is called with each outcome before the next entity starts,
    so presentation stays interleaved with processing.
    """
    outcomes: List[EntityOutcome] = []
    for name, series in tqdm(groups.items(), desc="Forecasting", total=len(groups),
                             disable=not show_progress):
        outcome = forecast_entity(name, series, forecaster, category, config)
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)

    counts = {s: sum(1 for o in outcomes if o.status is s) for s in EntityStatus}
    logger.info(
        "Processed %d entities: %d succeeded, %d skipped, %d failed",
        len(outcomes),
        counts[EntityStatus.FORECAST_SUCCEEDED],
        counts[EntityStatus.SKIPPED_INSUFFICIENT_DATA],
        counts[EntityStatus.FORECAST_FAILED],
    )
    return outcomes


def successful_results(outcomes: Sequence[EntityOutcome]) -> List[ForecastResult]:
    """ForecastResults of the succeeded outcomes, in iteration order."""
    return [o.result for o in outcomes if o.succeeded and o.result is not None]

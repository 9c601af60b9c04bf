from datetime import date
from typing import List

import pytest

from music_forecaster_src.config_utils import CATEGORIES, ForecastConfig
from music_forecaster_src.forecasting_utils import ForecastError, Forecaster
from music_forecaster_src.parsing_utils import Record
from music_forecaster_src.pipeline_utils import (
    EntityStatus, add_months, forecast_entity, run_forecasts, successful_results
)

GENRE = CATEGORIES["2"]
CONFIG = ForecastConfig()


class StubForecaster(Forecaster):
    """Returns last value + step; fails for names listed in ``fail_for``."""

    name = "stub"

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.calls: List[int] = []

    def predict(self, series, config):
        self.calls.append(len(series))
        if series[0] in self.fail_for:
            raise ForecastError("insufficient variance")
        return [float(series[-1]) + step for step in range(1, config.horizon + 1)]


def monthly(name, n, start=date(2023, 1, 1), first_value=10.0):
    return [Record(name, add_months(start, i), first_value + i) for i in range(n)]


def test_add_months_rolls_over_year_and_clamps_day():
    assert add_months(date(2023, 12, 1), 1) == date(2024, 1, 1)
    assert add_months(date(2023, 11, 30), 3) == date(2024, 2, 29)


def test_short_series_skipped_without_calling_backend():
    stub = StubForecaster()
    outcome = forecast_entity("ArtistB", monthly("ArtistB", 5), stub, GENRE, CONFIG)
    assert outcome.status is EntityStatus.SKIPPED_INSUFFICIENT_DATA
    assert outcome.n_observations == 5
    assert outcome.result is None
    assert stub.calls == []


def test_six_months_forecast_three_following_months():
    series = monthly("ArtistA", 6)
    outcome = forecast_entity("ArtistA", series, StubForecaster(), GENRE, CONFIG)
    assert outcome.status is EntityStatus.FORECAST_SUCCEEDED
    result = outcome.result
    assert result.category == "Genre"
    assert [r.date for r in result.last_known] == [date(2023, 4, 1), date(2023, 5, 1), date(2023, 6, 1)]
    months = [m for m, _ in result.forecast]
    assert months == [date(2023, 7, 1), date(2023, 8, 1), date(2023, 9, 1)]
    assert all(m > series[-1].date for m in months)
    assert [v for _, v in result.forecast] == pytest.approx([16.0, 17.0, 18.0])


def test_backend_failure_is_contained():
    stub = StubForecaster(fail_for={100.0})
    outcome = forecast_entity("Bad", monthly("Bad", 8, first_value=100.0), stub, GENRE, CONFIG)
    assert outcome.status is EntityStatus.FORECAST_FAILED
    assert outcome.error == "insufficient variance"
    assert outcome.result is None


def test_wrong_length_from_backend_counts_as_failure():
    class ShortForecaster(Forecaster):
        name = "short"

        def predict(self, series, config):
            return [1.0]

    outcome = forecast_entity("A", monthly("A", 6), ShortForecaster(), GENRE, CONFIG)
    assert outcome.status is EntityStatus.FORECAST_FAILED


def test_unexpected_exceptions_propagate():
    class BrokenForecaster(Forecaster):
        name = "broken"

        def predict(self, series, config):
            raise RuntimeError("bug")

    with pytest.raises(RuntimeError):
        forecast_entity("A", monthly("A", 6), BrokenForecaster(), GENRE, CONFIG)


def test_run_forecasts_processes_each_entity_once_in_order():
    groups = {
        "ArtistA": monthly("ArtistA", 6),
        "ArtistB": monthly("ArtistB", 3),
        "Bad": monthly("Bad", 7, first_value=100.0),
        "ArtistC": monthly("ArtistC", 9, first_value=50.0),
    }
    seen = []
    outcomes = run_forecasts(groups, StubForecaster(fail_for={100.0}), GENRE, CONFIG,
                             on_outcome=lambda o: seen.append(o.name))

    assert seen == ["ArtistA", "ArtistB", "Bad", "ArtistC"]
    assert [o.status for o in outcomes] == [
        EntityStatus.FORECAST_SUCCEEDED,
        EntityStatus.SKIPPED_INSUFFICIENT_DATA,
        EntityStatus.FORECAST_FAILED,
        EntityStatus.FORECAST_SUCCEEDED,
    ]
    results = successful_results(outcomes)
    assert [r.name for r in results] == ["ArtistA", "ArtistC"]


def test_result_to_dict_uses_month_strings():
    outcome = forecast_entity("ArtistA", monthly("ArtistA", 6), StubForecaster(), GENRE, CONFIG)
    d = outcome.result.to_dict()
    assert d["Name"] == "ArtistA"
    assert d["Category"] == "Genre"
    assert d["LastKnown"][0] == {"Date": "2023-04", "Value": 13.0}
    assert [f["Month"] for f in d["Forecast"]] == ["2023-07", "2023-08", "2023-09"]

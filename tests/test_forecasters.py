import numpy as np
import pytest

from music_forecaster_src import forecasting_utils as fu
from music_forecaster_src.config_utils import ForecastConfig
from music_forecaster_src.forecasting_utils import (
    ForecastError, MovingAverageForecaster, SarimaxForecaster, SsaForecaster,
    get_forecaster, hankelize
)

CONFIG = ForecastConfig()


def test_hankelize_averages_antidiagonals():
    m = np.array([[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]])
    # anti-diagonals: [1], [3, 2], [5, 4], [6]
    assert hankelize(m).tolist() == [1.0, 2.5, 4.5, 6.0]


def test_ssa_constant_series_stays_flat():
    preds = SsaForecaster().predict([5.0] * 8, CONFIG)
    assert len(preds) == 3
    assert preds == pytest.approx([5.0, 5.0, 5.0], rel=1e-9)


def test_ssa_geometric_series_extrapolated_exactly():
    series = [2.0 ** k for k in range(6)]  # 1..32
    preds = SsaForecaster().predict(series, CONFIG)
    assert preds == pytest.approx([64.0, 128.0, 256.0], rel=1e-6)


def test_ssa_all_zero_series():
    assert SsaForecaster().predict([0.0] * 6, CONFIG) == [0.0, 0.0, 0.0]


def test_ssa_noisy_series_returns_finite_horizon():
    rng = np.random.default_rng(7)
    series = 100 + np.arange(12) * 3.0 + rng.normal(0, 2.0, 12)
    preds = SsaForecaster().predict(series, CONFIG)
    assert len(preds) == 3
    assert np.all(np.isfinite(preds))


def test_ssa_respects_horizon_and_train_size():
    cfg = ForecastConfig(horizon=5, train_size=6)
    series = [100.0, 1.0, 1.0] + [2.0 ** k for k in range(6)]
    preds = SsaForecaster().predict(series, cfg)
    assert preds == pytest.approx([64.0, 128.0, 256.0, 512.0, 1024.0], rel=1e-6)


def test_ssa_rejects_non_finite():
    with pytest.raises(ForecastError):
        SsaForecaster().predict([1.0, 2.0, float("nan"), 4.0, 5.0, 6.0], CONFIG)


def test_ssa_rejects_too_short_series():
    with pytest.raises(ForecastError):
        SsaForecaster().predict([1.0, 2.0, 3.0], CONFIG)


def test_ssa_rejects_series_length_not_above_window():
    with pytest.raises(ForecastError):
        SsaForecaster().predict([1.0] * 6, ForecastConfig(series_length=3))


def test_ssa_invalid_energy_threshold():
    with pytest.raises(ValueError):
        SsaForecaster(energy_threshold=0.0)


def test_moving_average_uses_last_window():
    preds = MovingAverageForecaster().predict([1, 2, 3, 4, 5, 6], CONFIG)
    assert preds == pytest.approx([5.0, 5.0, 5.0])


def test_sarimax_returns_horizon_values():
    series = np.linspace(100.0, 122.0, num=12) + np.array([0.5, -0.5] * 6)
    preds = SarimaxForecaster().predict(series, CONFIG)
    assert len(preds) == 3
    assert np.all(np.isfinite(preds))


def test_sarimax_failure_becomes_forecast_error(monkeypatch: pytest.MonkeyPatch):
    def _boom(*args, **kwargs):
        raise np.linalg.LinAlgError("singular matrix")

    monkeypatch.setattr(fu, "SARIMAX", _boom, raising=True)
    with pytest.raises(ForecastError, match="singular matrix"):
        SarimaxForecaster().predict([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], CONFIG)


def test_get_forecaster_by_name():
    assert isinstance(get_forecaster("ssa"), SsaForecaster)
    assert isinstance(get_forecaster("sarimax"), SarimaxForecaster)
    assert isinstance(get_forecaster("moving_average"), MovingAverageForecaster)
    with pytest.raises(ValueError):
        get_forecaster("prophet")

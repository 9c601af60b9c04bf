# music_forecaster_src/forecasting_utils.py

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence, Union

import numpy as np
import pandas as pd
from statsmodels.tsa.statespace.sarimax import SARIMAX

from .config_utils import ForecastConfig

logger = logging.getLogger(__name__)


class ForecastError(Exception):
    """Raised when a backend cannot produce a forecast for a series."""


class Forecaster(ABC):
    """Black-box forecasting backend used by the pipeline."""

    name = "base"

    @abstractmethod
    def predict(self, series: Union[Sequence[float], np.ndarray], config: ForecastConfig) -> List[float]:
        """
        Forecast ``config.horizon`` values following ``series``.

        Raises
        ------
        ForecastError
            If the series cannot be forecast.
        """


def _as_clean_array(series: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    arr = np.asarray(series, dtype=float)
    if arr.ndim != 1 or arr.size == 0:
        raise ForecastError("series must be a non-empty one-dimensional sequence")
    if not np.all(np.isfinite(arr)):
        raise ForecastError("series contains non-finite values")
    return arr


def hankelize(matrix: np.ndarray) -> np.ndarray:
    """
    Diagonal-average an L x K trajectory matrix back into a series of length L + K - 1.

    Examples
    --------
    >>> hankelize(np.array([[1.0, 2.0], [2.0, 3.0]])).tolist()
    [1.0, 2.0, 3.0]
    """
    L, K = matrix.shape
    n = L + K - 1
    out = np.zeros(n)
    counts = np.zeros(n)
    for i in range(L):
        out[i:i + K] += matrix[i]
        counts[i:i + K] += 1
    return out / counts


class SsaForecaster(Forecaster):
    """
    Singular spectrum analysis with recurrent forecasting.

    The last ``train_size`` points are embedded in a trajectory matrix with
    ``window_size`` rows, decomposed by SVD and truncated to the leading
    components holding ``energy_threshold`` of the spectrum (always fewer than
    ``window_size``). The linear recurrence derived from the retained
    eigenvectors is then rolled forward from the reconstructed tail of the
    last ``series_length`` points.

    Parameters
    ----------
    energy_threshold : float, default=0.95
        Share of the singular value energy the retained components must reach.
    """

    name = "ssa"

    def __init__(self, energy_threshold: float = 0.95):
        if not 0.0 < energy_threshold <= 1.0:
            raise ValueError("energy_threshold must be in (0, 1]")
        self.energy_threshold = energy_threshold

    def _select_rank(self, singular_values: np.ndarray, window_size: int) -> int:
        energy = singular_values ** 2
        cumulative = np.cumsum(energy) / energy.sum()
        rank = int(np.searchsorted(cumulative, self.energy_threshold - 1e-12) + 1)
        return max(1, min(rank, window_size - 1))

    def predict(self, series, config: ForecastConfig) -> List[float]:
        values = _as_clean_array(series)
        L = config.window_size
        if L < 2:
            raise ForecastError(f"window_size must be at least 2 (got {L})")
        if config.series_length <= L:
            raise ForecastError(
                f"series_length ({config.series_length}) must exceed window_size ({L})"
            )

        train_size = config.train_size or len(values)
        train = values[-train_size:]
        n = len(train)
        if n < L + 1:
            raise ForecastError(f"need at least {L + 1} points for window_size={L} (got {n})")

        K = n - L + 1
        trajectory = np.column_stack([train[j:j + L] for j in range(K)])
        try:
            U, s, Vt = np.linalg.svd(trajectory, full_matrices=False)
        except np.linalg.LinAlgError as e:
            raise ForecastError(f"SVD did not converge: {e}") from e

        if s[0] <= np.finfo(float).eps * max(L, K):
            # All-zero series
            return [0.0] * config.horizon

        r = self._select_rank(s, L)
        reconstructed = hankelize(U[:, :r] @ np.diag(s[:r]) @ Vt[:r])

        pi = U[L - 1, :r]
        nu2 = float(np.dot(pi, pi))
        if nu2 >= 1.0 - 1e-9:
            raise ForecastError(f"degenerate decomposition (verticality coefficient {nu2:.6f})")
        coeffs = (U[:L - 1, :r] @ pi) / (1.0 - nu2)

        state = list(reconstructed[-config.series_length:])
        preds: List[float] = []
        for _ in range(config.horizon):
            nxt = float(np.dot(coeffs, state[-(L - 1):]))
            preds.append(nxt)
            state.append(nxt)

        if not np.all(np.isfinite(preds)):
            raise ForecastError("forecast diverged to non-finite values")
        logger.debug("SSA rank=%d of window=%d, nu2=%.4f, forecast=%s", r, L, nu2, preds)
        return preds


class SarimaxForecaster(Forecaster):
    """
    Statsmodels SARIMAX with a fixed, small order.

    Parameters
    ----------
    order : tuple, default=(1, 1, 0)
        Non-seasonal (p, d, q) order.
    """

    name = "sarimax"

    def __init__(self, order=(1, 1, 0)):
        self.order = tuple(order)

    def predict(self, series, config: ForecastConfig) -> List[float]:
        values = _as_clean_array(series)
        train_size = config.train_size or len(values)
        endog = pd.Series(values[-train_size:])
        try:
            res = SARIMAX(endog, order=self.order, simple_differencing=False).fit(disp=False)
            fc = res.get_forecast(steps=config.horizon).predicted_mean
        except Exception as e:
            raise ForecastError(f"SARIMAX{self.order} failed: {e}") from e
        preds = [float(v) for v in np.asarray(fc, dtype=float)]
        if len(preds) != config.horizon or not np.all(np.isfinite(preds)):
            raise ForecastError("SARIMAX returned an invalid forecast")
        return preds


class MovingAverageForecaster(Forecaster):
    """Repeat the mean of the last ``window_size`` observations over the horizon."""

    name = "moving_average"

    def predict(self, series, config: ForecastConfig) -> List[float]:
        values = _as_clean_array(series)
        level = float(values[-config.window_size:].mean())
        return [level] * config.horizon


_BACKENDS = {
    SsaForecaster.name: SsaForecaster,
    SarimaxForecaster.name: SarimaxForecaster,
    MovingAverageForecaster.name: MovingAverageForecaster,
}


def get_forecaster(name: str = "ssa") -> Forecaster:
    """
    Instantiate a forecasting backend by name.

    Raises
    ------
    ValueError
        If the backend name is unknown.
    """
    try:
        return _BACKENDS[name]()
    except KeyError:
        raise ValueError(f"Unknown forecasting backend '{name}'. Must be one of: {sorted(_BACKENDS)}")

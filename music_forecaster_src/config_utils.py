# music_forecaster_src/config_utils.py

import argparse
import logging
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForecastConfig:
    """Fixed forecasting parameters shared by every entity in a run."""
    window_size: int = 3
    series_length: int = 6
    horizon: int = 3
    min_observations: int = 6
    last_known: int = 3
    train_size: Optional[int] = None    # None -> full series length


@dataclass(frozen=True)
class CategorySpec:
    """A dataset category: where its input lives and how it is labelled."""
    key: str
    label: str
    input_file: str
    output_file: str
    unit: str


CATEGORIES: Dict[str, CategorySpec] = {
    "1": CategorySpec("1", "Country", "top_country_spending_by_month_EXPANDED.csv",
                      "country_forecast.json", "$"),
    "2": CategorySpec("2", "Genre", "top_genres_by_month_EXPANDED.csv",
                      "genre_forecast.json", "plays"),
    "3": CategorySpec("3", "Artist", "top_artists_by_month_EXPANDED.csv",
                      "artist_forecast.json", "plays"),
    "4": CategorySpec("4", "Album", "top_albums_by_month_EXPANDED.csv",
                      "album_forecast.json", "plays"),
    "5": CategorySpec("5", "Track", "top_tracks_by_month_EXPANDED.csv",
                      "track_forecast.json", "plays"),
}

CATEGORY_DESCRIPTIONS = {
    "1": "Country Spending",
    "2": "Top Genres by Country listening data",
    "3": "Top Artists play counts",
    "4": "Top Albums play counts",
    "5": "Top Tracks play counts",
}


def resolve_category(choice: Optional[str]) -> Optional[CategorySpec]:
    """
    Map a user choice to its category.

    Accepts the menu number ("1") or the label, case-insensitive ("country").
    Returns None for anything else so the caller decides how to abort.

    Examples
    --------
    >>> resolve_category("1").label
    'Country'
    >>> resolve_category(" Genre ").output_file
    'genre_forecast.json'
    >>> resolve_category("9") is None
    True
    """
    txt = (choice or "").strip()
    if txt in CATEGORIES:
        return CATEGORIES[txt]
    for spec in CATEGORIES.values():
        if spec.label.lower() == txt.lower():
            return spec
    return None


def get_config_value(cli_param: str, default=None, args: Optional[argparse.Namespace] = None):
    """
    Retrieve a forecast setting with command-line override support.

    The CLI argument wins when present and not None, otherwise the default
    is returned.

    Examples
    --------
    >>> get_config_value("horizon", 3, argparse.Namespace(horizon=5))
    5
    >>> get_config_value("horizon", 3, argparse.Namespace(horizon=None))
    3
    """
    if args is not None and hasattr(args, cli_param):
        cli_value = getattr(args, cli_param)
        if cli_value is not None:
            logger.debug("Setting '%s' overridden from CLI: %r", cli_param, cli_value)
            return cli_value
    return default


def build_forecast_config(args: Optional[argparse.Namespace] = None) -> ForecastConfig:
    """Assemble the ForecastConfig for a run; only horizon and minimum history are tunable."""
    base = ForecastConfig()
    return ForecastConfig(
        window_size=base.window_size,
        series_length=base.series_length,
        horizon=int(get_config_value("horizon", base.horizon, args)),
        min_observations=int(get_config_value("min_observations", base.min_observations, args)),
        last_known=base.last_known,
        train_size=None,
    )

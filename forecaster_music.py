#!/usr/bin/env python3
"""
Monthly listening-metric forecaster.

Usage
-----
    python forecaster_music.py --help
    python forecaster_music.py --category 1
    python forecaster_music.py --category genre --input data/top_genres_by_month_EXPANDED.csv

The implementation lives in music_forecaster_src/:
- config_utils.py: Dataset categories and forecast parameters
- parsing_utils.py: CSV record parsing
- data_utils.py: Loading and grouping
- forecasting_utils.py: Forecasting backends
- pipeline_utils.py: Per-entity forecast loop
- report_utils.py: Console output
- file_utils.py: JSON output
- plotting_utils.py: Forecast figures
- main.py: Main entry point
"""

from music_forecaster_src.main import main

if __name__ == "__main__":
    main()

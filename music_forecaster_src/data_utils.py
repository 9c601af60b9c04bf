# music_forecaster_src/data_utils.py

import logging
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd

from .parsing_utils import Record, parse_records

logger = logging.getLogger(__name__)


def load_records(input_path: Path) -> List[Record]:
    """
    Load monthly records from a CSV file, discarding its header line.

    Parameters
    ----------
    input_path : Path
        CSV with rows ``name,YYYY-MM-DD,value``.

    Returns
    -------
    List[Record]
        Valid records in file order. Malformed rows are dropped.

    Raises
    ------
    SystemExit
        If the file doesn't exist.

    Notes
    -----
    Rows end at ``\\n`` (``\\r\\n`` and lone ``\\r`` are normalized by text
    mode). Bytes that are not valid UTF-8 are replaced, not rejected.
    """
    if not input_path.is_file():
        raise SystemExit(f"File not found: {input_path}")

    logger.info("Loading records from: %s", input_path)
    # Undecodable bytes become U+FFFD rather than aborting the run
    with input_path.open("r", encoding="utf-8-sig", errors="replace") as f:
        text = f.read()
    # Only line breaks end a row; form feeds and other separators stay in the field
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    records = parse_records(lines[1:])
    logger.info("Parsed %d valid record(s) from %d data line(s)", len(records), max(len(lines) - 1, 0))
    return records


def group_records(records: Sequence[Record]) -> Dict[str, List[Record]]:
    """
    Group records by entity name and sort each group by date.

    Groups keep the order in which names first appear. The sort is stable, so
    rows sharing a date stay in encounter order.

    Examples
    --------
    >>> from datetime import date
    >>> recs = [Record("A", date(2023, 2, 1), 2.0), Record("A", date(2023, 1, 1), 1.0)]
    >>> [r.value for r in group_records(recs)["A"]]
    [1.0, 2.0]
    """
    groups: Dict[str, List[Record]] = {}
    for rec in records:
        groups.setdefault(rec.name, []).append(rec)
    return {name: sorted(recs, key=lambda r: r.date) for name, recs in groups.items()}


def series_values(series: Sequence[Record]) -> np.ndarray:
    """Return the observation values of an ordered series as a float array."""
    return np.asarray([r.value for r in series], dtype=float)


def records_to_series(series: Sequence[Record]) -> pd.Series:
    """Convert an ordered list of records into a pandas Series indexed by date."""
    idx = pd.DatetimeIndex([pd.Timestamp(r.date) for r in series], name="date")
    name = series[0].name if series else None
    return pd.Series([r.value for r in series], index=idx, name=name, dtype=float)

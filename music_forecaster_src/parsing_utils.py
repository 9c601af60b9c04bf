# music_forecaster_src/parsing_utils.py

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class Record:
    """One monthly observation for a named entity."""
    name: str
    date: date
    value: float


def parse_record_line(line: str) -> Optional[Record]:
    """
    Parse one CSV data line of the form ``name,YYYY-MM-DD,value[,...]``.

    Parameters
    ----------
    line : str
        Raw text line (no header).

    Returns
    -------
    Optional[Record]
        The parsed record, or None when the line has fewer than three fields,
        an unparseable date or a non-numeric value. Extra fields are ignored.

    Examples
    --------
    >>> parse_record_line("ArtistA,2023-01-01,10")
    Record(name='ArtistA', date=datetime.date(2023, 1, 1), value=10.0)
    >>> parse_record_line("ArtistA,2023-01-01") is None
    True
    """
    parts = line.rstrip("\r\n").split(",")
    if len(parts) < 3:
        return None
    date_text = parts[1].strip()
    # strptime also accepts unpadded months/days; only the zero-padded form is valid
    if len(date_text) != 10:
        return None
    try:
        when = datetime.strptime(date_text, DATE_FORMAT).date()
    except ValueError:
        return None
    try:
        value = float(parts[2].strip())
    except ValueError:
        return None
    return Record(name=parts[0].strip(), date=when, value=value)


def parse_records(lines: Iterable[str]) -> List[Record]:
    """
    Parse data lines into records, silently dropping malformed ones.

    The header must already have been skipped by the caller.
    """
    records: List[Record] = []
    dropped = 0
    for line in lines:
        rec = parse_record_line(line)
        if rec is None:
            dropped += 1
            continue
        records.append(rec)
    if dropped:
        logger.debug("Dropped %d malformed line(s) while parsing.", dropped)
    return records


def validate_log_level(log_level: str) -> str:
    """
    Validate and normalize logging level specification.

    Raises
    ------
    ValueError
        If the logging level is not supported
    """
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    level_upper = log_level.upper()
    if level_upper not in valid_levels:
        raise ValueError(f"Invalid log level '{log_level}'. Must be one of: {valid_levels}")
    return level_upper


def validate_backend(backend: str) -> str:
    """Validate a forecasting backend name ('ssa', 'sarimax', 'moving_average')."""
    valid_backends = ["ssa", "sarimax", "moving_average"]
    name = backend.strip().lower()
    if name not in valid_backends:
        raise ValueError(f"Invalid backend '{backend}'. Must be one of: {valid_backends}")
    return name

# music_forecaster_src/file_utils.py

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .pipeline_utils import ForecastResult

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> None:
    """
    Create directory if it doesn't exist, including all parent directories.

    No error is raised if the directory already exists.
    """
    path.mkdir(parents=True, exist_ok=True)


def resolve_path(path_str: str, base_dir: Path) -> Path:
    """
    Resolve a path string relative to a base directory if not absolute.

    Examples
    --------
    >>> resolve_path("data/file.csv", Path("/project"))
    PosixPath('/project/data/file.csv')
    >>> resolve_path("/absolute/path.csv", Path("/project"))
    PosixPath('/absolute/path.csv')
    """
    path = Path(path_str)
    return path if path.is_absolute() else (base_dir / path)


def safe_filename(name: str) -> str:
    """Reduce an entity name to a filesystem-safe stem (used for figure files)."""
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._")
    return stem or "entity"


def write_forecasts_json(results: Sequence[ForecastResult], output_path: Path) -> Path:
    """
    Write forecast results as an indented JSON array.

    Parameters
    ----------
    results : Sequence[ForecastResult]
        Successful forecasts, in the order they were produced
    output_path : Path
        Destination file; parent directories are created

    Returns
    -------
    Path
        The path written to.

    Notes
    -----
    I/O errors are not caught here; a failed write ends the run.
    """
    ensure_dir(output_path.parent)
    payload = [r.to_dict() for r in results]
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info("Wrote %d forecast(s) to %s", len(payload), output_path)
    return output_path


def read_forecasts_json(input_path: Path) -> List[Dict[str, Any]]:
    """Load a forecast file written by write_forecasts_json."""
    with input_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array in {input_path}, got {type(data).__name__}")
    return data

"""
Historical price loader for delimited text files.

Each line contributes its last comma-separated field as a price. Header
lines and fields that do not parse as finite numbers are skipped, so exports with
a leading date column (``2024-01-02,101.3``) and bare one-column files both
load. Missing or unreadable files are an error, never an empty series.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """Raised when data loading fails."""

    pass


def parse_price_lines(lines: list[str], delimiter: str = ",") -> np.ndarray:
    """
    Extract prices from the last field of each line.

    Parameters
    ----------
    lines : list[str]
        Raw text lines
    delimiter : str, default ","
        Field separator

    Returns
    -------
    np.ndarray
        Parsed prices in file order (chronological), dtype float64
    """
    last_fields = pd.Series([line.rsplit(delimiter, 1)[-1].strip() for line in lines], dtype=object)
    parsed = pd.to_numeric(last_fields, errors="coerce").astype(np.float64)
    prices = parsed[np.isfinite(parsed)]

    skipped = len(parsed) - len(prices)
    if skipped:
        logger.debug(f"Skipped {skipped} line(s) without a numeric last field")

    return prices.to_numpy(dtype=np.float64)


def read_prices_from_csv(path: Union[str, Path], delimiter: str = ",") -> np.ndarray:
    """
    Load a chronological price series from a delimited text file.

    Parameters
    ----------
    path : str or Path
        File to read
    delimiter : str, default ","
        Field separator

    Returns
    -------
    np.ndarray
        Prices in file order; may be empty if no line holds a number

    Raises
    ------
    DataLoadError
        If the file does not exist or cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise DataLoadError(f"Price file not found: {path}")

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Failed to read {path}: {e}") from e

    prices = parse_price_lines(lines, delimiter=delimiter)
    logger.info(f"Loaded {prices.size} prices from {path}")
    return prices

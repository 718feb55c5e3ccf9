"""
Price history ingestion.
"""

from hpc_pricer.data.loader import DataLoadError, parse_price_lines, read_prices_from_csv

__all__ = [
    "DataLoadError",
    "parse_price_lines",
    "read_prices_from_csv",
]

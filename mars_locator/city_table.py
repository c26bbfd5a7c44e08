"""
City Reference Table

Maps a short city name to the stable numeric id used by the rest of the
application. The table ships with the package as ``data/city.json`` (a list of
``{"id": ..., "name": ...}`` objects); CSV files with ``name`` and ``id``
columns are accepted as well.

The table is parsed once per process and shared between threads. Lookups
never fail: an unknown name, an empty table or an unreadable file all resolve
to FALLBACK_CITY_ID.

Dependencies:
    - pandas: CSV parsing
    - json (standard library)
    - threading (standard library)
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from . import config

logger = logging.getLogger(__name__)

FALLBACK_CITY_ID = config.FALLBACK_CITY_ID

# Cache for the parsed reference table to avoid repeated loading
_city_table_cache = None
_city_table_lock = threading.Lock()


@dataclass(frozen=True)
class CityRecord:
    name: str
    id: int


def load_city_table(path):
    """
    Parse a city reference file

    Args:
        path (str or Path): JSON or CSV file

    Returns:
        tuple: CityRecord values in file order

    Raises:
        OSError: File cannot be read
        ValueError: Content is not a list of name/id records
    """
    path = Path(path)

    if path.suffix.lower() == '.csv':
        df = pd.read_csv(path, encoding='utf-8')
        if 'name' not in df.columns or 'id' not in df.columns:
            raise ValueError(f"CSV file missing required columns (name, id): {path}")
        rows = df[['name', 'id']].to_dict('records')
    else:
        with open(path, 'r', encoding='utf-8') as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"City file must contain a JSON list: {path}")

    records = []
    for row in rows:
        try:
            records.append(CityRecord(name=str(row['name']).strip(), id=int(row['id'])))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid city record {row!r} in {path}: {e}") from e

    return tuple(records)


def get_city_table(path=None):
    """
    Return the process-wide reference table, loading it on first use

    A file that cannot be loaded is logged once and cached as an empty
    table, so every later lookup falls back without touching the disk again.

    Args:
        path (str or Path): Override for config.CITY_FILE, first call only

    Returns:
        tuple: CityRecord values
    """
    global _city_table_cache

    if _city_table_cache is not None:
        if path is not None:
            logger.debug(f"City table already loaded, ignoring {path}; call reset_city_table_cache() first")
        return _city_table_cache

    with _city_table_lock:
        if _city_table_cache is None:
            city_file = Path(path) if path is not None else config.CITY_FILE
            try:
                table = load_city_table(city_file)
                logger.info(f"Loaded {len(table)} cities from {city_file}")
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load city table {city_file}: {e}")
                table = ()
            _city_table_cache = table

    return _city_table_cache


def reset_city_table_cache():
    """Drop the cached table so the next lookup reloads it."""
    global _city_table_cache
    with _city_table_lock:
        _city_table_cache = None


def resolve_id(name, table=None):
    """
    Resolve a city name to its id

    Matching is exact and case sensitive; callers trim administrative
    suffixes beforehand (see city_names.trim_city).

    Args:
        name (str): Short city name
        table (sequence): CityRecord values, defaults to the bundled table

    Returns:
        int: Id of the first matching record, or FALLBACK_CITY_ID
    """
    if table is None:
        table = get_city_table()

    for record in table:
        if record.name == name:
            return record.id

    logger.debug(f"City {name!r} not in reference table, using fallback id {FALLBACK_CITY_ID}")
    return FALLBACK_CITY_ID

"""
Runtime configuration

Module-level defaults for the location pipeline. Every value can be overridden
through an environment variable, and every component also accepts the value
as a constructor argument, which takes precedence.

Environment variables:
    - MARS_LOCATOR_AMAP_KEY: AMap web service key
    - MARS_LOCATOR_CITY_FILE: path to an alternative city reference table
    - MARS_LOCATOR_TIMEOUT: HTTP timeout in seconds
"""

import os
from pathlib import Path

# AMap reverse geocoding
API_KEY = os.getenv("MARS_LOCATOR_AMAP_KEY", "Your Amap Key")
AMAP_REGEO_URL = "https://restapi.amap.com/v3/geocode/regeo"
REQUEST_TIMEOUT = float(os.getenv("MARS_LOCATOR_TIMEOUT", "10"))

# Retry policy for the HTTP session
MAX_RETRIES = 3
BACKOFF_FACTOR = 1
RETRY_STATUS_CODES = [429, 500, 502, 503, 504]

# City reference table
DEFAULT_CITY_FILE = Path(__file__).parent / "data" / "city.json"
CITY_FILE = Path(os.getenv("MARS_LOCATOR_CITY_FILE", str(DEFAULT_CITY_FILE)))
FALLBACK_CITY_ID = 880

# Batch CLI
LOG_FILE = "mars_locator.log"

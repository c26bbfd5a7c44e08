"""
mars_locator: WGS84 to GCJ02 transformation and city resolution

Converts raw GPS fixes into the GCJ02 coordinates used by Chinese mapping
services, reverse geocodes them through AMap and resolves the resulting city
name to a stable numeric id.
"""

from .city_names import CAPITAL_CITIES, is_capital_city, pick_city_name, trim_city
from .city_table import (
    FALLBACK_CITY_ID,
    CityRecord,
    get_city_table,
    load_city_table,
    reset_city_table_cache,
    resolve_id,
)
from .geocoding import AmapReverseGeocoder, GeocodeResult, GeocodingError
from .service import LocationService, LocationUpdate, ServiceState
from .store import City, LocationStore
from .transform import GeoPoint, gcj02_to_wgs84, offset_meters, out_of_china, wgs84_to_gcj02

__version__ = "0.1.0"

"""
Location Service

Drives one round of locating: a raw WGS84 fix comes in, is shifted to GCJ02,
reverse geocoded, trimmed and resolved to city ids, and the result is written
to the LocationStore. The service stops after the first fix it handles,
whether geocoding succeeded or not; call start() again to relocate.

State machine:
    IDLE --start()--> LISTENING --fix handled / stop()--> STOPPED
    STOPPED --start()--> LISTENING

Fixes arriving outside LISTENING are ignored.

License: MIT
"""

import enum
import logging
import threading
from dataclasses import dataclass

from .city_names import pick_city_name, trim_city
from .city_table import resolve_id
from .geocoding import AmapReverseGeocoder, GeocodingError
from .store import City
from .transform import GeoPoint, wgs84_to_gcj02

logger = logging.getLogger(__name__)


class ServiceState(enum.Enum):
    IDLE = 'idle'
    LISTENING = 'listening'
    STOPPED = 'stopped'


@dataclass(frozen=True)
class LocationUpdate:
    raw_point: GeoPoint
    gcj_point: GeoPoint
    upper_city: City
    city: City
    upper_changed: bool
    city_changed: bool


class LocationService:
    """
    Single-shot location pipeline

    Args:
        store (LocationStore): Destination for the resolved cities
        geocoder (callable): GeoPoint -> GeocodeResult, defaults to AMap
        city_table (sequence): CityRecord values, defaults to the bundled table
    """

    def __init__(self, store, geocoder=None, city_table=None):
        self.store = store
        self.geocoder = geocoder or AmapReverseGeocoder()
        self.city_table = city_table
        self.relocate = False
        self._state = ServiceState.IDLE
        self._lock = threading.Lock()

    @property
    def state(self):
        return self._state

    def start(self, relocate=False):
        with self._lock:
            if self._state is ServiceState.LISTENING:
                logger.debug("Location service already listening")
                self.relocate = self.relocate or relocate
                return
            self.relocate = relocate
            self._state = ServiceState.LISTENING
        logger.info(f"Location service started (relocate={relocate})")

    def stop(self):
        with self._lock:
            if self._state is ServiceState.STOPPED:
                return
            self._state = ServiceState.STOPPED
        logger.info("Location service stopped")

    def on_location_changed(self, point):
        """
        Handle a raw device fix

        Args:
            point (GeoPoint): WGS84 fix, None is ignored

        Returns:
            LocationUpdate: Resolved cities, or None when the fix was ignored
                or geocoding failed
        """
        if point is None:
            return None

        # Only the first fix is handled; concurrent fixes see STOPPED
        with self._lock:
            if self._state is not ServiceState.LISTENING:
                logger.debug(f"Ignoring fix {point} in state {self._state.value}")
                return None
            self._state = ServiceState.STOPPED
        logger.info("Location service stopped")

        logger.info(f"Raw coordinates: {point.lat},{point.lng}")
        gcj_point = wgs84_to_gcj02(point)
        logger.info(f"Transformed coordinates: {gcj_point.lat},{gcj_point.lng}")

        try:
            result = self.geocoder(gcj_point)
        except GeocodingError as e:
            logger.warning(f"Location failed: {e}")
            return None

        return self._apply(point, gcj_point, result)

    def _resolve(self, name):
        return resolve_id(name, self.city_table)

    def _apply(self, point, gcj_point, result):
        upper_name = trim_city(result.upper_city)
        if not upper_name:
            logger.warning(f"Geocoder returned no upper city for {gcj_point}")
            return None

        upper_city = self.store.upper_city
        diff_upper = upper_city is None or upper_city.name != upper_name
        if diff_upper:
            upper_city = City(id=self._resolve(upper_name), name=upper_name, upper=True)
            self.store.update_upper_city(upper_city)

        city_name = pick_city_name(result.upper_city, result.city)
        logger.info(f"Located: {result.upper_city}, {city_name}")

        city = self.store.city
        # The current city is only replaced when the upper city moved too
        city_changed = diff_upper and (city is None or city.name != city_name)
        if city_changed:
            city = City(id=self._resolve(city_name), name=city_name)
            self.store.update_city(city)

        if self.relocate:
            logger.info(f"Relocated to {city_name}")

        return LocationUpdate(
            raw_point=point,
            gcj_point=gcj_point,
            upper_city=upper_city,
            city=city,
            upper_changed=diff_upper,
            city_changed=city_changed,
        )

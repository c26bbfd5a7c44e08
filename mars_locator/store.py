"""
In-memory location store

Holds the located upper city (province or municipality) and the current city,
and notifies subscribers whenever either changes. Nothing is persisted.
"""

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)

UPPER_CITY = 'upper_city'
CITY = 'city'


@dataclass(frozen=True)
class City:
    id: int
    name: str
    upper: bool = False


class LocationStore:
    """Thread-safe holder for the located cities."""

    def __init__(self):
        self._lock = threading.Lock()
        self._upper_city = None
        self._city = None
        self._listeners = []

    @property
    def upper_city(self):
        with self._lock:
            return self._upper_city

    @property
    def city(self):
        with self._lock:
            return self._city

    def update_upper_city(self, city):
        with self._lock:
            self._upper_city = city
        self._notify(UPPER_CITY, city)

    def update_city(self, city):
        with self._lock:
            self._city = city
        self._notify(CITY, city)

    def subscribe(self, callback):
        """
        Register a listener called as ``callback(field, city)``

        Returns:
            function: Call it to remove the listener again
        """
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, field, city):
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(field, city)
            except Exception as e:
                logger.error(f"Location listener {listener!r} failed for {field}: {e}")

"""
AMap reverse geocoding

Turns a GCJ02 point into province and city names through the AMap web
service API (https://lbs.amap.com/api/webservice/guide/api/georegeo).

Dependencies:
    - requests: HTTP client library
    - urllib3: retry policy for the HTTP adapter
"""

import logging
from dataclasses import dataclass

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import config

logger = logging.getLogger(__name__)


class GeocodingError(RuntimeError):
    """Raised when the geocoding service does not return a usable address."""


@dataclass(frozen=True)
class GeocodeResult:
    upper_city: str
    city: str
    formatted_address: str = ""


def safe_get_string(data, default=""):
    """
    Safely get a string value from an AMap field

    AMap returns an empty list instead of an empty string for missing
    fields, e.g. ``"city": []`` for municipalities.

    Args:
        data: Raw field value
        default (str): Value used when the field is empty

    Returns:
        str: Extracted string value
    """
    if isinstance(data, str):
        return data.strip()
    elif isinstance(data, list):
        if len(data) > 0 and isinstance(data[0], str):
            return data[0].strip()
        return default
    elif data is None:
        return default
    return str(data).strip()


def create_session(max_retries=None, backoff_factor=None):
    """
    Create an HTTP session with a retry strategy for idempotent requests

    Returns:
        requests.Session: Configured session
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=config.MAX_RETRIES if max_retries is None else max_retries,
        backoff_factor=config.BACKOFF_FACTOR if backoff_factor is None else backoff_factor,
        status_forcelist=config.RETRY_STATUS_CODES,
        allowed_methods=["HEAD", "GET", "OPTIONS"]
    )
    adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=4, pool_maxsize=8)

    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


class AmapReverseGeocoder:
    """
    AMap reverse geocoding client

    Instances are callable, so any function taking a GeoPoint and returning
    a GeocodeResult can be used in its place by LocationService.
    """

    def __init__(self, api_key=None, session=None, timeout=None, url=None):
        """
        Args:
            api_key (str): AMap web service key, defaults to config.API_KEY
            session (requests.Session): Shared session, created when omitted
            timeout (float): Request timeout in seconds
            url (str): Endpoint override
        """
        self.api_key = api_key or config.API_KEY
        self.session = session or create_session()
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.url = url or config.AMAP_REGEO_URL

    def __call__(self, point):
        return self.reverse_geocode(point)

    def reverse_geocode(self, point):
        """
        Resolve a GCJ02 point to its administrative names

        Args:
            point (GeoPoint): Point in GCJ02

        Returns:
            GeocodeResult: Province and city names as returned by AMap

        Raises:
            GeocodingError: Network failure or an unusable response
        """
        params = {
            'key': self.api_key,
            'location': point.as_query(),
            'output': 'json',
            'extensions': 'base',
        }

        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise GeocodingError(f"Network error for {point.as_query()}: {e}") from e

        if response.status_code != 200:
            raise GeocodingError(f"HTTP {response.status_code} for {point.as_query()}")

        try:
            data = response.json()
        except ValueError as e:
            raise GeocodingError(f"Invalid JSON response for {point.as_query()}") from e

        if not isinstance(data, dict):
            raise GeocodingError(f"Unexpected response body for {point.as_query()}: {type(data).__name__}")

        return self._parse_response(data, point)

    def _parse_response(self, data, point):
        if data.get('status') != '1':
            info = data.get('info', 'unknown error')
            raise GeocodingError(f"AMap error for {point.as_query()}: {info}")

        regeocode = data.get('regeocode')
        if not isinstance(regeocode, dict):
            regeocode = {}
        component = regeocode.get('addressComponent')
        if not isinstance(component, dict):
            component = {}

        province = safe_get_string(component.get('province'))
        if not province:
            raise GeocodingError(f"No administrative area found for {point.as_query()}")

        # Municipalities report an empty city; the province is the city
        city = safe_get_string(component.get('city')) or province
        address = safe_get_string(regeocode.get('formatted_address'))

        logger.debug(f"Geocoded {point.as_query()} -> {province} / {city}")
        return GeocodeResult(upper_city=province, city=city, formatted_address=address)

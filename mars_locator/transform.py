"""
Coordinate Transformation Module

Converts GPS fixes (WGS84) into the GCJ02 "Mars" coordinate system expected by
Chinese mapping services such as AMap. Points outside the mainland China
bounding box are passed through untouched, since the offset is only defined
inside China.

Coordinate Systems:
    - WGS84: World Geodetic System 1984 (GPS standard)
    - GCJ02: Mars Coordinate System (used by Chinese mapping services)

Dependencies:
    - math (standard library)
    - dataclasses (standard library)

License: MIT
"""

import math
from dataclasses import dataclass

# Coordinate transformation constants
PI = 3.1415926535897932384626  # π
A = 6378245.0  # Semi-major axis
EE = 0.00669342162296594323  # Eccentricity squared

# Mainland China bounding box
CHINA_MIN_LNG = 72.004
CHINA_MAX_LNG = 137.8347
CHINA_MIN_LAT = 0.8293
CHINA_MAX_LAT = 55.8271

EARTH_RADIUS_M = 6371008.8


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable (latitude, longitude) pair in degrees

    The constructor does not validate ranges; the transform is total over
    any float input. Use is_valid() when range checking is needed.
    """
    lat: float
    lng: float

    def is_valid(self):
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0

    def as_query(self):
        """Return the point as an AMap ``lng,lat`` location string."""
        return f"{self.lng:.6f},{self.lat:.6f}"


def out_of_china(point):
    """
    Check if a point lies outside the mainland China bounding box

    Args:
        point (GeoPoint): Point to check

    Returns:
        bool: True if outside China, False if inside China
    """
    if point.lng < CHINA_MIN_LNG or point.lng > CHINA_MAX_LNG:
        return True
    return point.lat < CHINA_MIN_LAT or point.lat > CHINA_MAX_LAT


def _gcj02_offset(point):
    # Offsets are evaluated relative to (35N, 105E)
    dlat = _transform_lat(point.lat - 35.0, point.lng - 105.0)
    dlng = _transform_lng(point.lat - 35.0, point.lng - 105.0)
    radlat = point.lat / 180.0 * PI
    magic = math.sin(radlat)
    magic = 1 - EE * magic * magic
    sqrtmagic = math.sqrt(magic)
    dlat = (dlat * 180.0) / ((A * (1 - EE)) / (magic * sqrtmagic) * PI)
    dlng = (dlng * 180.0) / (A / sqrtmagic * math.cos(radlat) * PI)
    return dlat, dlng


def wgs84_to_gcj02(point):
    """
    Convert a WGS84 point to GCJ02 (Mars) coordinates

    Used for converting raw device fixes before querying Chinese mapping
    services.

    Args:
        point (GeoPoint): Point in WGS84

    Returns:
        GeoPoint: Point in GCJ02, or the input itself when outside China
    """
    if out_of_china(point):
        return point

    dlat, dlng = _gcj02_offset(point)
    return GeoPoint(lat=point.lat + dlat, lng=point.lng + dlng)


def gcj02_to_wgs84(point):
    """
    Approximate inverse of wgs84_to_gcj02

    The offset is evaluated at the GCJ02 point and subtracted, which leaves a
    residual error of a few meters at most.

    Args:
        point (GeoPoint): Point in GCJ02

    Returns:
        GeoPoint: Point in WGS84
    """
    if out_of_china(point):
        return point

    dlat, dlng = _gcj02_offset(point)
    return GeoPoint(lat=point.lat - dlat, lng=point.lng - dlng)


def offset_meters(origin, target):
    """Great-circle distance between two points in meters (haversine)."""
    lat1 = math.radians(origin.lat)
    lat2 = math.radians(target.lat)
    dlat = lat2 - lat1
    dlng = math.radians(target.lng - origin.lng)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def _transform_lat(lat, lng):
    """
    Latitude offset series

    Args:
        lat (float): Latitude relative to 35N
        lng (float): Longitude relative to 105E

    Returns:
        float: Unscaled latitude offset
    """
    ret = -100.0 + 2.0 * lng + 3.0 * lat + 0.2 * lat * lat + \
          0.1 * lng * lat + 0.2 * math.sqrt(math.fabs(lng))
    ret += (20.0 * math.sin(6.0 * lng * PI) + 20.0 *
            math.sin(2.0 * lng * PI)) * 2.0 / 3.0
    ret += (20.0 * math.sin(lat * PI) + 40.0 *
            math.sin(lat / 3.0 * PI)) * 2.0 / 3.0
    ret += (160.0 * math.sin(lat / 12.0 * PI) + 320 *
            math.sin(lat * PI / 30.0)) * 2.0 / 3.0
    return ret


def _transform_lng(lat, lng):
    """
    Longitude offset series

    Args:
        lat (float): Latitude relative to 35N
        lng (float): Longitude relative to 105E

    Returns:
        float: Unscaled longitude offset
    """
    ret = 300.0 + lng + 2.0 * lat + 0.1 * lng * lng + \
          0.1 * lng * lat + 0.1 * math.sqrt(math.fabs(lng))
    ret += (20.0 * math.sin(6.0 * lng * PI) + 20.0 *
            math.sin(2.0 * lng * PI)) * 2.0 / 3.0
    ret += (20.0 * math.sin(lng * PI) + 40.0 *
            math.sin(lng / 3.0 * PI)) * 2.0 / 3.0
    ret += (150.0 * math.sin(lng / 12.0 * PI) + 300.0 *
            math.sin(lng / 30.0 * PI)) * 2.0 / 3.0
    return ret

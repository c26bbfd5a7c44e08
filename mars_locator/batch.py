#!/usr/bin/env python3
"""
Batch Locator

Runs a CSV file of WGS84 fixes through the location pipeline and writes the
GCJ02 coordinates, the shift in meters and, optionally, the resolved cities.

Input:
    - CSV file with ``lat`` and ``lng`` columns (WGS84)

Output:
    - Input columns plus gcj_lat, gcj_lng, offset_m
    - With --geocode: upper_city, city, city_id, city_name_en

Dependencies:
    - pandas: Data manipulation and CSV IO
    - xpinyin: Chinese to pinyin conversion
    - requests: AMap reverse geocoding (through geocoding module)

License: MIT
"""

import argparse
import logging
import re
import sys
from pathlib import Path

import pandas as pd
from xpinyin import Pinyin

from . import config
from .city_names import pick_city_name, trim_city
from .city_table import FALLBACK_CITY_ID, resolve_id
from .geocoding import AmapReverseGeocoder, GeocodingError
from .transform import GeoPoint, offset_meters, wgs84_to_gcj02

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('lat', 'lng')


class BatchLocator:
    """
    Batch transformer and resolver for tabular fixes

    Args:
        geocoder (callable): GeoPoint -> GeocodeResult; None skips geocoding
        city_table (sequence): CityRecord values, defaults to the bundled table
    """

    def __init__(self, geocoder=None, city_table=None):
        self.geocoder = geocoder
        self.city_table = city_table
        self.pinyin_converter = Pinyin()

    def _chinese_to_pinyin(self, text):
        if not text or not isinstance(text, str):
            return ""
        cleaned_text = re.sub(r'[^\u4e00-\u9fff\w]', '', text)
        return self.pinyin_converter.get_pinyin(cleaned_text, '').lower()

    def _locate_row(self, point):
        gcj_point = wgs84_to_gcj02(point)
        row = {
            'gcj_lat': gcj_point.lat,
            'gcj_lng': gcj_point.lng,
            'offset_m': round(offset_meters(point, gcj_point), 2),
        }

        if self.geocoder is None:
            return row, True

        row.update({'upper_city': '', 'city': '', 'city_id': FALLBACK_CITY_ID, 'city_name_en': ''})
        try:
            result = self.geocoder(gcj_point)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for {point.lat},{point.lng}: {e}")
            return row, False

        upper_name = trim_city(result.upper_city)
        city_name = pick_city_name(result.upper_city, result.city)
        row.update({
            'upper_city': upper_name,
            'city': city_name,
            'city_id': resolve_id(city_name, self.city_table),
            'city_name_en': self._chinese_to_pinyin(city_name),
        })
        return row, True

    def process(self, df):
        """
        Locate every row of a DataFrame

        Args:
            df (pd.DataFrame): Must contain lat and lng columns

        Returns:
            tuple: (result DataFrame, number of rows that failed geocoding)

        Raises:
            ValueError: Required columns are missing
        """
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"CSV file missing required columns: {', '.join(missing)}")

        rows = []
        failed = 0
        for lat, lng in zip(df['lat'], df['lng']):
            row, ok = self._locate_row(GeoPoint(lat=float(lat), lng=float(lng)))
            rows.append(row)
            if not ok:
                failed += 1

        located = pd.DataFrame(rows, index=df.index)
        return pd.concat([df, located], axis=1), failed

    def process_file(self, input_file, output_file):
        df = pd.read_csv(input_file, encoding='utf-8')
        logger.info(f"Loaded {len(df)} fixes from {input_file}")

        result, failed = self.process(df)
        result.to_csv(output_file, index=False, encoding='utf-8')

        logger.info(f"Saved {len(result)} rows to {output_file}")
        if failed:
            logger.warning(f"{failed} of {len(result)} rows could not be geocoded")
        return result


def build_parser():
    parser = argparse.ArgumentParser(
        prog='mars-locator',
        description='Convert WGS84 fixes to GCJ02 and resolve their cities',
    )
    parser.add_argument('input', help='CSV file with lat and lng columns')
    parser.add_argument('-o', '--output', help='Output CSV (default: <input>_located.csv)')
    parser.add_argument('--geocode', action='store_true', help='Reverse geocode through AMap')
    parser.add_argument('--api-key', default=None, help='AMap web service key')
    parser.add_argument('--log-level', default='INFO')
    return parser


def main(argv=None):
    """
    Command line entry point

    Returns:
        int: Process exit status
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(config.LOG_FILE, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )

    input_file = Path(args.input)
    if not input_file.exists():
        logger.error(f"Input file not found: {input_file}")
        return 1

    output_file = Path(args.output) if args.output else input_file.with_name(f"{input_file.stem}_located.csv")
    geocoder = AmapReverseGeocoder(api_key=args.api_key) if args.geocode else None

    try:
        BatchLocator(geocoder=geocoder).process_file(input_file, output_file)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to process {input_file}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

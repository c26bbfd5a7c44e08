from unittest import mock

import pandas as pd
import pytest

from mars_locator.batch import BatchLocator, main
from mars_locator.city_table import FALLBACK_CITY_ID
from mars_locator.geocoding import AmapReverseGeocoder, GeocodeResult, GeocodingError


def _geocoder(point):
    if point.lng < 0:
        raise GeocodingError('outside AMap coverage')
    if point.lat > 35:
        return GeocodeResult('北京市', '北京市')
    return GeocodeResult('浙江省', '杭州市')


@pytest.fixture
def fixes():
    return pd.DataFrame({
        'name': ['tiananmen', 'west lake', 'paris', 'new york'],
        'lat': [39.908692, 30.2741, 48.8566, 40.7128],
        'lng': [116.397477, 120.1551, 2.3522, -74.0060],
    })


def test_transform_only(fixes):
    result, failed = BatchLocator().process(fixes)

    assert failed == 0
    assert list(result.columns) == ['name', 'lat', 'lng', 'gcj_lat', 'gcj_lng', 'offset_m']
    assert 300 < result.loc[0, 'offset_m'] < 900
    assert result.loc[2, 'gcj_lat'] == fixes.loc[2, 'lat']
    assert result.loc[2, 'offset_m'] == 0


def test_geocoded_columns(fixes, city_table):
    result, failed = BatchLocator(geocoder=_geocoder, city_table=city_table).process(fixes)

    assert failed == 1
    assert list(result['city'][:2]) == ['北京', '杭州']
    assert list(result['upper_city'][:2]) == ['北京', '浙江']
    assert list(result['city_id'][:2]) == [290, 974]
    assert list(result['city_name_en'][:2]) == ['beijing', 'hangzhou']
    assert result.loc[3, 'city'] == ''
    assert result.loc[3, 'city_id'] == FALLBACK_CITY_ID


def test_missing_columns():
    with pytest.raises(ValueError, match='lng'):
        BatchLocator().process(pd.DataFrame({'lat': [30.0]}))


def test_main_writes_output(tmp_path, fixes, monkeypatch):
    monkeypatch.chdir(tmp_path)
    input_file = tmp_path / 'fixes.csv'
    fixes.to_csv(input_file, index=False)

    assert main([str(input_file)]) == 0

    output = pd.read_csv(tmp_path / 'fixes_located.csv')
    assert len(output) == 4
    assert 'gcj_lat' in output.columns


def test_main_missing_input(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main([str(tmp_path / 'missing.csv')]) == 1


def test_malformed_geocoder_body_counts_as_failed_row(fixes, city_table):
    response = mock.Mock(status_code=200)
    response.json.return_value = None
    session = mock.Mock()
    session.get.return_value = response
    geocoder = AmapReverseGeocoder(api_key='k', session=session)

    result, failed = BatchLocator(geocoder=geocoder, city_table=city_table).process(fixes.head(2))

    assert failed == 2
    assert list(result['city_id']) == [FALLBACK_CITY_ID, FALLBACK_CITY_ID]

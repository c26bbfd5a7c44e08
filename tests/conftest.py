import pytest

from mars_locator.city_table import CityRecord, reset_city_table_cache


@pytest.fixture(autouse=True)
def _fresh_city_table():
    reset_city_table_cache()
    yield
    reset_city_table_cache()


@pytest.fixture
def city_table():
    return (
        CityRecord(name='北京', id=290),
        CityRecord(name='杭州', id=974),
        CityRecord(name='浙江', id=9001),
        CityRecord(name='宁波', id=975),
    )

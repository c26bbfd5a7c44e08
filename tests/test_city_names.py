import pytest

from mars_locator.city_names import CAPITAL_CITIES, is_capital_city, pick_city_name, trim_city


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('北京市', '北京'),
        ('浙江省', '浙江'),
        ('香港特别行政区', '香港'),
        ('内蒙古自治区', '内蒙古'),
        ('广西壮族自治区', '广西'),
        ('新疆维吾尔自治区', '新疆'),
        ('延边朝鲜族自治州', '延边朝鲜族'),
        ('锡林郭勒盟', '锡林郭勒'),
        ('阿里地区', '阿里'),
        ('  杭州市 ', '杭州'),
        ('浦东新区', '浦东新区'),
        ('市', '市'),
        ('', ''),
        (None, ''),
    ],
)
def test_trim_city(raw, expected):
    assert trim_city(raw) == expected


def test_only_one_suffix_is_removed():
    assert trim_city('沙市市') == '沙市'


def test_capital_cities():
    assert len(CAPITAL_CITIES) == 31
    assert is_capital_city('北京市')
    assert is_capital_city('乌鲁木齐')
    assert not is_capital_city('宁波')
    assert not is_capital_city('京')


def test_pick_city_name_prefers_municipality():
    assert pick_city_name('上海市', '') == '上海'
    assert pick_city_name('上海市', '上海市') == '上海'


def test_pick_city_name_uses_lower_city_in_provinces():
    assert pick_city_name('浙江省', '宁波市') == '宁波'
    assert pick_city_name('浙江省', '') == '浙江'

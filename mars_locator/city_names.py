"""
City name normalization

Reverse geocoding answers carry full administrative names ("杭州市",
"广西壮族自治区"). The reference table and the capital list use the short form,
so names are trimmed here before any lookup.
"""

# Longest suffixes first; district-level suffixes (区, 县) are kept
ADMIN_SUFFIXES = ['特别行政区', '自治区', '自治州', '地区', '盟', '省', '市']

# Autonomous regions whose short name drops the ethnic qualifier as well
SPECIAL_MAPPINGS = {
    '广西壮族': '广西',
    '宁夏回族': '宁夏',
    '新疆维吾尔': '新疆',
}

# Municipalities and provincial capitals
CAPITAL_CITIES = frozenset([
    '北京', '天津', '上海', '重庆', '石家庄', '太原', '呼和浩特', '沈阳',
    '长春', '哈尔滨', '南京', '杭州', '合肥', '福州', '南昌', '济南', '郑州',
    '武汉', '长沙', '广州', '南宁', '海口', '成都', '贵阳', '昆明', '西安',
    '兰州', '西宁', '拉萨', '银川', '乌鲁木齐',
])


def trim_city(name):
    """
    Strip one administrative suffix from a city or province name

    Single-character names are returned as-is so that a name like "县" is
    never trimmed to nothing.

    Args:
        name (str): Name as returned by the geocoder

    Returns:
        str: Short name, or "" for empty input
    """
    if not name or not isinstance(name, str):
        return ""

    cleaned = name.strip()
    for suffix in ADMIN_SUFFIXES:
        if cleaned.endswith(suffix) and len(cleaned) > len(suffix):
            cleaned = cleaned[:-len(suffix)]
            break

    return SPECIAL_MAPPINGS.get(cleaned, cleaned)


def is_capital_city(name):
    return trim_city(name) in CAPITAL_CITIES


def pick_city_name(upper_city, city):
    """
    Choose the city a fix is attributed to

    Municipalities and provincial capitals are used directly; elsewhere the
    lower-level city wins, falling back to the upper name when it is empty.

    Args:
        upper_city (str): Province or municipality name
        city (str): Prefecture-level city name

    Returns:
        str: Trimmed city name
    """
    upper_name = trim_city(upper_city)
    if upper_name in CAPITAL_CITIES:
        return upper_name
    return trim_city(city) or upper_name

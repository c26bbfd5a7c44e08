from mars_locator.store import CITY, UPPER_CITY, City, LocationStore


def test_updates_are_visible():
    store = LocationStore()
    assert store.upper_city is None
    assert store.city is None

    store.update_upper_city(City(id=290, name='北京', upper=True))
    store.update_city(City(id=290, name='北京'))

    assert store.upper_city.name == '北京'
    assert store.upper_city.upper
    assert not store.city.upper


def test_listeners_receive_changes():
    store = LocationStore()
    events = []
    unsubscribe = store.subscribe(lambda field, city: events.append((field, city.name)))

    store.update_upper_city(City(id=9001, name='浙江', upper=True))
    store.update_city(City(id=974, name='杭州'))
    unsubscribe()
    store.update_city(City(id=975, name='宁波'))

    assert events == [(UPPER_CITY, '浙江'), (CITY, '杭州')]


def test_failing_listener_does_not_block_others():
    store = LocationStore()
    events = []

    def broken(field, city):
        raise RuntimeError('listener failed')

    store.subscribe(broken)
    store.subscribe(lambda field, city: events.append(field))
    store.update_city(City(id=974, name='杭州'))

    assert events == [CITY]
    assert store.city.name == '杭州'

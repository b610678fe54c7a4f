import pytest

from engine.errors import UnavailableCapabilityError
from engine.geolocation import LocationTracker, ScriptedGeolocation
from world.grid import GeoPoint


def _route():
    return [GeoPoint(lat=0.001, lng=0.0), GeoPoint(lat=0.002, lng=0.0)]


def test_tracker_holds_one_subscription():
    provider = ScriptedGeolocation(_route())
    received = []
    tracker = LocationTracker(provider, received.append)

    tracker.start()
    tracker.start()
    assert provider.watcher_count == 1

    provider.pump()
    assert received == [GeoPoint(lat=0.001, lng=0.0)]

    tracker.stop()
    assert provider.watcher_count == 0
    assert provider.pump() is None
    assert len(received) == 1


def test_toggle_flips_state():
    provider = ScriptedGeolocation(_route())
    tracker = LocationTracker(provider, lambda point: None)
    assert tracker.toggle() is True
    assert tracker.active
    assert tracker.toggle() is False
    assert provider.watcher_count == 0


def test_route_is_consumed_once():
    provider = ScriptedGeolocation(_route())
    provider.watch(lambda point: None)
    assert provider.pump() is not None
    assert provider.pump() is not None
    assert provider.pump() is None


def test_tracker_without_provider():
    tracker = LocationTracker(None, lambda point: None)
    with pytest.raises(UnavailableCapabilityError):
        tracker.start()
    tracker.stop()
    assert not tracker.active

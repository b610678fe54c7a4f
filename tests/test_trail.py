from world.grid import GeoPoint
from world.trail import MovementTrail


def test_polyline_ends_at_current_position():
    trail = MovementTrail()
    a = GeoPoint(lat=0.0, lng=0.0)
    b = GeoPoint(lat=0.0001, lng=0.0)
    trail.record(a)
    trail.record(b)
    current = GeoPoint(lat=0.0002, lng=0.0)
    assert trail.polyline(current) == [a, b, current]
    assert len(trail) == 2


def test_state_roundtrip_and_bad_points():
    trail = MovementTrail()
    trail.record(GeoPoint(lat=1.5, lng=-2.5))
    state = trail.get_state()
    assert state == [{"lat": 1.5, "lng": -2.5}]

    restored = MovementTrail()
    restored.load_state(state + [{"lng": 3}, "nope"])
    assert restored.points == [GeoPoint(lat=1.5, lng=-2.5)]

    restored.load_state({"lat": 0})
    assert len(restored) == 0

from engine.history import SessionSnapshot, SnapshotLog
from world.grid import GeoPoint


def _snap(label):
    return SessionSnapshot(
        label=label,
        position=GeoPoint(lat=0, lng=0),
        inventory=(),
        caches=(("0,1", ("0:1#0",)),),
        trail=(),
    )


def test_undo_walks_back_through_chain():
    log = SnapshotLog()
    assert not log.can_undo
    assert log.undo() is None

    log.record(_snap("first"))
    log.record(_snap("second"))
    assert log.undo().label == "second"
    assert log.undo().label == "first"
    assert log.undo() is None


def test_log_only_grows():
    log = SnapshotLog()
    log.record(_snap("first"))
    log.record(_snap("second"))
    log.undo()
    index = log.record(_snap("third"))

    assert len(log) == 3
    assert index == 2
    # "third" was recorded on top of "first"; "second" is off the chain
    assert log[2].previous == 0
    assert log.undo().label == "third"
    assert log.undo().label == "first"


def test_reset_detaches_head():
    log = SnapshotLog()
    log.record(_snap("first"))
    log.reset()
    assert not log.can_undo
    assert len(log) == 1
    assert log[0].caches_dict() == {"0,1": ("0:1#0",)}

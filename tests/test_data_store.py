import threading

import pytest

from core.data_models import SatelliteRecord, SessionStatus
from core.data_store import RollingLog, SharedState


def _sat(prn: str) -> SatelliteRecord:
    return SatelliteRecord(id=prn, elevation=10.0, azimuth=20.0, strength=30)


def test_log_never_exceeds_capacity():
    state = SharedState()

    for i in range(1200):
        state.append_log_line(f"line {i}")
        assert len(state.get_state().log_tail) <= 500


def test_501st_line_evicts_the_first():
    state = SharedState()
    for i in range(501):
        state.append_log_line(f"line {i}")

    tail = state.get_state().log_tail

    assert len(tail) == 500
    assert tail[0] == "line 1"
    assert tail[-1] == "line 500"


def test_rolling_log_trim_reports_evictions():
    log = RollingLog(capacity=3)
    for i in range(5):
        log.append(str(i))

    assert len(log) == 5
    assert log.trim() == 2
    assert log.lines() == ["2", "3", "4"]
    assert log.trim() == 0


def test_rolling_log_rejects_zero_capacity():
    with pytest.raises(ValueError):
        RollingLog(capacity=0)


def test_replace_satellites_is_wholesale():
    state = SharedState()
    state.replace_satellites([_sat("01"), _sat("02")])
    state.replace_satellites([_sat("03")])

    assert [s.id for s in state.get_state().satellites] == ["03"]

    state.replace_satellites([])
    assert state.get_state().satellites == ()


def test_snapshot_is_a_copy():
    state = SharedState()
    records = [_sat("01")]
    state.replace_satellites(records)
    snapshot = state.get_state()

    records.append(_sat("02"))
    state.append_log_line("after")

    assert len(snapshot.satellites) == 1
    assert snapshot.log_tail == ()


def test_only_one_concurrent_start_is_granted():
    state = SharedState()
    n = 16
    barrier = threading.Barrier(n)
    results = []
    lock = threading.Lock()

    def worker(idx):
        barrier.wait()
        granted = state.start_if_idle(f"COM{idx}")
        with lock:
            results.append(granted)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert state.get_state().status == SessionStatus.OPENING


def test_session_lifecycle():
    state = SharedState()
    assert state.get_state().status == SessionStatus.IDLE

    assert state.start_if_idle("COM3")
    snapshot = state.get_state()
    assert snapshot.status == SessionStatus.OPENING
    assert snapshot.port == "COM3"
    assert not snapshot.is_reading

    state.mark_streaming()
    assert state.get_state().is_reading
    assert not state.start_if_idle("COM3")

    state.append_log_line("$GPGSV,1,1,00")
    state.finish("read error: device disconnected")
    snapshot = state.get_state()
    assert snapshot.status == SessionStatus.STOPPED
    assert snapshot.stop_reason == "read error: device disconnected"
    assert not snapshot.is_reading
    assert snapshot.log_tail == ("$GPGSV,1,1,00",)

    assert state.start_if_idle("COM4")
    assert state.get_state().stop_reason is None


def test_is_reading_flag_blocks_start():
    state = SharedState()
    state.set_is_reading(True)

    assert not state.start_if_idle("COM1")


def test_reset_refused_while_active():
    state = SharedState()
    state.append_log_line("x")
    state.start_if_idle("COM1")

    assert not state.reset()
    assert state.get_state().log_tail == ("x",)


def test_reset_clears_after_stop():
    state = SharedState()
    state.start_if_idle("COM1")
    state.mark_streaming()
    state.append_log_line("x")
    state.replace_satellites([_sat("01")])
    state.finish("stopped")

    assert state.reset()
    snapshot = state.get_state()
    assert snapshot.log_tail == ()
    assert snapshot.satellites == ()
    assert snapshot.status == SessionStatus.IDLE
    assert snapshot.port is None


def test_custom_log_capacity():
    state = SharedState(log_capacity=2)
    for line in ["a", "b", "c"]:
        state.append_log_line(line)

    assert state.log_capacity == 2
    assert state.get_state().log_tail == ("b", "c")

"""
Tests for the dial sampler: position mapping, drag handling and write throttling.
"""
import pytest

from dialtester.recorder.sampler import DialSampler, Throttle, TrackBounds, position_to_value
from dialtester.recorder.timer import SessionTimer

TRACK = TrackBounds(left=100, width=400)


class ListSink:
    def __init__(self, accept=True):
        self.writes = []
        self.accept = accept

    def submit(self, write):
        if self.accept:
            self.writes.append(write)
        return self.accept


@pytest.fixture
def sink():
    return ListSink()


@pytest.fixture
def timer():
    timer = SessionTimer(auto_tick=False)
    timer.start()
    return timer


@pytest.fixture
def sampler(timer, sink, clock):
    return DialSampler(session_id="s-1", timer=timer, sink=sink, started_at=clock(), clock=clock)


class TestPositionToValue:

    def test_left_edge_is_minus_hundred(self):
        assert position_to_value(100, 100, 400) == -100

    def test_centre_is_zero(self):
        assert position_to_value(300, 100, 400) == 0

    def test_right_edge_is_plus_hundred(self):
        assert position_to_value(500, 100, 400) == 100

    def test_outside_track_is_clamped(self):
        assert position_to_value(-50, 100, 400) == -100
        assert position_to_value(9000, 100, 400) == 100

    def test_monotonic_in_position(self):
        values = [position_to_value(x, 100, 400) for x in range(80, 521)]
        assert values == sorted(values)

    def test_rounds_to_integer(self):
        assert position_to_value(200, 100, 400) == -50
        assert position_to_value(202, 100, 400) == -49
        assert position_to_value(398, 100, 400) == 49

    def test_zero_width_track(self):
        assert position_to_value(10, 10, 0) == 0


class TestThrottle:

    def test_first_call_passes(self):
        assert Throttle(100).ready(0.0)

    def test_blocks_inside_interval(self):
        throttle = Throttle(100)
        assert throttle.ready(10.0)
        assert not throttle.ready(10.05)
        assert throttle.ready(10.1)


class TestDialSampler:

    def test_moves_ignored_until_pressed(self, sampler, sink):
        assert sampler.move(300, TRACK) is None
        assert sampler.samples == []
        assert sink.writes == []

    def test_press_samples_and_dispatches(self, sampler, sink):
        assert sampler.press(500, TRACK) == 100
        assert sampler.current_value == 100
        assert len(sampler.samples) == 1
        assert sink.writes[0].value == 100
        assert sink.writes[0].session_id == "s-1"

    def test_writes_50ms_apart_dispatch_once(self, sampler, sink, clock):
        sampler.press(300, TRACK)
        clock.advance_ms(50)
        sampler.move(350, TRACK)
        assert len(sink.writes) == 1
        assert len(sampler.samples) == 2

    def test_writes_150ms_apart_dispatch_twice(self, sampler, sink, clock):
        sampler.press(300, TRACK)
        clock.advance_ms(150)
        sampler.move(350, TRACK)
        assert [w.value for w in sink.writes] == [0, 25]

    def test_throttle_measured_from_last_dispatch(self, sampler, sink, clock):
        sampler.press(300, TRACK)
        for _ in range(4):
            clock.advance_ms(40)
            sampler.move(310, TRACK)
        # dispatched at 0ms and 120ms
        assert len(sink.writes) == 2
        assert len(sampler.samples) == 5

    def test_sample_timestamps_relative_to_start(self, sampler, clock):
        clock.advance_ms(2500)
        sampler.press(300, TRACK)
        assert sampler.samples[0].timestamp_ms == 2500

    def test_release_stops_sampling(self, sampler, clock):
        sampler.press(300, TRACK)
        sampler.release()
        clock.advance_ms(500)
        assert sampler.move(400, TRACK) is None
        assert len(sampler.samples) == 1

    def test_paused_session_ignores_input(self, sampler, timer, sink):
        timer.pause()
        assert sampler.press(300, TRACK) is None
        assert sampler.samples == []
        assert sink.writes == []

    def test_dropped_write_keeps_local_sample(self, timer, clock):
        sink = ListSink(accept=False)
        sampler = DialSampler(session_id="s-1", timer=timer, sink=sink, started_at=clock(), clock=clock)
        sampler.press(100, TRACK)
        assert sampler.values() == [-100]
        assert sampler.dispatched == 0

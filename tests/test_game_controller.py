import numpy as np
import pytest

from toegrip.models.events import EventType, GameState
from toegrip.models.game_controller import GameController
from toegrip.models.spawner import FallingObject, FruitType
from conftest import start_playing


def types(events):
    return [e.type for e in events]


def test_marker_found_starts_calibration_on_next_tick(controller):
    controller.marker_acquired()
    assert controller.state == GameState.WAITING

    events = controller.tick(0, True, 5.0)
    assert controller.state == GameState.CALIBRATING
    assert events[0].data == {"from": "waiting", "to": "calibrating"}


def test_calibration_then_play_after_acknowledgment(controller):
    controller.marker_acquired()
    controller.tick(0, True, 5.0)
    controller.tick(1500, True, 5.0)
    assert controller.calibration.progress == pytest.approx(0.5)

    events = controller.tick(3000, True, 5.0)
    assert EventType.CALIBRATION_COMPLETE in types(events)
    assert any(e.data.get("text") == "Calibration Complete!" for e in events)
    assert controller.session.reference.angle_deg == 5.0
    assert controller.state == GameState.CALIBRATING

    assert EventType.CALIBRATION_COMPLETE not in types(controller.tick(3500, True, 5.0))
    assert controller.state == GameState.CALIBRATING

    controller.tick(4000, True, 5.0)
    assert controller.state == GameState.PLAYING
    assert controller.session.remaining_s == 180


def test_tracking_loss_during_calibration_returns_to_waiting(controller):
    controller.marker_acquired()
    controller.tick(0, True, 5.0)
    controller.tick(1000, False, 5.0)
    assert controller.state == GameState.WAITING
    assert controller.session.reference is None

    # Reacquiring the marker restarts the capture window
    controller.marker_acquired()
    controller.tick(2000, True, 5.0)
    assert controller.state == GameState.CALIBRATING
    controller.tick(3000, True, 5.0)
    assert controller.calibration.progress == pytest.approx(1 / 3)


def test_marker_lost_event_aborts_calibration(controller):
    controller.marker_acquired()
    controller.tick(0, True, 5.0)
    controller.marker_lost()
    controller.tick(100, True, 5.0)
    assert controller.state == GameState.WAITING
    assert not controller.marker_visible


def test_restart_while_waiting_is_noop(controller):
    before = (controller.state, controller.session.score, controller.session.reps)
    session = controller.session
    controller.request_restart()
    events = controller.tick(0, False, 0.0)
    assert events == []
    assert controller.session is session
    assert (controller.state, controller.session.score, controller.session.reps) == before


def test_restart_ignored_while_playing(controller):
    start_playing(controller)
    controller.request_restart()
    controller.tick(5000, True, 5.0)
    assert controller.state == GameState.PLAYING


def test_rep_counted_from_calibrated_angle(controller):
    start = start_playing(controller, neutral=5.0)
    reps = []
    for i, angle in enumerate([0, 10, 20, 25, 8, 5]):
        events = controller.tick(start + (i + 1) * 16, True, 5.0 + angle)
        reps += [e for e in events if e.type == EventType.REP_COMPLETED]

    assert len(reps) == 1
    assert controller.session.reps == 1


def test_no_reps_or_catcher_motion_without_tracking(controller, scene):
    start = start_playing(controller, neutral=0.0)
    scene.drain()
    for i, angle in enumerate([20, 25, 8, 5, 20, 25, 8, 5]):
        controller.tick(start + (i + 1) * 16, False, angle)

    assert controller.session.reps == 0
    assert controller.session.curl_magnitude == 0.0
    assert not any(c["command"] == "setCatcherPosition" for c in scene.drain())


def test_game_keeps_running_without_tracking(controller):
    start = start_playing(controller)
    controller.tick(start + 10_000, False, 0.0, delta_ms=16)
    assert controller.session.remaining_s == pytest.approx(170)
    assert len(controller.simulator) == 1  # First spawn still happens


def test_catcher_follows_curl_magnitude(controller, scene):
    start = start_playing(controller, neutral=10.0)
    controller.tick(start + 16, True, 10.0 + 22.5)
    assert controller.session.curl_magnitude == pytest.approx(0.5)
    assert controller.session.catcher_y == pytest.approx(0.0)

    controller.tick(start + 32, True, 10.0 - 90)
    assert controller.session.curl_magnitude == 1.0
    assert controller.session.catcher_y == pytest.approx(0.15)
    assert scene.drain()[-1] == {"command": "setCatcherPosition", "y": 0.15}


def test_game_over_exactly_at_duration_and_only_once(controller, history):
    start = start_playing(controller)
    controller.tick(start + 179_999, True, 5.0)
    assert controller.state == GameState.PLAYING

    events = controller.tick(start + 180_000, True, 5.0)
    assert controller.state == GameState.GAMEOVER
    assert types(events).count(EventType.SESSION_FINISHED) == 1
    assert controller.session.remaining_s == 0
    assert len(controller.simulator) == 0

    events = controller.tick(start + 180_016, True, 5.0)
    assert EventType.SESSION_FINISHED not in types(events)
    assert len(history.records) == 1

    record = history.records[0]
    assert record.configuredDurationSeconds == 180
    assert record.score == controller.session.score
    assert record.reps == controller.session.reps


def test_restart_after_game_over(controller):
    start = start_playing(controller)
    controller.tick(start + 180_000, True, 5.0)
    old_session = controller.session

    controller.request_restart()
    events = controller.tick(start + 181_000, True, 5.0)
    assert controller.state == GameState.WAITING
    assert controller.session is not old_session
    assert controller.session.reference is None
    assert events[0].data == {"from": "gameover", "to": "waiting"}

    # Second restart is a no-op
    controller.request_restart()
    assert controller.tick(start + 182_000, True, 5.0) == []


def test_entering_play_resets_session_values(controller):
    start = start_playing(controller)
    controller.session.scoring.score = 99
    controller.tick(start + 180_000, True, 5.0)
    controller.request_restart()
    controller.tick(start + 181_000, True, 5.0)
    start_two = start + 200_000
    controller.marker_acquired()
    controller.tick(start_two, True, 5.0)
    controller.tick(start_two + 3000, True, 5.0)
    controller.tick(start_two + 4000, True, 5.0)

    session = controller.session
    assert controller.state == GameState.PLAYING
    assert (session.score, session.combo, session.reps, session.best_hold) == (0, 1, 0, 0)
    assert len(controller.simulator) == 0
    assert controller.spawner.interval_ms == 2000


def test_history_failure_does_not_block_game_over(scene):
    class BrokenHistory:
        def load(self):
            return []

        def save(self, record):
            raise OSError("disk full")

    controller = GameController(scene, history=BrokenHistory(), rng=np.random.default_rng(1),
                                session_duration_s=10, calibration_ms=3000, ack_delay_ms=1000)
    start = start_playing(controller)
    controller.tick(start + 10_000, True, 5.0)
    assert controller.state == GameState.GAMEOVER
    assert controller.session.final_record is not None


def test_caught_fruit_scores(controller):
    start = start_playing(controller, neutral=0.0)
    apple = FruitType("apple", "#FF0000", 10)
    # Catcher sits at -0.15 with no curl; drop a fruit right onto it
    controller.simulator.add(FallingObject(object_id=99, fruit=apple, x=0.0, y=-0.1,
                                           fall_speed=0.1, spawn_time=start))
    events = controller.tick(start + 500, True, 0.0)
    assert EventType.CATCH in types(events)
    assert controller.session.score == 10


def test_long_session_invariants(scene):
    controller = GameController(scene, rng=np.random.default_rng(3), session_duration_s=120,
                                curl_threshold=15, calibration_ms=3000, ack_delay_ms=1000)
    start = start_playing(controller, neutral=0.0)
    angles = np.random.default_rng(11).uniform(0, 45, size=120 * 30)

    scores, intervals = [], []
    now = start
    for angle in angles:
        now += 1000 / 30
        tracking = angle < 40
        controller.tick(now, tracking, float(angle))
        if controller.state != GameState.PLAYING:
            break
        scores.append(controller.session.score)
        intervals.append(controller.spawner.interval_ms)
        assert 1 <= controller.session.combo <= 5
        for obj in controller.simulator.objects:
            assert -0.3 <= obj.y <= 0.3

    assert all(b >= a for a, b in zip(scores, scores[1:]))
    assert all(b <= a for a, b in zip(intervals, intervals[1:]))
    assert min(intervals) >= 800

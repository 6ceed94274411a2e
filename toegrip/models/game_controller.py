# game_controller.py
"""
Session clock and game state machine.
Coordinates calibration, rep counting, spawning, falling objects and scoring
once per tick, and finalizes a session record when time runs out.
"""

from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Optional, Protocol

import numpy as np

from toegrip.config import config
from toegrip.utils.logging_utils import logger
from toegrip.utils.motivation import format_hold
from toegrip.models.calibration import CalibrationTracker
from toegrip.models.events import EventType, GameEvent, GameState, achievement
from toegrip.models.falling_objects import FallingObjectSimulator, Outcome, Scene
from toegrip.models.schemas import SessionRecord
from toegrip.models.session import Session
from toegrip.models.spawner import FallingObject, ObjectSpawner
from toegrip.models.toe_curl_counter import ToeCurlCounter, curl_angle, curl_magnitude


class HistoryStore(Protocol):
    def load(self) -> List[SessionRecord]: ...

    def save(self, record: SessionRecord) -> None: ...


MARKER_ACQUIRED = "marker_acquired"
MARKER_LOST = "marker_lost"
RESTART = "restart"


class GameController:
    """
    Drives one game instance. External signals (marker acquired/lost, restart)
    are buffered and applied at the start of the next tick, never mid-tick.
    All timing decisions in a tick use the single `now` passed to tick().
    """

    def __init__(
        self,
        scene: Scene,
        history: Optional[HistoryStore] = None,
        rng: Optional[np.random.Generator] = None,
        session_duration_s: Optional[float] = None,
        curl_threshold: Optional[float] = None,
        calibration_ms: Optional[float] = None,
        ack_delay_ms: Optional[float] = None,
    ):
        self.scene = scene
        self.history = history
        self.session_duration_s = session_duration_s if session_duration_s is not None else config.session_duration_s
        self.curl_threshold = curl_threshold
        self.ack_delay_ms = ack_delay_ms if ack_delay_ms is not None else config.calibration_ack_delay_ms

        self.calibration = CalibrationTracker(calibration_ms)
        self.spawner = ObjectSpawner(rng=rng)
        self.simulator = FallingObjectSimulator(scene)
        self.session = self._new_session()

        self.marker_visible = False
        self._pending: Deque[str] = deque()
        self._play_at: Optional[float] = None
        self._last_tick: Optional[float] = None

        logger.info(f"GameController initialized ({self.session_duration_s:.0f}s sessions)")

    def _new_session(self) -> Session:
        return Session(
            duration_s=self.session_duration_s,
            counter=ToeCurlCounter(threshold=self.curl_threshold),
        )

    @property
    def state(self) -> GameState:
        return self.session.state

    # External signals, buffered until the next tick
    def marker_acquired(self):
        self._pending.append(MARKER_ACQUIRED)

    def marker_lost(self):
        self._pending.append(MARKER_LOST)

    def request_restart(self):
        self._pending.append(RESTART)

    def tick(
        self,
        now: float,
        tracking_active: bool,
        raw_angle: float,
        delta_ms: Optional[float] = None,
    ) -> List[GameEvent]:
        """
        Run one frame. `now` is a monotonic timestamp in milliseconds;
        delta_ms defaults to the time since the previous tick.
        """
        if delta_ms is None:
            delta_ms = 0.0 if self._last_tick is None else now - self._last_tick
        self._last_tick = now

        events: List[GameEvent] = []
        self._apply_pending(now, events)

        if self.state == GameState.CALIBRATING:
            self._update_calibration(now, tracking_active, raw_angle, events)
        elif self.state == GameState.PLAYING:
            self._update_game(now, delta_ms, tracking_active, raw_angle, events)

        return events

    def _apply_pending(self, now: float, events: List[GameEvent]):
        while self._pending:
            signal = self._pending.popleft()

            if signal == MARKER_ACQUIRED:
                logger.info("Marker found!")
                self.marker_visible = True
                if self.state == GameState.WAITING:
                    self._start_calibration(now, events)

            elif signal == MARKER_LOST:
                logger.info("Marker lost!")
                self.marker_visible = False
                if self.state == GameState.CALIBRATING and self.calibration.reference is None:
                    self._abort_calibration(events, now)

            elif signal == RESTART:
                if self.state == GameState.GAMEOVER:
                    self._restart(now, events)
                else:
                    logger.info(f"Restart ignored while {self.state.value}")

    def _set_state(self, new_state: GameState, now: float, events: List[GameEvent]):
        old_state = self.session.state
        self.session.state = new_state
        events.append(GameEvent(EventType.STATE_CHANGED, now, {
            "from": old_state.value,
            "to": new_state.value,
        }))
        logger.info(f"State changed to: {new_state.value}")

    def _start_calibration(self, now: float, events: List[GameEvent]):
        self._set_state(GameState.CALIBRATING, now, events)
        self.calibration.begin(now)
        self._play_at = None

    def _abort_calibration(self, events: List[GameEvent], now: float):
        self.calibration.reset()
        self._play_at = None
        self._set_state(GameState.WAITING, now, events)

    def _update_calibration(self, now: float, tracking_active: bool, raw_angle: float,
                            events: List[GameEvent]):
        if self.calibration.reference is None:
            progress = self.calibration.tick(tracking_active, raw_angle, now)

            if progress.aborted:
                self._abort_calibration(events, now)
                return

            if progress.completed:
                self.session.reference = self.calibration.reference
                self._play_at = now + self.ack_delay_ms
                events.append(GameEvent(EventType.CALIBRATION_COMPLETE, now, {
                    "referenceAngle": self.session.reference.angle_deg,
                }))
                events.append(achievement(now, "Calibration Complete!"))

        if self._play_at is not None and now >= self._play_at:
            self._start_game(now, events)

    def _start_game(self, now: float, events: List[GameEvent]):
        self._set_state(GameState.PLAYING, now, events)
        self._play_at = None

        session = self.session
        session.started_at = now
        session.remaining_s = self.session_duration_s
        session.counter.reset()
        session.scoring.reset()
        session.curl_angle = 0.0
        session.curl_magnitude = 0.0
        session.final_record = None

        self.simulator.clear()
        self.spawner.reset(now)
        self._move_catcher()

    def _update_game(self, now: float, delta_ms: float, tracking_active: bool, raw_angle: float,
                     events: List[GameEvent]):
        session = self.session
        elapsed = (now - session.started_at) / 1000
        session.remaining_s = max(0.0, self.session_duration_s - elapsed)

        if session.remaining_s <= 0:
            self._end_game(now, events)
            return

        # Motion freezes while the marker is out of view; the game keeps running
        if tracking_active and session.reference is not None:
            session.curl_angle = curl_angle(raw_angle, session.reference.angle_deg)
            session.curl_magnitude = curl_magnitude(session.curl_angle)
            events.extend(session.counter.update(session.curl_angle, now))
            self._move_catcher()

        obj = self.spawner.maybe_spawn(now)
        if obj is not None:
            self.simulator.add(obj)

        def on_outcome(fallen: FallingObject, outcome: Outcome):
            if outcome is Outcome.CAUGHT:
                events.extend(session.scoring.on_catch(fallen, now))
            else:
                events.extend(session.scoring.on_miss(fallen, now))

        self.simulator.update(delta_ms, (config.catcher_x, session.catcher_y), on_outcome)

    def _move_catcher(self):
        session = self.session
        min_y, max_y = config.catcher_min_y, config.catcher_max_y
        session.catcher_y = min_y + session.curl_magnitude * (max_y - min_y)
        self.scene.set_catcher_position(session.catcher_y)

    def _end_game(self, now: float, events: List[GameEvent]):
        self._set_state(GameState.GAMEOVER, now, events)
        self.simulator.clear()

        session = self.session
        record = SessionRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            score=session.score,
            reps=session.reps,
            bestHoldSeconds=round(session.best_hold, 3),
            configuredDurationSeconds=self.session_duration_s,
        )
        session.final_record = record
        logger.info(f"🏁 Session finished - score {record.score}, reps {record.reps}, "
                    f"best hold {format_hold(session.best_hold)}")

        events.append(GameEvent(EventType.SESSION_FINISHED, now, record.model_dump()))

        if self.history is not None:
            try:
                self.history.save(record)
            except Exception as e:
                # Final stats are already on screen; losing the save must not block game over
                logger.error(f"Error saving session history: {e}")

    def _restart(self, now: float, events: List[GameEvent]):
        self.calibration.reset()
        self.simulator.clear()
        self._play_at = None
        self.session = self._new_session()
        # New session starts WAITING; report the transition from game over
        events.append(GameEvent(EventType.STATE_CHANGED, now, {
            "from": GameState.GAMEOVER.value,
            "to": GameState.WAITING.value,
        }))
        logger.info("State changed to: waiting")

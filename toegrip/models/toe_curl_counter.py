# toe_curl_counter.py
"""
Toe curl repetition counter driven by the calibrated curl angle.
A rep is one full neutral -> curling -> curled -> releasing -> neutral cycle.
"""

from enum import Enum
from typing import List, Optional

import numpy as np

from toegrip.config import config
from toegrip.utils.logging_utils import logger
from toegrip.utils.motivation import get_milestone_text, get_rep_text
from toegrip.models.events import EventType, GameEvent, achievement


class CurlState(Enum):
    """Phases of a single toe curl"""
    NEUTRAL = "neutral"
    CURLING = "curling"
    CURLED = "curled"
    RELEASING = "releasing"


def curl_angle(raw_angle: float, reference_angle: float) -> float:
    """
    Deviation from the calibrated neutral, in degrees.
    Uses a single rotation axis, so it approximates rather than measures the 3D curl.
    """
    return abs(raw_angle - reference_angle)


def curl_magnitude(angle: float, max_angle: Optional[float] = None) -> float:
    """Normalize a curl angle to 0-1, saturating at max_angle"""
    max_angle = max_angle if max_angle is not None else config.max_curl_angle_deg
    return float(np.clip(angle / max_angle, 0.0, 1.0))


class ToeCurlCounter:
    """
    Repetition state machine over the curl angle.
    Thresholds are fixed multiples of the base threshold T:
    curl confirmed above 1.5T, release starts below 0.7T, release confirmed below 0.5T.
    """

    def __init__(self, threshold: Optional[float] = None, milestone_every: Optional[int] = None):
        self.count = 0
        self.threshold = threshold if threshold is not None else config.curl_threshold_deg
        self.milestone_every = milestone_every or config.rep_milestone_every

        self.state = CurlState.NEUTRAL
        self.hold_start: Optional[float] = None
        self.current_hold = 0.0  # Seconds
        self.best_hold = 0.0

        logger.info(
            f"🦶 Toe curl thresholds: start>{self.threshold}°, curled>{self.threshold * 1.5}°, "
            f"release<{self.threshold * 0.7}°, neutral<{self.threshold * 0.5}°"
        )

    def update(self, angle: float, now: float) -> List[GameEvent]:
        """
        Advance the state machine by one sample.
        Conditions are checked in order per state; the first match wins and no match holds.
        """
        events: List[GameEvent] = []
        t = self.threshold

        if self.state == CurlState.NEUTRAL:
            if angle > t:
                self._change_state(CurlState.CURLING, angle)

        elif self.state == CurlState.CURLING:
            if angle > t * 1.5:
                self._change_state(CurlState.CURLED, angle)
                self.hold_start = now
            elif angle < t * 0.5:
                self._change_state(CurlState.NEUTRAL, angle)

        elif self.state == CurlState.CURLED:
            if angle < t * 0.7:
                self._change_state(CurlState.RELEASING, angle)
            else:
                self.current_hold = (now - self.hold_start) / 1000
                if self.current_hold > self.best_hold:
                    self.best_hold = self.current_hold

        elif self.state == CurlState.RELEASING:
            if angle < t * 0.5:
                self._change_state(CurlState.NEUTRAL, angle)
                self.count += 1
                logger.info(f"✅ TOE CURL REP #{self.count} completed! Released to {angle:.1f}°")
                events.append(GameEvent(EventType.REP_COMPLETED, now, {
                    "reps": self.count,
                    "holdSeconds": round(self.current_hold, 1),
                }))
                events.append(achievement(now, get_rep_text(self.count)))

                milestone = get_milestone_text(self.count, self.milestone_every)
                if milestone:
                    events.append(GameEvent(EventType.REP_MILESTONE, now, {"reps": self.count}))
                    events.append(achievement(now, milestone))

                self.current_hold = 0.0
            elif angle > t:
                self._change_state(CurlState.CURLED, angle)

        return events

    def _change_state(self, new_state: CurlState, angle: float):
        logger.debug(f"Curl state {self.state.value} -> {new_state.value} at {angle:.1f}°")
        self.state = new_state

    def reset(self):
        """Reset counter to initial state for a new session"""
        self.count = 0
        self.state = CurlState.NEUTRAL
        self.hold_start = None
        self.current_hold = 0.0
        self.best_hold = 0.0
        logger.info("Toe curl counter reset")

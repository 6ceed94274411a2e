# calibration.py
"""
Neutral-pose calibration. The marker must stay tracked for a fixed window
before its orientation is captured as the zero reference for curl angles.
"""

from dataclasses import dataclass
from typing import Optional
from toegrip.config import config
from toegrip.utils.logging_utils import logger


@dataclass
class CalibrationReference:
    angle_deg: float
    captured_at: float


@dataclass
class CalibrationProgress:
    fraction: float          # Elapsed share of the capture window, clamped to [0, 1]
    completed: bool = False  # True only on the tick that captured the reference
    aborted: bool = False    # Tracking was lost before completion


class CalibrationTracker:
    """
    Timed capture of the neutral orientation.
    Signals completion exactly once per begin(); aborts on tracking loss.
    """

    def __init__(self, duration_ms: Optional[float] = None):
        self.duration_ms = duration_ms if duration_ms is not None else config.calibration_duration_ms
        self.started_at: Optional[float] = None
        self.reference: Optional[CalibrationReference] = None
        self.progress = 0.0

    @property
    def active(self) -> bool:
        return self.started_at is not None and self.reference is None

    def begin(self, now: float):
        """Open a new capture window; any previous reference is discarded"""
        self.started_at = now
        self.reference = None
        self.progress = 0.0
        logger.info("🎯 Calibration started - hold your foot still")

    def tick(self, tracking_active: bool, raw_angle: float, now: float) -> CalibrationProgress:
        if self.started_at is None:
            return CalibrationProgress(0.0)

        if self.reference is not None:
            return CalibrationProgress(1.0)

        if not tracking_active:
            logger.warning(f"Calibration aborted at {self.progress * 100:.0f}% - marker lost")
            self.started_at = None
            self.progress = 0.0
            return CalibrationProgress(0.0, aborted=True)

        elapsed = now - self.started_at
        if self.duration_ms <= 0:
            self.progress = 1.0
        else:
            self.progress = min(1.0, max(0.0, elapsed / self.duration_ms))

        if self.progress >= 1.0:
            self.reference = CalibrationReference(angle_deg=raw_angle, captured_at=now)
            logger.info(f"✅ Calibration complete - neutral angle {raw_angle:.1f}°")
            return CalibrationProgress(1.0, completed=True)

        return CalibrationProgress(self.progress)

    def reset(self):
        self.started_at = None
        self.reference = None
        self.progress = 0.0

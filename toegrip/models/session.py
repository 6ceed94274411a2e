# session.py
from dataclasses import dataclass, field
from typing import Optional

from toegrip.models.calibration import CalibrationReference
from toegrip.models.events import GameState
from toegrip.models.schemas import SessionRecord
from toegrip.models.scoring import ScoreEngine
from toegrip.models.toe_curl_counter import ToeCurlCounter


@dataclass
class Session:
    """
    Everything belonging to one play-through. Replaced wholesale on restart.
    """
    duration_s: float
    state: GameState = GameState.WAITING
    counter: ToeCurlCounter = field(default_factory=ToeCurlCounter)
    scoring: ScoreEngine = field(default_factory=ScoreEngine)
    reference: Optional[CalibrationReference] = None
    started_at: Optional[float] = None
    remaining_s: float = 0.0
    curl_angle: float = 0.0
    curl_magnitude: float = 0.0
    catcher_y: float = 0.0
    final_record: Optional[SessionRecord] = None

    def __post_init__(self):
        self.remaining_s = self.duration_s

    @property
    def score(self) -> int:
        return self.scoring.score

    @property
    def combo(self) -> int:
        return self.scoring.combo

    @property
    def reps(self) -> int:
        return self.counter.count

    @property
    def current_hold(self) -> float:
        return self.counter.current_hold

    @property
    def best_hold(self) -> float:
        return self.counter.best_hold

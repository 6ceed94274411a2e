# events.py
"""
Events emitted by the game core. The HTTP adapter forwards them to the
presentation layer; the core never touches UI state directly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class GameState(str, Enum):
    WAITING = "waiting"
    CALIBRATING = "calibrating"
    PLAYING = "playing"
    GAMEOVER = "gameover"


class EventType(str, Enum):
    STATE_CHANGED = "state_changed"
    CALIBRATION_COMPLETE = "calibration_complete"
    REP_COMPLETED = "rep_completed"
    REP_MILESTONE = "rep_milestone"
    CATCH = "catch"
    MISS = "miss"
    COMBO_INCREASED = "combo_increased"
    ACHIEVEMENT = "achievement"
    SESSION_FINISHED = "session_finished"


@dataclass
class GameEvent:
    type: EventType
    ts: float  # Monotonic tick time in milliseconds
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "ts": self.ts, "data": self.data}


def achievement(ts: float, text: str) -> GameEvent:
    """Short-lived notification for the presentation layer"""
    return GameEvent(EventType.ACHIEVEMENT, ts, {"text": text})

# schemas.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

class SessionRecord(BaseModel):
    """
    Finished-session summary appended to the persisted history.
    """
    timestamp: str                              # ISO-8601 wall-clock time the session ended
    score: int = 0
    reps: int = 0
    bestHoldSeconds: float = 0.0                # Longest curled hold in the session
    configuredDurationSeconds: float = 0.0      # Session length the player was given


class TickRequest(BaseModel):
    """One tracking sample from the marker collaborator"""
    trackingActive: bool = False
    rawAngle: float = 0.0                       # Marker orientation on the curl axis (degrees)
    deltaMs: Optional[float] = Field(default=None, ge=0)  # Measured frame time; server clock when omitted


class FinalStats(BaseModel):
    score: int
    reps: int
    bestHold: str


class GameSnapshot(BaseModel):
    """
    Display values for the presentation layer.
    Mirrors the HUD: score, clock, combo banner, curl meter, reps and hold times.
    """
    state: str = "waiting"
    calibrationProgress: int = 0                # Percent
    score: int = 0
    remainingTime: str = "0:00"                 # m:ss
    comboText: Optional[str] = None             # Hidden while combo is x1
    combo: int = 1
    curlPercent: int = 0
    reps: int = 0
    holdTime: str = "0.0s"
    bestHoldTime: str = "0.0s"
    liveObjects: int = 0
    achievement: Optional[str] = None           # Active toast text, if still visible
    finalStats: Optional[FinalStats] = None


class TickResponse(BaseModel):
    snapshot: GameSnapshot
    events: List[Dict[str, Any]] = []
    sceneCommands: List[Dict[str, Any]] = []

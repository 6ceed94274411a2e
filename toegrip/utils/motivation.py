# motivation.py
from typing import Optional


def get_rep_text(rep_count: int) -> str:
    """Achievement text shown for every completed repetition."""
    return f"Rep #{rep_count}!"


def get_milestone_text(rep_count: int, every: int = 10) -> Optional[str]:
    """
    Generate a milestone message every `every` reps.
    Returns None when the rep count is not a milestone, so callers can skip the toast.
    """
    if rep_count <= 0 or rep_count % every != 0:
        return None
    return f"🎉 {rep_count} Reps!"


def get_combo_text(combo: int) -> Optional[str]:
    """HUD combo banner; suppressed while the multiplier is 1."""
    if combo <= 1:
        return None
    return f"COMBO x{combo}!"


def format_remaining(seconds: float) -> str:
    """Format remaining session time as m:ss"""
    seconds = max(0.0, seconds)
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def format_hold(seconds: float) -> str:
    return f"{seconds:.1f}s"


def curl_percent(magnitude: float) -> int:
    """Curl meter value in whole percent"""
    # Half-up rounding so 0.125 shows as 13%
    return int(min(1.0, max(0.0, magnitude)) * 100 + 0.5)

# scoring.py
from typing import List, Optional

from toegrip.config import config
from toegrip.utils.logging_utils import logger
from toegrip.models.events import EventType, GameEvent, achievement
from toegrip.models.spawner import FallingObject


class ScoreEngine:
    """
    Converts catches into points using a combo multiplier.
    Streaks of catches grow the combo up to max_combo; a single miss drops it back to 1.
    """

    def __init__(self, streak: Optional[int] = None, max_combo: Optional[int] = None):
        self.streak = streak if streak is not None else config.combo_streak
        self.max_combo = max_combo if max_combo is not None else config.max_combo
        self.reset()

    def reset(self):
        self.score = 0
        self.combo = 1
        self.consecutive_catches = 0

    def on_catch(self, obj: FallingObject, now: float) -> List[GameEvent]:
        points = obj.fruit.points * self.combo
        self.score += points
        self.consecutive_catches += 1
        logger.info(f"Caught! +{points} points (score {self.score})")

        events = [GameEvent(EventType.CATCH, now, {
            "objectId": obj.object_id,
            "fruit": obj.fruit.name,
            "points": points,
            "score": self.score,
        })]

        if self.consecutive_catches >= self.streak:
            previous = self.combo
            self.combo = min(self.max_combo, self.combo + 1)
            if self.combo > previous:
                logger.info(f"🔥 Combo x{self.combo}")
                events.append(GameEvent(EventType.COMBO_INCREASED, now, {"combo": self.combo}))
            # The streak toast shows on every catch, including at the cap
            events.append(achievement(now, f"Combo x{self.combo}!"))

        return events

    def on_miss(self, obj: FallingObject, now: float) -> List[GameEvent]:
        self.consecutive_catches = 0
        self.combo = 1
        logger.info("Missed! Combo reset")
        return [GameEvent(EventType.MISS, now, {"objectId": obj.object_id, "fruit": obj.fruit.name})]

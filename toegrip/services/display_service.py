from typing import Iterable, Optional

from toegrip.config import config
from toegrip.models.events import EventType, GameEvent, GameState
from toegrip.models.game_controller import GameController
from toegrip.models.schemas import FinalStats, GameSnapshot
from toegrip.utils.motivation import curl_percent, format_hold, format_remaining, get_combo_text

class DisplayService:
    """
    Presentation adapter. Turns controller state into HUD values and keeps
    the most recent achievement toast visible for a fixed time.
    """

    def __init__(self, visible_ms: Optional[float] = None):
        self.visible_ms = visible_ms if visible_ms is not None else config.achievement_visible_ms
        self.achievement_text: Optional[str] = None
        self.achievement_until = 0.0

    def consume(self, events: Iterable[GameEvent]):
        """Newer achievements replace the one on screen"""
        for event in events:
            if event.type == EventType.ACHIEVEMENT:
                self.achievement_text = event.data["text"]
                self.achievement_until = event.ts + self.visible_ms

    def active_achievement(self, now: float) -> Optional[str]:
        if self.achievement_text is not None and now < self.achievement_until:
            return self.achievement_text
        return None

    def snapshot(self, controller: GameController, now: float) -> GameSnapshot:
        session = controller.session

        final_stats = None
        if session.state == GameState.GAMEOVER:
            final_stats = FinalStats(
                score=session.score,
                reps=session.reps,
                bestHold=format_hold(session.best_hold),
            )

        return GameSnapshot(
            state=session.state.value,
            calibrationProgress=int(controller.calibration.progress * 100 + 0.5),
            score=session.score,
            remainingTime=format_remaining(session.remaining_s),
            comboText=get_combo_text(session.combo),
            combo=session.combo,
            curlPercent=curl_percent(session.curl_magnitude),
            reps=session.reps,
            holdTime=format_hold(session.current_hold),
            bestHoldTime=format_hold(session.best_hold),
            liveObjects=len(controller.simulator),
            achievement=self.active_achievement(now),
            finalStats=final_stats,
        )

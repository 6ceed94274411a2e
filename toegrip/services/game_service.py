import threading
import time
from typing import Callable, List, Optional

from toegrip.config import config
from toegrip.models.game_controller import GameController
from toegrip.models.schemas import GameSnapshot, SessionRecord, TickRequest, TickResponse
from toegrip.services.display_service import DisplayService
from toegrip.services.history_service import HistoryService
from toegrip.services.scene_service import SceneService
from toegrip.utils.logging_utils import logger

def monotonic_ms() -> float:
    return time.monotonic() * 1000

class GameService:
    """
    Owns the single game instance behind the HTTP API.
    Wires the controller to the scene queue, display adapter and history file,
    and serializes access so only one tick runs at a time.
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self.clock = clock
        self.controller: Optional[GameController] = None
        self.scene: Optional[SceneService] = None
        self.display: Optional[DisplayService] = None
        self.history: Optional[HistoryService] = None
        self._lock = threading.Lock()

    def initialize(self, **controller_kwargs):
        """Create a fresh game; keyword arguments are passed through to GameController"""
        with self._lock:
            self.scene = SceneService()
            self.display = DisplayService()
            self.history = HistoryService()
            self.controller = GameController(
                self.scene,
                history=self.history if config.save_history else None,
                **controller_kwargs
            )
        logger.info(f"Game service ready (history: {self.history.path if config.save_history else 'disabled'})")

    def _require_controller(self) -> GameController:
        if self.controller is None:
            raise RuntimeError("Game not initialized")
        return self.controller

    def marker_found(self):
        with self._lock:
            self._require_controller().marker_acquired()

    def marker_lost(self):
        with self._lock:
            self._require_controller().marker_lost()

    def restart(self):
        with self._lock:
            self._require_controller().request_restart()

    def tick(self, sample: TickRequest) -> TickResponse:
        with self._lock:
            controller = self._require_controller()
            # One clock sample per tick; every decision below uses it
            now = self.clock()
            events = controller.tick(now, sample.trackingActive, sample.rawAngle, sample.deltaMs)
            self.display.consume(events)
            return TickResponse(
                snapshot=self.display.snapshot(controller, now),
                events=[e.to_dict() for e in events],
                sceneCommands=self.scene.drain(),
            )

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return self.display.snapshot(self._require_controller(), self.clock())

    def load_history(self) -> List[SessionRecord]:
        # Same lock as tick() so a save from game over is never read half-written
        with self._lock:
            if self.history is None:
                return []
            return self.history.load()

# Global service instance
game_service = GameService()

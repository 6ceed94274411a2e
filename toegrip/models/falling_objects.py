# falling_objects.py
"""
Falling-object simulation: moves live fruit down each tick and retires them
as caught (near the catcher) or missed (below the floor).
"""

from enum import Enum
from typing import Any, Callable, List, Optional, Protocol, Tuple

import numpy as np

from toegrip.config import config
from toegrip.utils.logging_utils import logger
from toegrip.models.spawner import FallingObject, FruitType


class Scene(Protocol):
    """Rendering collaborator; receives abstract scene commands only."""

    def set_catcher_position(self, y: float) -> None: ...

    def spawn_visual(self, fruit: FruitType, position: Tuple[float, float]) -> Any: ...

    def remove_visual(self, handle: Any) -> None: ...


class Outcome(Enum):
    CAUGHT = "caught"
    MISSED = "missed"


OutcomeCallback = Callable[[FallingObject, Outcome], None]


class FallingObjectSimulator:
    """
    Owns the live-object set. Each retired object produces exactly one outcome,
    and its visual is removed in the same step it leaves the set.
    """

    def __init__(
        self,
        scene: Scene,
        catch_radius: Optional[float] = None,
        floor_y: Optional[float] = None,
    ):
        self.scene = scene
        self.catch_radius = catch_radius if catch_radius is not None else config.catch_radius
        self.floor_y = floor_y if floor_y is not None else config.floor_y
        self.objects: List[FallingObject] = []

    def add(self, obj: FallingObject) -> FallingObject:
        obj.handle = self.scene.spawn_visual(obj.fruit, (obj.x, obj.y))
        self.objects.append(obj)
        return obj

    def update(
        self,
        delta_ms: float,
        catcher: Tuple[float, float],
        on_outcome: OutcomeCallback,
    ) -> List[Tuple[FallingObject, Outcome]]:
        """
        Advance every live object by delta_ms and resolve outcomes.
        Catch is tested before miss, so a frame satisfying both counts as a catch.
        """
        dt = max(0.0, delta_ms) / 1000
        catcher_x, catcher_y = catcher
        retired: List[Tuple[FallingObject, Outcome]] = []

        # Iterate over a copy so removal doesn't disturb the loop
        for obj in list(self.objects):
            obj.y -= obj.fall_speed * dt

            distance = np.hypot(obj.x - catcher_x, obj.y - catcher_y)
            if distance < self.catch_radius:
                outcome = Outcome.CAUGHT
            elif obj.y < self.floor_y:
                outcome = Outcome.MISSED
            else:
                continue

            self._retire(obj)
            logger.info(f"{'🧺 Caught' if outcome is Outcome.CAUGHT else '💨 Missed'} "
                        f"{obj.fruit.name} #{obj.object_id} at y={obj.y:.3f}")
            on_outcome(obj, outcome)
            retired.append((obj, outcome))

        return retired

    def _retire(self, obj: FallingObject):
        self.objects.remove(obj)
        self.scene.remove_visual(obj.handle)

    def clear(self):
        """Remove every live object and its visual without producing outcomes"""
        for obj in self.objects:
            self.scene.remove_visual(obj.handle)
        self.objects = []

    def __len__(self) -> int:
        return len(self.objects)

from itertools import count
from typing import Any, Dict, List, Tuple

from toegrip.models.spawner import FruitType
from toegrip.utils.logging_utils import logger

class SceneService:
    """
    Scene command queue for the rendering client.
    Hands out visual handles and records basket/fruit commands until the client drains them.
    """

    def __init__(self):
        self._handles = count(1)
        self.live_handles: Dict[int, FruitType] = {}
        self.commands: List[Dict[str, Any]] = []

    def set_catcher_position(self, y: float) -> None:
        self.commands.append({"command": "setCatcherPosition", "y": round(y, 4)})

    def spawn_visual(self, fruit: FruitType, position: Tuple[float, float]) -> int:
        handle = next(self._handles)
        self.live_handles[handle] = fruit
        x, y = position
        self.commands.append({
            "command": "spawnVisual",
            "handle": handle,
            "fruit": fruit.name,
            "color": fruit.color,
            "x": round(x, 4),
            "y": round(y, 4),
        })
        return handle

    def remove_visual(self, handle: int) -> None:
        if self.live_handles.pop(handle, None) is None:
            logger.warning(f"Remove requested for unknown visual handle {handle}")
            return
        self.commands.append({"command": "removeVisual", "handle": handle})

    def drain(self) -> List[Dict[str, Any]]:
        """Return and clear the pending commands"""
        commands, self.commands = self.commands, []
        return commands

# spawner.py
"""
Fruit spawner with a difficulty ramp: the spawn interval shrinks a little
after every spawn until it reaches a floor.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np

from toegrip.config import config
from toegrip.utils.logging_utils import logger


@dataclass(frozen=True)
class FruitType:
    name: str
    color: str
    points: int


@dataclass
class FallingObject:
    """A live fruit. `handle` is the opaque visual reference returned by the scene."""
    object_id: int
    fruit: FruitType
    x: float
    y: float
    fall_speed: float  # Scene units per second
    spawn_time: float
    handle: Any = None


def default_fruit_types() -> List[FruitType]:
    return [FruitType(name, color, points) for name, color, points in config.fruit_types]


class ObjectSpawner:
    """
    Emits falling objects at an adaptive interval.
    Category, horizontal offset and fall speed are drawn from the injected random generator.
    """

    def __init__(
        self,
        fruit_types: Optional[Sequence[FruitType]] = None,
        rng: Optional[np.random.Generator] = None,
        initial_interval_ms: Optional[float] = None,
        decay: Optional[float] = None,
        min_interval_ms: Optional[float] = None,
    ):
        self.fruit_types = list(fruit_types) if fruit_types is not None else default_fruit_types()
        if not self.fruit_types:
            raise ValueError("At least one fruit type is required")

        self.rng = rng if rng is not None else np.random.default_rng()
        self.initial_interval_ms = initial_interval_ms if initial_interval_ms is not None else config.spawn_interval_ms
        self.decay = decay if decay is not None else config.spawn_interval_decay
        self.min_interval_ms = min_interval_ms if min_interval_ms is not None else config.min_spawn_interval_ms

        self.interval_ms = self.initial_interval_ms
        self.last_spawn = 0.0
        self.spawned = 0

    def reset(self, now: float):
        """Restart the ramp; the first spawn comes one full interval after `now`"""
        self.interval_ms = self.initial_interval_ms
        self.last_spawn = now
        self.spawned = 0

    def maybe_spawn(self, now: float) -> Optional[FallingObject]:
        if now - self.last_spawn <= self.interval_ms:
            return None

        fruit = self.fruit_types[int(self.rng.integers(len(self.fruit_types)))]
        x = (self.rng.random() - 0.5) * config.spawn_x_band
        fall_speed = config.min_fall_speed + self.rng.random() * config.fall_speed_range

        self.spawned += 1
        obj = FallingObject(
            object_id=self.spawned,
            fruit=fruit,
            x=float(x),
            y=config.spawn_y,
            fall_speed=float(fall_speed),
            spawn_time=now,
        )

        self.last_spawn = now
        self.interval_ms = max(self.min_interval_ms, self.interval_ms * self.decay)
        logger.info(f"🍎 Spawned {fruit.name} #{obj.object_id} (next in {self.interval_ms:.0f}ms)")
        return obj

import numpy as np
import pytest

from toegrip.models.game_controller import GameController
from toegrip.services.scene_service import SceneService


class MemoryHistory:
    """In-memory history store used in place of the JSON file"""

    def __init__(self):
        self.records = []

    def load(self):
        return list(self.records)

    def save(self, record):
        self.records.append(record)


@pytest.fixture
def scene():
    return SceneService()


@pytest.fixture
def history():
    return MemoryHistory()


@pytest.fixture
def controller(scene, history):
    return GameController(
        scene,
        history=history,
        rng=np.random.default_rng(7),
        session_duration_s=180,
        curl_threshold=15,
        calibration_ms=3000,
        ack_delay_ms=1000,
    )


def start_playing(controller, neutral=5.0):
    """Drive a controller from waiting to playing; returns the play start time (ms)"""
    controller.marker_acquired()
    controller.tick(0, True, neutral)
    controller.tick(3000, True, neutral)
    controller.tick(4000, True, neutral)
    return 4000

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

class Config:
    """
    Central configuration manager for the Toe Grip rehabilitation game.
    Handles command-line argument parsing, debug modes, and game tuning parameters.
    """

    def __init__(self):
        # Application mode settings
        self.debug_mode: str = "debug"
        self.host: str = "0.0.0.0"
        self.port: int = 8000

        # Calibration settings
        self.calibration_duration_ms: float = 3000  # Stable tracking needed before capturing neutral
        self.calibration_ack_delay_ms: float = 1000  # "Calibration complete" shown before play starts

        # Exercise classification parameters
        self.curl_threshold_deg: float = 15.0  # Base threshold T for the rep state machine
        self.max_curl_angle_deg: float = 45.0  # Angle treated as a full curl (magnitude 1.0)
        self.rep_milestone_every: int = 10

        # Session timing
        self.session_duration_s: float = 180.0

        # Spawner difficulty ramp
        self.spawn_interval_ms: float = 2000
        self.spawn_interval_decay: float = 0.98
        self.min_spawn_interval_ms: float = 800

        # Fruit categories as (name, color, points)
        self.fruit_types: List[tuple] = [
            ("apple", "#FF0000", 10),
            ("orange", "#FFA500", 15),
            ("banana", "#FFFF00", 20),
        ]
        self.min_fall_speed: float = 0.15  # Scene units per second
        self.fall_speed_range: float = 0.1

        # Scene geometry (scene units)
        self.spawn_y: float = 0.3
        self.spawn_x_band: float = 0.2  # Objects spawn within +/- half of this band
        self.floor_y: float = -0.3
        self.catcher_x: float = 0.0
        self.catcher_min_y: float = -0.15
        self.catcher_max_y: float = 0.15
        self.catcher_width: float = 0.15

        # Scoring
        self.combo_streak: int = 3  # Consecutive catches before combo starts growing
        self.max_combo: int = 5

        # Presentation and persistence
        self.achievement_visible_ms: float = 3000
        self.history_path: Path = Path("toegrip_sessions.json")
        self.history_limit: int = 30

        # Human-readable descriptions for each debug mode
        self.mode_descriptions = {
            "debug": "Debug Mode (verbose game logging)",
            "debug_no_save": "Debug Mode (without session history)",
            "non_debug": "Non-Debug Mode (minimal logging)"
        }

    def setup_from_args(self, argv: Optional[Sequence[str]] = None):
        """
        Parse command line arguments and configure application settings.
        Session history is only written outside of debug_no_save mode.
        """
        parser = argparse.ArgumentParser(description="Toe Grip Rehabilitation Game Backend")
        parser.add_argument(
            "--mode",
            choices=["debug", "debug_no_save", "non_debug"],
            default="debug",
            help="Debug mode setting"
        )
        parser.add_argument("--duration", type=float, default=self.session_duration_s,
                            help="Session length in seconds")
        parser.add_argument("--history-file", type=Path, default=self.history_path,
                            help="JSON file holding finished session records")
        parser.add_argument("--host", default=self.host)
        parser.add_argument("--port", type=int, default=self.port)
        args = parser.parse_args(argv)

        self.debug_mode = args.mode
        self.session_duration_s = args.duration
        self.history_path = args.history_file
        self.host = args.host
        self.port = args.port

    @property
    def save_history(self) -> bool:
        """Whether finished sessions should be written to the history file"""
        return self.debug_mode != "debug_no_save"

    @property
    def catch_radius(self) -> float:
        """Catch distance is half of the catcher's width"""
        return self.catcher_width / 2

    @property
    def mode_description(self) -> str:
        """Get human-readable description of current mode"""
        return self.mode_descriptions[self.debug_mode]

# Global configuration instance - import this in other modules
config = Config()

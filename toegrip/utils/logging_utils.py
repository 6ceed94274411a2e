import logging
from toegrip.config import config

def setup_logging():
    """
    Configure logging level based on debug mode setting.
    Non-debug mode uses WARNING level to minimize console output.
    Debug modes use INFO level for detailed game tracking.
    """
    if config.debug_mode == "non_debug":
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    game_logger = logging.getLogger("toegrip")
    game_logger.setLevel(level)
    return game_logger

# Global logger instance - import this in other modules
logger = setup_logging()

"""Runtime configuration and logging setup."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

# Default data directory
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """Settings read from the environment."""

    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "WARNING"
    weight_unit: str = "lbs"

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = os.environ.get("LIFT_TRACKER_DATA_DIR")
        return cls(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            log_level=os.environ.get("LIFT_TRACKER_LOG_LEVEL", "WARNING").upper(),
            weight_unit=os.environ.get("LIFT_TRACKER_WEIGHT_UNIT", "lbs"),
        )


def get_settings() -> Settings:
    """Get settings for the current process."""
    return Settings.from_env()


def configure_logging(level: str | int | None = None) -> None:
    """Send lift_tracker logs to stderr at the given level."""
    if level is None:
        level = get_settings().log_level
    logger = logging.getLogger("lift_tracker")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)

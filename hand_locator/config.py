"""Configuration for the hand locator."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from root .env
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class Config:
    """Tracker configuration."""

    # Camera
    CAMERA_INDEX: int = int(os.getenv("HAND_CAMERA_INDEX", "0"))
    BUFFER_SIZE: int = int(os.getenv("HAND_BUFFER_SIZE", "1"))  # frames queued by the device

    # Tick cadence
    TICK_INTERVAL_MS: float = float(os.getenv("HAND_TICK_INTERVAL_MS", "8"))
    PACING_DELAY_MS: float = float(os.getenv("HAND_PACING_DELAY_MS", "30"))  # blocking sleep before each pull

    # Output
    DEBUG_DIR: str = os.getenv("HAND_DEBUG_DIR", "")
    SHOW_WINDOW: bool = os.getenv("HAND_SHOW_WINDOW", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("HAND_LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration. Returns list of problems."""
        problems = []
        if cls.CAMERA_INDEX < 0:
            problems.append(f"HAND_CAMERA_INDEX must be >= 0 (got {cls.CAMERA_INDEX})")
        if cls.BUFFER_SIZE < 1:
            problems.append(f"HAND_BUFFER_SIZE must be >= 1 (got {cls.BUFFER_SIZE})")
        if cls.TICK_INTERVAL_MS < 0:
            problems.append(f"HAND_TICK_INTERVAL_MS must be >= 0 (got {cls.TICK_INTERVAL_MS})")
        if cls.PACING_DELAY_MS < 0:
            problems.append(f"HAND_PACING_DELAY_MS must be >= 0 (got {cls.PACING_DELAY_MS})")
        if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            problems.append(f"HAND_LOG_LEVEL is not a logging level: {cls.LOG_LEVEL}")
        return problems


config = Config()

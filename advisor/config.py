"""Environment configuration and logging setup."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")

CONVEX_URL = os.getenv("CONVEX_URL", "")

PROFILES_DIR = Path(
    os.getenv("PROFILES_DIR", os.path.join(os.path.dirname(__file__), "profile_data"))
)


def _positive_int(name: str, default: int) -> int:
    value = int(os.getenv(name, str(default)))
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


ANTHROPIC_MAX_TOKENS = _positive_int("ANTHROPIC_MAX_TOKENS", 4096)

# Number of products kept in an analysis
TOP_N = _positive_int("TOP_N", 6)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv(
    "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def setup_logging() -> None:
    """Configure root logging from LOG_LEVEL and LOG_FORMAT."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format=LOG_FORMAT,
    )

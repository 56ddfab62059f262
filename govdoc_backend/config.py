"""
Runtime configuration loaded from environment variables / .env
"""
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# Fixed by contract, not configurable
TOOL_TIMEOUT_SECONDS = 30
ANALYSIS_TEMPERATURE = 0.1


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL
    hwp5txt_command: str = "hwp5txt"
    temp_dir: str = tempfile.gettempdir()
    static_dir: str = "dist"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


def _model_name(raw: Optional[str]) -> str:
    model_name = (raw or DEFAULT_MODEL).strip()
    # Remove 'models/' prefix if present (some APIs include it, others don't)
    if model_name.startswith("models/"):
        model_name = model_name[len("models/"):]
    return model_name


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build settings from the environment

    Args:
        env_file: Optional path to a .env file; the working directory is searched otherwise

    Returns:
        Populated Settings instance
    """
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        load_dotenv()

    api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
    if not api_key:
        logger.error("[CONFIG] GEMINI_API_KEY is missing in environment variables")

    return Settings(
        gemini_api_key=api_key,
        gemini_model=_model_name(os.environ.get("GEMINI_MODEL")),
        hwp5txt_command=os.environ.get("HWP5TXT_COMMAND", "hwp5txt"),
        temp_dir=os.environ.get("GOVDOC_TEMP_DIR") or tempfile.gettempdir(),
        static_dir=os.environ.get("STATIC_DIR", "dist"),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )

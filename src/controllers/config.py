import json
import os
import logging
import tempfile
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


# Basic logging configuration with file output
import sys
from logging.handlers import RotatingFileHandler

log_file_path = os.environ.get(
    "LOG_FILE",
    os.path.join(tempfile.gettempdir(), "grader_backend", "grader_api.log"),
)
log_dir = os.path.dirname(log_file_path)
os.makedirs(log_dir, exist_ok=True)

# Configure logging with both file and console handlers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        # File handler with rotation
        RotatingFileHandler(
            log_file_path, maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        ),
        # Console handler for development
        logging.StreamHandler(sys.stdout),
    ],
)
# Library warnings (e.g. from the DOCX decoder) go to the log handlers
logging.captureWarnings(True)

logger = logging.getLogger(__name__)


# Paths
DEFAULT_UPLOAD_DIR = os.path.join(tempfile.gettempdir(), "grader_uploads")

# Model providers
PROVIDER_OPENAI = "openai"
PROVIDER_ZAI = "zai"

DEFAULT_BASE_URLS = {
    PROVIDER_OPENAI: "https://api.openai.com/v1",
    PROVIDER_ZAI: "https://api.z-ai.com",
}
DEFAULT_MODELS = {
    PROVIDER_OPENAI: "gpt-4o-mini",
    PROVIDER_ZAI: "glm-4.6",
}
DEFAULT_COMPLETION_PATH = "/v1/chat/completions"
DEFAULT_TEMPERATURE = 0.3


class Settings(BaseModel):
    api_key: Optional[str] = None
    model_provider: str = PROVIDER_OPENAI
    api_base_url: Optional[str] = None
    completion_path: str = DEFAULT_COMPLETION_PATH
    model_name: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    strict_field_validation: bool = True
    upload_dir: str = DEFAULT_UPLOAD_DIR

    @property
    def resolved_base_url(self) -> str:
        return self.api_base_url or DEFAULT_BASE_URLS.get(
            self.model_provider, DEFAULT_BASE_URLS[PROVIDER_OPENAI]
        )

    @property
    def resolved_model_name(self) -> str:
        return self.model_name or DEFAULT_MODELS.get(
            self.model_provider, DEFAULT_MODELS[PROVIDER_OPENAI]
        )


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_headers(name: str) -> Dict[str, str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return {}
    try:
        headers = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"{name} is not valid JSON, ignoring vendor headers")
        return {}
    if not isinstance(headers, dict):
        logger.warning(f"{name} must be a JSON object, ignoring vendor headers")
        return {}
    return {str(k): str(v) for k, v in headers.items()}


def get_settings() -> Settings:
    """Build settings from the current environment (FastAPI dependency)."""
    provider = os.environ.get("MODEL_PROVIDER", PROVIDER_OPENAI).strip().lower()
    if provider not in DEFAULT_BASE_URLS:
        logger.warning(
            f"Unknown MODEL_PROVIDER '{provider}', falling back to '{PROVIDER_OPENAI}'"
        )
        provider = PROVIDER_OPENAI

    api_key = (
        os.environ.get("API_KEY")
        or os.environ.get("Z_AI_API_KEY")
        or os.environ.get("OPENAI_API_KEY")
    )

    temperature = DEFAULT_TEMPERATURE
    raw_temperature = os.environ.get("MODEL_TEMPERATURE")
    if raw_temperature:
        try:
            temperature = float(raw_temperature)
        except ValueError:
            logger.warning(
                f"Invalid MODEL_TEMPERATURE '{raw_temperature}', using {DEFAULT_TEMPERATURE}"
            )

    return Settings(
        api_key=api_key or None,
        model_provider=provider,
        api_base_url=os.environ.get("API_BASE_URL")
        or os.environ.get("API_ENDPOINT")
        or None,
        completion_path=os.environ.get("COMPLETION_PATH", DEFAULT_COMPLETION_PATH),
        model_name=os.environ.get("MODEL_NAME") or None,
        temperature=temperature,
        extra_headers=_env_headers("MODEL_EXTRA_HEADERS"),
        strict_field_validation=_env_flag("STRICT_FIELD_VALIDATION", True),
        upload_dir=os.environ.get("UPLOAD_DIR", DEFAULT_UPLOAD_DIR),
    )

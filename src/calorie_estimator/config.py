# Path: calorie_estimator/config.py
"""
Centralized configuration for the calorie estimator.

Values come from environment variables (a local .env file is loaded first),
so the API key never has to live in the source tree.
"""

import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ========== Environment Setup ==========
load_dotenv()

# Gemini credentials and endpoint
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", default="")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", default="gemini-2.0-flash")
GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", default="https://generativelanguage.googleapis.com/v1beta")


def parse_timeout(value):
    """Seconds as a float; unset or unparsable means the request may wait indefinitely."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning(f"GEMINI_REQUEST_TIMEOUT={value!r} is not a number. Requests will not time out.")
        return None


REQUEST_TIMEOUT = parse_timeout(os.getenv("GEMINI_REQUEST_TIMEOUT"))

LOG_LEVEL = os.getenv("LOG_LEVEL", default="INFO")

if not GEMINI_API_KEY:
    logger.warning("GEMINI_API_KEY not set in environment or .env. Requests to Gemini will be rejected.")

# ========== Prompt ==========
ESTIMATE_PROMPT = (
    "Analyze this food image. Provide a brief description of the food and estimate its calorie content. "
    "If you cannot determine the food, set description to 'Cannot determine food type' and calories to 'N/A'."
)

# ========== User-facing messages ==========
NO_FILE_MESSAGE = "Please select an image file."
NO_IMAGE_MESSAGE = "Please select an image first."
NO_CONTENT_MESSAGE = "No content found in the API response."
MISSING_FIELDS_MESSAGE = "Could not parse description or calories from the JSON response."
NOT_AVAILABLE = "N/A"
UNKNOWN_ERROR = "Unknown error"

# ========== Upload settings ==========
ACCEPTED_IMAGE_TYPES = ["jpg", "jpeg", "png", "webp", "gif"]
DEFAULT_MIME_TYPE = "application/octet-stream"

# Path: calorie_estimator/gemini.py
"""
Wire contract for the Gemini generateContent endpoint.

build_payload() produces the request body, GeminiClient.generate_content()
performs the single POST, and extract_text() / parse_estimate() pull the
description and calorie estimate back out of the response.
"""

import json
import logging

import requests

from . import config
from .errors import FieldMissingError, NetworkError, ParseError, ResponseShapeError

logger = logging.getLogger(__name__)

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "description": {"type": "STRING"},
        "calories": {"type": "STRING"},
    },
    "required": ["description", "calories"],
}


def build_payload(image_b64, mime_type, prompt=config.ESTIMATE_PROMPT):
    return {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": prompt},
                    {
                        "inlineData": {
                            "mimeType": mime_type,
                            "data": image_b64,
                        }
                    },
                ],
            }
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def error_message_from(response):
    """Pulls error.message out of a failed response, or None if the body has none."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return None
    return message or None


class GeminiClient:
    """Thin requests wrapper around one Gemini model's generateContent call. No retries."""

    def __init__(self, api_key=None, model=None, api_base=None, timeout=None, session=None):
        self.api_key = config.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or config.GEMINI_MODEL
        self.api_base = (api_base or config.GEMINI_API_BASE).rstrip("/")
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()

    @property
    def url(self):
        return f"{self.api_base}/models/{self.model}:generateContent"

    def generate_content(self, payload):
        """
        POSTs `payload` and returns the decoded JSON body.
        Raises NetworkError on transport failures and non-2xx statuses.
        """
        logger.info(f"Sending estimate request to {self.url}")
        try:
            response = self.session.post(
                self.url,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Connection Error: Could not reach Gemini at {self.url}. Details: {e}")
            raise NetworkError(str(e)) from e

        if not response.ok:
            message = error_message_from(response) or config.UNKNOWN_ERROR
            logger.error(f"Server Error: {response.status_code} - {message}")
            raise NetworkError(message, status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Gemini returned status {response.status_code} but the body was not valid JSON")
            raise NetworkError(f"Invalid JSON in response body: {e}", status=response.status_code) from e

    def close(self):
        self.session.close()


def extract_text(result):
    """Returns candidates[0].content.parts[0].text, or raises ResponseShapeError."""
    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ResponseShapeError(f"Missing {e} in response") from e
    if not isinstance(text, str):
        raise ResponseShapeError(f"Text part is {type(text).__name__}, not a string")
    if not text:
        raise ResponseShapeError("Empty text part in response")
    return text


def parse_estimate(text):
    """
    Decodes the JSON text part into a (description, calories) pair.
    Raises ParseError for invalid JSON and FieldMissingError when either value is missing or empty.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(str(e), text) from e

    if not isinstance(parsed, dict):
        raise FieldMissingError(f"Expected a JSON object, got {type(parsed).__name__}")
    description = parsed.get("description")
    calories = parsed.get("calories")
    if not description or not calories:
        raise FieldMissingError("description or calories missing from response")
    return str(description).strip(), str(calories).strip()

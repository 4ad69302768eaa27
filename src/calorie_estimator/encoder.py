# Path: calorie_estimator/encoder.py

import asyncio
import base64
import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from .config import DEFAULT_MIME_TYPE
from .errors import ReadError

logger = logging.getLogger(__name__)

DATA_URL_SEPARATOR = ";base64,"


def read_image_bytes(file):
    """
    Returns the raw bytes behind `file`.
    Accepts bytes, a Streamlit UploadedFile (getvalue) or any readable file-like object.
    Raises ReadError if the handle cannot be read.
    """
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    try:
        if hasattr(file, "getvalue"):
            return file.getvalue()
        if hasattr(file, "seek"):
            file.seek(0)
        return file.read()
    except (OSError, ValueError) as e:
        # ValueError: I/O operation on closed file
        raise ReadError(f"Could not read image: {e}") from e


def strip_data_url(text):
    """Drops a leading 'data:<mime>;base64,' prefix, if any."""
    if text.startswith("data:") and DATA_URL_SEPARATOR in text:
        return text.split(DATA_URL_SEPARATOR, 1)[1]
    return text


def image_to_base64(file):
    """Converts the selected image to a base64 string (no data-URL prefix)."""
    data = read_image_bytes(file)
    if isinstance(data, str):
        # Some readers hand back an already encoded data URL
        return strip_data_url(data)
    if not data:
        raise ReadError("Could not read image: file is empty")
    return base64.b64encode(data).decode("utf-8")


async def encode_image(file):
    """Async version of image_to_base64; the read happens in a worker thread."""
    return await asyncio.to_thread(image_to_base64, file)


def open_preview(data):
    """Opens a Pillow image for display, or None if the bytes are not an image."""
    try:
        image = Image.open(BytesIO(data))
        image.load()
        return image
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not open image preview: {e}")
        return None


def detect_mime_type(data, declared=None):
    """Uses the declared MIME type when present, otherwise sniffs it from the image header."""
    if declared:
        return declared
    try:
        with Image.open(BytesIO(data)) as image:
            mime_type = Image.MIME.get(image.format)
    except (UnidentifiedImageError, OSError):
        mime_type = None
    if not mime_type:
        logger.warning(f"Could not determine image type, falling back to {DEFAULT_MIME_TYPE}")
        return DEFAULT_MIME_TYPE
    return mime_type

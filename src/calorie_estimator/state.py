# Path: calorie_estimator/state.py
"""
State container for the estimator page.

EstimatorState is the single source of truth the UI renders from. It is only
changed through the transition methods below; the controller drives the
estimation phases, the UI drives selection and clearing.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .config import NO_FILE_MESSAGE
from .encoder import detect_mime_type, open_preview, read_image_bytes
from .errors import ReadError

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    IDLE = "idle"
    ENCODING = "encoding"
    REQUESTING = "requesting"
    PARSING = "parsing"
    SUCCESS = "success"
    FAILURE = "failure"


IN_FLIGHT = (Phase.ENCODING, Phase.REQUESTING, Phase.PARSING)


@dataclass
class SelectedImage:
    name: str
    data: bytes
    mime_type: str


@dataclass
class EstimationResult:
    description: str
    calories: str


@dataclass
class EstimatorState:
    image: Optional[SelectedImage] = None
    preview: Any = None  # PIL.Image.Image
    result: Optional[EstimationResult] = None
    error: str = ""
    loading: bool = False
    pending: bool = False
    phase: Phase = Phase.IDLE

    @property
    def can_estimate(self) -> bool:
        return self.image is not None and not self.loading and not self.pending

    # --- selection ---

    def select_image(self, file) -> None:
        """
        Handles a change of the file input.
        A file replaces the current image and wipes old results; None (cancelled
        selection) clears everything and leaves the no-file message.
        """
        self._release_preview()
        self.result = None
        self.phase = Phase.IDLE
        if file is None:
            self.image = None
            self.error = NO_FILE_MESSAGE
            return

        try:
            data = read_image_bytes(file)
        except ReadError as e:
            logger.error(f"Selection failed: {e}")
            self.image = None
            self.error = str(e)
            return
        mime_type = detect_mime_type(data, getattr(file, "type", None))
        self.image = SelectedImage(name=getattr(file, "name", "image"), data=data, mime_type=mime_type)
        self.preview = open_preview(data)
        self.error = ""
        logger.info(f"Selected image {self.image.name} ({mime_type}, {len(data)} bytes)")

    def clear(self) -> None:
        self._release_preview()
        self.pending = False
        self.image = None
        self.result = None
        self.error = ""
        self.phase = Phase.IDLE

    def close(self) -> None:
        self._release_preview()

    def _release_preview(self):
        if self.preview is not None:
            self.preview.close()
            self.preview = None

    # --- estimation phases ---

    def begin(self) -> None:
        self.loading = True
        self.pending = False
        self.error = ""
        self.result = None
        self.phase = Phase.ENCODING

    def advance(self, phase: Phase) -> None:
        if phase not in IN_FLIGHT:
            raise ValueError(f"{phase} is not an in-flight phase")
        self.phase = phase

    def succeed(self, description: str, calories: str) -> None:
        self.error = ""
        self.result = EstimationResult(description=description, calories=calories)
        self.phase = Phase.SUCCESS

    def fail(self, message: str) -> None:
        self.result = None
        self.error = message
        self.phase = Phase.FAILURE

    def finish(self) -> None:
        self.loading = False

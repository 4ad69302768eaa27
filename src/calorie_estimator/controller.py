# Path: calorie_estimator/controller.py

import asyncio
import logging

from . import config
from .encoder import encode_image
from .errors import EstimationError, FieldMissingError, ParseError, ResponseShapeError, SelectionError
from .gemini import GeminiClient, build_payload, extract_text, parse_estimate
from .state import EstimatorState, Phase

logger = logging.getLogger(__name__)


class EstimationController:
    """
    Owns the page state and runs estimation cycles against Gemini.

    One cycle walks ENCODING -> REQUESTING -> PARSING and ends in SUCCESS or
    FAILURE. Every error is turned into state.error; nothing is raised to the caller.
    """

    def __init__(self, client=None, state=None):
        self.client = client or GeminiClient()
        self.state = state or EstimatorState()

    def select_image(self, file):
        self.state.select_image(file)
        return self.state

    def clear(self):
        self.state.clear()
        return self.state

    def close(self):
        self.state.close()
        if hasattr(self.client, "close"):
            self.client.close()

    def request_estimate(self):
        """
        Records a click on the estimate trigger. The cycle itself is started by
        run_pending() on the next pass, so the page can draw the trigger disabled first.
        Returns False when the trigger is disabled.
        """
        if not self.state.can_estimate:
            logger.warning("Estimate requested while the trigger is disabled; ignoring.")
            return False
        self.state.pending = True
        return True

    async def run_pending(self):
        if not self.state.pending:
            return self.state
        self.state.pending = False
        return await self.estimate()

    async def estimate(self):
        state = self.state
        if state.loading:
            logger.warning("Estimate requested while another request is in flight; ignoring.")
            return state
        try:
            image = self._require_image()
        except SelectionError as e:
            state.fail(str(e))
            return state

        state.begin()
        try:
            image_b64 = await encode_image(image.data)

            state.advance(Phase.REQUESTING)
            payload = build_payload(image_b64, image.mime_type)
            result = await asyncio.to_thread(self.client.generate_content, payload)

            state.advance(Phase.PARSING)
            self._apply_result(result)
        except EstimationError as e:
            logger.error(f"Error estimating calories: {e}")
            state.fail(f"Failed to estimate calories: {e}")
        except Exception as e:
            logger.error(f"An unexpected error occurred: {str(e)}", exc_info=True)
            state.fail(f"Failed to estimate calories: {e}")
        finally:
            state.finish()
        return state

    def _require_image(self):
        if self.state.image is None:
            raise SelectionError(config.NO_IMAGE_MESSAGE)
        return self.state.image

    def _apply_result(self, result):
        state = self.state
        try:
            text = extract_text(result)
        except ResponseShapeError as e:
            logger.warning(f"No usable content in Gemini response: {e}")
            state.succeed(config.NO_CONTENT_MESSAGE, config.NOT_AVAILABLE)
            return

        try:
            description, calories = parse_estimate(text)
        except ParseError as e:
            logger.error(str(e))
            state.fail(str(e))
            return
        except FieldMissingError as e:
            logger.warning(f"{e}. Raw response: {text}")
            state.succeed(config.MISSING_FIELDS_MESSAGE, config.NOT_AVAILABLE)
            return

        logger.info(f"Estimate ready: {description!r} / {calories!r}")
        state.succeed(description, calories)

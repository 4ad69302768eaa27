import os
import sys
import unittest
from io import BytesIO
from unittest import mock

from PIL import Image

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from calorie_estimator.config import NO_FILE_MESSAGE
from calorie_estimator.state import EstimationResult, EstimatorState, Phase


class FakeUpload(BytesIO):
    """Mimics streamlit's UploadedFile: bytes plus name and type."""

    def __init__(self, data, name="meal.png", type="image/png"):
        super().__init__(data)
        self.name = name
        self.type = type


def make_upload(color=(10, 200, 10), **kwargs):
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=color).save(buffer, format="PNG")
    return FakeUpload(buffer.getvalue(), **kwargs)


class TestEstimatorState(unittest.TestCase):

    def setUp(self):
        self.state = EstimatorState()

    def tearDown(self):
        self.state.close()

    def test_initial_state(self):
        self.assertIsNone(self.state.image)
        self.assertFalse(self.state.loading)
        self.assertFalse(self.state.can_estimate)
        self.assertEqual(self.state.phase, Phase.IDLE)

    def test_select_image_sets_image_and_clears_results(self):
        self.state.result = EstimationResult("old", "1")
        self.state.error = "old error"
        self.state.select_image(make_upload())

        self.assertEqual(self.state.image.name, "meal.png")
        self.assertEqual(self.state.image.mime_type, "image/png")
        self.assertIsNotNone(self.state.preview)
        self.assertIsNone(self.state.result)
        self.assertEqual(self.state.error, "")
        self.assertTrue(self.state.can_estimate)

    def test_select_nothing_sets_no_file_message(self):
        self.state.select_image(make_upload())
        self.state.result = EstimationResult("old", "1")
        self.state.select_image(None)

        self.assertIsNone(self.state.image)
        self.assertIsNone(self.state.preview)
        self.assertIsNone(self.state.result)
        self.assertEqual(self.state.error, NO_FILE_MESSAGE)
        self.assertFalse(self.state.can_estimate)

    def test_previous_preview_is_released(self):
        self.state.select_image(make_upload())
        first = self.state.preview
        with mock.patch.object(first, "close", wraps=first.close) as close:
            self.state.select_image(make_upload(color=(1, 2, 3)))
            close.assert_called_once()
        self.assertIsNot(self.state.preview, first)

    def test_missing_mime_type_is_detected(self):
        self.state.select_image(make_upload(type=None))
        self.assertEqual(self.state.image.mime_type, "image/png")

    def test_unreadable_file_sets_error(self):
        upload = make_upload()
        upload.close()
        self.state.select_image(upload)
        self.assertIsNone(self.state.image)
        self.assertIn("Could not read image", self.state.error)

    def test_loading_disables_estimate(self):
        self.state.select_image(make_upload())
        self.state.begin()
        self.assertTrue(self.state.loading)
        self.assertFalse(self.state.can_estimate)
        self.state.finish()
        self.assertTrue(self.state.can_estimate)

    def test_success_and_failure_are_exclusive(self):
        self.state.fail("boom")
        self.state.succeed("Salad", "150 kcal")
        self.assertEqual(self.state.error, "")
        self.assertEqual(self.state.result, EstimationResult("Salad", "150 kcal"))
        self.state.fail("boom")
        self.assertIsNone(self.state.result)
        self.assertEqual(self.state.phase, Phase.FAILURE)

    def test_advance_rejects_terminal_phase(self):
        with self.assertRaises(ValueError):
            self.state.advance(Phase.SUCCESS)

    def test_clear(self):
        self.state.select_image(make_upload())
        self.state.succeed("Salad", "150 kcal")
        self.state.clear()
        self.assertIsNone(self.state.image)
        self.assertIsNone(self.state.preview)
        self.assertIsNone(self.state.result)
        self.assertEqual(self.state.error, "")


if __name__ == '__main__':
    unittest.main()

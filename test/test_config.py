import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from calorie_estimator.config import parse_timeout


class TestRequestTimeout(unittest.TestCase):

    def test_unset_means_no_timeout(self):
        self.assertIsNone(parse_timeout(None))
        self.assertIsNone(parse_timeout(""))

    def test_numeric_value(self):
        self.assertEqual(parse_timeout("45"), 45.0)
        self.assertEqual(parse_timeout("2.5"), 2.5)

    def test_garbage_falls_back_with_warning(self):
        with self.assertLogs("calorie_estimator.config", level="WARNING") as logs:
            self.assertIsNone(parse_timeout("soon"))
        self.assertIn("soon", logs.output[0])


if __name__ == '__main__':
    unittest.main()

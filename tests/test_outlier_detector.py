import math
import unittest
from dataclasses import FrozenInstanceError
from unittest.mock import Mock
from statlens.outlier_detector import OutlierDetector
from statlens.models.config import OutlierDetectionConfig


class TestOutlierDetection(unittest.TestCase):
    """Test suite for OutlierDetector.detect_outliers."""

    def setUp(self):
        self.data = [1, 2, 2, 3, 3, 4, 4, 5, 100]

    def test_default_config(self):
        detector = OutlierDetector()

        self.assertEqual(detector.config.method, 'iqr')
        self.assertEqual(detector.config.iqr_multiplier, 1.5)
        self.assertEqual(detector.config.z_score_threshold, 3)
        self.assertEqual(detector.config.min_frequency_for_pattern, 2)
        self.assertIsNone(detector.config.custom_outlier_detector)

    def test_config_is_immutable(self):
        config = OutlierDetectionConfig()

        with self.assertRaises(FrozenInstanceError):
            config.method = 'z-score'

    def test_iqr_outliers(self):
        self.assertEqual(OutlierDetector().detect_outliers(self.data), [100])

    def test_iqr_multiplier(self):
        # Q1 = 2 and Q3 = 4, so a zero multiplier flags everything outside [2, 4]
        detector = OutlierDetector(OutlierDetectionConfig(iqr_multiplier=0))

        self.assertEqual(detector.detect_outliers(self.data), [1, 5, 100])

    def test_iqr_bounds(self):
        lower, upper = OutlierDetector().iqr_bounds(self.data)

        self.assertEqual(lower, -1)
        self.assertEqual(upper, 7)

    def test_iqr_bounds_empty(self):
        lower, upper = OutlierDetector().iqr_bounds([])

        self.assertTrue(math.isnan(lower))
        self.assertTrue(math.isnan(upper))

    def test_duplicates_are_preserved(self):
        data = [5, 5, 100, 5, 5, 5, 5, 100, 5, 5]

        self.assertEqual(OutlierDetector().detect_outliers(data), [100, 100])

    def test_empty_dataset(self):
        self.assertEqual(OutlierDetector().detect_outliers([]), [])

    def test_z_score_outliers(self):
        detector = OutlierDetector(OutlierDetectionConfig(method='z-score'))
        data = [10] * 19 + [100]

        self.assertEqual(detector.detect_outliers(data), [100])

    def test_z_score_uses_population_std_dev(self):
        # Mean 19, population std dev 27, so 100 sits exactly 3 deviations out
        data = [10] * 9 + [100]

        at_threshold = OutlierDetector(OutlierDetectionConfig(method='z-score'))
        below_threshold = OutlierDetector(OutlierDetectionConfig(method='z-score', z_score_threshold=2.9))

        self.assertEqual(at_threshold.detect_outliers(data), [])
        self.assertEqual(below_threshold.detect_outliers(data), [100])

    def test_z_score_constant_dataset(self):
        detector = OutlierDetector(OutlierDetectionConfig(method='z-score'))

        self.assertEqual(detector.detect_outliers([5, 5, 5, 5]), [])

    def test_custom_detector(self):
        predicate = Mock(side_effect=lambda data, value: value > max(data) / 2)
        detector = OutlierDetector(OutlierDetectionConfig(method='custom', custom_outlier_detector=predicate))

        self.assertEqual(detector.detect_outliers([1, 2, 10]), [10])
        self.assertEqual(predicate.call_count, 3)
        predicate.assert_any_call([1, 2, 10], 10)

    def test_custom_detector_gets_private_copy(self):
        def predicate(data, value):
            data.clear()
            return False

        data = [1, 2, 3]
        detector = OutlierDetector(OutlierDetectionConfig(method='custom', custom_outlier_detector=predicate))

        detector.detect_outliers(data)

        self.assertEqual(data, [1, 2, 3])

    def test_custom_without_detector_falls_back_to_iqr(self):
        detector = OutlierDetector(OutlierDetectionConfig(method='custom'))

        with self.assertLogs('statlens.outlier_detector', level='WARNING') as logs:
            outliers = detector.detect_outliers(self.data)

        self.assertEqual(outliers, [100])
        self.assertIn('falling back to IQR', logs.output[0])

    def test_unknown_method_falls_back_to_iqr(self):
        detector = OutlierDetector(OutlierDetectionConfig(method='mad'))

        with self.assertLogs('statlens.outlier_detector', level='WARNING'):
            outliers = detector.detect_outliers(self.data)

        self.assertEqual(outliers, [100])

    def test_repeated_calls_leave_input_unchanged(self):
        data = [100, 3, 1, 4, 2]
        detector = OutlierDetector()

        first = detector.detect_outliers(data)
        second = detector.detect_outliers(data)

        self.assertEqual(first, second)
        self.assertEqual(data, [100, 3, 1, 4, 2])


if __name__ == '__main__':
    unittest.main()

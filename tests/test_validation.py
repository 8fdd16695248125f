import unittest

import numpy as np

from ethanol_blend_sim.engine import PerformanceModel, default_fuels
from ethanol_blend_sim.utils import (
    InvalidParameterError, check_series_ranges, validate_in_range, validate_positive,
    validate_rpm_sweep, validate_rpm_values
)


class TestBoundaryValidation(unittest.TestCase):

    def test_default_sweep(self):
        rpm = validate_rpm_sweep(1000, 5000, 500)
        np.testing.assert_array_equal(rpm, [1000, 1500, 2000, 2500, 3000, 3500, 4000, 4500, 5000])

    def test_sweep_stop_off_grid(self):
        rpm = validate_rpm_sweep(1000, 2200, 500)
        np.testing.assert_array_equal(rpm, [1000, 1500, 2000])

    def test_single_point_sweep(self):
        np.testing.assert_array_equal(validate_rpm_sweep(3000, 3000, 100), [3000])

    def test_invalid_sweeps(self):
        for args in ((0, 5000, 500), (1000, 5000, 0), (1000, 5000, -500), (5000, 1000, 500)):
            with self.subTest(args=args):
                with self.assertRaises(InvalidParameterError):
                    validate_rpm_sweep(*args)

    def test_rpm_values(self):
        np.testing.assert_array_equal(validate_rpm_values([1000, 2000]), [1000.0, 2000.0])
        for values in ([], [1000, 1000], [-1000, 2000], [1000, float('nan')], ['a', 'b']):
            with self.subTest(values=values):
                with self.assertRaises(InvalidParameterError):
                    validate_rpm_values(values)

    def test_validate_positive(self):
        self.assertEqual(validate_positive('2.5', 'x'), 2.5)
        for value in (0, -1, None, True, float('nan')):
            with self.subTest(value=value):
                with self.assertRaises(InvalidParameterError):
                    validate_positive(value, 'x')

    def test_error_message_names_parameter(self):
        with self.assertRaises(InvalidParameterError) as ctx:
            validate_positive(-3, 'rpm_step')
        self.assertEqual(ctx.exception.name, 'rpm_step')
        self.assertIn("rpm_step", str(ctx.exception))


class TestRangeValidation(unittest.TestCase):

    def test_within_range(self):
        self.assertEqual(validate_in_range(0.3, 'thermal_efficiency')['status'], 'valid')

    def test_statuses(self):
        self.assertEqual(validate_in_range(1.005, 'thermal_efficiency')['status'], 'good')
        self.assertEqual(validate_in_range(1.1, 'thermal_efficiency')['status'], 'acceptable')
        self.assertEqual(validate_in_range(1.2, 'thermal_efficiency')['status'], 'warning')
        self.assertEqual(validate_in_range(2.0, 'thermal_efficiency')['status'], 'critical_error')

    def test_below_zero_bound(self):
        result = validate_in_range(-0.5, 'brake_power')
        self.assertEqual(result['status'], 'critical_error')
        self.assertAlmostEqual(result['relative_error'], 0.5)

    def test_nan(self):
        self.assertEqual(validate_in_range(float('nan'), 'bsfc')['status'], 'critical_error')

    def test_unknown_metric(self):
        self.assertEqual(validate_in_range(1.0, 'horsepower')['status'], 'unknown')

    def test_clean_series_in_range(self):
        series = PerformanceModel().compute_all(default_fuels(), validate_rpm_sweep(1000, 5000, 500))
        for s in series.values():
            self.assertEqual(check_series_ranges(s), [])

    def test_out_of_range_series_reported(self):
        series = PerformanceModel().compute_series(default_fuels()['E10'], [1000, 3000])
        broken = series.replace(thermal_efficiency=[0.3, 1.5])
        with self.assertLogs('Validation', level='WARNING'):
            issues = check_series_ranges(broken)
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0]['rpm'], 3000.0)
        self.assertEqual(issues[0]['fuel'], 'E10')
        # Reported, not corrected
        self.assertEqual(broken.thermal_efficiency[1], 1.5)


if __name__ == '__main__':
    unittest.main()

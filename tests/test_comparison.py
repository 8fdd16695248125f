import unittest

import numpy as np

from ethanol_blend_sim.analysis import BlendComparison, COMPARED_METRICS
from ethanol_blend_sim.engine import PerformanceModel, default_fuels
from ethanol_blend_sim.utils import validate_rpm_sweep


class TestBlendComparison(unittest.TestCase):

    def setUp(self):
        self.fuels = default_fuels()
        self.series = PerformanceModel().compute_all(self.fuels, validate_rpm_sweep(1000, 5000, 500))
        self.comparison = BlendComparison(self.series, baseline='E10', fuels=self.fuels)

    def test_peak_locations(self):
        for name in ('E10', 'E20'):
            metrics = self.comparison.metrics[name]
            self.assertEqual(metrics['peak_torque_rpm'], 3000.0)
            self.assertEqual(metrics['min_bsfc_rpm'], 3000.0)
            self.assertEqual(metrics['peak_efficiency_rpm'], 3000.0)

    def test_display_units(self):
        e10 = self.comparison.metrics['E10']
        self.assertAlmostEqual(e10['peak_efficiency_pct'], 32.0)
        self.assertAlmostEqual(e10['min_bsfc_g_per_kwh'], 3.6e9 / (43.54e6 * 0.32))
        self.assertAlmostEqual(self.comparison.metrics['E20']['peak_efficiency_pct'], 33.0)

    def test_relative_differences(self):
        differences = self.comparison.relative_differences()
        self.assertEqual(list(differences), ['E20'])
        self.assertEqual(set(differences['E20']), set(COMPARED_METRICS))
        self.assertAlmostEqual(differences['E20']['peak_efficiency_pct'], 3.125)

    def test_summary(self):
        summary = self.comparison.summary()
        self.assertEqual(summary['baseline'], 'E10')
        self.assertIn('E20', summary['fuel_property_ratios'])
        self.assertNotIn('fuel_property_ratios', BlendComparison(self.series).summary())

    def test_to_dataframe(self):
        df = self.comparison.to_dataframe()
        self.assertEqual(list(df.index), ['E10', 'E20'])
        self.assertTrue(np.isclose(df.loc['E10', 'peak_efficiency_pct'], 32.0))

    def test_unknown_baseline(self):
        with self.assertRaises(ValueError):
            BlendComparison(self.series, baseline='E85')


if __name__ == '__main__':
    unittest.main()

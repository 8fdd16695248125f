import unittest

import numpy as np

from ethanol_blend_sim.analysis import NoiseInjector
from ethanol_blend_sim.engine import OUTPUT_QUANTITIES, PerformanceModel, default_fuels
from ethanol_blend_sim.utils import InvalidParameterError, validate_rpm_sweep


class TestNoiseInjector(unittest.TestCase):

    def setUp(self):
        self.rpm = validate_rpm_sweep(1000, 5000, 500)
        self.clean = PerformanceModel().compute_all(default_fuels(), self.rpm)

    def test_zero_noise_is_identity(self):
        noisy = NoiseInjector.from_seed(0.0, seed=1).apply(self.clean)
        for name, series in self.clean.items():
            for quantity in OUTPUT_QUANTITIES:
                self.assertTrue(np.array_equal(getattr(noisy[name], quantity),
                                               getattr(series, quantity)),
                                f"{name} {quantity} changed under zero noise")

    def test_same_seed_is_bit_identical(self):
        first = NoiseInjector.from_seed(0.02, seed=1).apply(self.clean)
        second = NoiseInjector.from_seed(0.02, seed=1).apply(self.clean)
        for name in self.clean:
            for quantity in OUTPUT_QUANTITIES:
                self.assertTrue(np.array_equal(getattr(first[name], quantity),
                                               getattr(second[name], quantity)))

    def test_different_seed_differs(self):
        first = NoiseInjector.from_seed(0.02, seed=1).apply(self.clean)
        second = NoiseInjector.from_seed(0.02, seed=2).apply(self.clean)
        self.assertFalse(np.array_equal(first['E10'].brake_power, second['E10'].brake_power))

    def test_draw_order(self):
        """Power A/B, then torque A/B, then BSFC A/B, then efficiency A/B."""
        noisy = NoiseInjector.from_seed(0.05, seed=123).apply(self.clean)

        rng = np.random.default_rng(123)
        for quantity in ('brake_power', 'torque', 'bsfc', 'thermal_efficiency'):
            for name in ('E10', 'E20'):
                values = getattr(self.clean[name], quantity)
                expected = values * (1.0 + 0.05 * rng.standard_normal(len(values)))
                self.assertTrue(np.array_equal(getattr(noisy[name], quantity), expected),
                                f"{name} {quantity} drawn out of order")

    def test_inputs_not_modified(self):
        before = {name: s.brake_power.copy() for name, s in self.clean.items()}
        NoiseInjector.from_seed(0.02, seed=1).apply(self.clean)
        for name, series in self.clean.items():
            np.testing.assert_array_equal(series.brake_power, before[name])

    def test_intermediate_quantities_untouched(self):
        noisy = NoiseInjector.from_seed(0.02, seed=1).apply(self.clean)
        for name, series in self.clean.items():
            np.testing.assert_array_equal(noisy[name].volumetric_efficiency,
                                          series.volumetric_efficiency)
            np.testing.assert_array_equal(noisy[name].fuel_mass_flow, series.fuel_mass_flow)

    def test_length_preserved(self):
        noisy = NoiseInjector.from_seed(0.02, seed=1).apply(self.clean)
        for series in noisy.values():
            self.assertEqual(len(series), len(self.rpm))
            for quantity in OUTPUT_QUANTITIES:
                self.assertEqual(len(getattr(series, quantity)), len(self.rpm))

    def test_no_clamping_after_noise(self):
        injector = NoiseInjector(5.0, np.random.default_rng(0))
        values = np.full(200, 0.3)
        perturbed = injector.perturb(values)
        # With a 500% spread some efficiencies leave [0, 1]; they are kept as drawn
        self.assertTrue(np.any(perturbed < 0.0))
        self.assertTrue(np.any(perturbed > 1.0))

    def test_noise_level_is_relative(self):
        injector = NoiseInjector(0.02, np.random.default_rng(5))
        values = np.full(20000, 500.0)
        perturbed = injector.perturb(values)
        relative = perturbed / values - 1.0
        self.assertAlmostEqual(np.mean(relative), 0.0, delta=0.001)
        self.assertAlmostEqual(np.std(relative), 0.02, delta=0.001)

    def test_negative_fraction_rejected(self):
        with self.assertRaises(InvalidParameterError):
            NoiseInjector(-0.01)
        with self.assertRaises(InvalidParameterError):
            NoiseInjector(float('nan'))


if __name__ == '__main__':
    unittest.main()

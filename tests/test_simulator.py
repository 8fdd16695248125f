import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd

from ethanol_blend_sim.cli import main
from ethanol_blend_sim.core import BlendSimulator, SimulationConfig
from ethanol_blend_sim.engine import OUTPUT_QUANTITIES


class TestBlendSimulator(unittest.TestCase):

    def test_same_seed_runs_are_identical(self):
        first = BlendSimulator(SimulationConfig(seed=1)).run()
        second = BlendSimulator(SimulationConfig(seed=1)).run()
        for name in first.series:
            for quantity in OUTPUT_QUANTITIES:
                self.assertTrue(np.array_equal(getattr(first.series[name], quantity),
                                               getattr(second.series[name], quantity)))

    def test_repeated_runs_are_identical(self):
        simulator = BlendSimulator(SimulationConfig(seed=1))
        first = simulator.run()
        second = simulator.run()
        for name in first.series:
            for quantity in OUTPUT_QUANTITIES:
                self.assertTrue(np.array_equal(getattr(first.series[name], quantity),
                                               getattr(second.series[name], quantity)))

    def test_noise_changes_reported_values(self):
        result = BlendSimulator(SimulationConfig(seed=1)).run()
        self.assertTrue(result.noise_applied)
        self.assertFalse(np.array_equal(result.series['E10'].brake_power,
                                        result.clean_series['E10'].brake_power))

    def test_run_without_noise(self):
        result = BlendSimulator().run(add_noise=False)
        self.assertFalse(result.noise_applied)
        for name, series in result.clean_series.items():
            for quantity in OUTPUT_QUANTITIES:
                np.testing.assert_array_equal(getattr(result.series[name], quantity),
                                              getattr(series, quantity))

    def test_zero_noise_fraction_matches_clean(self):
        result = BlendSimulator(SimulationConfig(noise_fraction=0.0)).run()
        np.testing.assert_array_equal(result.series['E20'].bsfc, result.clean_series['E20'].bsfc)

    def test_lengths_match_sweep(self):
        result = BlendSimulator(SimulationConfig(rpm_start=1200, rpm_stop=6200, rpm_step=250)).run()
        self.assertEqual(len(result.rpm), 21)
        for name in ('E10', 'E20'):
            self.assertEqual(len(result.clean_series[name]), 21)
            self.assertEqual(len(result.series[name]), 21)

    def test_data_table(self):
        df = BlendSimulator().run(add_noise=False).to_dataframe()
        self.assertEqual(len(df), 18)
        row = df[(df['fuel'] == 'E10') & (df['rpm'] == 3000)].iloc[0]
        self.assertAlmostEqual(row['thermal_efficiency_pct'], 32.0)
        self.assertAlmostEqual(row['bsfc_g_per_kwh'], 3.6e9 / (43.54e6 * 0.32), places=6)

    def test_export_results(self):
        with tempfile.TemporaryDirectory() as tmp:
            simulator = BlendSimulator(SimulationConfig(output_dir=tmp))
            files = simulator.export_results(simulator.run())
            self.assertEqual([os.path.basename(p) for p in files],
                             ['E10_E20_PerformanceGraphs_data.csv',
                              'E10_E20_PerformanceGraphs_summary.json'])

            df = pd.read_csv(files[0])
            self.assertEqual(len(df), 18)
            self.assertEqual(sorted(df['fuel'].unique()), ['E10', 'E20'])

            with open(files[1]) as f:
                summary = json.load(f)
            self.assertTrue(summary['noise_applied'])
            self.assertEqual(summary['comparison']['baseline'], 'E10')

    def test_export_plots(self):
        with tempfile.TemporaryDirectory() as tmp:
            simulator = BlendSimulator(SimulationConfig(output_dir=tmp))
            files = simulator.export_plots(simulator.run())
            self.assertEqual([os.path.basename(p) for p in files],
                             ['E10_E20_PerformanceGraphs.png', 'E10_E20_PerformanceGraphs.pdf'])
            for path in files:
                self.assertGreater(os.path.getsize(path), 0)

    def test_export_plots_clean_style(self):
        with tempfile.TemporaryDirectory() as tmp:
            simulator = BlendSimulator(SimulationConfig(output_dir=tmp, plot_style='clean',
                                                        export_formats=['png']))
            files = simulator.export_plots(simulator.run())
            self.assertEqual([os.path.basename(p) for p in files], ['E10_E20_PerformanceGraphs.png'])

    def test_run_and_export_respects_flags(self):
        with tempfile.TemporaryDirectory() as tmp:
            config = SimulationConfig(output_dir=tmp, save_plots=False)
            outcome = BlendSimulator(config).run_and_export()
            self.assertEqual(len(outcome['files']), 2)
            self.assertFalse(os.path.exists(os.path.join(tmp, 'E10_E20_PerformanceGraphs.png')))


class TestCommandLine(unittest.TestCase):

    def test_main_writes_outputs(self):
        with tempfile.TemporaryDirectory() as tmp:
            with redirect_stdout(io.StringIO()) as out:
                code = main(['--output-dir', tmp, '--seed', '3'])
            self.assertEqual(code, 0)
            for ext in ('png', 'pdf'):
                self.assertTrue(os.path.exists(os.path.join(tmp, f'E10_E20_PerformanceGraphs.{ext}')))
            self.assertIn('E20 vs E10', out.getvalue())

    def test_main_invalid_parameter(self):
        with tempfile.TemporaryDirectory() as tmp:
            with redirect_stdout(io.StringIO()):
                code = main(['--output-dir', tmp, '--rpm-step', '0'])
            self.assertEqual(code, 2)
            self.assertEqual(os.listdir(tmp), [])

    def test_main_invalid_parameter_logged(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertLogs('CLI', level='ERROR') as logs:
                code = main(['--output-dir', tmp, '--rpm-step', '0', '--no-plots', '--no-data'])
        self.assertEqual(code, 2)
        self.assertIn('rpm_step', logs.output[0])

    def test_main_malformed_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'broken.yaml')
            with open(path, 'w') as f:
                f.write("engine: [unclosed\n")
            with redirect_stdout(io.StringIO()):
                code = main(['--config', path, '--no-plots', '--no-data'])
        self.assertEqual(code, 2)

    def test_main_missing_config(self):
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main(['--config', 'no_such_file.yaml', '--no-plots', '--no-data']), 2)

    def test_main_without_exports(self):
        with redirect_stdout(io.StringIO()) as out:
            code = main(['--no-plots', '--no-data', '--no-noise'])
        self.assertEqual(code, 0)
        self.assertNotIn('Exported files', out.getvalue())


if __name__ == '__main__':
    unittest.main()

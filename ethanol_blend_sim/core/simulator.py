"""
Simulator module for the ethanol blend engine performance simulation.

This module runs one comparison: it builds the engine and blends from a
SimulationConfig, computes the clean performance series, injects measurement
noise from the run's own seeded generator and hands the final series to the
exporters. Data flows one way: config -> model -> noise -> export.
"""

import json
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..analysis.comparison import BlendComparison
from ..analysis.noise import NoiseInjector
from ..engine.performance_model import PerformanceModel, PerformanceSeries
from ..utils.constants import bsfc_to_g_per_kwh, efficiency_to_percent
from ..utils.plotting import ReportExporter
from ..utils.validation import check_series_ranges
from .config import SimulationConfig

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Simulator")


class SimulationResult:
    """Outcome of one simulation run."""

    def __init__(self, rpm: np.ndarray, clean_series: Dict[str, PerformanceSeries],
                 series: Dict[str, PerformanceSeries], comparison: BlendComparison,
                 noise_applied: bool, range_issues: Optional[List[Dict]] = None):
        """
        Initialize a simulation result.

        Args:
            rpm: Engine speeds of the sweep (rpm)
            clean_series: Model output per blend, before noise
            series: Final series per blend (noisy when noise was applied)
            comparison: Blend comparison computed on the final series
            noise_applied: Whether noise was injected
            range_issues: Out-of-range points found in the final series
        """
        self.rpm = rpm
        self.clean_series = clean_series
        self.series = series
        self.comparison = comparison
        self.noise_applied = noise_applied
        self.range_issues = range_issues or []

    def to_dataframe(self) -> pd.DataFrame:
        """
        Build the long-format data table of the final series.

        Returns:
            DataFrame with one row per blend per engine speed, BSFC in g/kWh
            and thermal efficiency in percent
        """
        rows = []
        for name, series in self.series.items():
            rows.append(pd.DataFrame({
                'fuel': name,
                'rpm': series.rpm,
                'volumetric_efficiency': series.volumetric_efficiency,
                'air_mass_flow_kg_s': series.air_mass_flow,
                'fuel_mass_flow_kg_s': series.fuel_mass_flow,
                'brake_power_kw': series.brake_power,
                'torque_nm': series.torque,
                'bsfc_g_per_kwh': bsfc_to_g_per_kwh(series.bsfc),
                'thermal_efficiency_pct': efficiency_to_percent(series.thermal_efficiency)
            }))
        return pd.concat(rows, ignore_index=True)


class BlendSimulator:
    """Runs the E10/E20 performance comparison described by a SimulationConfig."""

    def __init__(self, config: Optional[SimulationConfig] = None):
        """
        Initialize the simulator.

        Each call to run() seeds its own random generator from the configured
        seed, so repeated runs are identical; no global random state is used.

        Args:
            config: Run configuration (defaults to SimulationConfig())
        """
        self.config = config if config is not None else SimulationConfig()
        self.geometry = self.config.engine_geometry()
        self.fuels = self.config.fuels()
        self.rpm = self.config.rpm_sweep()
        self.model = PerformanceModel(self.geometry)

    def run(self, add_noise: Optional[bool] = None) -> SimulationResult:
        """
        Run the model and, optionally, the noise injection.

        Args:
            add_noise: Override of the configured noise setting

        Returns:
            SimulationResult holding clean and final series
        """
        add_noise = self.config.add_noise if add_noise is None else add_noise

        logger.info(f"Running blend comparison: {', '.join(self.fuels)}, "
                    f"swept volume {self.geometry.get_displacement_cc():.1f} cc")

        clean_series = self.model.compute_all(self.fuels, self.rpm)
        if add_noise:
            rng = np.random.default_rng(self.config.seed)
            series = NoiseInjector(self.config.noise_fraction, rng).apply(clean_series)
        else:
            series = {name: s.copy() for name, s in clean_series.items()}

        range_issues = []
        for s in series.values():
            range_issues.extend(check_series_ranges(s))

        comparison = BlendComparison(series, baseline=next(iter(self.fuels)), fuels=self.fuels)
        comparison.log_summary()

        return SimulationResult(self.rpm.copy(), clean_series, series, comparison,
                                add_noise, range_issues)

    def export_plots(self, result: SimulationResult, output_dir: Optional[str] = None) -> List[str]:
        """
        Export the comparison figure.

        Args:
            result: Result of run()
            output_dir: Destination directory (defaults to the configured one)

        Returns:
            Paths of the written figure files
        """
        exporter = ReportExporter(
            output_dir=output_dir or self.config.output_dir,
            basename=self.config.export_basename,
            formats=self.config.export_formats,
            style=self.config.plot_style
        )
        return exporter.export(result.rpm, result.series)

    def export_results(self, result: SimulationResult, output_dir: Optional[str] = None) -> List[str]:
        """
        Export the data table (CSV) and the comparison summary (JSON).

        Args:
            result: Result of run()
            output_dir: Destination directory (defaults to the configured one)

        Returns:
            Paths of the written files
        """
        output_dir = output_dir or self.config.output_dir
        os.makedirs(output_dir, exist_ok=True)

        data_csv_path = os.path.join(output_dir, f"{self.config.export_basename}_data.csv")
        summary_json_path = os.path.join(output_dir, f"{self.config.export_basename}_summary.json")

        result.to_dataframe().to_csv(data_csv_path, index=False)
        logger.info(f"Data table exported to {data_csv_path}")

        summary = {
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'noise_applied': result.noise_applied,
            'config': self.config.to_dict(),
            'engine': self.geometry.to_dict(),
            'fuels': {name: fuel.to_dict() for name, fuel in self.fuels.items()},
            'comparison': result.comparison.summary(),
            'range_issues': len(result.range_issues)
        }
        with open(summary_json_path, 'w') as f:
            json.dump(summary, f, indent=4, default=_json_default)
        logger.info(f"Summary exported to {summary_json_path}")

        return [data_csv_path, summary_json_path]

    def run_and_export(self) -> Dict:
        """
        Run the comparison and write every configured export.

        Returns:
            Dictionary with the 'result' and the list of written 'files'
        """
        result = self.run()
        files = []
        if self.config.save_plots:
            files.extend(self.export_plots(result))
        if self.config.save_data:
            files.extend(self.export_results(result))
        return {'result': result, 'files': files}


def _json_default(value):
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

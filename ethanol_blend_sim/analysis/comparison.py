"""
Blend comparison module for the ethanol blend engine performance simulation.

Reduces the performance series of each blend to headline metrics (peak power,
peak torque, minimum BSFC, peak thermal efficiency and their speeds, plus
sweep averages) and expresses every other blend relative to a baseline blend.
"""

import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..engine.fuel_properties import FuelProperties
from ..engine.performance_model import PerformanceSeries
from ..utils.constants import FRACTION_TO_PERCENT, KG_TO_G

logger = logging.getLogger("Comparison")

# Metrics compared against the baseline blend (speed locations are not)
COMPARED_METRICS = (
    'peak_power_kw', 'peak_torque_nm', 'min_bsfc_g_per_kwh', 'peak_efficiency_pct',
    'mean_power_kw', 'mean_torque_nm', 'mean_bsfc_g_per_kwh', 'mean_efficiency_pct'
)


def summarize_series(series: PerformanceSeries) -> Dict[str, float]:
    """
    Calculate headline metrics of one blend.

    Args:
        series: Performance series of the blend

    Returns:
        Dictionary of metrics in display units (kW, Nm, g/kWh, %)
    """
    power_rpm, peak_power = series.peak('brake_power')
    torque_rpm, peak_torque = series.peak('torque')
    bsfc_rpm, min_bsfc = series.minimum('bsfc')
    efficiency_rpm, peak_efficiency = series.peak('thermal_efficiency')

    return {
        'peak_power_kw': peak_power,
        'peak_power_rpm': power_rpm,
        'peak_torque_nm': peak_torque,
        'peak_torque_rpm': torque_rpm,
        'min_bsfc_g_per_kwh': min_bsfc * KG_TO_G,
        'min_bsfc_rpm': bsfc_rpm,
        'peak_efficiency_pct': peak_efficiency * FRACTION_TO_PERCENT,
        'peak_efficiency_rpm': efficiency_rpm,
        'mean_power_kw': float(np.nanmean(series.brake_power)),
        'mean_torque_nm': float(np.nanmean(series.torque)),
        'mean_bsfc_g_per_kwh': float(np.nanmean(series.bsfc)) * KG_TO_G,
        'mean_efficiency_pct': float(np.nanmean(series.thermal_efficiency)) * FRACTION_TO_PERCENT,
    }


class BlendComparison:
    """Compares the performance of fuel blends against a baseline blend."""

    def __init__(self, series_by_fuel: Dict[str, PerformanceSeries], baseline: str = 'E10',
                 fuels: Optional[Dict[str, FuelProperties]] = None):
        """
        Initialize the comparison.

        Args:
            series_by_fuel: Series keyed by blend name
            baseline: Name of the blend the others are compared against
            fuels: Optional blend properties, adds property ratios to the summary

        Raises:
            ValueError: If the baseline blend has no series
        """
        if baseline not in series_by_fuel:
            raise ValueError(f"Baseline blend '{baseline}' not in {list(series_by_fuel)}")

        self.series_by_fuel = series_by_fuel
        self.baseline = baseline
        self.fuels = fuels
        self.metrics = {name: summarize_series(series) for name, series in series_by_fuel.items()}

    def relative_differences(self) -> Dict[str, Dict[str, float]]:
        """
        Calculate percent differences of every non-baseline blend.

        Returns:
            Nested dictionary {blend: {metric: percent difference vs baseline}}
        """
        base = self.metrics[self.baseline]
        differences = {}
        for name, metrics in self.metrics.items():
            if name == self.baseline:
                continue
            differences[name] = {
                metric: (metrics[metric] - base[metric]) / base[metric] * FRACTION_TO_PERCENT
                if base[metric] != 0 else np.nan
                for metric in COMPARED_METRICS
            }
        return differences

    def summary(self) -> Dict:
        """
        Build the full comparison summary.

        Returns:
            Dictionary with the baseline name, metrics per blend, percent
            differences vs baseline and, when fuels were given, property ratios
        """
        summary = {
            'baseline': self.baseline,
            'metrics': self.metrics,
            'relative_to_baseline_pct': self.relative_differences()
        }

        if self.fuels and self.baseline in self.fuels:
            base_fuel = self.fuels[self.baseline]
            summary['fuel_property_ratios'] = {
                name: fuel.compare_with(base_fuel)
                for name, fuel in self.fuels.items() if name != self.baseline
            }

        return summary

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the per-blend metrics to a DataFrame.

        Returns:
            DataFrame indexed by blend name with one column per metric
        """
        df = pd.DataFrame.from_dict(self.metrics, orient='index')
        df.index.name = 'fuel'
        return df

    def log_summary(self):
        """Log the headline metrics of every blend."""
        for name, metrics in self.metrics.items():
            logger.info(
                f"{name}: peak power {metrics['peak_power_kw']:.1f} kW @ {metrics['peak_power_rpm']:.0f} rpm, "
                f"peak torque {metrics['peak_torque_nm']:.1f} Nm @ {metrics['peak_torque_rpm']:.0f} rpm, "
                f"min BSFC {metrics['min_bsfc_g_per_kwh']:.1f} g/kWh, "
                f"peak efficiency {metrics['peak_efficiency_pct']:.1f}%"
            )

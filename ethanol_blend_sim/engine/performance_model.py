"""
Performance model module for the ethanol blend engine performance simulation.

This module computes steady-state performance curves of a spark-ignition engine
for a given fuel blend over a sweep of engine speeds. For each speed the chain
is: volumetric efficiency -> air mass flow -> fuel mass flow -> thermal
efficiency -> brake power -> torque -> brake-specific fuel consumption (BSFC).
Volumetric and thermal efficiency are quadratics peaking at 3000 rpm and
clamped to a floor.
"""

import logging
from typing import Dict, Iterator, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .fuel_properties import FuelProperties
from .geometry import EngineGeometry
from ..utils.constants import (
    AIR_DENSITY_SEA_LEVEL, KW_RPM_TO_NM, PEAK_EFFICIENCY_RPM, SECONDS_PER_HOUR,
    STROKES_PER_INTAKE, VE_CURVATURE, VE_FLOOR, VE_PEAK, W_TO_KW
)
from ..utils.validation import validate_positive, validate_rpm_values

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("PerformanceModel")

# Quantities reported per blend, in the order noise is applied to them
OUTPUT_QUANTITIES = ('brake_power', 'torque', 'bsfc', 'thermal_efficiency')

# All per-point quantities carried by a series
SERIES_QUANTITIES = (
    'volumetric_efficiency', 'air_mass_flow', 'fuel_mass_flow',
    'thermal_efficiency', 'brake_power', 'torque', 'bsfc'
)


class PerformancePoint:
    """Engine operating point for one blend at one engine speed."""

    def __init__(self, rpm: float, volumetric_efficiency: float, air_mass_flow: float,
                 fuel_mass_flow: float, thermal_efficiency: float, brake_power: float,
                 torque: float, bsfc: float):
        """
        Initialize a performance point.

        Args:
            rpm: Engine speed (rpm)
            volumetric_efficiency: Volumetric efficiency (dimensionless)
            air_mass_flow: Air mass flow rate (kg/s)
            fuel_mass_flow: Fuel mass flow rate (kg/s)
            thermal_efficiency: Brake thermal efficiency (dimensionless)
            brake_power: Brake power (kW)
            torque: Brake torque (Nm)
            bsfc: Brake-specific fuel consumption (kg/kWh)
        """
        self.rpm = rpm
        self.volumetric_efficiency = volumetric_efficiency
        self.air_mass_flow = air_mass_flow
        self.fuel_mass_flow = fuel_mass_flow
        self.thermal_efficiency = thermal_efficiency
        self.brake_power = brake_power
        self.torque = torque
        self.bsfc = bsfc

    def to_dict(self) -> Dict:
        """Convert the point to a dictionary."""
        return {'rpm': self.rpm, **{name: getattr(self, name) for name in SERIES_QUANTITIES}}

    def __repr__(self) -> str:
        return (f"PerformancePoint(rpm={self.rpm:.0f}, brake_power={self.brake_power:.2f} kW, "
                f"torque={self.torque:.2f} Nm, bsfc={self.bsfc:.4f} kg/kWh)")


class PerformanceSeries:
    """
    Performance points of one blend, aligned index-for-index with an RPM sweep.

    Values are held as numpy arrays. BSFC is kept in kg/kWh; conversion to
    g/kWh happens at display and export time.
    """

    def __init__(self, fuel_name: str, rpm: Sequence[float], **quantities):
        """
        Initialize a performance series.

        Args:
            fuel_name: Blend name, e.g. 'E10'
            rpm: Engine speeds (rpm)
            **quantities: One array per name in SERIES_QUANTITIES

        Raises:
            ValueError: If a quantity is missing or its length differs from rpm
        """
        self.fuel_name = fuel_name
        self.rpm = np.array(rpm, dtype=float)

        missing = [name for name in SERIES_QUANTITIES if name not in quantities]
        if missing:
            raise ValueError(f"Missing series quantities: {', '.join(missing)}")

        for name in SERIES_QUANTITIES:
            values = np.array(quantities[name], dtype=float)
            if values.shape != self.rpm.shape:
                raise ValueError(f"{name} must have the same length as rpm "
                                 f"({len(values)} != {len(self.rpm)})")
            setattr(self, name, values)

    def __len__(self) -> int:
        return len(self.rpm)

    def points(self) -> Iterator[PerformancePoint]:
        """Iterate over the series as PerformancePoint objects."""
        for i, rpm in enumerate(self.rpm):
            yield PerformancePoint(float(rpm), *(float(getattr(self, name)[i])
                                                 for name in SERIES_QUANTITIES))

    def get_quantities(self) -> Dict[str, np.ndarray]:
        """Return a dictionary of all per-point arrays keyed by quantity name."""
        return {name: getattr(self, name) for name in SERIES_QUANTITIES}

    def replace(self, **quantities) -> 'PerformanceSeries':
        """
        Create a new series with some quantities replaced.

        Args:
            **quantities: Replacement arrays keyed by quantity name

        Returns:
            New PerformanceSeries; this one is left unchanged
        """
        unknown = set(quantities) - set(SERIES_QUANTITIES)
        if unknown:
            raise ValueError(f"Unknown series quantities: {', '.join(sorted(unknown))}")

        values = self.get_quantities()
        values.update(quantities)
        return PerformanceSeries(self.fuel_name, self.rpm, **values)

    def copy(self) -> 'PerformanceSeries':
        """Create an independent copy of the series."""
        return self.replace()

    def peak(self, quantity: str) -> Tuple[float, float]:
        """
        Find the maximum of a quantity.

        Args:
            quantity: Quantity name

        Returns:
            Tuple of (rpm at maximum, maximum value)
        """
        values = getattr(self, quantity)
        idx = int(np.nanargmax(values))
        return float(self.rpm[idx]), float(values[idx])

    def minimum(self, quantity: str) -> Tuple[float, float]:
        """
        Find the minimum of a quantity.

        Args:
            quantity: Quantity name

        Returns:
            Tuple of (rpm at minimum, minimum value)
        """
        values = getattr(self, quantity)
        idx = int(np.nanargmin(values))
        return float(self.rpm[idx]), float(values[idx])

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the series to a DataFrame with one row per engine speed.

        Returns:
            DataFrame with 'fuel', 'rpm' and one column per quantity
        """
        df = pd.DataFrame({'rpm': self.rpm, **self.get_quantities()})
        df.insert(0, 'fuel', self.fuel_name)
        return df

    def __repr__(self) -> str:
        return f"PerformanceSeries({self.fuel_name}, {len(self)} points)"


class PerformanceModel:
    """
    Steady-state performance model of a spark-ignition engine.

    The model is a pure function of the engine geometry, a fuel blend and the
    engine speed. It holds no state besides the geometry.
    """

    def __init__(self, geometry: Optional[EngineGeometry] = None,
                 air_density: float = AIR_DENSITY_SEA_LEVEL):
        """
        Initialize the performance model.

        Args:
            geometry: Engine geometry (defaults to EngineGeometry())
            air_density: Ambient air density in kg/m³
        """
        self.geometry = geometry if geometry is not None else EngineGeometry()
        self.air_density = validate_positive(air_density, 'air_density')

    def volumetric_efficiency(self, rpm):
        """
        Volumetric efficiency, dropping away from a 3000 rpm peak.

        VE = 0.90 - 0.000002 · (rpm - 3000)², floored at 0.7.

        Args:
            rpm: Engine speed (rpm), scalar or array

        Returns:
            Volumetric efficiency (dimensionless)
        """
        ve = VE_PEAK - VE_CURVATURE * (rpm - PEAK_EFFICIENCY_RPM) ** 2
        return np.maximum(ve, VE_FLOOR)

    def air_mass_flow(self, rpm):
        """
        Air mass flow rate into the engine.

        One intake charge of swept volume at ambient density every two
        revolutions, scaled by volumetric efficiency.

        Args:
            rpm: Engine speed (rpm), scalar or array

        Returns:
            Air mass flow rate in kg/s
        """
        return ((rpm / STROKES_PER_INTAKE) * self.geometry.swept_volume
                * self.air_density * self.volumetric_efficiency(rpm))

    def fuel_mass_flow(self, rpm, fuel: FuelProperties):
        """
        Fuel mass flow rate for a blend.

        Args:
            rpm: Engine speed (rpm), scalar or array
            fuel: Blend properties

        Returns:
            Fuel mass flow rate in kg/s
        """
        return self.air_mass_flow(rpm) / fuel.air_fuel_ratio

    def thermal_efficiency(self, rpm, fuel: FuelProperties):
        """
        Brake thermal efficiency for a blend, peaking at 3000 rpm.

        η = peak - curvature · (rpm - 3000)², floored at the blend's floor.

        Args:
            rpm: Engine speed (rpm), scalar or array
            fuel: Blend properties

        Returns:
            Thermal efficiency (dimensionless)
        """
        eta = fuel.efficiency_peak - fuel.efficiency_curvature * (rpm - PEAK_EFFICIENCY_RPM) ** 2
        return np.maximum(eta, fuel.efficiency_floor)

    def compute_point(self, rpm: float, fuel: FuelProperties) -> PerformancePoint:
        """
        Compute the operating point of a blend at one engine speed.

        Args:
            rpm: Engine speed (rpm), positive
            fuel: Blend properties

        Returns:
            PerformancePoint with BSFC in kg/kWh
        """
        ve = float(self.volumetric_efficiency(rpm))
        if ve == VE_FLOOR:
            logger.debug(f"Volumetric efficiency clamped to {VE_FLOOR} at {rpm:.0f} rpm")

        maf = (rpm / STROKES_PER_INTAKE) * self.geometry.swept_volume * self.air_density * ve
        mf = maf / fuel.air_fuel_ratio

        eta = float(self.thermal_efficiency(rpm, fuel))
        if eta == fuel.efficiency_floor:
            logger.debug(f"{fuel.name} thermal efficiency clamped to {fuel.efficiency_floor} "
                         f"at {rpm:.0f} rpm")

        # Brake power (kW)
        brake_power = mf * fuel.lower_heating_value * eta * W_TO_KW

        # Torque (Nm)
        torque = brake_power * KW_RPM_TO_NM / rpm

        # BSFC (kg/kWh): fuel flow in kg/h over brake power in kW
        if brake_power > 0.0:
            bsfc = mf * SECONDS_PER_HOUR / brake_power
        else:
            logger.warning(f"{fuel.name} brake power is {brake_power} kW at {rpm:.0f} rpm; "
                           f"BSFC undefined")
            bsfc = np.nan

        logger.debug(f"{fuel.name} {rpm:.0f} rpm: VE={ve:.4f}, maf={maf:.5f} kg/s, "
                     f"mf={mf:.6f} kg/s, eta={eta:.4f}, BP={brake_power:.2f} kW, "
                     f"T={torque:.2f} Nm, BSFC={bsfc:.4f} kg/kWh")

        return PerformancePoint(float(rpm), ve, maf, mf, eta, brake_power, torque, bsfc)

    def compute_series(self, fuel: FuelProperties, rpm_sweep: Sequence[float]) -> PerformanceSeries:
        """
        Compute the performance series of a blend over an RPM sweep.

        Args:
            fuel: Blend properties
            rpm_sweep: Strictly increasing positive engine speeds (rpm)

        Returns:
            PerformanceSeries aligned with rpm_sweep
        """
        rpm = validate_rpm_values(rpm_sweep)

        columns = {name: np.zeros(len(rpm)) for name in SERIES_QUANTITIES}
        for i, speed in enumerate(rpm):
            point = self.compute_point(float(speed), fuel)
            for name in SERIES_QUANTITIES:
                columns[name][i] = getattr(point, name)

        return PerformanceSeries(fuel.name, rpm, **columns)

    def compute_all(self, fuels: Dict[str, FuelProperties],
                    rpm_sweep: Sequence[float]) -> Dict[str, PerformanceSeries]:
        """
        Compute one performance series per blend.

        Args:
            fuels: Blend properties keyed by blend name
            rpm_sweep: Strictly increasing positive engine speeds (rpm)

        Returns:
            Dictionary mapping blend name to PerformanceSeries, in the order of fuels
        """
        rpm = validate_rpm_values(rpm_sweep)
        logger.info(f"Computing performance for {', '.join(fuels)} over {len(rpm)} speeds "
                    f"({rpm[0]:.0f}-{rpm[-1]:.0f} rpm)")
        return {name: self.compute_series(fuel, rpm) for name, fuel in fuels.items()}

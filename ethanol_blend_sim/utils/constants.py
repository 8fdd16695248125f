"""
Constants module for the ethanol blend engine performance simulation.

This module provides physical constants, unit conversion factors, model tuning
values and run defaults used throughout the simulation.
"""

import numpy as np

# Physical constants
AIR_DENSITY_SEA_LEVEL = 1.225  # kg/m³, air density at sea level (15°C, 1013.25 hPa)
STROKES_PER_INTAKE = 2  # four-stroke engine: one intake charge every two revolutions

# Unit conversion factors
KW_RPM_TO_NM = 9550  # T [Nm] = P [kW] * 9550 / n [rpm], i.e. 60000 / (2π) rounded
SECONDS_PER_HOUR = 3600.0  # Convert kg/s to kg/h
W_TO_KW = 1.0 / 1000.0  # Convert watts to kilowatts
KG_TO_G = 1000.0  # Convert kilograms to grams
FRACTION_TO_PERCENT = 100.0  # Convert a fraction to percent
M3_TO_CC = 1.0e6  # Convert cubic meters to cubic centimeters

# Volumetric efficiency model
VE_PEAK = 0.90  # VE at the peak speed
VE_CURVATURE = 0.000002  # 1/rpm², quadratic fall-off away from the peak
VE_FLOOR = 0.7  # lower clamp
PEAK_EFFICIENCY_RPM = 3000.0  # rpm at which VE and thermal efficiency peak

# Engine reference values
DEFAULT_COMPRESSION_RATIO = 10.0
DEFAULT_BORE = 0.08  # m
DEFAULT_STROKE = 0.09  # m

# Run defaults
DEFAULT_RPM_START = 1000
DEFAULT_RPM_STOP = 5000
DEFAULT_RPM_STEP = 500
DEFAULT_NOISE_FRACTION = 0.02  # 2% multiplicative variation
DEFAULT_SEED = 1
DEFAULT_EXPORT_BASENAME = 'E10_E20_PerformanceGraphs'
DEFAULT_EXPORT_FORMATS = ('png', 'pdf')


def bsfc_to_g_per_kwh(bsfc_kg_per_kwh):
    """Convert BSFC from kg/kWh (model output) to g/kWh (display units)."""
    return np.asarray(bsfc_kg_per_kwh) * KG_TO_G


def efficiency_to_percent(efficiency):
    """Convert an efficiency fraction to percent."""
    return np.asarray(efficiency) * FRACTION_TO_PERCENT

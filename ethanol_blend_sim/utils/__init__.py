"""
Utility modules for the ethanol blend engine performance simulation.

This package provides constants, validation and plotting used throughout the
simulation.
"""

from .constants import (
    # Physical constants
    AIR_DENSITY_SEA_LEVEL, STROKES_PER_INTAKE,

    # Unit conversion factors
    KW_RPM_TO_NM, SECONDS_PER_HOUR, W_TO_KW, KG_TO_G, FRACTION_TO_PERCENT,
    M3_TO_CC,

    # Model constants
    VE_PEAK, VE_CURVATURE, VE_FLOOR, PEAK_EFFICIENCY_RPM,

    # Unit conversion functions
    bsfc_to_g_per_kwh, efficiency_to_percent
)

from .validation import (
    InvalidParameterError, validate_positive, validate_non_negative,
    validate_rpm_sweep, validate_rpm_values, validate_in_range,
    check_series_ranges, PERFORMANCE_RANGES, VALIDATION_THRESHOLDS
)

from .plotting import (
    set_plot_style, save_plot, plot_blend_comparison, ReportExporter
)

__all__ = [
    # Constants
    'AIR_DENSITY_SEA_LEVEL', 'STROKES_PER_INTAKE',
    'KW_RPM_TO_NM', 'SECONDS_PER_HOUR', 'W_TO_KW', 'KG_TO_G', 'FRACTION_TO_PERCENT',
    'M3_TO_CC',
    'VE_PEAK', 'VE_CURVATURE', 'VE_FLOOR', 'PEAK_EFFICIENCY_RPM',
    'bsfc_to_g_per_kwh', 'efficiency_to_percent',

    # Validation
    'InvalidParameterError', 'validate_positive', 'validate_non_negative',
    'validate_rpm_sweep', 'validate_rpm_values', 'validate_in_range',
    'check_series_ranges', 'PERFORMANCE_RANGES', 'VALIDATION_THRESHOLDS',

    # Plotting
    'set_plot_style', 'save_plot', 'plot_blend_comparison', 'ReportExporter'
]

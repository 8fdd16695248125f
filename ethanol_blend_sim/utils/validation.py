"""
Validation utilities for the ethanol blend engine performance simulation.

This module provides the boundary checks applied when engine geometry, fuel
properties, RPM sweeps and run settings are constructed, plus range checks that
flag simulated values falling outside physically sensible bounds. Boundary
checks raise InvalidParameterError; range checks only report.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .constants import VE_FLOOR, VE_PEAK

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Validation")


class InvalidParameterError(ValueError):
    """Raised when a model or run parameter is outside its valid domain."""

    def __init__(self, name: str, value, requirement: str):
        self.name = name
        self.value = value
        self.requirement = requirement
        super().__init__(f"Invalid parameter '{name}': {requirement}, got {value!r}")


# Expected ranges of simulated quantities (model units)
PERFORMANCE_RANGES = {
    'volumetric_efficiency': (VE_FLOOR, VE_PEAK),  # dimensionless
    'thermal_efficiency': (0.0, 1.0),              # dimensionless
    'brake_power': (0.0, np.inf),                  # kW
    'torque': (0.0, np.inf),                       # Nm
    'bsfc': (0.15, 0.5),                           # kg/kWh, spark-ignition engines
}

# Validation error thresholds
VALIDATION_THRESHOLDS = {
    'critical_error': 0.25,     # Relative error threshold for critical validation issues
    'warning': 0.15,            # Relative error threshold for validation warnings
    'acceptable': 0.05,         # Relative error threshold for acceptable validation
    'good': 0.01                # Relative error threshold for good validation
}


def _as_float(value, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidParameterError(name, value, "expected a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(name, value, "expected a number") from exc


def validate_positive(value, name: str) -> float:
    """
    Check that a parameter is a finite number strictly greater than zero.

    Args:
        value: Value to check
        name: Parameter name used in the error message

    Returns:
        The value as a float

    Raises:
        InvalidParameterError: If the value is not a positive finite number
    """
    number = _as_float(value, name)
    if not math.isfinite(number) or number <= 0.0:
        raise InvalidParameterError(name, value, "expected a positive finite value")
    return number


def validate_non_negative(value, name: str) -> float:
    """
    Check that a parameter is a finite number greater than or equal to zero.

    Args:
        value: Value to check
        name: Parameter name used in the error message

    Returns:
        The value as a float
    """
    number = _as_float(value, name)
    if not math.isfinite(number) or number < 0.0:
        raise InvalidParameterError(name, value, "expected a non-negative finite value")
    return number


def validate_rpm_sweep(start, stop, step) -> np.ndarray:
    """
    Build an RPM sweep from a start, stop and step.

    The stop value is included when it lies on the step grid, so the default
    1000..5000 step 500 sweep has nine points.

    Args:
        start: First engine speed (rpm)
        stop: Last engine speed (rpm)
        step: Spacing between speeds (rpm)

    Returns:
        Strictly increasing array of engine speeds

    Raises:
        InvalidParameterError: If any bound is non-positive or stop < start
    """
    start = validate_positive(start, 'rpm_start')
    stop = validate_positive(stop, 'rpm_stop')
    step = validate_positive(step, 'rpm_step')

    if stop < start:
        raise InvalidParameterError('rpm_stop', stop, f"expected a value >= rpm_start ({start})")

    # Small tolerance so a stop value on the grid is not lost to rounding
    n_points = int(math.floor((stop - start) / step + 1e-9)) + 1
    return start + step * np.arange(n_points, dtype=float)


def validate_rpm_values(rpm_values: Sequence[float]) -> np.ndarray:
    """
    Check an explicit sequence of engine speeds.

    Args:
        rpm_values: Engine speeds (rpm)

    Returns:
        The speeds as a float array

    Raises:
        InvalidParameterError: If the sequence is empty, contains a non-positive
            or non-finite speed, or is not strictly increasing
    """
    try:
        rpm = np.asarray(rpm_values, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError('rpm', rpm_values, "expected a sequence of numbers") from exc

    if rpm.size == 0:
        raise InvalidParameterError('rpm', rpm_values, "expected at least one engine speed")
    if not np.all(np.isfinite(rpm)) or np.any(rpm <= 0.0):
        raise InvalidParameterError('rpm', rpm_values, "expected positive finite engine speeds")
    if np.any(np.diff(rpm) <= 0.0):
        raise InvalidParameterError('rpm', rpm_values, "expected strictly increasing engine speeds")

    return rpm


def validate_in_range(value: float, metric_name: str,
                      custom_range: Optional[Tuple[float, float]] = None) -> Dict:
    """
    Validate if a value is within expected range for a metric.

    Args:
        value: Value to validate
        metric_name: Name of the metric to check
        custom_range: Optional custom range override

    Returns:
        Dictionary with validation results
    """
    if custom_range:
        expected_range = custom_range
    elif metric_name in PERFORMANCE_RANGES:
        expected_range = PERFORMANCE_RANGES[metric_name]
    else:
        logger.warning(f"No expected range found for metric: {metric_name}")
        return {
            'status': 'unknown',
            'metric': metric_name,
            'value': value,
            'expected_range': None,
            'message': f"No expected range defined for {metric_name}"
        }

    min_value, max_value = expected_range

    if math.isnan(value):
        return {
            'status': 'critical_error',
            'metric': metric_name,
            'value': value,
            'expected_range': expected_range,
            'relative_error': np.inf,
            'message': f"{metric_name} is undefined (NaN)"
        }
    elif value < min_value:
        relative_error = (min_value - value) / _reference_magnitude(min_value)
        return {
            'status': _determine_validation_status(relative_error),
            'metric': metric_name,
            'value': value,
            'expected_range': expected_range,
            'relative_error': relative_error,
            'message': f"{metric_name} ({value:.3f}) is below expected minimum ({min_value:.3f})"
        }
    elif value > max_value:
        relative_error = (value - max_value) / _reference_magnitude(max_value)
        return {
            'status': _determine_validation_status(relative_error),
            'metric': metric_name,
            'value': value,
            'expected_range': expected_range,
            'relative_error': relative_error,
            'message': f"{metric_name} ({value:.3f}) is above expected maximum ({max_value:.3f})"
        }
    else:
        return {
            'status': 'valid',
            'metric': metric_name,
            'value': value,
            'expected_range': expected_range,
            'relative_error': 0.0,
            'message': f"{metric_name} ({value:.3f}) is within expected range ({min_value:.3f} - {max_value:.3f})"
        }


def _reference_magnitude(bound: float) -> float:
    # A zero bound would make the relative error undefined
    return abs(bound) if bound != 0 else 1.0


def _determine_validation_status(relative_error: float) -> str:
    """
    Determine validation status based on relative error.

    Args:
        relative_error: Calculated relative error

    Returns:
        Validation status string
    """
    if relative_error >= VALIDATION_THRESHOLDS['critical_error']:
        return 'critical_error'
    elif relative_error >= VALIDATION_THRESHOLDS['warning']:
        return 'warning'
    elif relative_error >= VALIDATION_THRESHOLDS['acceptable']:
        return 'acceptable'
    else:
        return 'good'


def check_series_ranges(series) -> List[Dict]:
    """
    Check every point of a performance series against PERFORMANCE_RANGES.

    Out-of-range values are logged and reported, never corrected: noise
    injection is allowed to push values past physical limits.

    Args:
        series: PerformanceSeries to check

    Returns:
        List of validation results for the out-of-range points, each with
        an added 'rpm' and 'fuel' entry
    """
    issues = []
    for metric_name in PERFORMANCE_RANGES:
        values = getattr(series, metric_name)
        for rpm, value in zip(series.rpm, values):
            result = validate_in_range(float(value), metric_name)
            if result['status'] == 'valid':
                continue
            result['rpm'] = float(rpm)
            result['fuel'] = series.fuel_name
            logger.warning(f"{series.fuel_name} at {rpm:.0f} rpm: {result['message']}")
            issues.append(result)
    return issues

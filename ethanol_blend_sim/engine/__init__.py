"""
Engine module for the ethanol blend engine performance simulation.

This module provides the engine geometry, the fuel blend properties and the
steady-state performance model mapping engine speed to brake power, torque,
BSFC and thermal efficiency.
"""

from .geometry import EngineGeometry

from .fuel_properties import FuelType, FuelProperties, default_fuels

from .performance_model import (
    PerformancePoint, PerformanceSeries, PerformanceModel,
    OUTPUT_QUANTITIES, SERIES_QUANTITIES
)

__all__ = [
    # Geometry
    'EngineGeometry',

    # Fuels
    'FuelType', 'FuelProperties', 'default_fuels',

    # Performance model
    'PerformancePoint', 'PerformanceSeries', 'PerformanceModel',
    'OUTPUT_QUANTITIES', 'SERIES_QUANTITIES'
]

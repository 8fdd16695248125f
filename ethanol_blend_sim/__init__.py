"""
Ethanol blend engine performance simulation.

Computes brake power, torque, brake-specific fuel consumption and thermal
efficiency of a spark-ignition engine running on E10 and E20 over a sweep of
engine speeds, adds reproducible dynamometer-like noise and exports comparison
graphs.
"""

from .engine import (
    EngineGeometry, FuelType, FuelProperties, default_fuels,
    PerformancePoint, PerformanceSeries, PerformanceModel
)
from .analysis import NoiseInjector, BlendComparison
from .core import SimulationConfig, BlendSimulator, SimulationResult
from .utils import InvalidParameterError, ReportExporter

__version__ = '0.1.0'

__all__ = [
    'EngineGeometry', 'FuelType', 'FuelProperties', 'default_fuels',
    'PerformancePoint', 'PerformanceSeries', 'PerformanceModel',
    'NoiseInjector', 'BlendComparison',
    'SimulationConfig', 'BlendSimulator', 'SimulationResult',
    'InvalidParameterError', 'ReportExporter'
]

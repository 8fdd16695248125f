"""
Analysis module for the ethanol blend engine performance simulation.

Provides measurement noise injection and the blend comparison metrics.
"""

from .noise import NoiseInjector
from .comparison import BlendComparison, summarize_series, COMPARED_METRICS

__all__ = ['NoiseInjector', 'BlendComparison', 'summarize_series', 'COMPARED_METRICS']

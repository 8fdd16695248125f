"""Run configuration and orchestration."""

from .config import SimulationConfig
from .simulator import BlendSimulator, SimulationResult

__all__ = ['SimulationConfig', 'BlendSimulator', 'SimulationResult']

"""
Engine geometry module for the ethanol blend engine performance simulation.

This module describes the single-cylinder spark-ignition engine whose
performance is compared across fuel blends. Geometry is fixed for a run and
can be parameterized directly or from a YAML configuration file.
"""

import os
from typing import Dict, Optional

import numpy as np
import yaml

from ..utils.constants import (
    DEFAULT_BORE, DEFAULT_COMPRESSION_RATIO, DEFAULT_STROKE, M3_TO_CC
)
from ..utils.validation import validate_positive


class EngineGeometry:
    """
    Geometry of a spark-ignition engine cylinder.

    The compression ratio is carried as part of the physical description even
    though the performance model does not use it.
    """

    def __init__(self, compression_ratio: float = DEFAULT_COMPRESSION_RATIO,
                 bore: float = DEFAULT_BORE, stroke: float = DEFAULT_STROKE):
        """
        Initialize the engine geometry.

        Args:
            compression_ratio: Compression ratio (dimensionless)
            bore: Cylinder bore in m
            stroke: Piston stroke in m

        Raises:
            InvalidParameterError: If any value is not positive
        """
        self._compression_ratio = validate_positive(compression_ratio, 'compression_ratio')
        self._bore = validate_positive(bore, 'bore')  # m
        self._stroke = validate_positive(stroke, 'stroke')  # m

    @property
    def compression_ratio(self) -> float:
        return self._compression_ratio

    @property
    def bore(self) -> float:
        """Cylinder bore in m."""
        return self._bore

    @property
    def stroke(self) -> float:
        """Piston stroke in m."""
        return self._stroke

    @property
    def swept_volume(self) -> float:
        """Swept volume Vs = (π/4) · bore² · stroke, in m³."""
        return (np.pi / 4.0) * self._bore ** 2 * self._stroke

    @classmethod
    def from_config(cls, config_path: str) -> 'EngineGeometry':
        """
        Create an EngineGeometry instance from a YAML configuration file.

        The file may hold the geometry at top level or under an 'engine' key.

        Args:
            config_path: Path to the configuration file

        Returns:
            EngineGeometry instance
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Engine configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config.get('engine', config))

    @classmethod
    def from_dict(cls, params: Optional[Dict]) -> 'EngineGeometry':
        """
        Create an EngineGeometry instance from a parameter dictionary.

        Args:
            params: Dictionary with 'compression_ratio', 'bore_m' and 'stroke_m'
                (missing keys fall back to defaults)

        Returns:
            EngineGeometry instance
        """
        params = params or {}
        return cls(
            compression_ratio=params.get('compression_ratio', DEFAULT_COMPRESSION_RATIO),
            bore=params.get('bore_m', DEFAULT_BORE),
            stroke=params.get('stroke_m', DEFAULT_STROKE)
        )

    def get_displacement_cc(self) -> float:
        """
        Calculate displacement.

        Returns:
            Swept volume in cc
        """
        return self.swept_volume * M3_TO_CC

    def to_dict(self) -> Dict:
        """
        Convert engine geometry to dictionary.

        Returns:
            Dictionary with geometry parameters in configuration keys
        """
        return {
            'compression_ratio': self.compression_ratio,
            'bore_m': self.bore,
            'stroke_m': self.stroke,
            'swept_volume_m3': self.swept_volume,
            'displacement_cc': self.get_displacement_cc()
        }

    def __repr__(self) -> str:
        return (f"EngineGeometry(compression_ratio={self.compression_ratio}, "
                f"bore={self.bore}, stroke={self.stroke})")

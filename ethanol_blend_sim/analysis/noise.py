"""
Measurement noise module for the ethanol blend engine performance simulation.

Model output is smooth; dynamometer data is not. This module perturbs the
reported series with multiplicative Gaussian noise, v -> v · (1 + f · z) with
z ~ N(0, 1) drawn independently per value, to emulate test-bench scatter.

All draws come from one numpy Generator owned by the injector. For a run over
blends A and B the draw order is: brake power A, brake power B, torque A,
torque B, BSFC A, BSFC B, thermal efficiency A, thermal efficiency B, each in
RPM order. The same seed and inputs therefore give bit-identical output.
Perturbed values are not clamped.
"""

import logging
from typing import Dict, Optional

import numpy as np

from ..engine.performance_model import OUTPUT_QUANTITIES, PerformanceSeries
from ..utils.constants import DEFAULT_NOISE_FRACTION, DEFAULT_SEED
from ..utils.validation import validate_non_negative

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("NoiseInjector")


class NoiseInjector:
    """Applies reproducible multiplicative Gaussian noise to performance series."""

    def __init__(self, noise_fraction: float = DEFAULT_NOISE_FRACTION,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize the noise injector.

        Args:
            noise_fraction: Standard deviation of the relative perturbation
                (0.02 = 2%)
            rng: Random generator to draw from; a generator seeded with
                DEFAULT_SEED is created if not given

        Raises:
            InvalidParameterError: If noise_fraction is negative or not finite
        """
        self.noise_fraction = validate_non_negative(noise_fraction, 'noise_fraction')
        self.rng = rng if rng is not None else np.random.default_rng(DEFAULT_SEED)

    @classmethod
    def from_seed(cls, noise_fraction: float = DEFAULT_NOISE_FRACTION,
                  seed: Optional[int] = DEFAULT_SEED) -> 'NoiseInjector':
        """
        Create a noise injector with its own seeded generator.

        Args:
            noise_fraction: Standard deviation of the relative perturbation
            seed: Seed for numpy.random.default_rng (None for OS entropy)

        Returns:
            NoiseInjector instance
        """
        return cls(noise_fraction, np.random.default_rng(seed))

    def perturb(self, values) -> np.ndarray:
        """
        Perturb an array of values.

        Draws one standard normal sample per value, in array order.

        Args:
            values: Values to perturb

        Returns:
            New array with each value v replaced by v · (1 + noise_fraction · z)
        """
        values = np.asarray(values, dtype=float)
        z = self.rng.standard_normal(values.shape)
        return values * (1.0 + self.noise_fraction * z)

    def apply(self, series_by_fuel: Dict[str, PerformanceSeries]) -> Dict[str, PerformanceSeries]:
        """
        Perturb the reported quantities of every blend.

        Brake power, torque, BSFC and thermal efficiency are perturbed; the
        intermediate quantities (volumetric efficiency, mass flows) are left
        as computed.

        Args:
            series_by_fuel: Series keyed by blend name, in draw order

        Returns:
            New dictionary of perturbed series; the inputs are not modified
        """
        perturbed = {name: {} for name in series_by_fuel}
        for quantity in OUTPUT_QUANTITIES:
            for name, series in series_by_fuel.items():
                perturbed[name][quantity] = self.perturb(getattr(series, quantity))

        logger.info(f"Applied {self.noise_fraction:.1%} measurement noise to "
                    f"{len(series_by_fuel)} series")

        return {name: series.replace(**perturbed[name])
                for name, series in series_by_fuel.items()}

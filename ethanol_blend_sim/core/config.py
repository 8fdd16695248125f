"""
Configuration module for the ethanol blend engine performance simulation.

A run is described by engine geometry, the RPM sweep, the noise settings, the
fuel table and output options. Values come from built-in defaults, optionally
overridden by a YAML file and then by explicit overrides (e.g. command-line
flags). Every value is validated when the configuration is built.
"""

import copy
import logging
import os
from typing import Any, Dict, List, Optional

import numpy as np
import yaml

from ..engine.fuel_properties import FuelProperties, FuelType
from ..engine.geometry import EngineGeometry
from ..utils.constants import (
    DEFAULT_BORE, DEFAULT_COMPRESSION_RATIO, DEFAULT_EXPORT_BASENAME,
    DEFAULT_EXPORT_FORMATS, DEFAULT_NOISE_FRACTION, DEFAULT_RPM_START,
    DEFAULT_RPM_STEP, DEFAULT_RPM_STOP, DEFAULT_SEED, DEFAULT_STROKE
)
from ..utils.validation import (
    InvalidParameterError, validate_non_negative, validate_rpm_sweep
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Config")

SUPPORTED_EXPORT_FORMATS = ('png', 'pdf', 'svg', 'jpg', 'eps')


class SimulationConfig:
    """Settings of one simulation run."""

    # Settings accepted by __init__ and update()
    SETTINGS = (
        'compression_ratio', 'bore', 'stroke', 'rpm_start', 'rpm_stop', 'rpm_step',
        'add_noise', 'noise_fraction', 'seed', 'output_dir', 'export_basename',
        'export_formats', 'plot_style', 'save_plots', 'save_data', 'fuel_overrides'
    )

    def __init__(self, compression_ratio: float = DEFAULT_COMPRESSION_RATIO,
                 bore: float = DEFAULT_BORE, stroke: float = DEFAULT_STROKE,
                 rpm_start: float = DEFAULT_RPM_START, rpm_stop: float = DEFAULT_RPM_STOP,
                 rpm_step: float = DEFAULT_RPM_STEP,
                 add_noise: bool = True, noise_fraction: float = DEFAULT_NOISE_FRACTION,
                 seed: Optional[int] = DEFAULT_SEED,
                 output_dir: str = '.', export_basename: str = DEFAULT_EXPORT_BASENAME,
                 export_formats: Optional[List[str]] = None, plot_style: str = 'default',
                 save_plots: bool = True, save_data: bool = True,
                 fuel_overrides: Optional[Dict[str, Dict]] = None):
        """
        Initialize a run configuration.

        Args:
            compression_ratio: Engine compression ratio
            bore: Cylinder bore in m
            stroke: Piston stroke in m
            rpm_start: First engine speed of the sweep (rpm)
            rpm_stop: Last engine speed of the sweep (rpm)
            rpm_step: Sweep spacing (rpm)
            add_noise: Whether to inject measurement noise
            noise_fraction: Relative noise standard deviation (0.02 = 2%)
            seed: Seed of the run's random generator
            output_dir: Directory exported files are written to
            export_basename: Base filename of exported files
            export_formats: Figure formats to export (default png and pdf)
            plot_style: Matplotlib style name passed to set_plot_style
            save_plots: Whether to export the comparison figure
            save_data: Whether to export the data table and summary
            fuel_overrides: Per-blend property overrides keyed by blend name

        Raises:
            InvalidParameterError: If any setting is invalid
        """
        self.compression_ratio = compression_ratio
        self.bore = bore
        self.stroke = stroke
        self.rpm_start = rpm_start
        self.rpm_stop = rpm_stop
        self.rpm_step = rpm_step
        self.add_noise = add_noise
        self.noise_fraction = noise_fraction
        self.seed = seed
        self.output_dir = output_dir
        self.export_basename = export_basename
        self.export_formats = list(export_formats) if export_formats else list(DEFAULT_EXPORT_FORMATS)
        self.plot_style = plot_style
        self.save_plots = save_plots
        self.save_data = save_data
        self.fuel_overrides = copy.deepcopy(fuel_overrides) if fuel_overrides else {}

        self.validate()

    def validate(self):
        """
        Validate every setting by building the domain objects.

        Raises:
            InvalidParameterError: If any setting is invalid
        """
        self.engine_geometry()
        self.rpm_sweep()
        self.fuels()
        self.noise_fraction = validate_non_negative(self.noise_fraction, 'noise_fraction')

        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer))
                                      or self.seed < 0):
            raise InvalidParameterError('seed', self.seed, "expected a non-negative integer or None")

        unknown_fuels = set(self.fuel_overrides) - {t.name for t in FuelType}
        if unknown_fuels:
            raise InvalidParameterError('fuels', sorted(unknown_fuels),
                                        f"expected blends among {[t.name for t in FuelType]}")

        formats = [str(fmt).lower().lstrip('.') for fmt in self.export_formats]
        unsupported = [fmt for fmt in formats if fmt not in SUPPORTED_EXPORT_FORMATS]
        if unsupported:
            raise InvalidParameterError('export_formats', unsupported,
                                        f"expected formats among {list(SUPPORTED_EXPORT_FORMATS)}")
        self.export_formats = formats

        if not self.export_basename:
            raise InvalidParameterError('export_basename', self.export_basename, "expected a filename")

    def engine_geometry(self) -> EngineGeometry:
        """Build the engine geometry of the run."""
        return EngineGeometry(self.compression_ratio, self.bore, self.stroke)

    def rpm_sweep(self) -> np.ndarray:
        """Build the RPM sweep of the run."""
        return validate_rpm_sweep(self.rpm_start, self.rpm_stop, self.rpm_step)

    def fuels(self) -> Dict[str, FuelProperties]:
        """
        Build the blend properties of the run, E10 first.

        Returns:
            Dictionary mapping blend name to FuelProperties
        """
        return {
            fuel_type.name: FuelProperties(fuel_type, self.fuel_overrides.get(fuel_type.name))
            for fuel_type in FuelType
        }

    def update(self, overrides: Dict[str, Any]) -> 'SimulationConfig':
        """
        Apply overrides to the configuration and re-validate.

        Args:
            overrides: Setting values keyed by name (see SETTINGS); None values are ignored

        Returns:
            This configuration

        Raises:
            InvalidParameterError: If a key is not a setting or a value is invalid;
                the configuration is left unchanged
        """
        candidate = copy.deepcopy(self)
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in self.SETTINGS:
                raise InvalidParameterError(key, value, "unknown configuration setting")
            setattr(candidate, key, value)
            logger.debug(f"Configuration override: {key} = {value!r}")

        candidate.validate()
        self.__dict__.update(candidate.__dict__)
        return self

    @classmethod
    def from_dict(cls, config: Optional[Dict]) -> 'SimulationConfig':
        """
        Create a configuration from a nested dictionary (the YAML layout).

        Args:
            config: Dictionary with optional 'engine', 'rpm_sweep', 'noise',
                'output' and 'fuels' sections

        Returns:
            SimulationConfig instance
        """
        config = config or {}
        engine = config.get('engine', {}) or {}
        sweep = config.get('rpm_sweep', {}) or {}
        noise = config.get('noise', {}) or {}
        output = config.get('output', {}) or {}

        return cls(
            compression_ratio=engine.get('compression_ratio', DEFAULT_COMPRESSION_RATIO),
            bore=engine.get('bore_m', DEFAULT_BORE),
            stroke=engine.get('stroke_m', DEFAULT_STROKE),
            rpm_start=sweep.get('start', DEFAULT_RPM_START),
            rpm_stop=sweep.get('stop', DEFAULT_RPM_STOP),
            rpm_step=sweep.get('step', DEFAULT_RPM_STEP),
            add_noise=noise.get('enabled', True),
            noise_fraction=noise.get('fraction', DEFAULT_NOISE_FRACTION),
            seed=noise.get('seed', DEFAULT_SEED),
            output_dir=output.get('directory', '.'),
            export_basename=output.get('basename', DEFAULT_EXPORT_BASENAME),
            export_formats=output.get('formats'),
            plot_style=output.get('plot_style', 'default'),
            save_plots=output.get('save_plots', True),
            save_data=output.get('save_data', True),
            fuel_overrides=config.get('fuels')
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> 'SimulationConfig':
        """
        Create a configuration from a YAML file.

        Args:
            config_path: Path to the configuration file

        Returns:
            SimulationConfig instance

        Raises:
            FileNotFoundError: If the file does not exist
            InvalidParameterError: If the file holds an invalid setting
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Simulation configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)

        if config is not None and not isinstance(config, dict):
            raise InvalidParameterError('config', config_path, "expected a YAML mapping")

        logger.info(f"Loaded configuration from {config_path}")
        return cls.from_dict(config)

    def to_dict(self) -> Dict:
        """
        Convert the configuration to a nested dictionary (the YAML layout).

        Returns:
            Dictionary accepted by from_dict
        """
        return {
            'engine': {
                'compression_ratio': self.compression_ratio,
                'bore_m': self.bore,
                'stroke_m': self.stroke
            },
            'rpm_sweep': {
                'start': self.rpm_start,
                'stop': self.rpm_stop,
                'step': self.rpm_step
            },
            'noise': {
                'enabled': self.add_noise,
                'fraction': self.noise_fraction,
                'seed': self.seed
            },
            'output': {
                'directory': self.output_dir,
                'basename': self.export_basename,
                'formats': list(self.export_formats),
                'plot_style': self.plot_style,
                'save_plots': self.save_plots,
                'save_data': self.save_data
            },
            'fuels': copy.deepcopy(self.fuel_overrides)
        }

    def save_yaml(self, config_path: str) -> str:
        """
        Save the configuration to a YAML file.

        Args:
            config_path: Destination path

        Returns:
            The path written
        """
        directory = os.path.dirname(config_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(config_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
        return config_path

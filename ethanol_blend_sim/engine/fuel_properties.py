"""
Fuel properties module for the ethanol blend engine performance simulation.

This module defines the ethanol-petrol blends compared by the simulation and
their physical properties: lower heating value, air-fuel ratio and the
parameters of the blend's brake thermal efficiency curve.
"""

import os
from enum import Enum, auto
from typing import Dict, Optional

import yaml

from ..utils.validation import (
    InvalidParameterError, validate_non_negative, validate_positive
)

# Define module exports
__all__ = ['FuelType', 'FuelProperties', 'default_fuels']


class FuelType(Enum):
    """Enumeration of the ethanol-petrol blends modeled."""
    E10 = auto()
    E20 = auto()


class FuelProperties:
    """
    Class representing the properties of an ethanol-petrol blend.

    Properties are validated on construction and read-only afterwards.
    """

    # Order of the values in _DEFAULT_PROPERTIES
    PROPERTY_NAMES = (
        'lower_heating_value',   # J/kg
        'air_fuel_ratio',        # kg air / kg fuel
        'ethanol_fraction',      # by volume
        'efficiency_peak',       # brake thermal efficiency at the peak speed
        'efficiency_curvature',  # 1/rpm²
        'efficiency_floor',      # lower clamp
    )

    # Default fuel properties dictionary
    # Values: [LHV (J/kg), AFR, ethanol fraction by volume,
    #          peak thermal efficiency, efficiency curvature (1/rpm²), efficiency floor]
    _DEFAULT_PROPERTIES = {
        FuelType.E10: [43.54e6, 14.1, 0.10, 0.32, 0.0000025, 0.25],
        FuelType.E20: [41.93e6, 13.5, 0.20, 0.33, 0.0000020, 0.26],
    }

    def __init__(self, fuel_type: FuelType = FuelType.E10, custom_properties: Optional[Dict] = None):
        """
        Initialize fuel properties for the specified blend.

        Args:
            fuel_type: Blend from FuelType enum
            custom_properties: Optional custom properties to override defaults
                (unknown keys are ignored)

        Raises:
            InvalidParameterError: If a property is outside its valid domain
        """
        self._fuel_type = fuel_type

        # Set default properties for the selected blend
        props = dict(zip(self.PROPERTY_NAMES, self._DEFAULT_PROPERTIES[fuel_type]))

        # Override with custom properties if provided
        if custom_properties:
            for key, value in custom_properties.items():
                if key in props:
                    props[key] = value

        self._validate(props)

    def _validate(self, props: Dict):
        self._lower_heating_value = validate_positive(props['lower_heating_value'], 'lower_heating_value')
        self._air_fuel_ratio = validate_positive(props['air_fuel_ratio'], 'air_fuel_ratio')
        self._ethanol_fraction = validate_non_negative(props['ethanol_fraction'], 'ethanol_fraction')
        self._efficiency_peak = validate_positive(props['efficiency_peak'], 'efficiency_peak')
        self._efficiency_curvature = validate_non_negative(props['efficiency_curvature'],
                                                           'efficiency_curvature')
        self._efficiency_floor = validate_positive(props['efficiency_floor'], 'efficiency_floor')

        if self._ethanol_fraction > 1.0:
            raise InvalidParameterError('ethanol_fraction', self._ethanol_fraction,
                                        "expected a fraction between 0 and 1")
        if self._efficiency_peak > 1.0:
            raise InvalidParameterError('efficiency_peak', self._efficiency_peak,
                                        "expected an efficiency no greater than 1")
        if self._efficiency_floor > self._efficiency_peak:
            raise InvalidParameterError('efficiency_floor', self._efficiency_floor,
                                        f"expected a value <= efficiency_peak ({self._efficiency_peak})")

    @property
    def fuel_type(self) -> FuelType:
        return self._fuel_type

    @property
    def name(self) -> str:
        """Blend name, e.g. 'E10'."""
        return self._fuel_type.name

    @property
    def lower_heating_value(self) -> float:
        """Lower heating value in J/kg."""
        return self._lower_heating_value

    @property
    def air_fuel_ratio(self) -> float:
        return self._air_fuel_ratio

    @property
    def ethanol_fraction(self) -> float:
        return self._ethanol_fraction

    @property
    def efficiency_peak(self) -> float:
        return self._efficiency_peak

    @property
    def efficiency_curvature(self) -> float:
        return self._efficiency_curvature

    @property
    def efficiency_floor(self) -> float:
        return self._efficiency_floor

    @classmethod
    def from_config(cls, config_path: str) -> 'FuelProperties':
        """
        Create a FuelProperties instance from a YAML configuration file.

        Args:
            config_path: Path to the configuration file

        Returns:
            FuelProperties instance
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Fuel configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: Dict, fuel_type: Optional[str] = None) -> 'FuelProperties':
        """
        Create a FuelProperties instance from a dictionary.

        Args:
            config: Dictionary with an optional 'fuel_type' and property overrides
            fuel_type: Blend name used when the dictionary carries none

        Returns:
            FuelProperties instance
        """
        fuel_type_str = str(config.get('fuel_type', fuel_type or 'E10')).upper()
        try:
            blend = FuelType[fuel_type_str]
        except KeyError:
            raise InvalidParameterError('fuel_type', fuel_type_str,
                                        f"expected one of {[t.name for t in FuelType]}")

        custom_props = {}
        for prop in cls.PROPERTY_NAMES:
            if prop in config:
                custom_props[prop] = config[prop]

        return cls(blend, custom_props)

    def get_energy_per_kg_air(self) -> float:
        """
        Calculate the fuel energy released per kg of inducted air.

        Returns:
            Energy in J per kg of air (LHV / AFR)
        """
        return self.lower_heating_value / self.air_fuel_ratio

    def compare_with(self, other: 'FuelProperties') -> Dict:
        """
        Compare properties with another blend.

        Args:
            other: Another FuelProperties instance

        Returns:
            Dictionary with comparison results
        """
        return {
            'lower_heating_value_ratio': self.lower_heating_value / other.lower_heating_value,
            'air_fuel_ratio_ratio': self.air_fuel_ratio / other.air_fuel_ratio,
            'energy_per_kg_air_ratio': self.get_energy_per_kg_air() / other.get_energy_per_kg_air(),
            'efficiency_peak_ratio': self.efficiency_peak / other.efficiency_peak
        }

    def to_dict(self) -> Dict:
        """
        Convert fuel properties to dictionary.

        Returns:
            Dictionary with fuel properties
        """
        return {
            'fuel_type': self.fuel_type.name,
            'lower_heating_value': self.lower_heating_value,
            'air_fuel_ratio': self.air_fuel_ratio,
            'ethanol_fraction': self.ethanol_fraction,
            'efficiency_peak': self.efficiency_peak,
            'efficiency_curvature': self.efficiency_curvature,
            'efficiency_floor': self.efficiency_floor,
            'energy_per_kg_air': self.get_energy_per_kg_air()
        }

    def __repr__(self) -> str:
        return (f"FuelProperties({self.name}, lower_heating_value={self.lower_heating_value}, "
                f"air_fuel_ratio={self.air_fuel_ratio})")


def default_fuels() -> Dict[str, FuelProperties]:
    """
    Create the two blends compared by the simulation with their default properties.

    Returns:
        Dictionary mapping blend name to FuelProperties, E10 first
    """
    return {fuel_type.name: FuelProperties(fuel_type) for fuel_type in FuelType}

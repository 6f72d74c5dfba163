"""
Simulator Configuration System

Provides YAML-based loading of the vehicle parameters, aerodynamic
tables and simulation setup. The YAML document mirrors the parameter
tree of the simulator node, so every value is addressed by a slash
path such as ``/uav/vtol_params/mass``.
"""

import yaml
import numpy as np
from typing import Dict, Any, Tuple
from pathlib import Path

from archimedes import struct

from ..exceptions import ConfigError
from ..core.tables import (
    AeroTables,
    VtolParams,
    MulticopterParams,
    TABLE_SHAPES,
    propellers_location,
)

AERO_COEFFS_PATH = '/uav/aerodynamics_coeffs/'
VTOL_PARAMS_PATH = '/uav/vtol_params/'
MULTICOPTER_PARAMS_PATH = '/uav/multicopter_params/'
SIM_PARAMS_PATH = '/uav/sim_params/'


def default_config_path() -> Path:
    """Path of the Innopolis VTOL configuration shipped with the package."""
    return Path(__file__).resolve().parent.parent / 'config' / 'innopolis_vtol.yaml'


class ConfigSource:
    """
    Parsed configuration document with slash-path access.

    Parameters
    ----------
    config_dict : dict
        Configuration dictionary (typically from YAML)
    """

    def __init__(self, config_dict: Dict[str, Any]):
        if not isinstance(config_dict, dict):
            raise ConfigError("configuration document must be a mapping")
        self.raw_config = config_dict

    def has(self, path: str) -> bool:
        try:
            self.get(path)
        except ConfigError:
            return False
        return True

    def get(self, path: str) -> Any:
        """
        Resolve a slash path.

        Raises
        ------
        ConfigError
            If any component of the path is missing
        """
        node = self.raw_config
        for key in path.strip('/').split('/'):
            if not isinstance(node, dict) or key not in node:
                raise ConfigError(f"Wrong parameter name: {path}")
            node = node[key]
        return node

    def get_float(self, path: str) -> float:
        value = self.get(path)
        if isinstance(value, bool):
            raise ConfigError(f"{path} must be a number, got {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{path} must be a number, got {value!r}") from None

    def get_array(self, path: str, shape: Tuple[int, ...]) -> np.ndarray:
        """Read a flat list and reshape it row-major to ``shape``."""
        value = self.get(path)
        try:
            data = np.asarray(value, dtype=float).ravel()
        except (TypeError, ValueError):
            raise ConfigError(f"{path} must be a list of numbers") from None
        if data.size != int(np.prod(shape)):
            raise ConfigError(f"{path} has {data.size} values, expected shape {shape}")
        return data.reshape(shape)

    def get_str(self, path: str) -> str:
        value = self.get(path)
        if not isinstance(value, str):
            raise ConfigError(f"{path} must be a string, got {value!r}")
        return value

    def __repr__(self):
        return f"ConfigSource(sections={list(self.raw_config)})"


@struct(frozen=True)
class SimParams:
    """Runner settings read from ``/uav/sim_params``."""

    dynamics: str
    vehicle: str
    init_pose: np.ndarray
    dt: float
    wind_mean: np.ndarray
    wind_variance: float
    alt_ref: float


def load_config(yaml_file=None) -> ConfigSource:
    """
    Load a simulator configuration from a YAML file.

    Parameters
    ----------
    yaml_file : str or Path, optional
        Path to YAML configuration file, the packaged Innopolis VTOL
        configuration by default

    Returns
    -------
    ConfigSource
        Loaded configuration
    """
    if yaml_file is None:
        yaml_file = default_config_path()
    try:
        with open(yaml_file, 'r') as f:
            config_dict = yaml.safe_load(f)
    except OSError as err:
        raise ConfigError(f"Can't read configuration {yaml_file}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Can't parse configuration {yaml_file}: {err}") from err

    return ConfigSource(config_dict)


def save_config(config: ConfigSource, yaml_file):
    """
    Save a configuration to a YAML file.

    Parameters
    ----------
    config : ConfigSource
        Configuration to save
    yaml_file : str or Path
        Output YAML file path
    """
    with open(yaml_file, 'w') as f:
        yaml.dump(config.raw_config, f, default_flow_style=None, sort_keys=False)

    print(f"Configuration saved to: {yaml_file}")


def _check_inertia(path: str, inertia: np.ndarray) -> np.ndarray:
    if not np.allclose(inertia, inertia.T):
        raise ConfigError(f"{path} must be symmetric")
    try:
        np.linalg.cholesky(inertia)
    except np.linalg.LinAlgError:
        raise ConfigError(f"{path} must be positive definite") from None
    return inertia


def load_vtol_tables(source: ConfigSource, path: str = AERO_COEFFS_PATH) -> AeroTables:
    """
    Build the aerodynamic tables from ``/uav/aerodynamics_coeffs``.

    Raises
    ------
    ConfigError
        If a table is missing or cannot be reshaped
    """
    t = {name: source.get_array(path + name, shape) for name, shape in TABLE_SHAPES.items()}

    return AeroTables(
        CS_rudder=t['CS_rudder_table'],
        CS_beta=t['CS_beta'],
        AoA=t['AoA'],
        AoS=t['AoS'],
        actuator=t['actuator_table'],
        airspeed=t['airspeed_table'],
        CLPolynomial=t['CLPolynomial'],
        CSPolynomial=t['CSPolynomial'],
        CDPolynomial=t['CDPolynomial'],
        CmxPolynomial=t['CmxPolynomial'],
        CmyPolynomial=t['CmyPolynomial'],
        CmzPolynomial=t['CmzPolynomial'],
        CmxAileron=t['CmxAileron'],
        CmyElevator=t['CmyElevator'],
        CmzRudder=t['CmzRudder'],
        prop=t['prop'],
        actuator_time_constants=t['actuatorTimeConstants'],
    )


def load_vtol_params(source: ConfigSource, path: str = VTOL_PARAMS_PATH) -> VtolParams:
    """
    Build the VTOL parameters from ``/uav/vtol_params``.

    Raises
    ------
    ConfigError
        If a parameter is missing, has the wrong shape or the inertia
        matrix is not symmetric positive definite
    """
    location = propellers_location(
        source.get_float(path + 'propellersLocationX'),
        source.get_float(path + 'propellersLocationY'),
        source.get_float(path + 'propellersLocationZ'),
        source.get_float(path + 'mainEngineLocationX'),
    )

    params = VtolParams(
        mass=source.get_float(path + 'mass'),
        gravity=source.get_float(path + 'gravity'),
        atmo_rho=source.get_float(path + 'atmoRho'),
        wing_area=source.get_float(path + 'wingArea'),
        characteristic_length=source.get_float(path + 'characteristicLength'),
        inertia=_check_inertia(path + 'inertia', source.get_array(path + 'inertia', (3, 3))),
        propellers_location=location,
        actuator_min=source.get_array(path + 'actuatorMin', (8,)),
        actuator_max=source.get_array(path + 'actuatorMax', (8,)),
        acc_variance=source.get_float(path + 'accVariance'),
        gyro_variance=source.get_float(path + 'gyroVariance'),
    )
    if params.mass <= 0:
        raise ConfigError(f"{path}mass must be positive")
    return params


def load_multicopter_params(source: ConfigSource,
                            path: str = MULTICOPTER_PARAMS_PATH) -> MulticopterParams:
    """Build the quadrotor parameters from ``/uav/multicopter_params``."""
    params = MulticopterParams(
        mass=source.get_float(path + 'mass'),
        gravity=source.get_float(path + 'gravity'),
        inertia=_check_inertia(path + 'inertia', source.get_array(path + 'inertia', (3, 3))),
        arm_length=source.get_float(path + 'armLength'),
        thrust_coefficient=source.get_float(path + 'thrustCoefficient'),
        torque_coefficient=source.get_float(path + 'torqueCoefficient'),
        motor_time_constant=source.get_float(path + 'motorTimeConstant'),
        max_prop_speed=source.get_float(path + 'maxPropSpeed'),
        acc_variance=source.get_float(path + 'accVariance'),
        gyro_variance=source.get_float(path + 'gyroVariance'),
    )
    if params.mass <= 0:
        raise ConfigError(f"{path}mass must be positive")
    return params


def load_sim_params(source: ConfigSource, path: str = SIM_PARAMS_PATH) -> SimParams:
    """
    Build the runner settings from ``/uav/sim_params``.

    ``dt``, ``wind_mean``, ``wind_variance`` and ``alt_ref`` are optional and
    default to 1 ms, calm air and a sea-level origin.
    """
    dt = source.get_float(path + 'dt') if source.has(path + 'dt') else 0.001
    if dt <= 0:
        raise ConfigError(f"{path}dt must be positive")

    wind_mean = (source.get_array(path + 'wind_mean', (3,))
                 if source.has(path + 'wind_mean') else np.zeros(3))
    wind_variance = (source.get_float(path + 'wind_variance')
                     if source.has(path + 'wind_variance') else 0.0)
    alt_ref = source.get_float(path + 'alt_ref') if source.has(path + 'alt_ref') else 0.0

    return SimParams(
        dynamics=source.get_str(path + 'dynamics'),
        vehicle=source.get_str(path + 'vehicle'),
        init_pose=source.get_array(path + 'init_pose', (7,)),
        dt=dt,
        wind_mean=wind_mean,
        wind_variance=wind_variance,
        alt_ref=alt_ref,
    )

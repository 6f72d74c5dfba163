"""
Input/output for simulator configuration.
"""

from .config import (
    ConfigSource,
    SimParams,
    load_config,
    save_config,
    load_vtol_tables,
    load_vtol_params,
    load_multicopter_params,
    load_sim_params,
)

__all__ = [
    'ConfigSource',
    'SimParams',
    'load_config',
    'save_config',
    'load_vtol_tables',
    'load_vtol_params',
    'load_multicopter_params',
    'load_sim_params',
]

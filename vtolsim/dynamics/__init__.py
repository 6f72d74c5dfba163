"""
UAV dynamics backends.

This module provides the VTOL and quadrotor backends behind a common
interface, and a factory selecting one by its configured name.
"""

from ..exceptions import ConfigError
from .base import UavDynamicsSim
from .vtol import InnoVtolDynamicsSim
from .multicopter import MulticopterDynamicsSim

DYNAMICS_BACKENDS = {
    'inno_vtol': InnoVtolDynamicsSim,
    'flightgoggles_multicopter': MulticopterDynamicsSim,
}


def create_dynamics(name: str, config=None, **kwargs) -> UavDynamicsSim:
    """
    Create a dynamics backend by name.

    Parameters:
    -----------
    name : str
        'inno_vtol' or 'flightgoggles_multicopter'
    config : ConfigSource, str or Path, optional
        Configuration passed to the backend
    **kwargs
        Backend keyword arguments (seed, verbose, mixer)

    Returns:
    --------
    dynamics : UavDynamicsSim
        Backend instance, not yet initialised
    """
    if name not in DYNAMICS_BACKENDS:
        raise ConfigError(f"Unknown dynamics '{name}', expected one of {sorted(DYNAMICS_BACKENDS)}")
    return DYNAMICS_BACKENDS[name](config=config, **kwargs)


__all__ = [
    'UavDynamicsSim',
    'InnoVtolDynamicsSim',
    'MulticopterDynamicsSim',
    'DYNAMICS_BACKENDS',
    'create_dynamics',
]

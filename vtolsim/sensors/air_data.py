"""
Air data sensors.

Static temperature, absolute pressure and differential (pitot) pressure
estimated from the vehicle altitude and velocity with the standard
atmosphere, as published to the autopilot's barometer, thermometer and
raw air data topics.
"""

import numpy as np

from ..environment.atmosphere import StandardAtmosphere

PA_TO_HPA = 0.01


class AirDataSensor:
    """
    ISA-based air data.

    Parameters
    ----------
    alt_ref : float
        Altitude above MSL of the NED origin (m)
    """

    def __init__(self, alt_ref: float = 0.0):
        self.alt_ref = alt_ref
        self.atmosphere = StandardAtmosphere(alt_ref)

    def measure(self, position: np.ndarray, velocity: np.ndarray) -> dict:
        """
        Sample the air data.

        Parameters:
        -----------
        position : np.ndarray, shape (3,)
            Position in NED (m)
        velocity : np.ndarray, shape (3,)
            Velocity in NED (m/s)

        Returns:
        --------
        air_data : dict
            'temperature' (K), 'abs_pressure' and 'diff_pressure' (hPa)
        """
        self.atmosphere.update(self.alt_ref - position[2])
        speed = float(np.linalg.norm(velocity))
        return {
            'temperature': self.atmosphere.temperature,
            'abs_pressure': self.atmosphere.pressure * PA_TO_HPA,
            'diff_pressure': self.atmosphere.get_dynamic_pressure(speed) * PA_TO_HPA,
        }

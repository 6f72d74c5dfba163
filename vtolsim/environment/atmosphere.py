"""
International Standard Atmosphere

Static temperature, pressure and density as a function of altitude
above mean sea level for the two lowest layers:
- Troposphere: 0 - 11,000 m (temperature decreases linearly)
- Lower Stratosphere: 11,000 - 20,000 m (isothermal)

Units: SI (m, K, Pa, kg/m^3)
"""

import numpy as np


class StandardAtmosphere:
    """
    ISA model.

    Parameters
    ----------
    altitude : float
        Geometric altitude above MSL (m)

    Attributes
    ----------
    temperature : float
        Static temperature (K)
    pressure : float
        Static pressure (Pa)
    density : float
        Air density (kg/m^3)

    Notes
    -----
    Altitudes below sea level follow the tropospheric lapse rate, altitudes
    above the lower stratosphere are held at its upper boundary.
    """

    # Sea level conditions
    T0 = 288.15  # K
    P0 = 101325.0  # Pa

    # Gas constant for dry air (J/(kg*K)) and standard gravity (m/s^2)
    R = 287.05
    g0 = 9.80665

    # Layer boundaries (m)
    h_trop = 11000.0
    h_strat1 = 20000.0

    # Temperature lapse rate in the troposphere (K/m)
    lapse_trop = -0.0065

    def __init__(self, altitude: float = 0.0):
        self.altitude = altitude
        self._compute_properties()

    def _compute_properties(self):
        h = min(self.altitude, self.h_strat1)
        exponent_trop = -self.g0 / (self.lapse_trop * self.R)

        if h <= self.h_trop:
            self.temperature = self.T0 + self.lapse_trop * h
            self.pressure = self.P0 * (self.temperature / self.T0)**exponent_trop
        else:
            self.temperature = self.T0 + self.lapse_trop * self.h_trop
            P_trop = self.P0 * (self.temperature / self.T0)**exponent_trop
            self.pressure = P_trop * np.exp(-self.g0 * (h - self.h_trop) / (self.R * self.temperature))

        self.density = self.pressure / (self.R * self.temperature)

    def update(self, altitude: float):
        """Recompute the properties for a new altitude (m)."""
        self.altitude = altitude
        self._compute_properties()

    def get_dynamic_pressure(self, velocity: float) -> float:
        """
        Compute dynamic pressure.

        Parameters
        ----------
        velocity : float
            Speed relative to the air (m/s)

        Returns
        -------
        float
            q = 0.5 * rho * V^2 (Pa)
        """
        return 0.5 * self.density * velocity**2

    def __repr__(self):
        return (f"StandardAtmosphere(altitude={self.altitude:.0f} m, "
                f"T={self.temperature:.2f} K, P={self.pressure:.0f} Pa, "
                f"rho={self.density:.4f} kg/m^3)")

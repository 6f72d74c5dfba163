"""
Wind model.

Wind is a constant mean velocity in the NED world frame plus an
independent zero-mean Gaussian sample per axis scaled by the square
root of a scalar variance.
"""

import numpy as np


class WindModel:
    """
    Mean wind with Gaussian turbulence.

    Parameters
    ----------
    mean_velocity : array_like, shape (3,)
        Mean wind velocity in NED (m/s)
    variance : float
        Per-axis variance of the turbulent component (m^2/s^2)
    rng : np.random.Generator, optional
        Random source; each dynamics instance owns its own
    """

    def __init__(self, mean_velocity=None, variance: float = 0.0, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.set(np.zeros(3) if mean_velocity is None else mean_velocity, variance)

    def set(self, mean_velocity, variance: float):
        variance = float(variance)
        if variance < 0:
            raise ValueError(f"wind variance must be non-negative, got {variance}")
        self.mean_velocity = np.asarray(mean_velocity, dtype=float).reshape(3)
        self.variance = variance

    def gust(self) -> np.ndarray:
        """Gust component, not modelled."""
        return np.zeros(3)

    def sample(self) -> np.ndarray:
        """Draw the wind velocity for one step (NED, m/s)."""
        noise = np.sqrt(self.variance) * self.rng.standard_normal(3)
        return self.mean_velocity + noise + self.gust()

"""
ESC status sensor.

Reports one motor per sample, cycling through all motors, the way a CAN
bus ESC status topic is filled one controller at a time.
"""

import numpy as np


class EscStatusSensor:
    """Round-robin motor rpm report."""

    def __init__(self):
        self.next_idx = 0

    def measure(self, rpm) -> dict:
        """
        Report the next motor.

        Parameters:
        -----------
        rpm : array_like
            Speeds of all motors (rev/min)

        Returns:
        --------
        status : dict
            'esc_idx' of the reported motor and its 'rpm'
        """
        rpm = np.asarray(rpm, dtype=float).ravel()
        if self.next_idx >= rpm.size:
            self.next_idx = 0
        status = {'esc_idx': self.next_idx, 'rpm': float(rpm[self.next_idx])}
        self.next_idx += 1
        return status

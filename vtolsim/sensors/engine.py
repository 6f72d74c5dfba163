"""
Internal combustion engine sensors of the forward pusher.

Provides:
- Engine status (state and rpm) with an engine-stall emulation flag
- Simplified fuel tank whose level drops while the engine turns
"""

from enum import IntEnum

MIN_RUNNING_RPM = 1.0


class IceState(IntEnum):
    """Engine states, numbered as in the UAVCAN reciprocating-engine status."""

    STOPPED = 0
    STARTING = 1
    RUNNING = 2
    FAULT = 3


class IceStatusSensor:
    """
    Engine status reported from the pusher motor rpm.

    Once stall emulation is started the engine reports FAULT with zero
    rpm regardless of the simulated motor, until it is stopped again.
    """

    def __init__(self):
        self.stall_emulation = False

    def start_stall_emulation(self):
        self.stall_emulation = True

    def stop_stall_emulation(self):
        self.stall_emulation = False

    def measure(self, rpm: float) -> dict:
        if self.stall_emulation:
            return {'state': IceState.FAULT, 'rpm': 0.0}
        state = IceState.RUNNING if rpm >= MIN_RUNNING_RPM else IceState.STOPPED
        return {'state': state, 'rpm': float(rpm)}


class FuelTankSensor:
    """Fuel level in percent, reduced by a fixed amount per running sample."""

    def __init__(self, level: float = 100.0, consumption_per_sample: float = 0.002):
        self.level = level
        self.consumption_per_sample = consumption_per_sample

    def measure(self, rpm: float) -> float:
        if rpm >= MIN_RUNNING_RPM:
            self.level = max(self.level - self.consumption_per_sample, 0.0)
        return self.level

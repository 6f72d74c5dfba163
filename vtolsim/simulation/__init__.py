"""
Simulation loop driving a dynamics backend.
"""

from .runner import SimulationRunner, SCENARIO_NONE, SCENARIO_ICE_STALL

__all__ = ['SimulationRunner', 'SCENARIO_NONE', 'SCENARIO_ICE_STALL']

"""
Rigid-body equations of motion for the UAV backends.

Implements one explicit step of:
- Rotational dynamics (Euler's equations) in body frame
- First-order quaternion kinematics with renormalization
- Translational dynamics in the NED world frame with gravity
"""

import numpy as np
from typing import Tuple

from .state import VtolState


class RigidBodyDynamics:
    """
    6-DOF rigid body integrator.

    Equations of motion:
    - Moments: omega_dot = I^-1 (M - omega x (I omega))
    - Kinematics: q <- normalize(q + 0.5 dt q * (0, omega))
    - Forces: a_world = R^-1 (F_body/m + R g) with R the world-to-body DCM
    """

    def __init__(self, mass: float, inertia: np.ndarray, gravity: float):
        """
        Parameters:
        -----------
        mass : float
            Vehicle mass (kg)
        inertia : np.ndarray, shape (3, 3)
            Inertia tensor in body frame (kg*m^2)
        gravity : float
            Gravity magnitude (m/s^2)
        """
        self.mass = mass
        self.inertia = np.asarray(inertia, dtype=float)
        self.gravity = gravity

    def angular_acceleration(self, moments: np.ndarray, omega: np.ndarray) -> np.ndarray:
        """Euler's rotation equation solved for omega_dot."""
        inertia_inv = np.linalg.inv(self.inertia)
        return inertia_inv @ (moments - np.cross(omega, self.inertia @ omega))

    def gravity_body(self, rotation: np.ndarray) -> np.ndarray:
        """Gravity acceleration (0, 0, g) expressed in body frame."""
        return rotation @ np.array([0.0, 0.0, self.gravity])

    def step(self, state: VtolState, force: np.ndarray, moment: np.ndarray,
             dt: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Advance the state by one step.

        Updates angular acceleration and velocity, attitude, linear
        acceleration, velocity and position of ``state`` in place.

        Parameters:
        -----------
        state : VtolState
            State to advance
        force : np.ndarray, shape (3,)
            Total non-gravitational force in body frame (N)
        moment : np.ndarray, shape (3,)
            Total moment in body frame (N*m)
        dt : float
            Time step (s)

        Returns:
        --------
        f_specific : np.ndarray, shape (3,)
            Specific force in body frame (m/s^2)
        f_total : np.ndarray, shape (3,)
            Total force including gravity in body frame (N)
        """
        state.angular_accel = self.angular_acceleration(moment, state.angular_vel)
        state.angular_vel = state.angular_vel + state.angular_accel * dt
        state.attitude = state.attitude.integrate(state.angular_vel, dt)

        rotation = state.attitude.to_rotation_matrix()
        f_specific = force / self.mass
        f_total = (f_specific + self.gravity_body(rotation)) * self.mass

        state.linear_accel = np.linalg.inv(rotation) @ f_total / self.mass
        state.linear_vel = state.linear_vel + state.linear_accel * dt
        state.position = state.position + state.linear_vel * dt
        return f_specific, f_total

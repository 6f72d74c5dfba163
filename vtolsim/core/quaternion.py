"""
Attitude quaternion.

Components are stored scalar first, [w, x, y, z], and multiplied with
the Hamilton convention. An attitude quaternion maps body (FRD) vectors
into the world (NED) frame, the way Eigen::Quaterniond is used by
PX4-style simulators.
"""

import numpy as np
from typing import Tuple

from archimedes import struct, field


@struct(frozen=False)
class Quaternion:
    """
    Body-to-world attitude, scalar first.

    Parameters
    ----------
    q : np.ndarray, shape (4,)
        Components [w, x, y, z], identity by default
    """

    q: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))

    def normalize(self):
        """Scale to unit length in place; a zero quaternion becomes identity."""
        length = np.linalg.norm(self.q)
        if length < 1e-10:
            self.q = np.array([1.0, 0.0, 0.0, 0.0])
        else:
            self.q = self.q / length

    def norm(self) -> float:
        return float(np.linalg.norm(self.q))

    def copy(self) -> 'Quaternion':
        return Quaternion(np.array(self.q, dtype=float))

    def conjugate(self) -> 'Quaternion':
        return Quaternion(np.hstack([self.q[0], -self.q[1:4]]))

    def inverse(self) -> 'Quaternion':
        return Quaternion(self.conjugate().q / np.dot(self.q, self.q))

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product ``self * other``.

        Parameters:
        -----------
        other : Quaternion
            Right-hand factor

        Returns:
        --------
        product : Quaternion
        """
        w1, x1, y1, z1 = self.q
        w2, x2, y2, z2 = other.q

        return Quaternion(np.array([
            w1*w2 - x1*x2 - y1*y2 - z1*z2,
            w1*x2 + x1*w2 + y1*z2 - z1*y2,
            w1*y2 - x1*z2 + y1*w2 + z1*x2,
            w1*z2 + x1*y2 - y1*x2 + z1*w2,
        ]))

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        return self.multiply(other)

    def body_to_world(self) -> np.ndarray:
        """
        Rotation matrix taking body vectors into the world frame.

        Matches Eigen's toRotationMatrix(), including for quaternions that
        are slightly off unit length.
        """
        w, x, y, z = self.q
        return np.array([
            [1 - 2*(y*y + z*z), 2*(x*y - w*z),     2*(x*z + w*y)],
            [2*(x*y + w*z),     1 - 2*(x*x + z*z), 2*(y*z - w*x)],
            [2*(x*z - w*y),     2*(y*z + w*x),     1 - 2*(x*x + y*y)],
        ])

    def to_rotation_matrix(self) -> np.ndarray:
        """
        World-to-body direction cosine matrix.

        Returns:
        --------
        dcm : np.ndarray, shape (3, 3)
            Transpose of body_to_world()
        """
        return self.body_to_world().T

    def to_euler_angles(self) -> Tuple[float, float, float]:
        """
        Roll, pitch and yaw (rad) of a yaw-pitch-roll rotation sequence.

        Returns:
        --------
        roll : float
        pitch : float
            Limited to [-pi/2, pi/2]
        yaw : float
        """
        w, x, y, z = self.q

        roll = np.arctan2(2*(w*x + y*z), 1 - 2*(x*x + y*y))
        pitch = np.arcsin(np.clip(2*(w*y - z*x), -1.0, 1.0))
        yaw = np.arctan2(2*(w*z + x*y), 1 - 2*(y*y + z*z))

        return roll, pitch, yaw

    def rotate_vector(self, v: np.ndarray) -> np.ndarray:
        """Express a world-frame vector in the body frame."""
        return self.to_rotation_matrix() @ v

    def integrate(self, omega: np.ndarray, dt: float) -> 'Quaternion':
        """
        Advance the attitude by one small step of body rate ``omega``.

        q <- normalize(q + 0.5*dt * q*(0, omega)). First order, so the
        renormalization keeps the result on the unit sphere.

        Parameters:
        -----------
        omega : np.ndarray, shape (3,)
            Body angular velocity [p, q, r] (rad/s)
        dt : float
            Step (s)

        Returns:
        --------
        attitude : Quaternion
            New unit quaternion
        """
        rate = Quaternion(np.hstack([0.0, np.asarray(omega, dtype=float)]))
        q_dot = 0.5 * self.multiply(rate).q

        stepped = Quaternion(self.q + q_dot * dt)
        stepped.normalize()
        return stepped

    @staticmethod
    def from_xyzw(x: float, y: float, z: float, w: float) -> 'Quaternion':
        """Build from vector-first components (ROS message order)."""
        return Quaternion(np.array([w, x, y, z], dtype=float))

    @staticmethod
    def from_euler_angles(roll: float, pitch: float, yaw: float) -> 'Quaternion':
        """Build from roll, pitch and yaw (rad), applied yaw first."""
        cr, sr = np.cos(roll / 2.0), np.sin(roll / 2.0)
        cp, sp = np.cos(pitch / 2.0), np.sin(pitch / 2.0)
        cy, sy = np.cos(yaw / 2.0), np.sin(yaw / 2.0)

        return Quaternion(np.array([
            cr*cp*cy + sr*sp*sy,
            sr*cp*cy - cr*sp*sy,
            cr*sp*cy + sr*cp*sy,
            cr*cp*sy - sr*sp*cy,
        ]))

    def __repr__(self) -> str:
        return f"Quaternion(w={self.q[0]:.6f}, x={self.q[1]:.6f}, y={self.q[2]:.6f}, z={self.q[3]:.6f})"

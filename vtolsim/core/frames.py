"""
Coordinate frame conversions between the PX4 and ROS conventions.

The dynamics work in NED world / FRD body frames; visualization and the
status output use ENU world / FLU body frames.
"""

import numpy as np


def ned_to_enu(v) -> np.ndarray:
    """Convert a world vector from north-east-down to east-north-up."""
    v = np.asarray(v, dtype=float)
    return np.array([v[1], v[0], -v[2]])


def enu_to_ned(v) -> np.ndarray:
    """Convert a world vector from east-north-up to north-east-down."""
    v = np.asarray(v, dtype=float)
    return np.array([v[1], v[0], -v[2]])


def frd_to_flu(v) -> np.ndarray:
    """Convert a body vector from forward-right-down to forward-left-up."""
    v = np.asarray(v, dtype=float)
    return np.array([v[0], -v[1], -v[2]])

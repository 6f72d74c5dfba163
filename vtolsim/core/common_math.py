"""
Table lookup and interpolation helpers.

Provides:
- Bracket search in monotonic (increasing or decreasing) sequences
- Linear interpolation and Horner polynomial evaluation
- Bilinear interpolation on a rectilinear grid
- Airspeed-scheduled polynomial coefficients
"""

import numpy as np

from ..exceptions import WrongTableError

MIN_TABLE_STEP = 1e-3


def prev_index(col, x: float) -> int:
    """
    Find the lower bracket index of x in a monotonic sequence.

    Parameters:
    -----------
    col : array_like, shape (N,)
        Strictly increasing or strictly decreasing sequence, N >= 2
    x : float
        Query value

    Returns:
    --------
    idx : int
        Largest i such that [col[i], col[i+1]] contains x. Values before
        the sequence map to 0, values at or past the last bracket map
        to N-2.
    """
    col = np.asarray(col, dtype=float).ravel()
    if col.size < 2:
        raise WrongTableError(f"sequence needs at least 2 entries, got {col.size}")

    last = col.size - 2
    if col[0] <= col[-1]:
        for idx in range(last + 1):
            if x <= col[idx + 1]:
                return idx
    else:
        for idx in range(last + 1):
            if x >= col[idx + 1]:
                return idx
    return last


def lerp(a, b, t):
    """Linear interpolation a + t*(b - a), t is not clamped."""
    return a + t * (b - a)


def polyval(coeffs, x: float) -> float:
    """
    Evaluate a polynomial with Horner's scheme.

    coeffs[0] is the highest-order coefficient.
    """
    result = 0.0
    for c in coeffs:
        result = result * x + c
    return float(result)


def griddata(x_axis, y_axis, z, x_val: float, y_val: float) -> float:
    """
    Bilinear interpolation on a rectilinear grid.

    Parameters:
    -----------
    x_axis : array_like, shape (Nx,)
        Monotonic column axis
    y_axis : array_like, shape (Ny,)
        Monotonic row axis
    z : array_like, shape (Ny, Nx)
        Grid values, z[j, i] is the value at (x_axis[i], y_axis[j])
    x_val, y_val : float
        Query point

    Returns:
    --------
    f : float
        Interpolated value
    """
    x = np.asarray(x_axis, dtype=float).ravel()
    y = np.asarray(y_axis, dtype=float).ravel()
    z = np.asarray(z, dtype=float)

    x1 = prev_index(x, x_val)
    y1 = prev_index(y, y_val)
    x2 = x1 + 1
    y2 = y1 + 1

    dx = x[x2] - x[x1]
    dy = y[y2] - y[y1]
    if abs(dx) < MIN_TABLE_STEP or abs(dy) < MIN_TABLE_STEP:
        raise WrongTableError("grid step is too small")

    q11 = z[y1, x1]
    q12 = z[y2, x1]
    q21 = z[y1, x2]
    q22 = z[y2, x2]

    r1 = ((x[x2] - x_val) * q11 + (x_val - x[x1]) * q21) / dx
    r2 = ((x[x2] - x_val) * q12 + (x_val - x[x1]) * q22) / dx
    return float(((y[y2] - y_val) * r1 + (y_val - y[y1]) * r2) / dy)


def calculate_polynomial(table, airspeed: float) -> np.ndarray:
    """
    Interpolate polynomial coefficients between two airspeed rows.

    Each table row is [airspeed, c0, c1, ...]. The fractional position
    between the bracketing rows is clamped to [0, 1], so speeds outside
    the table reuse the nearest endpoint row.

    Parameters:
    -----------
    table : array_like, shape (rows, cols)
        Coefficient table, rows >= 2, cols >= 2
    airspeed : float
        Airspeed magnitude (m/s)

    Returns:
    --------
    coeffs : np.ndarray, shape (cols - 1,)
        Polynomial coefficients, highest order first
    """
    table = np.asarray(table, dtype=float)
    if table.ndim != 2 or table.shape[0] < 2 or table.shape[1] < 2:
        raise WrongTableError(f"coefficient table has shape {table.shape}")

    prev_idx = prev_index(table[:, 0], airspeed)
    prev_row = table[prev_idx]
    next_row = table[prev_idx + 1]

    step = next_row[0] - prev_row[0]
    if abs(step) < MIN_TABLE_STEP:
        raise WrongTableError("airspeed step between rows is too small")

    t = np.clip((airspeed - prev_row[0]) / step, 0.0, 1.0)
    return lerp(prev_row[1:], next_row[1:], t)


def normalized(v: np.ndarray) -> np.ndarray:
    """Unit vector along v, or zeros for a zero vector."""
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return np.zeros_like(v, dtype=float)
    return v / norm

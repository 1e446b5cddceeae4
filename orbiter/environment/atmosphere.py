"""Exponential atmosphere and quadratic drag.

The atmosphere is a single exponential layer with a scale height of one
third of its thickness:

    rho(h) = exp(-h / (H / 3))   for 0 <= h < H
    rho(h) = 0                   for h >= H

so density is 1 at the surface and about 5% at the top of the layer.
Drag opposes the velocity with magnitude Cd * rho * |v|^2.

Example:
    >>> from orbiter.environment import Atmosphere
    >>>
    >>> atm = Atmosphere()
    >>> atm.density(0.0)
    1.0
    >>> force = atm.drag_force(velocity, altitude=0.5)
"""

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

# =============================================================================
# Constants
# =============================================================================

ATMOSPHERE_HEIGHT: float = 3.0  # Thickness of the atmosphere above the surface
DRAG_COEFFICIENT: float = 0.005
MIN_DRAG_SPEED_SQ: float = 1e-4  # Below this |v|^2 drag is skipped


# =============================================================================
# Numba-Optimized Core Functions
# =============================================================================


@njit(cache=True, fastmath=True)
def _density(altitude: float, atmosphere_height: float) -> float:
    """Scale-height density, clamped to the surface below zero altitude."""
    if altitude >= atmosphere_height:
        return 0.0
    if altitude < 0.0:
        altitude = 0.0
    scale_height = atmosphere_height / 3.0
    return np.exp(-altitude / scale_height)


@njit(cache=True, fastmath=True)
def _drag_force(
    vx: float, vy: float,
    density: float,
    drag_coefficient: float,
) -> tuple[float, float]:
    """Quadratic drag opposing the velocity."""
    v_sq = vx*vx + vy*vy
    if v_sq < MIN_DRAG_SPEED_SQ or density <= 0.0:
        return (0.0, 0.0)

    # -Cd * rho * |v|^2 * v_hat = -Cd * rho * |v| * v
    k = -drag_coefficient * density * np.sqrt(v_sq)
    return (k * vx, k * vy)


# =============================================================================
# Atmosphere Class
# =============================================================================


@beartype
class Atmosphere:
    """Atmosphere shared by every body that has one.

    Example:
        >>> atm = Atmosphere(height=3.0, drag_coefficient=0.005)
        >>> atm.contains(2.5)
        True
    """

    def __init__(
        self,
        height: float = ATMOSPHERE_HEIGHT,
        drag_coefficient: float = DRAG_COEFFICIENT,
    ) -> None:
        """Initialize atmosphere model.

        Args:
            height: Altitude at which the atmosphere ends
            drag_coefficient: Quadratic drag coefficient
        """
        if height <= 0:
            raise ValueError(f"Atmosphere height must be positive, got {height}")
        self.height = height
        self.drag_coefficient = drag_coefficient

    def contains(self, altitude: float) -> bool:
        """Check whether an altitude lies inside the atmosphere."""
        return bool(altitude < self.height)

    def density(self, altitude: float) -> float:
        """Relative air density at altitude (1 at the surface)."""
        return float(_density(float(altitude), self.height))

    def drag_force(
        self,
        velocity: NDArray[np.float64],
        altitude: float,
    ) -> NDArray[np.float64]:
        """Drag force on a body moving with velocity relative to the air.

        Args:
            velocity: Velocity relative to the atmosphere
            altitude: Altitude above the surface

        Returns:
            Drag force vector (zero outside the atmosphere or at rest)
        """
        rho = self.density(altitude)
        fx, fy = _drag_force(float(velocity[0]), float(velocity[1]), rho, self.drag_coefficient)
        return np.array([fx, fy])

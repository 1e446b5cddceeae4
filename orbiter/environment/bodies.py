"""Celestial bodies: gravity sources, collision targets and moving moons.

Gravity uses game-scaled masses and a game gravitational constant:

    F = G * M * m / d^2

with an extra pull close to the surface to make liftoff harder:

    multiplier = 1 + (1 - altitude) * 0.5   for altitude < 1.0

A body only attracts points within 20 radii of its centre.

A body can orbit a parent body on a fixed circle. Its position is then
derived from the orbit angle every tick and never set directly.

Example:
    >>> from orbiter.environment import CelestialBody
    >>>
    >>> earth = CelestialBody("Earth", radius=2.0, mass=3.0)
    >>> moon = CelestialBody(
    ...     "Moon", radius=0.5, mass=0.5, has_atmosphere=False,
    ...     orbit_target=earth, orbit_radius=5.0, orbit_angular_speed=0.1,
    ... )
    >>> moon.advance_orbit(1.0 / 60.0)
    >>> force = earth.gravity_force_on(2.0, np.array([0.0, 3.0]))
"""

import logging
import math
import weakref
from collections.abc import Callable, Iterable

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

G_GAME: float = 0.3  # Game gravitational constant
NEAR_SURFACE_ALTITUDE: float = 1.0  # Gravity boost applies below this altitude
NEAR_SURFACE_GAIN: float = 0.5  # Boost per unit of altitude below the threshold
GRAVITY_CUTOFF_FACTOR: float = 20.0  # Bodies farther than this many radii are ignored
MIN_DISTANCE: float = 1e-9  # Gravity is undefined at the centre


# =============================================================================
# Numba-Optimized Core Functions
# =============================================================================


@njit(cache=True, fastmath=True)
def _near_surface_multiplier(altitude: float) -> float:
    """Gravity boost factor, never below 1."""
    if altitude >= NEAR_SURFACE_ALTITUDE:
        return 1.0
    multiplier = 1.0 + (NEAR_SURFACE_ALTITUDE - altitude) * NEAR_SURFACE_GAIN
    if multiplier < 1.0:
        return 1.0
    return multiplier


@njit(cache=True, fastmath=True)
def _gravity_force(
    px: float, py: float,
    bx: float, by: float,
    radius: float,
    mu: float,
    point_mass: float,
) -> tuple[float, float]:
    """Numba-optimized attraction of a point mass toward a body centre."""
    dx = bx - px
    dy = by - py
    d_sq = dx*dx + dy*dy
    d = np.sqrt(d_sq)

    if d < MIN_DISTANCE:
        return (0.0, 0.0)

    magnitude = mu * point_mass / d_sq
    magnitude *= _near_surface_multiplier(d - radius)

    inv_d = 1.0 / d
    return (magnitude * dx * inv_d, magnitude * dy * inv_d)


# =============================================================================
# Celestial Body
# =============================================================================


@beartype
class CelestialBody:
    """Massive spherical body (planet or moon) in the simulation plane.

    Attributes:
        name: Display name
        radius: Surface radius
        mass: Game-scaled mass
        position: Centre position (derived while orbiting)
        has_atmosphere: Whether the body produces drag
        orbit_radius: Radius of the circle around the parent
        orbit_angular_speed: Angular speed around the parent [rad/s]
        orbit_angle: Current angle around the parent [rad]
        orbit_clockwise: Direction of travel around the parent
        min_orbit_altitude: Altitude an orbit must clear, or None for the default
        gravitational_constant: G used for this body
    """

    def __init__(
        self,
        name: str,
        radius: float = 1.0,
        mass: float = 1.0,
        position: NDArray[np.float64] | None = None,
        has_atmosphere: bool = True,
        orbit_target: "CelestialBody | None" = None,
        orbit_radius: float = 5.0,
        orbit_angular_speed: float = 0.1,
        orbit_angle: float = 0.0,
        orbit_clockwise: bool = False,
        min_orbit_altitude: float | None = None,
        gravitational_constant: float = G_GAME,
    ) -> None:
        """Create a body.

        Args:
            name: Display name
            radius: Surface radius (> 0)
            mass: Game-scaled mass (>= 0)
            position: Centre position, ignored when orbit_target is set
            has_atmosphere: Whether the body produces drag
            orbit_target: Parent body to circle; held by weak reference
            orbit_radius: Radius of the circle around the parent
            orbit_angular_speed: Angular speed around the parent [rad/s]
            orbit_angle: Starting angle around the parent [rad]
            orbit_clockwise: Travel clockwise instead of counter-clockwise
            min_orbit_altitude: Per-body orbit altitude floor
            gravitational_constant: G used for this body
        """
        if radius <= 0:
            raise ValueError(f"Body radius must be positive, got {radius}")
        if mass < 0:
            raise ValueError(f"Body mass must be non-negative, got {mass}")
        if orbit_target is not None and orbit_radius <= 0:
            raise ValueError(f"Orbit radius must be positive, got {orbit_radius}")

        self.name = name
        self.radius = radius
        self.mass = mass
        self.has_atmosphere = has_atmosphere
        self.gravitational_constant = gravitational_constant
        self.min_orbit_altitude = min_orbit_altitude

        self.orbit_radius = orbit_radius
        self.orbit_angular_speed = orbit_angular_speed
        self.orbit_angle = orbit_angle
        self.orbit_clockwise = orbit_clockwise
        self._orbit_target = weakref.ref(orbit_target) if orbit_target is not None else None

        if position is None:
            position = np.zeros(2)
        self.position = np.array(position, dtype=np.float64)

        self._initial_position = self.position.copy()
        self._initial_orbit_angle = orbit_angle

        if self.is_orbiting:
            self._place_on_orbit()

    def __repr__(self) -> str:
        return f"CelestialBody({self.name!r}, radius={self.radius}, mass={self.mass})"

    # -------------------------------------------------------------------------
    # Orbit
    # -------------------------------------------------------------------------

    @property
    def orbit_target(self) -> "CelestialBody | None":
        """Parent body, or None when static or when the parent is gone.

        A parent that has been garbage-collected is dropped with a warning
        and the body stays where it was.
        """
        if self._orbit_target is None:
            return None
        target = self._orbit_target()
        if target is None:
            logger.warning(
                "Parent of %s was garbage-collected; it no longer orbits", self.name,
            )
            self._orbit_target = None
        return target

    @property
    def is_orbiting(self) -> bool:
        """Whether the position is driven by an orbit around a parent."""
        return self.orbit_target is not None

    @property
    def orbit_direction(self) -> float:
        """+1 for counter-clockwise travel, -1 for clockwise."""
        return -1.0 if self.orbit_clockwise else 1.0

    def _place_on_orbit(self) -> None:
        target = self.orbit_target
        if target is None:
            return
        self.position = target.position + self.orbit_radius * np.array([
            math.cos(self.orbit_angle),
            math.sin(self.orbit_angle),
        ])

    def advance_orbit(self, dt: float) -> None:
        """Move along the orbit around the parent by dt seconds.

        Static bodies are left untouched.
        """
        if not self.is_orbiting:
            return
        self.orbit_angle += self.orbit_direction * self.orbit_angular_speed * dt
        self._place_on_orbit()

    def set_orbit_parameters(
        self,
        orbit_radius: float | None = None,
        orbit_angular_speed: float | None = None,
        orbit_angle: float | None = None,
        orbit_clockwise: bool | None = None,
    ) -> None:
        """Change orbit parameters between ticks and re-derive the position."""
        if orbit_radius is not None:
            if orbit_radius <= 0:
                raise ValueError(f"Orbit radius must be positive, got {orbit_radius}")
            self.orbit_radius = orbit_radius
        if orbit_angular_speed is not None:
            self.orbit_angular_speed = orbit_angular_speed
        if orbit_angle is not None:
            self.orbit_angle = orbit_angle
        if orbit_clockwise is not None:
            self.orbit_clockwise = orbit_clockwise
        self._place_on_orbit()

    def reset(self) -> None:
        """Return to the construction-time orbit angle and position."""
        self.orbit_angle = self._initial_orbit_angle
        self.position = self._initial_position.copy()
        self._place_on_orbit()

    @property
    def velocity(self) -> NDArray[np.float64]:
        """Velocity of the body centre, including the parent's motion."""
        target = self.orbit_target
        if target is None:
            return np.zeros(2)
        speed = self.orbit_direction * self.orbit_angular_speed * self.orbit_radius
        tangent = np.array([-math.sin(self.orbit_angle), math.cos(self.orbit_angle)])
        return target.velocity + speed * tangent

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def mu(self) -> float:
        """Gravitational parameter G * M."""
        return self.gravitational_constant * self.mass

    def distance_to(self, point: NDArray[np.float64]) -> float:
        """Distance from the body centre to a point."""
        return float(np.linalg.norm(point - self.position))

    def altitude_of(self, point: NDArray[np.float64]) -> float:
        """Height of a point above the surface (negative inside)."""
        return self.distance_to(point) - self.radius

    def surface_normal(self, point: NDArray[np.float64]) -> NDArray[np.float64]:
        """Outward unit normal below a point.

        Falls back to +y when the point sits exactly on the centre.
        """
        offset = point - self.position
        norm = float(np.linalg.norm(offset))
        if norm < MIN_DISTANCE:
            return np.array([0.0, 1.0])
        return offset / norm

    # -------------------------------------------------------------------------
    # Physics queries
    # -------------------------------------------------------------------------

    def in_gravity_range(
        self,
        point: NDArray[np.float64],
        cutoff_factor: float = GRAVITY_CUTOFF_FACTOR,
    ) -> bool:
        """Whether a point is close enough to feel this body's gravity."""
        return self.distance_to(point) < cutoff_factor * self.radius

    def gravity_force_on(
        self,
        point_mass: float,
        at_position: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Gravitational force on a point mass, pointing at the body centre.

        Args:
            point_mass: Mass of the attracted point
            at_position: Position of the attracted point

        Returns:
            Force vector; zero when the point coincides with the centre
        """
        fx, fy = _gravity_force(
            float(at_position[0]), float(at_position[1]),
            float(self.position[0]), float(self.position[1]),
            self.radius,
            self.mu,
            float(point_mass),
        )
        return np.array([fx, fy])

    def collides_with(self, point: NDArray[np.float64], point_radius: float = 0.0) -> bool:
        """Whether a sphere at point overlaps the body."""
        return self.distance_to(point) < self.radius + point_radius


# =============================================================================
# Convenience Functions
# =============================================================================


@beartype
def closest_body(
    point: NDArray[np.float64],
    bodies: Iterable[CelestialBody],
    where: Callable[[CelestialBody], bool] | None = None,
    by_surface: bool = False,
) -> CelestialBody | None:
    """Body nearest to point.

    Args:
        point: Query position
        bodies: Candidate bodies
        where: Optional filter, e.g. ``lambda b: b.has_atmosphere``
        by_surface: Measure to the surface (altitude) instead of the centre

    Returns:
        The nearest matching body, or None if nothing matches
    """
    best = None
    best_distance = math.inf
    for body in bodies:
        if where is not None and not where(body):
            continue
        distance = body.altitude_of(point) if by_surface else body.distance_to(point)
        if distance < best_distance:
            best = body
            best_distance = distance
    return best

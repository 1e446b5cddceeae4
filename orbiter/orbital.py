"""Orbit classification and orbital readouts.

Decides every tick whether the rocket is in a stable orbit around the
closest body. The test is deliberately arcade-like:

- altitude above the body's minimum orbit altitude
- 0.8 * v_circular < speed < 0.9 * v_escape
- velocity within ~60 degrees of perpendicular to the radius (|cos| < 0.5)

While in orbit the period follows Kepler's third law with the current
distance standing in for the semi-major axis:

    T = sqrt(4 pi^2 / (G M) * d^3)

Key functions:
- circular_velocity / escape_velocity / orbital_period
- apsides: periapsis and apoapsis altitudes from the vis-viva equation
- OrbitClassifier: per-tick orbit detection with a one-shot notification

Example:
    >>> from orbiter.orbital import OrbitClassifier
    >>>
    >>> classifier = OrbitClassifier(reference_body=earth)
    >>> entered = classifier.update(rocket, bodies)
    >>> if entered:
    ...     print(f"Orbit achieved, period {rocket.orbit_period:.1f} s")
"""

import math
from collections.abc import Sequence
from enum import Enum, auto
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

from orbiter.dynamics.state import RocketState
from orbiter.environment.bodies import CelestialBody, closest_body

# =============================================================================
# Constants
# =============================================================================

ORBIT_SPEED_FLOOR: float = 0.8  # Fraction of circular speed
ORBIT_SPEED_CEILING: float = 0.9  # Fraction of escape speed
ORBIT_ALIGNMENT_LIMIT: float = 0.5  # Max |cos| between radius and velocity
VACUUM_MIN_ORBIT_ALTITUDE: float = 0.25


# =============================================================================
# Flight Status
# =============================================================================


class FlightStatus(Enum):
    """High-level flight phase shown to the player."""

    READY_TO_LAUNCH = auto()
    LANDED = auto()
    SUB_ORBITAL = auto()
    ORBITING = auto()
    ESCAPING = auto()
    OUT_OF_FUEL = auto()
    CRASHED = auto()

    @property
    def label(self) -> str:
        """Human-readable label."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    FlightStatus.READY_TO_LAUNCH: "Ready to Launch",
    FlightStatus.LANDED: "Landed",
    FlightStatus.SUB_ORBITAL: "Sub-orbital",
    FlightStatus.ORBITING: "In Stable Orbit",
    FlightStatus.ESCAPING: "Escape Trajectory",
    FlightStatus.OUT_OF_FUEL: "Out of Fuel",
    FlightStatus.CRASHED: "Crashed",
}


class OrbitAssessment(NamedTuple):
    """Orbit test evaluated against one body.

    Attributes:
        body: Reference body
        distance: Distance from the body centre
        altitude: Height above the surface
        speed: Speed relative to the body
        circular_velocity: Circular orbit speed at this distance
        escape_velocity: Escape speed at this distance
        alignment: cos of the angle between radius and velocity
        min_altitude: Altitude the orbit must clear
        in_orbit: Whether every orbit criterion holds
        escaping: Above the orbit band and high enough to leave
        period: Kepler period while in orbit, else 0
    """
    body: CelestialBody
    distance: float
    altitude: float
    speed: float
    circular_velocity: float
    escape_velocity: float
    alignment: float
    min_altitude: float
    in_orbit: bool
    escaping: bool
    period: float


# =============================================================================
# Core Numba Functions
# =============================================================================


@njit(cache=True)
def _apsides_core(
    rx: float, ry: float,
    vx: float, vy: float,
    mu: float,
) -> tuple[float, float, float]:
    """Periapsis radius, apoapsis radius and eccentricity of a planar orbit.

    Apoapsis is infinite for unbound trajectories.
    """
    r = np.sqrt(rx*rx + ry*ry)
    if r < 1e-10 or mu < 1e-12:
        return (r, np.inf, 1.0)

    v_sq = vx*vx + vy*vy
    energy = v_sq / 2.0 - mu / r
    h = rx * vy - ry * vx

    ecc_sq = 1.0 + 2.0 * energy * h * h / (mu * mu)
    if ecc_sq < 0.0:
        ecc_sq = 0.0
    ecc = np.sqrt(ecc_sq)

    # p / (1 + e) holds for every conic
    periapsis = h * h / (mu * (1.0 + ecc))
    if ecc < 1.0 and energy < 0.0:
        sma = -mu / (2.0 * energy)
        apoapsis = sma * (1.0 + ecc)
    else:
        apoapsis = np.inf

    return (periapsis, apoapsis, ecc)


# =============================================================================
# Orbital Quantities
# =============================================================================


@beartype
def circular_velocity(mu: float, distance: float) -> float:
    """Circular orbit speed sqrt(mu / d)."""
    if distance <= 0:
        return 0.0
    return math.sqrt(mu / distance)


@beartype
def escape_velocity(mu: float, distance: float) -> float:
    """Escape speed sqrt(2 mu / d)."""
    if distance <= 0:
        return 0.0
    return math.sqrt(2.0 * mu / distance)


@beartype
def orbital_period(mu: float, semi_major_axis: float) -> float:
    """Kepler's third law, T = sqrt(4 pi^2 / mu * a^3)."""
    if mu <= 0 or semi_major_axis <= 0:
        return 0.0
    return math.sqrt((4.0 * math.pi ** 2 / mu) * semi_major_axis ** 3)


@beartype
def velocity_alignment(
    relative_position: NDArray[np.float64],
    relative_velocity: NDArray[np.float64],
) -> float:
    """cos of the angle between the radius and velocity directions.

    0 is a perfectly horizontal trajectory; +/-1 is straight up/down.
    Returns 1.0 when either vector is zero.
    """
    r = float(np.linalg.norm(relative_position))
    v = float(np.linalg.norm(relative_velocity))
    if r < 1e-10 or v < 1e-10:
        return 1.0
    cos_angle = float(np.dot(relative_position, relative_velocity)) / (r * v)
    return min(1.0, max(-1.0, cos_angle))


@beartype
def apsides(
    mu: float,
    relative_position: NDArray[np.float64],
    relative_velocity: NDArray[np.float64],
    body_radius: float = 0.0,
) -> tuple[float, float]:
    """Periapsis and apoapsis altitudes of the osculating orbit.

    Args:
        mu: Gravitational parameter of the central body
        relative_position: Position relative to the body centre
        relative_velocity: Velocity relative to the body
        body_radius: Subtracted to turn radii into altitudes

    Returns:
        (periapsis_altitude, apoapsis_altitude); apoapsis is inf when unbound
    """
    rp, ra, _ = _apsides_core(
        float(relative_position[0]), float(relative_position[1]),
        float(relative_velocity[0]), float(relative_velocity[1]),
        mu,
    )
    return float(rp) - body_radius, float(ra) - body_radius


# =============================================================================
# Orbit Classifier
# =============================================================================


@beartype
class OrbitClassifier:
    """Per-tick orbit detection around the closest body.

    Attributes:
        reference_body: Used when the scene has no bodies
        atmosphere_height: Orbit floor for bodies with an atmosphere
        vacuum_min_altitude: Orbit floor for airless bodies
        speed_floor: Lower speed bound as a fraction of circular speed
        speed_ceiling: Upper speed bound as a fraction of escape speed
        alignment_limit: Max |cos| between radius and velocity
        landed_altitude: Altitude below which a slow rocket counts as landed
        crash_threshold: Speed below which a low rocket counts as landed
    """

    def __init__(
        self,
        reference_body: CelestialBody | None = None,
        atmosphere_height: float = 3.0,
        vacuum_min_altitude: float = VACUUM_MIN_ORBIT_ALTITUDE,
        speed_floor: float = ORBIT_SPEED_FLOOR,
        speed_ceiling: float = ORBIT_SPEED_CEILING,
        alignment_limit: float = ORBIT_ALIGNMENT_LIMIT,
        landed_altitude: float = 0.2,
        crash_threshold: float = 0.3,
    ) -> None:
        if reference_body is None:
            reference_body = CelestialBody("Earth", radius=2.0, mass=3.0)
        self.reference_body = reference_body
        self.atmosphere_height = atmosphere_height
        self.vacuum_min_altitude = vacuum_min_altitude
        self.speed_floor = speed_floor
        self.speed_ceiling = speed_ceiling
        self.alignment_limit = alignment_limit
        self.landed_altitude = landed_altitude
        self.crash_threshold = crash_threshold

    def reference_for(
        self,
        position: NDArray[np.float64],
        bodies: Sequence[CelestialBody],
    ) -> CelestialBody:
        """Closest body, falling back to the default reference body."""
        body = closest_body(position, bodies)
        return body if body is not None else self.reference_body

    def min_altitude_for(self, body: CelestialBody) -> float:
        """Altitude an orbit around body must clear."""
        if body.min_orbit_altitude is not None:
            return body.min_orbit_altitude
        if body.has_atmosphere:
            return self.atmosphere_height
        return self.vacuum_min_altitude

    def assess(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> OrbitAssessment:
        """Evaluate the orbit criteria without touching the rocket."""
        body = self.reference_for(rocket.position, bodies)
        relative_position = rocket.position - body.position
        relative_velocity = rocket.velocity - body.velocity

        distance = float(np.linalg.norm(relative_position))
        altitude = distance - body.radius
        speed = float(np.linalg.norm(relative_velocity))
        v_circ = circular_velocity(body.mu, distance)
        v_esc = escape_velocity(body.mu, distance)
        alignment = velocity_alignment(relative_position, relative_velocity)
        min_altitude = self.min_altitude_for(body)

        high_enough = altitude > min_altitude
        in_speed_band = self.speed_floor * v_circ < speed < self.speed_ceiling * v_esc
        horizontal = abs(alignment) < self.alignment_limit

        in_orbit = high_enough and in_speed_band and horizontal
        escaping = not in_orbit and high_enough and speed >= self.speed_ceiling * v_esc
        period = orbital_period(body.mu, distance) if in_orbit else 0.0

        return OrbitAssessment(
            body=body,
            distance=distance,
            altitude=altitude,
            speed=speed,
            circular_velocity=v_circ,
            escape_velocity=v_esc,
            alignment=alignment,
            min_altitude=min_altitude,
            in_orbit=in_orbit,
            escaping=escaping,
            period=period,
        )

    def update(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> bool:
        """Reclassify the rocket's orbit for this tick.

        Only runs for a launched, intact rocket.

        Returns:
            True exactly on the tick the rocket enters an orbit
        """
        if not rocket.has_started or rocket.has_crashed:
            return False

        assessment = self.assess(rocket, bodies)
        if not assessment.in_orbit:
            rocket.is_in_orbit = False
            rocket.orbit_period = 0.0
            rocket.orbit_announced = False
            return False

        rocket.is_in_orbit = True
        rocket.orbit_period = assessment.period
        if rocket.orbit_announced:
            return False
        rocket.orbit_announced = True
        return True

    def status(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> FlightStatus:
        """Flight phase for the HUD."""
        if rocket.has_crashed:
            return FlightStatus.CRASHED
        if not rocket.has_started:
            return FlightStatus.READY_TO_LAUNCH

        assessment = self.assess(rocket, bodies)
        if rocket.out_of_fuel and assessment.altitude < self.atmosphere_height:
            return FlightStatus.OUT_OF_FUEL
        if rocket.is_in_orbit:
            return FlightStatus.ORBITING
        if assessment.escaping:
            return FlightStatus.ESCAPING
        if assessment.altitude < self.landed_altitude and assessment.speed < self.crash_threshold:
            return FlightStatus.LANDED
        return FlightStatus.SUB_ORBITAL

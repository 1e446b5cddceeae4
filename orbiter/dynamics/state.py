"""Rocket state and planar vector helpers.

The simulation is restricted to a plane, so every vector is a float64
numpy array of shape (2,).

The rocket state contains:
- Position / velocity (2 + 2)
- Thrust direction (unit vector, rotated by player input)
- Propulsion: thrust magnitude, fuel, tank capacity, out-of-fuel latch
- Flags: has_started (first thrust seen), has_crashed (terminal)
- Collision cooldown timer
- Orbit readout: is_in_orbit, orbit_period, orbit_announced
- Simulation time
"""

import math
from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from orbiter.environment.bodies import CelestialBody

# =============================================================================
# Vector Utilities
# =============================================================================


@beartype
def vec2(x: float = 0.0, y: float = 0.0) -> NDArray[np.float64]:
    """Build a planar vector."""
    return np.array([x, y], dtype=np.float64)


@beartype
def normalize(v: NDArray[np.float64]) -> NDArray[np.float64]:
    """Normalize a vector to unit length (zero vector stays zero)."""
    norm = np.linalg.norm(v)
    if norm < 1e-10:
        return np.zeros(2)
    return v / norm


@beartype
def rotate(v: NDArray[np.float64], angle: float) -> NDArray[np.float64]:
    """Rotate a vector counter-clockwise by angle [rad]."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([c*v[0] - s*v[1], s*v[0] + c*v[1]])


@beartype
def is_finite(v: NDArray[np.float64]) -> bool:
    """Check that every component is finite."""
    return bool(np.all(np.isfinite(v)))


# =============================================================================
# Rocket State
# =============================================================================


@beartype
@dataclass(eq=False)
class RocketState:
    """Mutable state of the simulated rocket.

    Attributes:
        position: [x, y] position
        velocity: [vx, vy] velocity
        thrust_direction: Unit vector the engine pushes along
        mass: Rocket mass (constant)
        thrust_magnitude: Current commanded thrust force
        fuel: Remaining propellant
        max_fuel: Tank capacity
        out_of_fuel: Latched when fuel reaches zero, cleared by a refill
        has_started: Latched on the first thrusting tick
        has_crashed: Terminal until recovered
        last_collision_elapsed: Time since the last resolved contact [s]
        is_in_orbit: Orbit classification of the last tick
        orbit_period: Kepler period while in orbit, else 0 [s]
        orbit_announced: Orbit-achieved notification already fired for this orbit
        time: Simulation time [s]
    """
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]
    thrust_direction: NDArray[np.float64]
    mass: float = 2.0
    thrust_magnitude: float = 0.0
    fuel: float = 100.0
    max_fuel: float = 100.0
    out_of_fuel: bool = False
    has_started: bool = False
    has_crashed: bool = False
    last_collision_elapsed: float = math.inf
    is_in_orbit: bool = False
    orbit_period: float = 0.0
    orbit_announced: bool = False
    time: float = 0.0

    def __post_init__(self) -> None:
        """Validate and normalize state."""
        self.position = np.asarray(self.position, dtype=np.float64)
        self.velocity = np.asarray(self.velocity, dtype=np.float64)
        self.thrust_direction = normalize(np.asarray(self.thrust_direction, dtype=np.float64))

        if self.position.shape != (2,):
            raise ValueError(f"Position must be shape (2,), got {self.position.shape}")
        if self.velocity.shape != (2,):
            raise ValueError(f"Velocity must be shape (2,), got {self.velocity.shape}")
        if self.thrust_direction.shape != (2,) or not self.thrust_direction.any():
            raise ValueError("Thrust direction must be a non-zero vector of shape (2,)")
        if self.mass < 0:
            raise ValueError(f"Mass must be non-negative, got {self.mass}")
        if self.max_fuel <= 0:
            raise ValueError(f"max_fuel must be positive, got {self.max_fuel}")

        self.fuel = min(max(self.fuel, 0.0), self.max_fuel)
        if self.fuel <= 0.0:
            self.out_of_fuel = True

    @classmethod
    def on_surface(
        cls,
        body: CelestialBody,
        angle: float = math.pi / 2,
        clearance: float = 0.05,
        mass: float = 2.0,
        max_fuel: float = 100.0,
    ) -> "RocketState":
        """Create a rocket at rest on a body's surface, pointing straight up.

        Args:
            body: Body to launch from
            angle: Position angle around the body [rad] (pi/2 = top)
            clearance: Height above the surface
            mass: Rocket mass
            max_fuel: Tank capacity (the tank starts full)
        """
        up = vec2(math.cos(angle), math.sin(angle))
        return cls(
            position=body.position + (body.radius + clearance) * up,
            velocity=np.zeros(2),
            thrust_direction=up,
            mass=mass,
            fuel=max_fuel,
            max_fuel=max_fuel,
        )

    @classmethod
    def in_circular_orbit(
        cls,
        body: CelestialBody,
        distance: float,
        angle: float = 0.0,
        clockwise: bool = False,
        speed_factor: float = 1.0,
        mass: float = 2.0,
        max_fuel: float = 100.0,
    ) -> "RocketState":
        """Create a rocket already flying a circular orbit.

        The rocket counts as launched, so gravity acts from the first step.

        Args:
            body: Central body
            distance: Distance from the body centre
            angle: Position angle around the body [rad]
            clockwise: Direction of travel
            speed_factor: Multiple of the circular speed
            mass: Rocket mass
            max_fuel: Tank capacity (the tank starts full)
        """
        radial = vec2(math.cos(angle), math.sin(angle))
        direction = -1.0 if clockwise else 1.0
        tangent = direction * vec2(-radial[1], radial[0])
        speed = speed_factor * math.sqrt(body.mu / distance)
        return cls(
            position=body.position + distance * radial,
            velocity=body.velocity + speed * tangent,
            thrust_direction=tangent,
            mass=mass,
            fuel=max_fuel,
            max_fuel=max_fuel,
            has_started=True,
        )

    def copy(self) -> "RocketState":
        """Create a copy of this state."""
        return RocketState(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            thrust_direction=self.thrust_direction.copy(),
            mass=self.mass,
            thrust_magnitude=self.thrust_magnitude,
            fuel=self.fuel,
            max_fuel=self.max_fuel,
            out_of_fuel=self.out_of_fuel,
            has_started=self.has_started,
            has_crashed=self.has_crashed,
            last_collision_elapsed=self.last_collision_elapsed,
            is_in_orbit=self.is_in_orbit,
            orbit_period=self.orbit_period,
            orbit_announced=self.orbit_announced,
            time=self.time,
        )

    def same_as(self, other: "RocketState") -> bool:
        """Exact field-by-field comparison."""
        return bool(
            np.array_equal(self.position, other.position)
            and np.array_equal(self.velocity, other.velocity)
            and np.array_equal(self.thrust_direction, other.thrust_direction)
            and self.mass == other.mass
            and self.thrust_magnitude == other.thrust_magnitude
            and self.fuel == other.fuel
            and self.max_fuel == other.max_fuel
            and self.out_of_fuel == other.out_of_fuel
            and self.has_started == other.has_started
            and self.has_crashed == other.has_crashed
            and self.last_collision_elapsed == other.last_collision_elapsed
            and self.is_in_orbit == other.is_in_orbit
            and self.orbit_period == other.orbit_period
            and self.orbit_announced == other.orbit_announced
            and self.time == other.time
        )

    @property
    def speed(self) -> float:
        """Speed magnitude."""
        return float(np.linalg.norm(self.velocity))

    @property
    def fuel_percentage(self) -> float:
        """Remaining fuel as a percentage of capacity (0-100)."""
        return 100.0 * self.fuel / self.max_fuel

    @property
    def heading(self) -> float:
        """Angle of the thrust direction from +x [rad]."""
        return math.atan2(self.thrust_direction[1], self.thrust_direction[0])

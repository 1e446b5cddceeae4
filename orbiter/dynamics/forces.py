"""Net force on the rocket.

Contributions are accumulated in a fixed order every tick:

1. Gravity from every body within its cutoff range
2. Drag from the single closest body with an atmosphere
3. Thrust along the thrust direction

Gravity and drag are switched off until the rocket first fires its engine,
so a rocket on the pad stays put while the player lines up the launch.

Example:
    >>> from orbiter.dynamics import ForceModel
    >>>
    >>> model = ForceModel()
    >>> force = model.compute_net_force(rocket, bodies)
    >>> acceleration = force / rocket.mass
"""

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from orbiter.dynamics.state import RocketState, normalize
from orbiter.environment.atmosphere import ATMOSPHERE_HEIGHT, DRAG_COEFFICIENT, Atmosphere
from orbiter.environment.bodies import GRAVITY_CUTOFF_FACTOR, CelestialBody, closest_body


class ForceBreakdown(NamedTuple):
    """Per-source forces of one evaluation."""
    gravity: NDArray[np.float64]
    drag: NDArray[np.float64]
    thrust: NDArray[np.float64]

    @property
    def total(self) -> NDArray[np.float64]:
        """Sum of all contributions."""
        return self.gravity + self.drag + self.thrust


@beartype
class ForceModel:
    """Gravity, drag and thrust acting on the rocket.

    Attributes:
        atmosphere: Drag model shared by all atmospheric bodies
        liftoff_impulse: Velocity kick on the first thrusting tick
        gravity_cutoff_factor: Bodies farther than this many radii are ignored
    """

    def __init__(
        self,
        atmosphere: Atmosphere | None = None,
        liftoff_impulse: float = 0.05,
        gravity_cutoff_factor: float = GRAVITY_CUTOFF_FACTOR,
    ) -> None:
        self.atmosphere = atmosphere or Atmosphere(ATMOSPHERE_HEIGHT, DRAG_COEFFICIENT)
        self.liftoff_impulse = liftoff_impulse
        self.gravity_cutoff_factor = gravity_cutoff_factor

    @staticmethod
    def thrust_active(rocket: RocketState) -> bool:
        """Whether the engine produces thrust this tick."""
        return (
            rocket.thrust_magnitude > 0
            and rocket.fuel > 0
            and not rocket.out_of_fuel
            and not rocket.has_crashed
        )

    def gravity(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> NDArray[np.float64]:
        """Summed gravity from all bodies in range."""
        force = np.zeros(2)
        for body in bodies:
            if body.in_gravity_range(rocket.position, self.gravity_cutoff_factor):
                force += body.gravity_force_on(rocket.mass, rocket.position)
        return force

    def drag(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> NDArray[np.float64]:
        """Drag from the closest body that has an atmosphere.

        The air moves with its body, so drag uses the relative velocity.
        """
        body = closest_body(rocket.position, bodies, where=lambda b: b.has_atmosphere)
        if body is None:
            return np.zeros(2)
        altitude = body.altitude_of(rocket.position)
        if not self.atmosphere.contains(altitude):
            return np.zeros(2)
        return self.atmosphere.drag_force(rocket.velocity - body.velocity, altitude)

    def thrust(self, rocket: RocketState) -> NDArray[np.float64]:
        """Engine force along the thrust direction."""
        if not self.thrust_active(rocket):
            return np.zeros(2)
        return rocket.thrust_magnitude * rocket.thrust_direction

    def breakdown(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> ForceBreakdown:
        """Evaluate every contribution separately."""
        if rocket.has_started and not rocket.has_crashed:
            gravity = self.gravity(rocket, bodies)
            drag = self.drag(rocket, bodies)
        else:
            gravity = np.zeros(2)
            drag = np.zeros(2)
        return ForceBreakdown(gravity=gravity, drag=drag, thrust=self.thrust(rocket))

    def compute_net_force(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> NDArray[np.float64]:
        """Net force on the rocket for the current tick.

        Args:
            rocket: Rocket state (not modified)
            bodies: Bodies in the scene

        Returns:
            Force vector; divide by rocket mass for acceleration
        """
        return self.breakdown(rocket, bodies).total

    def liftoff_impulse_for(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> NDArray[np.float64]:
        """Velocity kick that breaks static contact on the first burn.

        Points along the local vertical of the closest body, or along the
        thrust direction when there is no body.
        """
        body = closest_body(rocket.position, bodies)
        if body is None:
            up = rocket.thrust_direction
        else:
            up = body.surface_normal(rocket.position)
        return self.liftoff_impulse * normalize(up)

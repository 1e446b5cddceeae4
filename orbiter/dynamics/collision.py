"""Surface contact and crash detection.

Runs once per tick after integration. A contact is only handled once the
cooldown since the previous one has elapsed, and only the first
penetrated body (in scene order) is resolved.

A contact is either:

- a crash: impact speed above the threshold after launch. The rocket
  latches ``has_crashed`` and is frozen until recovered.
- a touchdown: the rocket is lifted just above the surface, loses its
  velocity into the surface and keeps most of its sliding velocity.

Speeds are measured relative to the body, so landing on a moving moon
works like landing on a static planet.
"""

import logging
from collections.abc import Sequence
from enum import Enum, auto
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from orbiter.dynamics.state import RocketState, is_finite
from orbiter.environment.bodies import CelestialBody

logger = logging.getLogger(__name__)


class ContactType(Enum):
    """Outcome of a collision check."""

    NONE = auto()       # No contact handled this tick
    TOUCHDOWN = auto()  # Gentle (or pre-launch) contact, rocket rests on surface
    CRASH = auto()      # Fatal impact


class Contact(NamedTuple):
    """Result of one collision check."""
    kind: ContactType
    body: CelestialBody | None = None
    impact_speed: float = 0.0


NO_CONTACT = Contact(ContactType.NONE)


@beartype
class CollisionResolver:
    """Detects penetration and resolves touchdowns and crashes.

    Attributes:
        contact_radius: Collision radius of the rocket
        cooldown: Minimum time between two resolved contacts [s]
        crash_threshold: Impact speed above which a contact is fatal
        surface_clearance: Height above the surface after a touchdown
        tangential_friction: Fraction of sliding velocity kept per touchdown
    """

    def __init__(
        self,
        contact_radius: float = 0.01,
        cooldown: float = 0.1,
        crash_threshold: float = 0.3,
        surface_clearance: float = 0.1,
        tangential_friction: float = 0.95,
    ) -> None:
        self.contact_radius = contact_radius
        self.cooldown = cooldown
        self.crash_threshold = crash_threshold
        self.surface_clearance = surface_clearance
        self.tangential_friction = tangential_friction

    def find_contact(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
    ) -> CelestialBody | None:
        """First body, in scene order, that the rocket penetrates."""
        for body in bodies:
            if body.collides_with(rocket.position, self.contact_radius):
                return body
        return None

    def resolve(
        self,
        rocket: RocketState,
        bodies: Sequence[CelestialBody],
        dt: float,
    ) -> Contact:
        """Advance the cooldown and handle at most one contact.

        Args:
            rocket: Rocket state, modified in place
            bodies: Bodies in scene order
            dt: Tick length [s]

        Returns:
            What happened this tick
        """
        if rocket.has_crashed:
            return NO_CONTACT

        rocket.last_collision_elapsed += dt
        if rocket.last_collision_elapsed <= self.cooldown:
            return NO_CONTACT

        body = self.find_contact(rocket, bodies)
        if body is None:
            return NO_CONTACT

        rocket.last_collision_elapsed = 0.0
        relative_velocity = rocket.velocity - body.velocity
        impact_speed = float(np.linalg.norm(relative_velocity))

        if impact_speed > self.crash_threshold and rocket.has_started:
            rocket.has_crashed = True
            rocket.thrust_magnitude = 0.0
            rocket.is_in_orbit = False
            rocket.orbit_period = 0.0
            logger.info(
                "Crashed into %s at speed %.3f (t=%.2f s)",
                body.name, impact_speed, rocket.time,
            )
            return Contact(ContactType.CRASH, body, impact_speed)

        self._rest_on_surface(rocket, body, relative_velocity)
        logger.debug("Touchdown on %s at speed %.3f", body.name, impact_speed)
        return Contact(ContactType.TOUCHDOWN, body, impact_speed)

    def _rest_on_surface(
        self,
        rocket: RocketState,
        body: CelestialBody,
        relative_velocity: NDArray[np.float64],
    ) -> None:
        normal = body.surface_normal(rocket.position)
        rocket.position = body.position + (body.radius + self.surface_clearance) * normal

        # Inelastic along the normal, damped along the surface
        normal_speed = float(np.dot(relative_velocity, normal))
        tangential = relative_velocity - normal_speed * normal
        rocket.velocity = body.velocity + self.tangential_friction * tangential

    def enforce_finite(
        self,
        rocket: RocketState,
        fallback_position: NDArray[np.float64],
    ) -> bool:
        """Recover from NaN/inf produced by integration.

        The velocity is zeroed; a non-finite position is replaced by the
        last known good one.

        Returns:
            True if a recovery was needed
        """
        position_ok = is_finite(rocket.position)
        velocity_ok = is_finite(rocket.velocity)
        if position_ok and velocity_ok:
            return False

        logger.warning(
            "Non-finite rocket state at t=%.2f s (position=%s, velocity=%s); zeroing velocity",
            rocket.time, rocket.position, rocket.velocity,
        )
        rocket.velocity = np.zeros(2)
        if not position_ok:
            rocket.position = fallback_position.copy()
        return True

"""Rocket state and the per-tick physics applied to it.

Example:
    >>> from orbiter.dynamics import ForceModel, RocketState
    >>>
    >>> rocket = RocketState.on_surface(earth)
    >>> rocket.thrust_magnitude = 1.0
    >>> force = ForceModel().compute_net_force(rocket, [earth])
"""

from orbiter.dynamics.collision import (
    NO_CONTACT,
    CollisionResolver,
    Contact,
    ContactType,
)
from orbiter.dynamics.forces import ForceBreakdown, ForceModel
from orbiter.dynamics.fuel import FuelSystem
from orbiter.dynamics.state import (
    RocketState,
    is_finite,
    normalize,
    rotate,
    vec2,
)

__all__ = [
    # State
    "RocketState",
    "vec2",
    "normalize",
    "rotate",
    "is_finite",
    # Forces
    "ForceModel",
    "ForceBreakdown",
    # Fuel
    "FuelSystem",
    # Collisions
    "CollisionResolver",
    "Contact",
    "ContactType",
    "NO_CONTACT",
]

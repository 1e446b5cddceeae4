"""Environment models for the rocket simulation.

Provides celestial bodies (gravity, collision geometry, orbital motion)
and the atmosphere drag model.

Example:
    >>> from orbiter.environment import Atmosphere, CelestialBody
    >>>
    >>> earth = CelestialBody("Earth", radius=2.0, mass=3.0)
    >>> force = earth.gravity_force_on(2.0, position)
    >>>
    >>> atm = Atmosphere()
    >>> rho = atm.density(altitude=1.0)
"""

from orbiter.environment.atmosphere import (
    ATMOSPHERE_HEIGHT,
    DRAG_COEFFICIENT,
    Atmosphere,
)
from orbiter.environment.bodies import (
    G_GAME,
    GRAVITY_CUTOFF_FACTOR,
    CelestialBody,
    closest_body,
)

__all__ = [
    "ATMOSPHERE_HEIGHT",
    "DRAG_COEFFICIENT",
    "G_GAME",
    "GRAVITY_CUTOFF_FACTOR",
    "Atmosphere",
    "CelestialBody",
    "closest_body",
]

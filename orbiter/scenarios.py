"""Ready-made scenes.

The default game world is a planet with an atmosphere and an airless moon
circling it counter-clockwise. Masses and G are game-scaled so that a
short burn reaches orbit.

Example:
    >>> from orbiter.scenarios import earth_moon_system
    >>> from orbiter.simulation import Simulator
    >>>
    >>> bodies = earth_moon_system()
    >>> sim = Simulator.from_launch_pad(bodies)
"""

from beartype import beartype

from orbiter.environment.bodies import CelestialBody

EARTH_RADIUS: float = 2.0
EARTH_MASS: float = 3.0
MOON_RADIUS: float = 0.5
MOON_MASS: float = 0.5
MOON_ORBIT_RADIUS: float = 5.0
MOON_ANGULAR_SPEED: float = 0.1  # rad/s


@beartype
def earth() -> CelestialBody:
    """Static home planet at the origin, with an atmosphere."""
    return CelestialBody(
        "Earth",
        radius=EARTH_RADIUS,
        mass=EARTH_MASS,
        has_atmosphere=True,
    )


@beartype
def moon(parent: CelestialBody, orbit_angle: float = 0.0) -> CelestialBody:
    """Airless moon circling parent counter-clockwise.

    Args:
        parent: Body to orbit; the caller must keep it alive
        orbit_angle: Starting angle around the parent [rad]
    """
    return CelestialBody(
        "Moon",
        radius=MOON_RADIUS,
        mass=MOON_MASS,
        has_atmosphere=False,
        orbit_target=parent,
        orbit_radius=MOON_ORBIT_RADIUS,
        orbit_angular_speed=MOON_ANGULAR_SPEED,
        orbit_angle=orbit_angle,
    )


@beartype
def earth_moon_system() -> list[CelestialBody]:
    """Earth and Moon, in collision priority order."""
    home = earth()
    return [home, moon(home)]

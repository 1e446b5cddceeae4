"""Read-only HUD and debug readouts.

Everything a presentation layer needs in one snapshot, so renderers never
reach into the simulation state.
"""

import math
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from orbiter.dynamics.state import RocketState
from orbiter.environment.bodies import CelestialBody, closest_body
from orbiter.orbital import FlightStatus, OrbitClassifier, apsides


class Telemetry(NamedTuple):
    """Snapshot of the rocket for display.

    Vectors are copies; mutating them does not affect the simulation.
    """
    time: float
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]
    speed: float
    heading_deg: float
    closest_body: str
    altitude: float
    fuel: float
    fuel_percentage: float
    thrust: float
    is_crashed: bool
    is_out_of_fuel: bool
    is_in_orbit: bool
    orbit_period: float
    orbit_time: str
    status: FlightStatus
    circular_velocity: float
    escape_velocity: float
    velocity_angle_deg: float
    periapsis: float
    apoapsis: float


@beartype
def format_orbit_period(seconds: float, in_orbit: bool = True) -> str:
    """Format a period as MM:SS, or "N/A" when not orbiting.

    Example:
        >>> format_orbit_period(97.4)
        '01:37'
    """
    if not in_orbit or not math.isfinite(seconds) or seconds <= 0:
        return "N/A"
    total = int(round(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


@beartype
def build_telemetry(
    rocket: RocketState,
    bodies: Sequence[CelestialBody],
    classifier: OrbitClassifier,
) -> Telemetry:
    """Collect the HUD readouts for the current state.

    The name and altitude refer to the body whose surface is nearest; the
    orbital readouts refer to the body the orbit test uses.
    """
    assessment = classifier.assess(rocket, bodies)
    body = assessment.body
    nearest = closest_body(rocket.position, bodies, by_surface=True) or body

    relative_position = rocket.position - body.position
    relative_velocity = rocket.velocity - body.velocity
    periapsis, apoapsis = apsides(body.mu, relative_position, relative_velocity, body.radius)
    angle = math.degrees(math.acos(assessment.alignment))

    return Telemetry(
        time=rocket.time,
        position=rocket.position.copy(),
        velocity=rocket.velocity.copy(),
        speed=rocket.speed,
        heading_deg=math.degrees(rocket.heading),
        closest_body=nearest.name,
        altitude=nearest.altitude_of(rocket.position),
        fuel=rocket.fuel,
        fuel_percentage=rocket.fuel_percentage,
        thrust=rocket.thrust_magnitude,
        is_crashed=rocket.has_crashed,
        is_out_of_fuel=rocket.out_of_fuel,
        is_in_orbit=rocket.is_in_orbit,
        orbit_period=rocket.orbit_period,
        orbit_time=format_orbit_period(rocket.orbit_period, rocket.is_in_orbit),
        status=classifier.status(rocket, bodies),
        circular_velocity=assessment.circular_velocity,
        escape_velocity=assessment.escape_velocity,
        velocity_angle_deg=angle,
        periapsis=periapsis,
        apoapsis=apoapsis,
    )


@beartype
def format_telemetry(telemetry: Telemetry) -> str:
    """Multi-line debug summary, like the in-game debug overlay."""
    lines = [
        f"t = {telemetry.time:.2f} s  [{telemetry.status.label}]",
        f"Position: [{telemetry.position[0]:.2f}, {telemetry.position[1]:.2f}]",
        f"Velocity: [{telemetry.velocity[0]:.2f}, {telemetry.velocity[1]:.2f}]",
        f"Speed: {telemetry.speed:.3f}",
        f"Altitude: {telemetry.altitude:.3f} ({telemetry.closest_body})",
        f"Fuel: {telemetry.fuel:.1f} ({telemetry.fuel_percentage:.1f}%)",
        f"In Orbit: {'YES' if telemetry.is_in_orbit else 'NO'}",
    ]
    if telemetry.is_in_orbit:
        lines.append(f"Orbit Period: {telemetry.orbit_period:.1f} s ({telemetry.orbit_time})")
    lines.extend([
        f"Circular Orbit Velocity: {telemetry.circular_velocity:.3f}",
        f"Escape Velocity: {telemetry.escape_velocity:.3f}",
        f"Velocity-Position Angle: {telemetry.velocity_angle_deg:.1f} deg (ideal: 90)",
        f"Periapsis: {telemetry.periapsis:.2f}  Apoapsis: {telemetry.apoapsis:.2f}",
    ])
    return "\n".join(lines)

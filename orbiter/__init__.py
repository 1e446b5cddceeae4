"""Orbiter - Arcade orbital mechanics for a single rocket.

This package provides the simulation core of a 2D rocket game: planets
and moons with game-scaled gravity, a rocket with a fuel tank, drag,
crash detection and stable-orbit detection, all advanced in fixed steps.

Example:
    >>> from orbiter import ControlInput, Simulator, apply_controls
    >>>
    >>> sim = Simulator.from_launch_pad()
    >>> for _ in range(120):
    ...     apply_controls(sim, ControlInput(thrust=True), sim.config.fixed_dt)
    ...     sim.step()
    >>> print(f"Altitude: {sim.altitude:.2f} ({sim.status.label})")
"""

__version__ = "0.1.0"

from orbiter.config import SimConfig
from orbiter.controls import ControlInput, apply_controls
from orbiter.dynamics import (
    CollisionResolver,
    Contact,
    ContactType,
    ForceModel,
    FuelSystem,
    RocketState,
)
from orbiter.environment import Atmosphere, CelestialBody, closest_body
from orbiter.orbital import (
    FlightStatus,
    OrbitClassifier,
    apsides,
    circular_velocity,
    escape_velocity,
    orbital_period,
)
from orbiter.plotting import plot_flight_summary, plot_trajectory
from orbiter.scenarios import earth, earth_moon_system, moon
from orbiter.simulation import (
    EventKind,
    FixedStepLoop,
    FrameTimer,
    SimEvent,
    SimulationResult,
    Simulator,
)
from orbiter.telemetry import Telemetry, format_orbit_period, format_telemetry

__all__ = [
    "__version__",
    # Configuration
    "SimConfig",
    # Environment
    "Atmosphere",
    "CelestialBody",
    "closest_body",
    "earth",
    "moon",
    "earth_moon_system",
    # Dynamics
    "RocketState",
    "ForceModel",
    "FuelSystem",
    "CollisionResolver",
    "Contact",
    "ContactType",
    # Orbits
    "FlightStatus",
    "OrbitClassifier",
    "circular_velocity",
    "escape_velocity",
    "orbital_period",
    "apsides",
    # Simulation
    "Simulator",
    "SimEvent",
    "EventKind",
    "SimulationResult",
    "FixedStepLoop",
    "FrameTimer",
    # Controls
    "ControlInput",
    "apply_controls",
    # Telemetry
    "Telemetry",
    "format_orbit_period",
    "format_telemetry",
    # Visualization
    "plot_trajectory",
    "plot_flight_summary",
]

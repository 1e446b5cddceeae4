"""Fixed-timestep simulation of the rocket.

The simulator owns the rocket state and advances it one fixed step at a
time. The host (game loop, test, script) owns the loop and feeds it two
commands between steps:

    - sim.rotate_thrust_direction(angle)
    - sim.set_thrust(throttle)   # 0..1
    - sim.step()                 # -> events fired this tick

Each step runs, in order:

    advance body orbits -> consume fuel -> gravity -> drag -> thrust
    -> integrate velocity/position -> resolve collisions -> classify orbit

Crash and fuel exhaustion are modelled states, not errors: they are
reported as flags and events and only cleared by an explicit recovery
call (``refuel``, ``recover_from_crash``) or ``reset``.

Example:
    >>> from orbiter.scenarios import earth_moon_system
    >>> from orbiter.simulation import EventKind, Simulator
    >>>
    >>> sim = Simulator.from_launch_pad(earth_moon_system())
    >>> sim.subscribe(EventKind.CRASH, lambda event: print("boom"))
    >>>
    >>> sim.set_thrust(1.0)
    >>> for _ in range(600):  # 10 seconds at 60 Hz
    ...     events = sim.step()
    >>> print(sim.altitude, sim.status.label)
"""

import logging
import math
from collections import defaultdict, deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from orbiter.config import SimConfig
from orbiter.dynamics.collision import CollisionResolver, ContactType
from orbiter.dynamics.forces import ForceModel
from orbiter.dynamics.fuel import FuelSystem
from orbiter.dynamics.state import RocketState, rotate
from orbiter.environment.atmosphere import Atmosphere
from orbiter.environment.bodies import CelestialBody, closest_body
from orbiter.orbital import FlightStatus, OrbitClassifier
from orbiter.telemetry import Telemetry, build_telemetry, format_orbit_period

logger = logging.getLogger(__name__)

MIN_MASS: float = 1e-9  # Below this the rocket does not accelerate


# =============================================================================
# Events
# =============================================================================


class EventKind(Enum):
    """One-shot notifications raised by a step."""

    LIFTOFF = auto()         # First thrusting tick
    OUT_OF_FUEL = auto()     # Tank ran dry
    CRASH = auto()           # Fatal impact
    ORBIT_ACHIEVED = auto()  # Entered a stable orbit


class SimEvent(NamedTuple):
    """Notification raised during a step.

    Attributes:
        kind: What happened
        time: Simulation time at the end of the step [s]
        body: Name of the body involved, if any
    """
    kind: EventKind
    time: float
    body: str | None = None


EventCallback = Callable[[SimEvent], object]


# =============================================================================
# Simulator
# =============================================================================


@beartype
class Simulator:
    """Step-driven rocket simulator (the integrator).

    Owns exactly one rocket. The body list is shared with the host and is
    read for forces; orbiting bodies are moved by ``step`` when
    ``config.advance_bodies`` is set.

    Example:
        >>> sim = Simulator(bodies, config=SimConfig(crash_threshold=0.5))
        >>> sim.set_thrust(1.0)
        >>> sim.step()
    """

    def __init__(
        self,
        bodies: Sequence[CelestialBody],
        initial_state: RocketState | None = None,
        config: SimConfig | None = None,
        reference_body: CelestialBody | None = None,
        record_history: bool = True,
    ) -> None:
        """Create a simulator.

        Args:
            bodies: Bodies in collision/priority order (not copied)
            initial_state: Rocket state to start from and to reset to;
                defaults to the launch pad on the first body
            config: Tuning constants
            reference_body: Orbit reference when the scene has no bodies
            record_history: Keep a copy of the state after every step
        """
        self.config = config or SimConfig()
        self.bodies = bodies

        if reference_body is None:
            reference_body = bodies[0] if bodies else CelestialBody("Earth", radius=2.0, mass=3.0)
        self.reference_body = reference_body

        if initial_state is None:
            initial_state = RocketState.on_surface(
                reference_body,
                clearance=self.config.launch_clearance,
                mass=self.config.rocket_mass,
                max_fuel=self.config.max_fuel,
            )
        self._initial_state = initial_state.copy()
        self.rocket = initial_state.copy()

        cfg = self.config
        self._forces = ForceModel(
            atmosphere=Atmosphere(cfg.atmosphere_height, cfg.drag_coefficient),
            liftoff_impulse=cfg.liftoff_impulse,
        )
        self._fuel = FuelSystem(consumption_rate=cfg.fuel_consumption_rate)
        self._collisions = CollisionResolver(
            contact_radius=cfg.contact_radius,
            cooldown=cfg.collision_cooldown,
            crash_threshold=cfg.crash_threshold,
            surface_clearance=cfg.surface_clearance,
            tangential_friction=cfg.tangential_friction,
        )
        self._classifier = OrbitClassifier(
            reference_body=reference_body,
            atmosphere_height=cfg.atmosphere_height,
            vacuum_min_altitude=cfg.vacuum_min_orbit_altitude,
            speed_floor=cfg.orbit_speed_floor,
            speed_ceiling=cfg.orbit_speed_ceiling,
            alignment_limit=cfg.orbit_alignment_limit,
            landed_altitude=cfg.landed_altitude,
            crash_threshold=cfg.crash_threshold,
        )

        self._subscribers: dict[EventKind, list[EventCallback]] = defaultdict(list)
        self._record_history = record_history
        self._history: deque[RocketState] = deque(maxlen=cfg.max_history)
        if record_history:
            self._history.append(self.rocket.copy())

    @classmethod
    def from_launch_pad(
        cls,
        bodies: Sequence[CelestialBody] | None = None,
        launch_body: CelestialBody | None = None,
        angle: float | int = math.pi / 2,
        config: SimConfig | None = None,
    ) -> "Simulator":
        """Create a simulator with the rocket on the launch pad.

        Args:
            bodies: Scene bodies; the Earth-Moon system when None
            launch_body: Body to launch from; the first body when None
            angle: Launch site angle around the body [rad] (pi/2 = top)
            config: Tuning constants
        """
        if bodies is None:
            from orbiter.scenarios import earth_moon_system

            bodies = earth_moon_system()
        config = config or SimConfig()
        launch_body = launch_body or bodies[0]

        state = RocketState.on_surface(
            launch_body,
            angle=float(angle),
            clearance=config.launch_clearance,
            mass=config.rocket_mass,
            max_fuel=config.max_fuel,
        )
        return cls(bodies, initial_state=state, config=config)

    @classmethod
    def from_orbit(
        cls,
        body: CelestialBody,
        distance: float | int,
        bodies: Sequence[CelestialBody] | None = None,
        angle: float | int = 0.0,
        speed_factor: float | int = 1.0,
        config: SimConfig | None = None,
    ) -> "Simulator":
        """Create a simulator with the rocket on a circular orbit.

        Args:
            body: Central body
            distance: Orbit radius from the body centre
            bodies: Scene bodies; just the central body when None
            angle: Starting angle around the body [rad]
            speed_factor: Multiple of the circular speed
            config: Tuning constants
        """
        config = config or SimConfig()
        state = RocketState.in_circular_orbit(
            body,
            float(distance),
            angle=float(angle),
            speed_factor=float(speed_factor),
            mass=config.rocket_mass,
            max_fuel=config.max_fuel,
        )
        return cls(bodies if bodies is not None else [body], initial_state=state, config=config)

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------

    def rotate_thrust_direction(self, angle: float | int) -> None:
        """Rotate the thrust direction counter-clockwise by angle [rad].

        Allowed before launch; ignored once crashed or for non-finite angles.
        """
        if self.rocket.has_crashed:
            return
        if not math.isfinite(angle):
            logger.debug("Ignoring non-finite rotation %r", angle)
            return
        angle = math.remainder(float(angle), 2.0 * math.pi)
        self.rocket.thrust_direction = rotate(self.rocket.thrust_direction, angle)

    def set_thrust(self, throttle: float | int) -> float:
        """Command the engine throttle for the next step.

        Args:
            throttle: Normalized throttle, clamped to [0, 1]

        Returns:
            The thrust force actually commanded (0 when crashed or dry)
        """
        if not math.isfinite(throttle):
            throttle = 0.0
        throttle = min(max(float(throttle), 0.0), 1.0)

        if self.rocket.has_crashed or self.rocket.out_of_fuel:
            self.rocket.thrust_magnitude = 0.0
        else:
            self.rocket.thrust_magnitude = throttle * self.config.thrust_power_max
        return self.rocket.thrust_magnitude

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def subscribe(self, kind: EventKind, callback: EventCallback) -> None:
        """Call callback(event) whenever an event of this kind fires."""
        self._subscribers[kind].append(callback)

    def unsubscribe(self, kind: EventKind, callback: EventCallback) -> None:
        """Remove a callback registered with subscribe."""
        callbacks = self._subscribers.get(kind, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def _dispatch(self, events: list[SimEvent]) -> None:
        for event in events:
            for callback in list(self._subscribers.get(event.kind, [])):
                callback(event)

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def step(self, dt: float | int | None = None) -> list[SimEvent]:
        """Advance the simulation by one fixed timestep.

        Args:
            dt: Timestep [s]; config.fixed_dt when None

        Returns:
            Events fired during this step (also sent to subscribers)
        """
        if dt is None:
            dt = self.config.fixed_dt
        if not math.isfinite(dt) or dt <= 0:
            logger.debug("Ignoring step with dt=%r", dt)
            return []
        dt = float(dt)

        if self.config.advance_bodies:
            for body in self.bodies:
                body.advance_orbit(dt)

        rocket = self.rocket
        rocket.time += dt
        if rocket.has_crashed:
            return []

        events = self._advance_rocket(rocket, dt)

        if self._record_history:
            self._history.append(rocket.copy())
        self._dispatch(events)
        return events

    def _advance_rocket(self, rocket: RocketState, dt: float) -> list[SimEvent]:
        events: list[SimEvent] = []

        if self._fuel.consume(rocket, rocket.thrust_magnitude, dt):
            events.append(SimEvent(EventKind.OUT_OF_FUEL, rocket.time))

        if not rocket.has_started and self._forces.thrust_active(rocket):
            rocket.has_started = True
            rocket.velocity = rocket.velocity + self._forces.liftoff_impulse_for(rocket, self.bodies)
            body = closest_body(rocket.position, self.bodies)
            events.append(SimEvent(EventKind.LIFTOFF, rocket.time, body.name if body else None))
            logger.info("Liftoff at t=%.2f s", rocket.time)

        force = self._forces.compute_net_force(rocket, self.bodies)

        if rocket.has_started:
            previous_position = rocket.position.copy()
            if rocket.mass > MIN_MASS:
                acceleration = force / rocket.mass
            else:
                acceleration = np.zeros(2)
            # Semi-implicit Euler
            rocket.velocity = rocket.velocity + acceleration * dt
            rocket.position = rocket.position + rocket.velocity * dt
            self._collisions.enforce_finite(rocket, previous_position)

        contact = self._collisions.resolve(rocket, self.bodies, dt)
        if contact.kind is ContactType.CRASH:
            events.append(SimEvent(EventKind.CRASH, rocket.time, contact.body.name))
            return events

        if self._classifier.update(rocket, self.bodies):
            events.append(SimEvent(EventKind.ORBIT_ACHIEVED, rocket.time, self.closest_body_name))
            logger.info(
                "Orbit achieved around %s, period %.1f s",
                self.closest_body_name, rocket.orbit_period,
            )

        return events

    def run(self, duration: float | int, dt: float | int | None = None) -> list[SimEvent]:
        """Step repeatedly for a span of simulated time with constant inputs."""
        dt = float(dt or self.config.fixed_dt)
        if not math.isfinite(dt) or dt <= 0 or not math.isfinite(duration):
            return []
        events: list[SimEvent] = []
        for _ in range(int(round(duration / dt))):
            events.extend(self.step(dt))
        return events

    # -------------------------------------------------------------------------
    # Recovery
    # -------------------------------------------------------------------------

    def refuel(self, amount: float | int | None = None) -> float:
        """Add fuel (a full tank when None). Player-triggered only."""
        return self._fuel.refill(self.rocket, None if amount is None else float(amount))

    def recover_from_crash(self) -> None:
        """Clear a crash: zero the velocity, refuel and re-arm collisions.

        The next step lifts the rocket back onto the surface it hit.
        """
        rocket = self.rocket
        if not rocket.has_crashed:
            return
        rocket.has_crashed = False
        rocket.velocity = np.zeros(2)
        rocket.thrust_magnitude = 0.0
        rocket.last_collision_elapsed = math.inf
        rocket.is_in_orbit = False
        rocket.orbit_period = 0.0
        rocket.orbit_announced = False
        self._fuel.refill(rocket)
        logger.info("Recovered from crash at t=%.2f s", rocket.time)

    def reset(self) -> None:
        """Restore the construction-time rocket and body state.

        Never runs inside a step; the simulator is single-threaded.
        """
        self.rocket = self._initial_state.copy()
        for body in self.bodies:
            body.reset()
        self._history.clear()
        if self._record_history:
            self._history.append(self.rocket.copy())

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_state(self) -> RocketState:
        """Get a copy of the current rocket state."""
        return self.rocket.copy()

    def telemetry(self) -> Telemetry:
        """Snapshot of all HUD readouts."""
        return build_telemetry(self.rocket, self.bodies, self._classifier)

    @property
    def classifier(self) -> OrbitClassifier:
        """Orbit classifier used by this simulator."""
        return self._classifier

    @property
    def time(self) -> float:
        """Current simulation time [s]."""
        return self.rocket.time

    @property
    def position(self) -> NDArray[np.float64]:
        """Rocket position (copy)."""
        return self.rocket.position.copy()

    @property
    def velocity(self) -> NDArray[np.float64]:
        """Rocket velocity (copy)."""
        return self.rocket.velocity.copy()

    @property
    def fuel_percentage(self) -> float:
        """Remaining fuel (0-100)."""
        return self.rocket.fuel_percentage

    @property
    def is_crashed(self) -> bool:
        return self.rocket.has_crashed

    @property
    def is_out_of_fuel(self) -> bool:
        return self.rocket.out_of_fuel

    @property
    def is_in_orbit(self) -> bool:
        return self.rocket.is_in_orbit

    @property
    def orbit_period(self) -> float:
        """Orbit period while in orbit, else 0 [s]."""
        return self.rocket.orbit_period

    @property
    def orbit_time(self) -> str:
        """Orbit period as MM:SS, or "N/A"."""
        return format_orbit_period(self.rocket.orbit_period, self.rocket.is_in_orbit)

    @property
    def closest_body(self) -> CelestialBody:
        """Body whose surface is nearest to the rocket (reference body if none)."""
        body = closest_body(self.rocket.position, self.bodies, by_surface=True)
        return body if body is not None else self._classifier.reference_body

    @property
    def closest_body_name(self) -> str:
        return self.closest_body.name

    @property
    def altitude(self) -> float:
        """Altitude above the closest body."""
        return self.closest_body.altitude_of(self.rocket.position)

    @property
    def status(self) -> FlightStatus:
        """Current flight phase."""
        return self._classifier.status(self.rocket, self.bodies)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def get_history(self) -> list[RocketState]:
        """Get recorded state history."""
        return list(self._history)

    def clear_history(self) -> None:
        """Clear recorded state history."""
        self._history.clear()
        self._history.append(self.rocket.copy())


# =============================================================================
# Results and Analysis
# =============================================================================


@beartype
@dataclass
class SimulationResult:
    """Recorded trajectory with convenient array access."""
    states: list[RocketState]

    @property
    def time(self) -> NDArray[np.float64]:
        """Time array [s]."""
        return np.array([s.time for s in self.states], dtype=np.float64)

    @property
    def position(self) -> NDArray[np.float64]:
        """Position history, shape (N, 2)."""
        return np.array([s.position for s in self.states], dtype=np.float64).reshape(-1, 2)

    @property
    def velocity(self) -> NDArray[np.float64]:
        """Velocity history, shape (N, 2)."""
        return np.array([s.velocity for s in self.states], dtype=np.float64).reshape(-1, 2)

    @property
    def speed(self) -> NDArray[np.float64]:
        """Speed history."""
        return np.array([s.speed for s in self.states], dtype=np.float64)

    @property
    def fuel(self) -> NDArray[np.float64]:
        """Fuel history."""
        return np.array([s.fuel for s in self.states], dtype=np.float64)

    @property
    def crashed(self) -> bool:
        """Whether the last recorded state is crashed."""
        return bool(self.states) and self.states[-1].has_crashed

    @classmethod
    def from_simulator(cls, sim: Simulator) -> "SimulationResult":
        """Create result from simulator history."""
        return cls(states=sim.get_history())

    def to_dataframe(self):
        """Convert to Polars DataFrame."""
        import polars as pl

        return pl.DataFrame({
            "time": self.time,
            "x": self.position[:, 0],
            "y": self.position[:, 1],
            "vx": self.velocity[:, 0],
            "vy": self.velocity[:, 1],
            "speed": self.speed,
            "fuel": self.fuel,
            "thrust": [s.thrust_magnitude for s in self.states],
            "in_orbit": [s.is_in_orbit for s in self.states],
            "crashed": [s.has_crashed for s in self.states],
        })

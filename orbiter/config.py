"""Simulation configuration.

All tuning constants of the game live here. They are dimensionless and
chosen for playability, not physical accuracy.

Example:
    >>> from orbiter.config import SimConfig
    >>>
    >>> config = SimConfig()
    >>> hard = config.with_overrides(crash_threshold=0.15, max_fuel=60.0)
"""

from dataclasses import dataclass, replace

from beartype import beartype

from orbiter.environment.atmosphere import ATMOSPHERE_HEIGHT, DRAG_COEFFICIENT


@beartype
@dataclass(frozen=True)
class SimConfig:
    """Tuning constants for the rocket simulation.

    Attributes:
        fixed_dt: Physics timestep [s]
        max_frame_time: Cap on wall-clock time consumed per host frame [s]
        speed_settings: Selectable simulation-speed multipliers
        thrust_power_max: Thrust force at full throttle
        rotation_rate: Thrust-direction rotation rate for held controls [rad/s]
        liftoff_impulse: Velocity kick applied on the first thrusting tick
        drag_coefficient: Quadratic drag coefficient
        atmosphere_height: Altitude at which the atmosphere ends
        fuel_consumption_rate: Fuel burned per unit thrust per second
        max_fuel: Tank capacity
        rocket_mass: Rocket mass (constant, propellant is massless)
        launch_clearance: Height above the surface of the launch position
        contact_radius: Collision radius of the rocket
        collision_cooldown: Minimum time between two resolved contacts [s]
        crash_threshold: Impact speed above which a contact is a crash
        surface_clearance: Height above the surface a contact pushes the rocket to
        tangential_friction: Tangential velocity factor kept after a contact
        orbit_speed_floor: Lower orbit speed bound as a fraction of circular speed
        orbit_speed_ceiling: Upper orbit speed bound as a fraction of escape speed
        orbit_alignment_limit: Max |cos| between radial and velocity directions
        vacuum_min_orbit_altitude: Orbit altitude floor for airless bodies
        landed_altitude: Altitude below which a slow rocket counts as landed
        advance_bodies: Whether the simulator moves orbiting bodies each step
        max_history: Number of recorded states kept (None keeps all)
    """
    fixed_dt: float = 1.0 / 60.0
    max_frame_time: float = 0.25
    speed_settings: tuple[float, ...] = (1.0, 5.0, 100.0)
    thrust_power_max: float = 1.0
    rotation_rate: float = 1.5
    liftoff_impulse: float = 0.05
    drag_coefficient: float = DRAG_COEFFICIENT
    atmosphere_height: float = ATMOSPHERE_HEIGHT
    fuel_consumption_rate: float = 7.0
    max_fuel: float = 100.0
    rocket_mass: float = 2.0
    launch_clearance: float = 0.05
    contact_radius: float = 0.01
    collision_cooldown: float = 0.1
    crash_threshold: float = 0.3
    surface_clearance: float = 0.1
    tangential_friction: float = 0.95
    orbit_speed_floor: float = 0.8
    orbit_speed_ceiling: float = 0.9
    orbit_alignment_limit: float = 0.5
    vacuum_min_orbit_altitude: float = 0.25
    landed_altitude: float = 0.2
    advance_bodies: bool = True
    max_history: int | None = 10000

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.fixed_dt <= 0:
            raise ValueError(f"fixed_dt must be positive, got {self.fixed_dt}")
        if self.max_frame_time < self.fixed_dt:
            raise ValueError("max_frame_time must be at least one fixed_dt")
        if not self.speed_settings or min(self.speed_settings) <= 0:
            raise ValueError("speed_settings must hold positive multipliers")
        if self.rocket_mass <= 0:
            raise ValueError(f"rocket_mass must be positive, got {self.rocket_mass}")
        if self.max_fuel <= 0:
            raise ValueError(f"max_fuel must be positive, got {self.max_fuel}")
        if self.thrust_power_max < 0 or self.fuel_consumption_rate < 0:
            raise ValueError("thrust_power_max and fuel_consumption_rate must be >= 0")
        if self.atmosphere_height <= 0:
            raise ValueError("atmosphere_height must be positive")
        if self.collision_cooldown < 0 or self.crash_threshold < 0:
            raise ValueError("collision_cooldown and crash_threshold must be >= 0")
        if not 0.0 <= self.tangential_friction <= 1.0:
            raise ValueError("tangential_friction must be in [0, 1]")
        if self.max_history is not None and self.max_history < 1:
            raise ValueError("max_history must be positive or None")

    def with_overrides(self, **changes: object) -> "SimConfig":
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

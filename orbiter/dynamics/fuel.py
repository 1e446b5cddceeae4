"""Propellant bookkeeping.

Fuel burns in proportion to thrust:

    fuel -= consumption_rate * thrust_magnitude * dt

and never drops below zero. Reaching zero latches ``out_of_fuel`` until
an explicit refill.
"""

import logging
import math

from beartype import beartype

from orbiter.dynamics.state import RocketState

logger = logging.getLogger(__name__)


@beartype
class FuelSystem:
    """Fuel consumption and refilling.

    Example:
        >>> fuel = FuelSystem(consumption_rate=7.0)
        >>> ran_dry = fuel.consume(rocket, thrust_magnitude=1.0, dt=1.0 / 60.0)
        >>> fuel.refill(rocket)
    """

    def __init__(self, consumption_rate: float = 7.0) -> None:
        """Initialize fuel system.

        Args:
            consumption_rate: Fuel units burned per unit thrust per second
        """
        self.consumption_rate = consumption_rate

    def consume(self, rocket: RocketState, thrust_magnitude: float, dt: float) -> bool:
        """Burn fuel for one tick of thrust.

        Nothing is burned when not thrusting, already dry or crashed.

        Args:
            rocket: Rocket to drain
            thrust_magnitude: Thrust force held during the tick
            dt: Tick length [s]

        Returns:
            True if the tank ran dry during this call
        """
        if thrust_magnitude <= 0 or dt <= 0:
            return False
        if rocket.out_of_fuel or rocket.has_crashed or rocket.fuel <= 0:
            return False

        burned = self.consumption_rate * thrust_magnitude * dt
        rocket.fuel = max(0.0, rocket.fuel - burned)

        if rocket.fuel <= 0.0:
            rocket.fuel = 0.0
            rocket.out_of_fuel = True
            rocket.thrust_magnitude = 0.0
            logger.info("Out of fuel at t=%.2f s", rocket.time)
            return True
        return False

    def refill(self, rocket: RocketState, amount: float | None = None) -> float:
        """Add fuel, clamped to the tank capacity.

        Args:
            rocket: Rocket to refuel
            amount: Fuel to add; a full tank when None

        Returns:
            Fuel level after the refill
        """
        if amount is None:
            amount = rocket.max_fuel
        if math.isnan(amount):
            amount = 0.0

        rocket.fuel = min(max(rocket.fuel + amount, 0.0), rocket.max_fuel)
        if rocket.fuel > 0.0:
            rocket.out_of_fuel = False
        logger.debug("Refuelled to %.1f / %.1f", rocket.fuel, rocket.max_fuel)
        return rocket.fuel

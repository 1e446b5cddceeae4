"""Simulation module for the rocket game.

Provides the step-driven simulator and the fixed-step loop that feeds it
from a host's frame clock.

Example:
    >>> from orbiter.simulation import FixedStepLoop, Simulator
    >>>
    >>> sim = Simulator.from_launch_pad()
    >>> loop = FixedStepLoop(sim)
    >>> loop.select_speed(1)  # 5x
    >>> sim.set_thrust(1.0)
    >>> events = loop.advance(1.0 / 60.0)
"""

from orbiter.simulation.clock import FixedStepLoop, FrameTimer
from orbiter.simulation.simulator import (
    EventKind,
    SimEvent,
    SimulationResult,
    Simulator,
)

__all__ = [
    "EventKind",
    "FixedStepLoop",
    "FrameTimer",
    "SimEvent",
    "SimulationResult",
    "Simulator",
]

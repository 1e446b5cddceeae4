"""Fixed-step game loop driver.

Converts variable host frame times into a whole number of fixed physics
steps. Unused time carries over to the next frame so the simulation rate
is independent of the frame rate.

Example:
    >>> from orbiter.simulation import FixedStepLoop, FrameTimer, Simulator
    >>>
    >>> loop = FixedStepLoop(Simulator.from_launch_pad())
    >>> timer = FrameTimer()
    >>> while running:
    ...     events = loop.advance(timer.tick())
    ...     render(loop.simulator.telemetry())
"""

import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from beartype import beartype

from orbiter.simulation.simulator import SimEvent, Simulator

logger = logging.getLogger(__name__)


@dataclass
class FrameTimer:
    """Wall-clock frame timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        """Seconds since the previous tick."""
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


@beartype
class FixedStepLoop:
    """Accumulator that drains frame time in fixed simulator steps.

    Attributes:
        simulator: Simulator being driven
        speed_settings: Selectable speed multipliers
        max_frame_time: Cap on the frame time accepted per call [s]
        fixed_dt: Physics timestep [s]
    """

    def __init__(
        self,
        simulator: Simulator,
        speed_settings: Sequence[float | int] | None = None,
        max_frame_time: float | int | None = None,
    ) -> None:
        config = simulator.config
        self.simulator = simulator
        self.speed_settings = tuple(float(s) for s in (speed_settings or config.speed_settings))
        if max_frame_time is None:
            max_frame_time = config.max_frame_time
        self.max_frame_time = float(max_frame_time)
        self.fixed_dt = config.fixed_dt
        if not self.speed_settings or min(self.speed_settings) <= 0:
            raise ValueError("speed_settings must hold positive multipliers")
        if self.max_frame_time <= 0:
            raise ValueError(f"max_frame_time must be positive, got {self.max_frame_time}")

        self._speed_index = 0
        self._accumulator = 0.0

    @property
    def speed(self) -> float:
        """Current speed multiplier."""
        return self.speed_settings[self._speed_index]

    @property
    def speed_index(self) -> int:
        return self._speed_index

    @property
    def accumulator(self) -> float:
        """Simulated time not yet consumed by a step [s]."""
        return self._accumulator

    def select_speed(self, index: int) -> float:
        """Select a speed setting by index (out-of-range indices are ignored).

        Returns:
            The active speed multiplier
        """
        if 0 <= index < len(self.speed_settings):
            self._speed_index = index
            logger.debug("Simulation speed set to %gx", self.speed)
        return self.speed

    def set_speed(self, multiplier: float | int) -> float:
        """Select the speed setting equal to multiplier, if there is one."""
        for index, value in enumerate(self.speed_settings):
            if math.isclose(value, multiplier):
                return self.select_speed(index)
        return self.speed

    def advance(self, frame_time: float | int) -> list[SimEvent]:
        """Run as many fixed steps as the elapsed frame time allows.

        Args:
            frame_time: Wall-clock time since the previous frame [s]

        Returns:
            Events fired by all steps run this frame, in order
        """
        if not math.isfinite(frame_time) or frame_time <= 0:
            return []

        frame_time = min(float(frame_time), self.max_frame_time)
        self._accumulator += frame_time * self.speed

        events: list[SimEvent] = []
        while self._accumulator >= self.fixed_dt:
            events.extend(self.simulator.step(self.fixed_dt))
            self._accumulator -= self.fixed_dt
        return events

    def reset(self) -> None:
        """Reset the simulator, drop pending time and return to 1x."""
        self.simulator.reset()
        self._accumulator = 0.0
        self._speed_index = 0

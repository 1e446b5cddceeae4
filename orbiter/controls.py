"""Player input mapping.

The simulator never reads keyboard state. A host samples its input device
once per tick, builds a ``ControlInput`` and hands it to ``apply_controls``.

Example:
    >>> from orbiter.controls import ControlInput, apply_controls
    >>>
    >>> inputs = ControlInput.from_keys({"ArrowUp", "ArrowLeft"})
    >>> apply_controls(sim, inputs, dt=1.0 / 60.0)
    >>> sim.step()
"""

from collections.abc import Iterable
from typing import NamedTuple

from beartype import beartype

from orbiter.simulation.simulator import Simulator

ROTATE_LEFT_KEY = "ArrowLeft"
ROTATE_RIGHT_KEY = "ArrowRight"
THRUST_KEY = "ArrowUp"


class ControlInput(NamedTuple):
    """Controls held during one tick."""
    rotate_left: bool = False
    rotate_right: bool = False
    thrust: bool = False

    @classmethod
    def from_keys(cls, pressed: Iterable[str]) -> "ControlInput":
        """Build from a collection of pressed key names (DOM ``code`` values)."""
        pressed = set(pressed)
        return cls(
            rotate_left=ROTATE_LEFT_KEY in pressed,
            rotate_right=ROTATE_RIGHT_KEY in pressed,
            thrust=THRUST_KEY in pressed,
        )

    @property
    def rotation(self) -> float:
        """Rotation sign: +1 counter-clockwise, -1 clockwise, 0 for none or both."""
        return float(self.rotate_left) - float(self.rotate_right)


@beartype
def apply_controls(sim: Simulator, inputs: ControlInput, dt: float | int) -> float:
    """Translate held controls into simulator commands for one tick.

    Left rotates counter-clockwise and right clockwise, at
    ``config.rotation_rate``. Thrust is all or nothing.

    Returns:
        The thrust force commanded
    """
    rotation = inputs.rotation
    if rotation:
        sim.rotate_thrust_direction(rotation * sim.config.rotation_rate * dt)
    return sim.set_thrust(1.0 if inputs.thrust else 0.0)

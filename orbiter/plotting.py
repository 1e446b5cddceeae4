"""Visualization module for orbiter.

Provides plotting functions for:
- Trajectory plots (bodies, atmosphere shells and the flown path)
- Flight summaries (speed and fuel vs time)

All plots use matplotlib with a consistent style.
"""

from collections.abc import Sequence

import matplotlib.pyplot as plt
import numpy as np
from beartype import beartype
from matplotlib.figure import Figure
from matplotlib.patches import Circle

from orbiter.environment.atmosphere import ATMOSPHERE_HEIGHT
from orbiter.environment.bodies import CelestialBody
from orbiter.simulation.simulator import SimulationResult

# =============================================================================
# Plot Style Configuration
# =============================================================================

COLORS = {
    "primary": "#2E86AB",  # Steel blue
    "secondary": "#A23B72",  # Berry
    "accent": "#F18F01",  # Orange
    "body": "#454545",  # Dark gray for airless bodies
    "planet": "#3A7D44",  # Green for bodies with an atmosphere
    "atmosphere": "#9CC5E8",  # Pale blue shell
    "text": "#333333",
}

DEFAULT_FIGSIZE = (8, 8)


def _setup_style() -> None:
    """Configure matplotlib style for consistent appearance."""
    plt.rcParams.update(
        {
            "font.size": 11,
            "axes.titlesize": 14,
            "axes.labelsize": 12,
            "axes.edgecolor": COLORS["text"],
            "axes.labelcolor": COLORS["text"],
            "legend.fontsize": 10,
            "grid.alpha": 0.5,
        }
    )


# =============================================================================
# Trajectory Plot
# =============================================================================


@beartype
def plot_trajectory(
    result: SimulationResult,
    bodies: Sequence[CelestialBody],
    atmosphere_height: float = ATMOSPHERE_HEIGHT,
    figsize: tuple[float, float] = DEFAULT_FIGSIZE,
    title: str | None = None,
) -> Figure:
    """Plot the flown path over the scene.

    Bodies are drawn at their current positions. Orbiting bodies move
    during a flight, so their discs show where they ended up.

    Args:
        result: Recorded flight
        bodies: Scene bodies
        atmosphere_height: Thickness of the drawn atmosphere shell
        figsize: Figure size
        title: Plot title

    Returns:
        matplotlib Figure
    """
    _setup_style()
    fig, ax = plt.subplots(figsize=figsize)

    for body in bodies:
        if body.has_atmosphere:
            ax.add_patch(Circle(
                tuple(body.position), body.radius + atmosphere_height,
                color=COLORS["atmosphere"], alpha=0.25, linewidth=0,
            ))
        color = COLORS["planet"] if body.has_atmosphere else COLORS["body"]
        ax.add_patch(Circle(tuple(body.position), body.radius, color=color, zorder=2))
        ax.annotate(body.name, xy=tuple(body.position), ha="center", va="center",
                    color="white", fontsize=9, zorder=3)

    position = result.position
    if len(position):
        ax.plot(position[:, 0], position[:, 1], color=COLORS["primary"],
                linewidth=1.5, label="Trajectory", zorder=4)
        ax.plot(position[0, 0], position[0, 1], "o", color=COLORS["accent"],
                label="Start", zorder=5)
        end_marker = "x" if result.crashed else "o"
        end_label = "Crash" if result.crashed else "End"
        ax.plot(position[-1, 0], position[-1, 1], end_marker, color=COLORS["secondary"],
                markersize=10, label=end_label, zorder=5)

    ax.set_aspect("equal")
    ax.autoscale_view()
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title(title or "Trajectory")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right")

    fig.tight_layout()
    return fig


# =============================================================================
# Flight Summary
# =============================================================================


@beartype
def plot_flight_summary(
    result: SimulationResult,
    figsize: tuple[float, float] = (12, 5),
) -> Figure:
    """Plot speed and remaining fuel against time.

    Args:
        result: Recorded flight
        figsize: Figure size

    Returns:
        matplotlib Figure with two subplots
    """
    _setup_style()
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=figsize)
    time = result.time

    ax1.plot(time, result.speed, color=COLORS["primary"], linewidth=2)
    ax1.set_xlabel("Time (s)")
    ax1.set_ylabel("Speed")
    ax1.set_title("Speed vs Time")
    ax1.grid(True, alpha=0.3)

    ax2.plot(time, result.fuel, color=COLORS["accent"], linewidth=2)
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Fuel")
    ax2.set_title("Fuel vs Time")
    ax2.grid(True, alpha=0.3)
    if len(time):
        ax2.set_ylim(0, max(float(np.max(result.fuel)), 1.0) * 1.05)

    fig.tight_layout()
    return fig

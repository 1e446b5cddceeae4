#!/usr/bin/env python
"""Headless launch example for Orbiter.

This example flies a scripted gravity turn from the launch pad without
any renderer:

1. Build the Earth-Moon scene and put the rocket on the pad
2. Burn straight up to clear the thick lower atmosphere
3. Pitch over towards the horizon while still burning
4. Coast and watch for orbit, escape or a crash
5. Summarize the flight from the recorded history

Frames are fed to the fixed-step loop at a steady 60 Hz, as a game host
would, but without sleeping between them.
"""

import logging

from orbiter import (
    ControlInput,
    EventKind,
    FixedStepLoop,
    SimulationResult,
    Simulator,
    apply_controls,
    earth_moon_system,
    format_telemetry,
)

FRAME_TIME = 1.0 / 60.0


def pilot(time: float) -> ControlInput:
    """Scripted controls for a simple gravity turn."""
    if time < 4.0:
        return ControlInput(thrust=True)
    if time < 7.0:
        return ControlInput(rotate_right=True, thrust=True)
    if time < 12.0:
        return ControlInput(thrust=True)
    return ControlInput()


def main() -> None:
    """Run the headless launch example."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("Orbiter - Headless Launch Example")
    print("=" * 70)
    print()

    bodies = earth_moon_system()
    sim = Simulator.from_launch_pad(bodies)
    loop = FixedStepLoop(sim)

    sim.subscribe(EventKind.ORBIT_ACHIEVED, lambda event: print(
        f"  >> Orbit achieved around {event.body} at t={event.time:.1f} s"
    ))
    sim.subscribe(EventKind.CRASH, lambda event: print(
        f"  >> Crashed into {event.body} at t={event.time:.1f} s"
    ))

    print(format_telemetry(sim.telemetry()))
    print()

    # =========================================================================
    # Fly
    # =========================================================================

    loop.select_speed(1)  # 5x, the coast is long
    for frame in range(60 * 30):
        apply_controls(sim, pilot(sim.time), FRAME_TIME * loop.speed)
        events = loop.advance(FRAME_TIME)
        if frame % 300 == 0 or events:
            print(f"t={sim.time:6.1f} s  alt={sim.altitude:6.2f}  "
                  f"fuel={sim.fuel_percentage:5.1f}%  {sim.status.label}")
        if sim.is_crashed:
            break

    print()
    print(format_telemetry(sim.telemetry()))
    print()

    # =========================================================================
    # Summarize
    # =========================================================================

    result = SimulationResult.from_simulator(sim)
    df = result.to_dataframe()
    print(f"Recorded {df.height} states")
    print(f"Max speed: {df['speed'].max():.3f}")
    print(f"Fuel used: {result.fuel[0] - result.fuel[-1]:.1f}")
    print(f"Orbit time: {sim.orbit_time}")


if __name__ == "__main__":
    main()

"""Unit tests for HUD telemetry and formatting."""

import math

import pytest
from numpy.testing import assert_allclose

from orbiter.orbital import FlightStatus
from orbiter.scenarios import earth
from orbiter.simulation import Simulator
from orbiter.telemetry import format_orbit_period, format_telemetry


class TestFormatOrbitPeriod:
    """Test MM:SS formatting."""

    @pytest.mark.parametrize("seconds,expected", [
        (97.4, "01:37"),
        (59.6, "01:00"),
        (5.0, "00:05"),
        (3600.0, "60:00"),
    ])
    def test_format(self, seconds, expected):
        assert format_orbit_period(seconds) == expected

    def test_not_in_orbit(self):
        assert format_orbit_period(97.4, in_orbit=False) == "N/A"

    @pytest.mark.parametrize("seconds", [0.0, -1.0, float("inf"), float("nan")])
    def test_degenerate(self, seconds):
        assert format_orbit_period(seconds) == "N/A"


class TestTelemetry:
    """Test telemetry snapshots."""

    def test_orbit_snapshot(self):
        body = earth()
        sim = Simulator.from_orbit(body, 6.0)
        sim.step()
        telemetry = sim.telemetry()

        assert telemetry.is_in_orbit
        assert telemetry.status is FlightStatus.ORBITING
        assert_allclose(telemetry.circular_velocity, math.sqrt(0.9 / (telemetry.altitude + 2.0)))
        assert_allclose(telemetry.escape_velocity, math.sqrt(2.0) * telemetry.circular_velocity)
        assert_allclose(telemetry.velocity_angle_deg, 90.0, atol=0.5)
        assert_allclose(telemetry.periapsis, 4.0, rtol=1e-2)
        assert_allclose(telemetry.apoapsis, 4.0, rtol=1e-2)

    def test_snapshot_is_detached(self):
        sim = Simulator.from_launch_pad()
        telemetry = sim.telemetry()
        telemetry.position[0] = 42.0
        assert sim.position[0] != 42.0

    def test_format_telemetry(self):
        body = earth()
        sim = Simulator.from_orbit(body, 6.0)
        sim.step()
        text = format_telemetry(sim.telemetry())

        assert "In Stable Orbit" in text
        assert "In Orbit: YES" in text
        assert "Orbit Period:" in text
        assert "Escape Velocity:" in text

    def test_format_on_pad(self):
        text = format_telemetry(Simulator.from_launch_pad().telemetry())
        assert "Ready to Launch" in text
        assert "In Orbit: NO" in text
        assert "Orbit Period:" not in text

"""Unit tests for orbit classification and orbital readouts."""

import math

import pytest
from numpy.testing import assert_allclose

from orbiter.dynamics import RocketState, vec2
from orbiter.environment import CelestialBody
from orbiter.orbital import (
    FlightStatus,
    OrbitClassifier,
    apsides,
    circular_velocity,
    escape_velocity,
    orbital_period,
    velocity_alignment,
)
from orbiter.scenarios import earth, earth_moon_system

MU = 0.3 * 3.0


# =============================================================================
# Orbital Quantity Tests
# =============================================================================


class TestOrbitalQuantities:
    """Test closed-form orbital quantities."""

    def test_circular_velocity(self):
        assert_allclose(circular_velocity(MU, 6.0), math.sqrt(0.15))

    def test_escape_is_sqrt2_circular(self):
        assert_allclose(escape_velocity(MU, 6.0), math.sqrt(2.0) * circular_velocity(MU, 6.0))

    def test_degenerate_distance(self):
        assert circular_velocity(MU, 0.0) == 0.0
        assert escape_velocity(MU, 0.0) == 0.0

    def test_orbital_period(self):
        assert_allclose(orbital_period(MU, 6.0), math.sqrt(4.0 * math.pi**2 / MU * 216.0))

    def test_alignment(self):
        assert_allclose(velocity_alignment(vec2(1.0, 0.0), vec2(0.0, 2.0)), 0.0)
        assert_allclose(velocity_alignment(vec2(1.0, 0.0), vec2(3.0, 0.0)), 1.0)
        assert velocity_alignment(vec2(1.0, 0.0), vec2()) == 1.0


class TestApsides:
    """Test periapsis/apoapsis from the vis-viva equation."""

    def test_circular(self):
        v = circular_velocity(MU, 6.0)
        peri, apo = apsides(MU, vec2(6.0, 0.0), vec2(0.0, v), body_radius=2.0)
        assert_allclose(peri, 4.0, rtol=1e-6)
        assert_allclose(apo, 4.0, rtol=1e-6)

    def test_elliptical(self):
        """Starting at periapsis with extra speed raises the apoapsis."""
        r = 6.0
        v = 1.1 * circular_velocity(MU, r)
        peri, apo = apsides(MU, vec2(r, 0.0), vec2(0.0, v))
        assert_allclose(peri, r, rtol=1e-9)

        # Vis-viva: a = 1 / (2/r - v^2/mu), r_a = 2a - r_p
        a = 1.0 / (2.0 / r - v * v / MU)
        assert_allclose(apo, 2.0 * a - r, rtol=1e-9)

    def test_unbound(self):
        v = 1.01 * escape_velocity(MU, 6.0)
        peri, apo = apsides(MU, vec2(6.0, 0.0), vec2(0.0, v))
        assert math.isinf(apo)
        assert_allclose(peri, 6.0, rtol=1e-9)


# =============================================================================
# Classifier Tests
# =============================================================================


class TestOrbitClassifier:
    """Test per-tick orbit detection."""

    def test_circular_orbit_detected(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0)
        classifier = OrbitClassifier(reference_body=body)

        assert classifier.update(rocket, [body])
        assert rocket.is_in_orbit
        assert_allclose(rocket.orbit_period, math.sqrt(4.0 * math.pi**2 / MU * 216.0))

    def test_fires_once(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0)
        classifier = OrbitClassifier()

        assert classifier.update(rocket, [body])
        assert not classifier.update(rocket, [body])
        assert rocket.is_in_orbit

    def test_refires_after_leaving_orbit(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0)
        classifier = OrbitClassifier()
        orbit_velocity = rocket.velocity.copy()

        assert classifier.update(rocket, [body])
        rocket.velocity = vec2(0.3, 0.0)  # radial
        assert not classifier.update(rocket, [body])
        assert not rocket.is_in_orbit
        assert rocket.orbit_period == 0.0

        rocket.velocity = orbit_velocity
        assert classifier.update(rocket, [body])

    def test_too_low_inside_atmosphere(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 4.5)
        assert not OrbitClassifier().update(rocket, [body])

    def test_airless_body_floor(self):
        body = CelestialBody("Rock", radius=0.5, mass=0.5, has_atmosphere=False)
        rocket = RocketState.in_circular_orbit(body, 0.9)
        assert OrbitClassifier().update(rocket, [body])

    def test_body_override_floor(self):
        body = CelestialBody("Rock", radius=0.5, mass=0.5, has_atmosphere=False,
                             min_orbit_altitude=1.0)
        rocket = RocketState.in_circular_orbit(body, 0.9)
        assert not OrbitClassifier().update(rocket, [body])

    @pytest.mark.parametrize("factor,expected", [
        (0.75, False),  # Below 0.8 v_c
        (0.85, True),
        (1.2, True),
        (1.3, False),  # Above 0.9 v_e = 1.27 v_c
    ])
    def test_speed_band(self, factor, expected):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0, speed_factor=factor)
        assert OrbitClassifier().update(rocket, [body]) is expected

    def test_not_run_before_launch(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0)
        rocket.has_started = False
        assert not OrbitClassifier().update(rocket, [body])
        assert not rocket.is_in_orbit

    def test_uses_closest_body(self):
        home, luna = earth_moon_system()
        rocket = RocketState.in_circular_orbit(luna, 0.9)
        assessment = OrbitClassifier().assess(rocket, [home, luna])
        assert assessment.body is luna
        assert_allclose(assessment.speed, circular_velocity(luna.mu, 0.9))

    def test_no_bodies_uses_reference(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0)
        classifier = OrbitClassifier(reference_body=body)
        assert classifier.assess(rocket, []).body is body


class TestFlightStatus:
    """Test HUD flight phases."""

    def test_ready_to_launch(self):
        body = earth()
        rocket = RocketState.on_surface(body)
        assert OrbitClassifier().status(rocket, [body]) is FlightStatus.READY_TO_LAUNCH
        assert FlightStatus.READY_TO_LAUNCH.label == "Ready to Launch"

    def test_crashed(self):
        body = earth()
        rocket = RocketState.on_surface(body)
        rocket.has_crashed = True
        assert OrbitClassifier().status(rocket, [body]) is FlightStatus.CRASHED

    def test_orbiting(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0)
        classifier = OrbitClassifier()
        classifier.update(rocket, [body])
        assert classifier.status(rocket, [body]) is FlightStatus.ORBITING

    def test_escaping(self):
        body = earth()
        rocket = RocketState.in_circular_orbit(body, 6.0, speed_factor=math.sqrt(2.0))
        assert OrbitClassifier().status(rocket, [body]) is FlightStatus.ESCAPING

    def test_landed(self):
        body = earth()
        rocket = RocketState.on_surface(body)
        rocket.has_started = True
        assert OrbitClassifier().status(rocket, [body]) is FlightStatus.LANDED

    def test_out_of_fuel_low(self):
        body = earth()
        rocket = RocketState.on_surface(body, clearance=1.0)
        rocket.has_started = True
        rocket.velocity = vec2(0.0, 0.5)
        rocket.fuel = 0.0
        rocket.out_of_fuel = True
        assert OrbitClassifier().status(rocket, [body]) is FlightStatus.OUT_OF_FUEL

    def test_sub_orbital(self):
        body = earth()
        rocket = RocketState.on_surface(body, clearance=1.0)
        rocket.has_started = True
        rocket.velocity = vec2(0.0, 0.5)
        assert OrbitClassifier().status(rocket, [body]) is FlightStatus.SUB_ORBITAL

"""Unit tests for celestial bodies and the atmosphere model."""

import gc
import logging
import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from orbiter.environment import Atmosphere, CelestialBody, closest_body
from orbiter.scenarios import earth, earth_moon_system, moon

# =============================================================================
# Gravity Tests
# =============================================================================


class TestGravity:
    """Test game-scaled gravity."""

    def test_points_toward_centre(self):
        """Gravity points from the query position to the body centre."""
        body = CelestialBody("Planet", radius=2.0, mass=3.0, position=np.array([1.0, -2.0]))
        rng = np.random.default_rng(7)

        for _ in range(50):
            pos = rng.uniform(-30.0, 30.0, size=2)
            force = body.gravity_force_on(2.0, pos)
            to_centre = body.position - pos
            cos_angle = np.dot(force, to_centre) / (np.linalg.norm(force) * np.linalg.norm(to_centre))
            assert_allclose(cos_angle, 1.0, rtol=1e-9)

    def test_inverse_square_above_boost(self):
        """Above the near-surface band gravity is plain G*M*m/d^2."""
        body = earth()
        force = body.gravity_force_on(2.0, np.array([0.0, 4.0]))
        assert_allclose(force, [0.0, -0.3 * 3.0 * 2.0 / 16.0], rtol=1e-12)

    def test_near_surface_boost(self):
        """Below altitude 1 gravity is boosted by up to 50%."""
        body = earth()
        surface = body.gravity_force_on(2.0, np.array([0.0, 2.0]))
        plain = 0.3 * 3.0 * 2.0 / 4.0
        assert_allclose(np.linalg.norm(surface), plain * 1.5, rtol=1e-12)

        half = body.gravity_force_on(2.0, np.array([2.5, 0.0]))
        assert_allclose(np.linalg.norm(half), 0.3 * 3.0 * 2.0 / 2.5**2 * 1.25, rtol=1e-12)

    def test_zero_at_centre(self):
        """No force (and no NaN) at the body centre."""
        body = earth()
        assert_allclose(body.gravity_force_on(2.0, np.zeros(2)), [0.0, 0.0])

    def test_gravity_range(self):
        """Bodies only attract within 20 radii."""
        body = earth()
        assert body.in_gravity_range(np.array([39.0, 0.0]))
        assert not body.in_gravity_range(np.array([41.0, 0.0]))

    def test_invalid_radius_rejected(self):
        with pytest.raises(ValueError):
            CelestialBody("Bad", radius=0.0)


# =============================================================================
# Orbital Motion Tests
# =============================================================================


class TestOrbitalMotion:
    """Test moons circling their parent."""

    def test_moon_starts_on_orbit(self):
        bodies = earth_moon_system()
        assert_allclose(bodies[1].position, [5.0, 0.0])

    def test_advance_counter_clockwise(self):
        """Moon moves 0.1 rad/s counter-clockwise."""
        home, luna = earth_moon_system()
        luna.advance_orbit(1.0)
        assert_allclose(luna.position, [5.0 * math.cos(0.1), 5.0 * math.sin(0.1)])

    def test_clockwise(self):
        home = earth()
        body = CelestialBody("Moon", radius=0.5, mass=0.5, orbit_target=home, orbit_clockwise=True)
        body.advance_orbit(1.0)
        assert body.position[1] < 0.0

    def test_velocity_is_tangential(self):
        """Orbital velocity is omega * r along the tangent."""
        home, luna = earth_moon_system()
        assert_allclose(luna.velocity, [0.0, 0.5], atol=1e-12)

    def test_static_body_does_not_move(self):
        body = earth()
        body.advance_orbit(10.0)
        assert_allclose(body.position, [0.0, 0.0])
        assert_allclose(body.velocity, [0.0, 0.0])

    def test_reset_restores_angle(self):
        home, luna = earth_moon_system()
        start = luna.position.copy()
        for _ in range(100):
            luna.advance_orbit(0.1)
        luna.reset()
        assert luna.orbit_angle == 0.0
        assert_allclose(luna.position, start)

    def test_set_orbit_parameters(self):
        home, luna = earth_moon_system()
        luna.set_orbit_parameters(orbit_radius=8.0, orbit_angle=math.pi / 2)
        assert_allclose(luna.position, [0.0, 8.0], atol=1e-12)

    def test_moon_follows_moving_parent(self):
        home = earth()
        luna = moon(home)
        home.position = np.array([10.0, 0.0])
        luna.advance_orbit(0.0)
        assert_allclose(luna.position, [15.0, 0.0])

    def test_collected_parent_stops_orbit(self, caplog):
        """A moon whose parent is gone stays put and says so once."""
        luna = moon(earth())
        gc.collect()

        with caplog.at_level(logging.WARNING, logger="orbiter.environment.bodies"):
            luna.advance_orbit(1.0)
            luna.advance_orbit(1.0)

        assert not luna.is_orbiting
        assert_allclose(luna.position, [5.0, 0.0])
        assert caplog.text.count("garbage-collected") == 1


# =============================================================================
# Geometry Tests
# =============================================================================


class TestGeometry:
    """Test altitude, normals, collision and nearest-body queries."""

    def test_altitude(self):
        assert_allclose(earth().altitude_of(np.array([3.0, 4.0])), 3.0)

    def test_surface_normal_fallback(self):
        assert_allclose(earth().surface_normal(np.zeros(2)), [0.0, 1.0])

    def test_collides_with(self):
        body = earth()
        assert body.collides_with(np.array([0.0, 2.005]), 0.01)
        assert not body.collides_with(np.array([0.0, 2.05]), 0.01)

    def test_closest_body(self):
        home, luna = earth_moon_system()
        assert closest_body(np.array([0.0, 3.0]), [home, luna]) is home
        assert closest_body(np.array([4.8, 0.0]), [home, luna]) is luna

    def test_closest_body_with_filter(self):
        home, luna = earth_moon_system()
        found = closest_body(np.array([4.8, 0.0]), [home, luna], where=lambda b: b.has_atmosphere)
        assert found is home

    def test_closest_body_by_surface(self):
        """Centre distance favours a small moon; surface distance favours the planet."""
        home = earth()
        rock = CelestialBody("Moon", radius=0.5, mass=0.5, position=np.array([4.4, 0.0]))
        point = np.array([2.3, 1.5])
        assert closest_body(point, [home, rock]) is rock
        assert closest_body(point, [home, rock], by_surface=True) is home

    def test_closest_body_empty(self):
        assert closest_body(np.zeros(2), []) is None


# =============================================================================
# Atmosphere Tests
# =============================================================================


class TestAtmosphere:
    """Test the exponential atmosphere and quadratic drag."""

    def test_density_profile(self):
        atm = Atmosphere()
        assert_allclose(atm.density(0.0), 1.0)
        assert_allclose(atm.density(1.0), math.exp(-1.0))
        assert atm.density(3.0) == 0.0
        assert atm.density(10.0) == 0.0

    def test_density_clamped_below_surface(self):
        assert_allclose(Atmosphere().density(-1.0), 1.0)

    def test_contains(self):
        atm = Atmosphere()
        assert atm.contains(2.9)
        assert not atm.contains(3.0)

    def test_drag_opposes_velocity(self):
        atm = Atmosphere()
        v = np.array([1.0, 0.0])
        drag = atm.drag_force(v, 0.5)
        assert_allclose(drag, [-0.005 * math.exp(-0.5), 0.0], rtol=1e-12)

    def test_drag_quadratic(self):
        atm = Atmosphere()
        slow = np.linalg.norm(atm.drag_force(np.array([0.0, 1.0]), 0.0))
        fast = np.linalg.norm(atm.drag_force(np.array([0.0, 2.0]), 0.0))
        assert_allclose(fast / slow, 4.0)

    def test_no_drag_at_rest(self):
        assert_allclose(Atmosphere().drag_force(np.zeros(2), 0.0), [0.0, 0.0])

    def test_invalid_height(self):
        with pytest.raises(ValueError):
            Atmosphere(height=0.0)

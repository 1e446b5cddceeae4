"""Tests for the ready-made scenes."""

from numpy.testing import assert_allclose

from orbiter.scenarios import earth, earth_moon_system, moon


class TestScenarios:
    """Test the default Earth-Moon scene."""

    def test_earth(self):
        body = earth()
        assert body.radius == 2.0
        assert body.mass == 3.0
        assert body.has_atmosphere
        assert_allclose(body.mu, 0.9)

    def test_moon(self):
        home = earth()
        luna = moon(home)
        assert luna.radius == 0.5
        assert not luna.has_atmosphere
        assert luna.orbit_target is home
        assert luna.orbit_radius == 5.0
        assert luna.orbit_angular_speed == 0.1

    def test_system_order(self):
        """Earth comes first so it wins collision ties."""
        bodies = earth_moon_system()
        assert [b.name for b in bodies] == ["Earth", "Moon"]
        assert bodies[1].orbit_target is bodies[0]

    def test_scenes_are_independent(self):
        first = earth_moon_system()
        second = earth_moon_system()
        first[1].advance_orbit(1.0)
        assert second[1].orbit_angle == 0.0

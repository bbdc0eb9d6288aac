"""Tests for the shared value types."""

import dataclasses
import math

import pytest

from barnes_hut import Body, Universe, Vector2


class TestVector2:
    """Tests for Vector2 arithmetic."""

    def test_defaults(self):
        assert Vector2() == Vector2(0.0, 0.0)
        assert Vector2.zero() == Vector2(0.0, 0.0)

    def test_arithmetic(self):
        a = Vector2(1.0, 2.0)
        b = Vector2(3.0, -4.0)

        assert a + b == Vector2(4.0, -2.0)
        assert a - b == Vector2(-2.0, 6.0)
        assert a * 2 == Vector2(2.0, 4.0)
        assert 2 * a == Vector2(2.0, 4.0)
        assert b / 2 == Vector2(1.5, -2.0)
        assert -a == Vector2(-1.0, -2.0)

    def test_norm_and_distance(self):
        assert Vector2(3.0, 4.0).norm() == 5.0
        assert Vector2(1.0, 1.0).distance_to(Vector2(4.0, 5.0)) == 5.0
        assert Vector2(1.0, 2.0).dot(Vector2(3.0, 4.0)) == 11.0

    def test_unpacking(self):
        x, y = Vector2(7.0, 8.0)
        assert (x, y) == (7.0, 8.0)

    def test_is_finite(self):
        assert Vector2(1.0, 2.0).is_finite()
        assert not Vector2(math.nan, 0.0).is_finite()
        assert not Vector2(0.0, -math.inf).is_finite()

    def test_immutable(self):
        v = Vector2(1.0, 2.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.x = 5.0  # type: ignore[misc]


class TestBody:
    """Tests for the Body dataclass."""

    def test_defaults(self):
        body = Body()
        assert body.position == Vector2.zero()
        assert body.velocity == Vector2.zero()
        assert body.acceleration == Vector2.zero()
        assert body.mass == 1.0
        assert body.radius == 0.0
        assert body.color is None

    def test_identity_equality(self):
        """Bodies with identical fields are still different bodies."""
        a = Body(position=Vector2(1.0, 1.0), mass=2.0)
        b = Body(position=Vector2(1.0, 1.0), mass=2.0)
        assert a != b
        assert a == a
        assert len({a, b}) == 2

    def test_copy(self):
        body = Body(
            position=Vector2(1.0, 2.0),
            velocity=Vector2(3.0, 4.0),
            acceleration=Vector2(5.0, 6.0),
            mass=7.0,
            radius=8.0,
            color=(1, 2, 3),
        )
        clone = body.copy()

        assert clone is not body
        assert clone.position == body.position
        assert clone.velocity == body.velocity
        assert clone.acceleration == body.acceleration
        assert clone.mass == body.mass
        assert clone.radius == body.radius
        assert clone.color == body.color

        clone.mass = 1.0
        assert body.mass == 7.0


class TestUniverse:
    """Tests for the Universe snapshot."""

    def test_sequence_access(self):
        bodies = (Body(mass=1.0), Body(mass=2.0))
        universe = Universe(bodies, 10.0)

        assert len(universe) == 2
        assert universe[1] is bodies[1]
        assert list(universe) == list(bodies)

    def test_frozen(self):
        universe = Universe((Body(),), 10.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            universe.width = 20.0  # type: ignore[misc]

    def test_copy(self):
        universe = Universe((Body(position=Vector2(1.0, 2.0)),), 10.0)
        clone = universe.copy()

        assert clone.width == 10.0
        assert clone.bodies[0] is not universe.bodies[0]
        assert clone.bodies[0].position == universe.bodies[0].position
